"""
Tipos de resultado de la API de Asaas.

Las llamadas al gateway no lanzan excepciones por errores del proveedor:
devuelven un resultado etiquetado (éxito o GatewayError) y el llamador decide
si abortar o continuar.

Tipos de error (GatewayError.kind):
    - TRANSPORT  → red, DNS o timeout (requests.RequestException)
    - REJECTED   → el proveedor rechazó la operación ({errors: [...]} o HTTP != 2xx)
    - MALFORMED  → el body no es JSON o no tiene los campos esperados
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


TRANSPORT = "TRANSPORT"
REJECTED = "REJECTED"
MALFORMED = "MALFORMED"


@dataclass(frozen=True)
class GatewayError:
    kind: str
    message: str
    status_code: Optional[int] = None
    body: Any = None
    cause: Optional[BaseException] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Representación serializable para el log JSON (sin la excepción original)."""
        return {
            "kind": self.kind,
            "message": self.message,
            "status_code": self.status_code,
            "cause": repr(self.cause) if self.cause is not None else None,
        }


@dataclass(frozen=True)
class Transfer:
    transfer_id: Optional[str]
    status: Optional[str]
    body: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class SendResult:
    transfer: Optional[Transfer] = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.transfer is not None


@dataclass(frozen=True)
class BalanceResult:
    balance: Optional[Decimal] = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.balance is not None


def format_provider_errors(errors: List[Dict[str, Any]]) -> str:
    """
    Concatena la lista de errores del proveedor en un único mensaje.

    Args:
        errors: Lista [{code, description}, ...] tal como la devuelve Asaas

    Returns:
        "code: description, code: description"
    """
    parts = []
    for err in errors:
        if isinstance(err, dict):
            parts.append(f"{err.get('code')}: {err.get('description')}")
        else:
            parts.append(str(err))
    return ", ".join(parts)
