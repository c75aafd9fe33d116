"""
Resultado de una ejecución de reparto.

Acciones por beneficiario:
    - SKIPPED → ya estaba en el ledger, no se llama a la API
    - PLANNED → DRY_RUN: monto sorteado, sin ledger ni API
    - PAID    → transferencia creada (transfer_id + status de Asaas)
    - FAILED  → la API devolvió error; el beneficiario queda en el ledger
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from common.asaas.results import GatewayError


SKIPPED = "SKIPPED"
PLANNED = "PLANNED"
PAID = "PAID"
FAILED = "FAILED"


@dataclass
class PlannedDisbursement:
    payee_id: str
    action: str
    amount: Optional[Decimal] = None
    transfer_id: Optional[str] = None
    status: Optional[str] = None
    error: Optional[GatewayError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "payee_id": self.payee_id,
            "action": self.action,
            "amount": str(self.amount) if self.amount is not None else None,
            "transfer_id": self.transfer_id,
            "status": self.status,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class RunReport:
    initial_balance: Decimal
    remaining_balance: Decimal
    results: List[PlannedDisbursement] = field(default_factory=list)
    stopped: bool = False
    aborted: bool = False
    abort_reason: Optional[str] = None

    @property
    def drawn_total(self) -> Decimal:
        """Suma de los montos sorteados (PAID, PLANNED y FAILED)."""
        return sum(
            (r.amount for r in self.results if r.amount is not None and r.action != SKIPPED),
            Decimal("0.00"),
        )

    def count(self, action: str) -> int:
        return sum(1 for r in self.results if r.action == action)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_balance": str(self.initial_balance),
            "remaining_balance": str(self.remaining_balance),
            "drawn_total": str(self.drawn_total),
            "stopped": self.stopped,
            "aborted": self.aborted,
            "abort_reason": self.abort_reason,
            "summary": {
                "visited": len(self.results),
                "paid": self.count(PAID),
                "planned": self.count(PLANNED),
                "skipped": self.count(SKIPPED),
                "failed": self.count(FAILED),
            },
            "results": [r.to_dict() for r in self.results],
        }
