"""
Estructura de un beneficiario (payee) leído desde pix-keys/.

Cada archivo de pix-keys/ contiene un objeto JSON con los campos de la llave
PIX que espera la API de Asaas. Se envían tal cual en el body de /transfers.

Ejemplo (pix-keys/ana.json):
    {
        "pixAddressKey": "ana@ejemplo.com",
        "pixAddressKeyType": "EMAIL",
        "description": "Repasse"
    }

Campos:
    - payee_id   → nombre del archivo (ej: "ana.json"); es lo que se guarda en el ledger
    - pix_fields → objeto JSON del archivo
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class Payee:
    payee_id: str
    pix_fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "pix_fields", MappingProxyType(dict(self.pix_fields)))

    def transfer_fields(self) -> Dict[str, Any]:
        """Copia mutable de los campos PIX para armar el body de la transferencia."""
        return dict(self.pix_fields)
