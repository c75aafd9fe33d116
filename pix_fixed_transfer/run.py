"""
Script para enviar TRANSFER_VALUE a cada llave PIX de pix-keys/.

La primera transferencia con error detiene el script (no hay reintentos ni
ledger).

Uso:
    python -m pix_fixed_transfer.run
    pix-fixed-transfer
"""

import sys
import time
from decimal import Decimal
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# ── Cargar .env de la raíz del repo ──────────────────────────────────────────
script_dir = Path(__file__).resolve().parent
repo_root = script_dir.parent
load_dotenv(str(repo_root / ".env"))

from common.asaas.asaas_client import BASE_URLS, AsaasClient, AsaasConfig
from common.logs.run_log import ExchangeRecorder, save_log
from common.pix.payee import Payee
from common.pix.payee_reader import list_payees
from pix_fixed_transfer import config


def send_all(client: AsaasClient, payees: List[Payee], value: Decimal, delay_ms: int = 0) -> List[dict]:
    """
    Envía `value` a cada beneficiario, en orden.

    Returns:
        Lista de resultados {payee_id, status, transfer_id, transfer_status, error}.
        Se corta en el primer error (ese resultado queda como último elemento).
    """
    results = []
    total = len(payees)

    for idx, payee in enumerate(payees, 1):
        prefix = f"[{idx}/{total}]"
        result = client.send_transfer(value, payee.transfer_fields())

        if not result.ok:
            print(f"{prefix} ✗ Error API: {payee.payee_id} → {result.error}")
            results.append({
                "payee_id": payee.payee_id,
                "status": "API_ERROR",
                "error": result.error.to_dict(),
            })
            break

        transfer = result.transfer
        print(f"{prefix} Transf: {transfer.transfer_id} - {transfer.status}")
        results.append({
            "payee_id": payee.payee_id,
            "status": "SENT",
            "transfer_id": transfer.transfer_id,
            "transfer_status": transfer.status,
        })

        if delay_ms > 0 and idx < total:
            time.sleep(delay_ms / 1000.0)

    return results


def main() -> int:
    if not config.ASAAS_TOKEN:
        raise ValueError(
            "ASAAS_TOKEN no está definida. Agrégala en el archivo .env de la raíz del repo.\n"
            f"  Ruta esperada: {repo_root / '.env'}"
        )

    client_config = AsaasConfig(
        access_token=config.ASAAS_TOKEN,
        environment=config.ASAAS_ENV,
        timeout=config.REQUEST_TIMEOUT,
    )
    value = Decimal(config.TRANSFER_VALUE)

    print("=" * 60)
    print("=== TRANSFERENCIA FIJA POR PIX (ASAAS) ===")
    print("=" * 60)
    print(f"   • Ambiente:   {config.ASAAS_ENV} ({BASE_URLS[config.ASAAS_ENV]})")
    print(f"   • Llaves PIX: {config.PIX_KEYS_DIR}")
    print(f"   • Monto:      R$ {value}")
    print("=" * 60)
    print()

    payees = list_payees(str(resolve_path(config.PIX_KEYS_DIR)))
    if not payees:
        print("No hay llaves PIX para procesar. Abortando.")
        return 0

    recorder = ExchangeRecorder()
    client = AsaasClient(client_config, on_exchange=recorder)
    results = send_all(client, payees, value, delay_ms=config.DELAY_MS)

    sent = sum(1 for r in results if r["status"] == "SENT")
    print()
    print("=" * 50)
    print(f"   Enviadas: {sent} de {len(payees)}")
    print("=" * 50)

    save_log(resolve_path(config.LOGS_DIR), "transfer", {
        "environment": config.ASAAS_ENV,
        "value": str(value),
        "total": len(payees),
        "sent": sent,
        "results": results,
        "exchanges": recorder.exchanges,
    })
    return 0 if sent == len(payees) else 1


def resolve_path(relative_path: str) -> Path:
    """Resuelve una ruta relativa al directorio del script."""
    p = Path(relative_path)
    if not p.is_absolute():
        return script_dir / relative_path
    return p


if __name__ == "__main__":
    sys.exit(main())
