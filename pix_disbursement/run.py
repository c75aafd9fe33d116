"""
Script orquestador para repartir el saldo de la cuenta Asaas por PIX.

Flujo:
    1. Lee pix-keys/ → beneficiarios
    2. Lee el ledger (paid.txt) → beneficiarios ya comprometidos
    3. Consulta el saldo (GET /finance/balance) y descuenta RESERVE
    4. Reparte el saldo entre los pendientes (ver services/disbursement_planner.py)
    5. Genera log JSON con detalle por beneficiario y los intercambios HTTP

Uso:
    python -m pix_disbursement.run
    pix-disbursement

Ctrl+C durante el reparto detiene la ejecución antes del siguiente beneficiario.
"""

import random
import signal
import sys
import threading
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# ── Cargar .env de la raíz del repo ──────────────────────────────────────────
script_dir = Path(__file__).resolve().parent
repo_root = script_dir.parent
load_dotenv(str(repo_root / ".env"))

# ── Imports del proyecto ──────────────────────────────────────────────────────

from common.asaas.asaas_client import BASE_URLS, AsaasClient, AsaasConfig
from common.logs.run_log import ExchangeRecorder, save_log
from common.pix.payee_reader import list_payees
from pix_disbursement import config
from pix_disbursement.entities.disbursement_result import RunReport
from pix_disbursement.repositories.ledger_repository import Ledger
from pix_disbursement.services.disbursement_planner import (
    DisbursementAborted,
    DisbursementError,
    DisbursementPlanner,
    compute_available_balance,
)


# ============================================================================
# PROMPTS INTERACTIVOS
# ============================================================================

def prompt_yes_no(message: str, default: bool) -> bool:
    """Pregunta y/n al usuario. Enter = valor por defecto."""
    hint = "Y/n" if default else "y/N"
    while True:
        resp = input(f"{message} [{hint}]: ").strip().lower()
        if not resp:
            return default
        if resp in ("y", "yes"):
            return True
        if resp in ("n", "no"):
            return False
        print("  Enter y or n.")


def collect_user_input():
    """
    Pide al usuario las opciones clave por terminal.
    Sobreescribe los valores en config con lo que el usuario elija.
    """
    if not sys.stdin.isatty():
        return

    print("\n--- Configuración de ejecución ---\n")

    config.DRY_RUN = prompt_yes_no(
        "¿Modo DRY_RUN? (solo sortea montos, no escribe ledger ni transfiere)",
        config.DRY_RUN,
    )

    print()


# ============================================================================
# FUNCIÓN PRINCIPAL
# ============================================================================

def _validate_config() -> None:
    """Valida variables de entorno requeridas."""
    if not config.ASAAS_TOKEN:
        raise ValueError(
            "ASAAS_TOKEN no está definida. Agrégala en el archivo .env de la raíz del repo.\n"
            f"  Ruta esperada: {repo_root / '.env'}\n"
            "  Ejemplo: ASAAS_TOKEN=$aact_..."
        )
    if config.ASAAS_ENV not in BASE_URLS:
        raise ValueError(
            f"ASAAS_ENV='{config.ASAAS_ENV}' no es válido. Valores: {', '.join(BASE_URLS)}\n"
            f"  Ruta esperada: {repo_root / '.env'}"
        )


def _install_stop_handler(stop_event: threading.Event):
    """Ctrl+C marca la detención; el planner la revisa entre beneficiarios."""
    def _handler(signum, frame):
        if not stop_event.is_set():
            print("\n⚠ Detención solicitada: se termina después del beneficiario actual.")
        stop_event.set()

    return signal.signal(signal.SIGINT, _handler)


def main() -> int:
    collect_user_input()
    _validate_config()
    print_configuration()

    pix_keys_dir = resolve_path(config.PIX_KEYS_DIR)
    print(f"Leyendo llaves PIX: {pix_keys_dir}")
    payees = list_payees(str(pix_keys_dir))

    ledger = Ledger(str(resolve_path(config.LEDGER_FILE)))
    pending = [p for p in payees if not ledger.contains(p.payee_id)]
    print(f"  → {len(payees)} beneficiarios, {len(payees) - len(pending)} ya en el ledger, {len(pending)} pendientes\n")

    if not pending:
        print("No hay beneficiarios pendientes. Terminando.")
        return 0

    recorder = ExchangeRecorder()
    client = AsaasClient(
        AsaasConfig(
            access_token=config.ASAAS_TOKEN,
            environment=config.ASAAS_ENV,
            timeout=config.REQUEST_TIMEOUT,
        ),
        on_exchange=recorder,
    )

    print("Consultando saldo...")
    balance_result = client.get_balance()
    if not balance_result.ok:
        print(f"  ✗ Error al consultar el saldo: {balance_result.error}")
        save_log(resolve_path(config.LOGS_DIR), "disbursement", _log_data(None, recorder, str(balance_result.error)))
        return 1

    reserve = Decimal(config.RESERVE)
    available = compute_available_balance(balance_result.balance, reserve)
    print(f"  → Saldo: R$ {balance_result.balance} | Reserva: R$ {reserve} | A repartir: R$ {available}\n")

    if sys.stdin.isatty():
        print(f"Se repartirá R$ {available} entre {len(pending)} beneficiarios.")
        if not config.DRY_RUN:
            print("  *** MODO REAL: se crearán transferencias PIX ***")
        if not prompt_yes_no("¿Confirmar ejecución?", True):
            print("\nEjecución cancelada por el usuario.")
            return 0
        print()

    planner = DisbursementPlanner(
        client=client,
        ledger=ledger,
        rng=random.SystemRandom(),
        delay_ms=config.DELAY_MS,
        dry_run=config.DRY_RUN,
        stop_event=threading.Event(),
    )

    exit_code = 0
    previous_handler = _install_stop_handler(planner.stop_event)
    try:
        report = planner.run(payees, available)
    except DisbursementError as e:
        report = e.report
        exit_code = 1
        print(f"\n✗ Ejecución abortada: {e}")
        if isinstance(e, DisbursementAborted):
            print(f"  ⚠ {e.payee_id} quedó en el ledger. Verificar en Asaas antes de quitarlo de {config.LEDGER_FILE}.")
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    print_summary(report)
    save_log(resolve_path(config.LOGS_DIR), "disbursement", _log_data(report, recorder, report.abort_reason))
    return exit_code


# ============================================================================
# FUNCIONES DE UTILIDAD
# ============================================================================

def resolve_path(relative_path: str) -> Path:
    """Resuelve una ruta relativa al directorio del script."""
    p = Path(relative_path)
    if not p.is_absolute():
        return script_dir / relative_path
    return p


def print_configuration():
    print("=" * 60)
    print("=== REPARTO DE SALDO POR PIX (ASAAS) ===")
    print("=" * 60)
    print(f"   • Ambiente:      {config.ASAAS_ENV} ({BASE_URLS.get(config.ASAAS_ENV)})")
    print(f"   • Llaves PIX:    {config.PIX_KEYS_DIR}")
    print(f"   • Ledger:        {config.LEDGER_FILE}")
    print(f"   • Reserva:       R$ {config.RESERVE}")
    print(f"   • Delay:         {config.DELAY_MS}ms")
    print(f"   • Dry Run:       {config.DRY_RUN}")
    print("=" * 60)
    print()


def print_summary(report: RunReport):
    summary = report.to_dict()["summary"]
    print()
    print("=" * 50)
    print("=== RESUMEN FINAL ===")
    print(f"   Saldo inicial:         R$ {report.initial_balance}")
    print(f"   Total sorteado:        R$ {report.drawn_total}")
    print(f"   Saldo restante:        R$ {report.remaining_balance}")
    print(f"   Transferidos:          {summary['paid']}")
    if config.DRY_RUN:
        print(f"   Planificados (dry):    {summary['planned']}")
    print(f"   Saltados (ledger):     {summary['skipped']}")
    if summary["failed"]:
        print(f"   Con error:             {summary['failed']}")
    if report.stopped:
        print("   (Detenido por el usuario)")
    print("=" * 50)


def _log_data(report, recorder: ExchangeRecorder, error) -> dict:
    return {
        "environment": config.ASAAS_ENV,
        "dry_run": config.DRY_RUN,
        "reserve": config.RESERVE,
        "ledger_file": config.LEDGER_FILE,
        "error": error,
        "report": report.to_dict() if report else None,
        "exchanges": recorder.exchanges,
    }


if __name__ == "__main__":
    sys.exit(main())
