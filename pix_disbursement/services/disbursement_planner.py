"""
Servicio que reparte el saldo disponible entre los beneficiarios pendientes.

Flujo por beneficiario (en orden de listado):
    1. ¿Se pidió detener? → termina antes de tocar este beneficiario
    2. ¿Está en el ledger? → se salta (payees_left - 1), sin llamar a la API
    3. Tope = round2(saldo_restante / payees_left); se sortea un monto en [0.01, tope]
    4. Se agrega al ledger y se persiste ANTES de llamar a la API
    5. Se descuenta el monto del saldo y se crea la transferencia
    6. Éxito → se imprime "Transf: <id> - <status>"; error → se aborta la ejecución

Un error de la API en un beneficiario aborta toda la ejecución
(DisbursementAborted). Como el ledger se escribe antes de la llamada, ese
beneficiario queda marcado y no se reintenta en la siguiente ejecución aunque
no se haya movido dinero. Hay que revisarlo a mano en Asaas antes de sacarlo
del ledger.

Nunca se envía un monto 0: si el tope queda bajo 0.01 la ejecución se detiene
con InsufficientBalanceError antes de escribir el ledger para ese beneficiario.
"""

import random
import time
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from common.asaas.asaas_client import AsaasClient
from common.asaas.results import GatewayError
from common.pix.payee import Payee
from pix_disbursement.entities.disbursement_result import (
    FAILED,
    PAID,
    PLANNED,
    SKIPPED,
    PlannedDisbursement,
    RunReport,
)
from pix_disbursement.repositories.ledger_repository import Ledger


CENT = Decimal("0.01")
ZERO = Decimal("0.00")


class DisbursementError(RuntimeError):
    """Error que termina la ejecución. Lleva el reporte parcial."""

    def __init__(self, message: str, report: RunReport):
        super().__init__(message)
        self.report = report


class DisbursementAborted(DisbursementError):
    def __init__(self, payee_id: str, error: GatewayError, report: RunReport):
        super().__init__(f"{payee_id}: {error.message}", report)
        self.payee_id = payee_id
        self.error = error


class InsufficientBalanceError(DisbursementError):
    pass


def round2(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_available_balance(balance: Decimal, reserve: Decimal) -> Decimal:
    """Saldo a repartir: saldo de la cuenta menos la reserva, nunca negativo."""
    return max(round2(Decimal(balance) - Decimal(reserve)), ZERO)


def draw_amount(upper: Decimal, rng: random.Random) -> Decimal:
    """Sortea un monto en centavos enteros dentro de [0.01, upper]."""
    cents = int(round2(upper) / CENT)
    if cents < 1:
        raise ValueError(f"Tope de sorteo inválido: {upper}")
    return Decimal(rng.randint(1, cents)) * CENT


class DisbursementPlanner:

    def __init__(
        self,
        client: AsaasClient,
        ledger: Ledger,
        rng: Optional[random.Random] = None,
        delay_ms: int = 0,
        dry_run: bool = False,
        stop_event=None,
    ):
        """
        Args:
            client: Cliente de Asaas
            ledger: Ledger de beneficiarios ya comprometidos
            rng: Generador aleatorio para los sorteos (inyectable en tests)
            delay_ms: Pausa entre transferencias
            dry_run: Si es True solo sortea montos; no escribe ledger ni llama a la API
            stop_event: Objeto con is_set() (ej: threading.Event); se revisa entre beneficiarios
        """
        self.client = client
        self.ledger = ledger
        self.rng = rng or random.Random()
        self.delay_ms = delay_ms
        self.dry_run = dry_run
        self.stop_event = stop_event

    def run(self, payees: List[Payee], initial_balance: Decimal) -> RunReport:
        remaining = round2(initial_balance)
        report = RunReport(initial_balance=remaining, remaining_balance=remaining)
        total = len(payees)
        payees_left = total
        mode_label = "[DRY_RUN]" if self.dry_run else "[PROD]"

        for idx, payee in enumerate(payees, 1):
            prefix = f"[{idx}/{total}]"

            if self.stop_event is not None and self.stop_event.is_set():
                print(f"{prefix} ⚠ Ejecución detenida antes de {payee.payee_id}")
                report.stopped = True
                break

            if self.ledger.contains(payee.payee_id):
                payees_left -= 1
                report.results.append(PlannedDisbursement(payee_id=payee.payee_id, action=SKIPPED))
                print(f"{prefix} ↷ Ya está en el ledger: {payee.payee_id}")
                continue

            upper = round2(remaining / payees_left)
            if upper < CENT:
                report.aborted = True
                report.abort_reason = f"Saldo insuficiente para {payee.payee_id}: restante={remaining}"
                print(f"{prefix} ✗ {report.abort_reason}")
                raise InsufficientBalanceError(report.abort_reason, report)

            amount = draw_amount(upper, self.rng)

            if self.dry_run:
                remaining -= amount
                report.remaining_balance = remaining
                payees_left -= 1
                report.results.append(PlannedDisbursement(payee_id=payee.payee_id, action=PLANNED, amount=amount))
                print(f"{prefix} {mode_label} R$ {amount} (tope {upper}) → {payee.payee_id}")
                continue

            # Sin chequeo de detención entre el commit y la llamada a la API
            self.ledger.commit(payee.payee_id)
            remaining -= amount
            report.remaining_balance = remaining

            result = self.client.send_transfer(amount, payee.transfer_fields())

            if not result.ok:
                report.results.append(PlannedDisbursement(
                    payee_id=payee.payee_id,
                    action=FAILED,
                    amount=amount,
                    error=result.error,
                ))
                report.aborted = True
                report.abort_reason = f"{payee.payee_id}: {result.error.message}"
                print(f"{prefix} {mode_label} ✗ Error API: {payee.payee_id} → {result.error}")
                raise DisbursementAborted(payee.payee_id, result.error, report)

            transfer = result.transfer
            report.results.append(PlannedDisbursement(
                payee_id=payee.payee_id,
                action=PAID,
                amount=amount,
                transfer_id=transfer.transfer_id,
                status=transfer.status,
            ))
            print(f"{prefix} {mode_label} ✓ Transf: {transfer.transfer_id} - {transfer.status} | R$ {amount} → {payee.payee_id}")
            payees_left -= 1

            if self.delay_ms > 0 and idx < total:
                time.sleep(self.delay_ms / 1000.0)

        return report
