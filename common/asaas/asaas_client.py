"""
Cliente HTTP reutilizable para la API de Asaas (transferencias PIX).

Uso:
    from common.asaas.asaas_client import AsaasClient, AsaasConfig

    client = AsaasClient(AsaasConfig(access_token="...", environment="sandbox"))
    result = client.send_transfer(Decimal("10.00"), {"pixAddressKey": "...", "pixAddressKeyType": "CPF"})
    if result.ok:
        print(result.transfer.transfer_id, result.transfer.status)
    else:
        print(result.error.message)

API:
    POST {base_url}/transfers         body: {"value": <monto>, ...campos de la llave PIX}
    GET  {base_url}/finance/balance   respuesta: {"balance": <monto>}

Headers:
    Content-Type: application/json
    access_token: <token>

El cliente no reintenta: cualquier error se devuelve de inmediato al llamador.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .results import (
    MALFORMED,
    REJECTED,
    TRANSPORT,
    BalanceResult,
    GatewayError,
    SendResult,
    Transfer,
    format_provider_errors,
)


BASE_URLS = {
    "sandbox": "https://sandbox.asaas.com/api/v3",
    "prod": "https://api.asaas.com/v3",
}

TRANSFERS_ENDPOINT = "/transfers"
BALANCE_ENDPOINT = "/finance/balance"


@dataclass(frozen=True)
class AsaasConfig:
    access_token: str
    environment: str = "sandbox"
    timeout: int = 30

    def __post_init__(self):
        if self.environment not in BASE_URLS:
            raise ValueError(
                f"Ambiente de Asaas desconocido: '{self.environment}'. "
                f"Valores válidos: {', '.join(BASE_URLS)}"
            )

    @property
    def base_url(self) -> str:
        return BASE_URLS[self.environment]


class AsaasClient:
    """
    Envía transferencias PIX y consulta el saldo de la cuenta.

    Cada intercambio HTTP se entrega a `on_exchange` (si se configuró) como un
    diccionario {method, url, request, status_code, response, error}. El token
    nunca se incluye.
    """

    def __init__(
        self,
        config: AsaasConfig,
        session: Optional[requests.Session] = None,
        on_exchange: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.config = config
        self.session = session or requests.Session()
        self.on_exchange = on_exchange

    def send_transfer(self, value: Decimal, pix_fields: Dict[str, Any]) -> SendResult:
        """
        Crea una transferencia PIX.

        Args:
            value: Monto a transferir (2 decimales)
            pix_fields: Campos de la llave PIX, se envían tal cual en el body

        Returns:
            SendResult con Transfer(id, status) o GatewayError
        """
        body = {"value": float(value), **pix_fields}
        data, error = self._request("POST", TRANSFERS_ENDPOINT, body)
        if error:
            return SendResult(error=error)
        return SendResult(transfer=Transfer(
            transfer_id=data.get("id"),
            status=data.get("status"),
            body=data,
        ))

    def get_balance(self) -> BalanceResult:
        """Consulta el saldo disponible de la cuenta (GET /finance/balance)."""
        data, error = self._request("GET", BALANCE_ENDPOINT)
        if error:
            return BalanceResult(error=error)

        balance = _to_amount(data.get("balance"))
        if balance is None:
            return BalanceResult(error=GatewayError(
                kind=MALFORMED,
                message=f"Respuesta sin 'balance' numérico: {str(data)[:200]}",
                body=data,
            ))
        return BalanceResult(balance=balance)

    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "access_token": self.config.access_token,
        }

    def _request(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> Tuple[Optional[Dict[str, Any]], Optional[GatewayError]]:
        url = f"{self.config.base_url}{endpoint}"
        exchange: Dict[str, Any] = {
            "method": method,
            "url": url,
            "request": body,
            "status_code": None,
            "response": None,
            "error": None,
        }

        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                json=body,
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            error = GatewayError(kind=TRANSPORT, message=str(e), cause=e)
            return None, self._finish(exchange, error=error)

        exchange["status_code"] = response.status_code
        data, error = _parse_response(response)
        exchange["response"] = data if data is not None else response.text[:500]
        if error:
            return None, self._finish(exchange, error=error)

        self._finish(exchange)
        return data, None

    def _finish(self, exchange: Dict[str, Any], error: Optional[GatewayError] = None) -> Optional[GatewayError]:
        if error:
            exchange["error"] = error.to_dict()
        if self.on_exchange:
            self.on_exchange(exchange)
        return error


def _to_amount(raw: Any) -> Optional[Decimal]:
    """Convierte un monto del JSON a Decimal con 2 decimales; None si no es numérico."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None
    try:
        amount = Decimal(str(raw))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _parse_response(response) -> Tuple[Optional[Dict[str, Any]], Optional[GatewayError]]:
    """
    Normaliza la respuesta de Asaas.

    Orden de evaluación:
        1. Body no JSON            → MALFORMED
        2. Body con lista `errors` → REJECTED "code: description, ..."
        3. HTTP != 2xx             → REJECTED con `message` / `msg` del body
        4. Body que no es objeto   → MALFORMED
    """
    status = response.status_code
    try:
        data = response.json()
    except ValueError as e:
        return None, GatewayError(
            kind=MALFORMED,
            message=f"Respuesta no JSON (HTTP {status}): {response.text[:200]}",
            status_code=status,
            cause=e,
        )

    if isinstance(data, dict) and isinstance(data.get("errors"), list) and data["errors"]:
        return data, GatewayError(
            kind=REJECTED,
            message=format_provider_errors(data["errors"]),
            status_code=status,
            body=data,
        )

    if not 200 <= status < 300:
        message = None
        if isinstance(data, dict):
            message = data.get("message") or data.get("msg")
        return data, GatewayError(
            kind=REJECTED,
            message=message or f"HTTP {status}",
            status_code=status,
            body=data,
        )

    if not isinstance(data, dict):
        return data, GatewayError(
            kind=MALFORMED,
            message=f"Se esperaba un objeto JSON, se obtuvo {type(data).__name__}",
            status_code=status,
            body=data,
        )

    return data, None
