from decimal import Decimal

import pytest
import requests

from common.asaas.asaas_client import AsaasConfig
from common.asaas.results import MALFORMED, REJECTED, TRANSPORT
from tests.conftest import FakeResponse, make_client


def test_config_resolves_base_url_by_environment():
    assert AsaasConfig(access_token="t", environment="sandbox").base_url == "https://sandbox.asaas.com/api/v3"
    assert AsaasConfig(access_token="t", environment="prod").base_url == "https://api.asaas.com/v3"


def test_config_rejects_unknown_environment():
    with pytest.raises(ValueError, match="desconocido"):
        AsaasConfig(access_token="t", environment="staging")


def test_send_transfer_success():
    client, session = make_client(lambda m, u, b: FakeResponse(200, {"id": "tra_1", "status": "PENDING"}))

    result = client.send_transfer(Decimal("12.34"), {"pixAddressKey": "ana@ejemplo.com", "pixAddressKeyType": "EMAIL"})

    assert result.ok
    assert result.transfer.transfer_id == "tra_1"
    assert result.transfer.status == "PENDING"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://sandbox.asaas.com/api/v3/transfers"
    assert call["headers"]["access_token"] == "token-123"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["json"] == {"value": 12.34, "pixAddressKey": "ana@ejemplo.com", "pixAddressKeyType": "EMAIL"}
    assert call["timeout"] == 30


def test_send_transfer_provider_errors_single():
    payload = {"errors": [{"code": "invalid_key", "description": "bad key"}]}
    client, _ = make_client(lambda m, u, b: FakeResponse(400, payload))

    result = client.send_transfer(Decimal("1.00"), {})

    assert not result.ok
    assert result.error.kind == REJECTED
    assert result.error.message == "invalid_key: bad key"
    assert result.error.status_code == 400


def test_send_transfer_provider_errors_joined_even_with_200():
    payload = {"errors": [
        {"code": "invalid_value", "description": "valor mínimo"},
        {"code": "invalid_key", "description": "bad key"},
    ]}
    client, _ = make_client(lambda m, u, b: FakeResponse(200, payload))

    result = client.send_transfer(Decimal("1.00"), {})

    assert result.error.message == "invalid_value: valor mínimo, invalid_key: bad key"


@pytest.mark.parametrize("payload, expected", [
    ({"message": "Unauthorized token"}, "Unauthorized token"),
    ({"msg": "rate limited"}, "rate limited"),
    ({}, "HTTP 503"),
])
def test_send_transfer_http_error_uses_message_or_msg(payload, expected):
    client, _ = make_client(lambda m, u, b: FakeResponse(503, payload))

    result = client.send_transfer(Decimal("1.00"), {})

    assert result.error.kind == REJECTED
    assert result.error.message == expected


def test_send_transfer_transport_error():
    exc = requests.exceptions.ConnectionError("Name or service not known")
    client, _ = make_client(lambda m, u, b: exc)

    result = client.send_transfer(Decimal("1.00"), {})

    assert result.error.kind == TRANSPORT
    assert result.error.message == "Name or service not known"
    assert result.error.cause is exc


def test_send_transfer_malformed_body():
    client, _ = make_client(lambda m, u, b: FakeResponse(502, text="<html>Bad Gateway</html>"))

    result = client.send_transfer(Decimal("1.00"), {})

    assert result.error.kind == MALFORMED
    assert result.error.status_code == 502
    assert "Bad Gateway" in result.error.message


def test_get_balance():
    client, session = make_client(lambda m, u, b: FakeResponse(200, {"balance": 150.5}))

    result = client.get_balance()

    assert result.ok
    assert result.balance == Decimal("150.50")
    assert session.calls[0]["method"] == "GET"
    assert session.calls[0]["url"].endswith("/finance/balance")
    assert session.calls[0]["json"] is None


def test_get_balance_without_numeric_balance_is_malformed():
    client, _ = make_client(lambda m, u, b: FakeResponse(200, {"balance": "n/a"}))

    result = client.get_balance()

    assert not result.ok
    assert result.error.kind == MALFORMED


def test_on_exchange_receives_each_exchange_without_token():
    exchanges = []
    responses = iter([
        FakeResponse(200, {"balance": 10}),
        FakeResponse(400, {"errors": [{"code": "x", "description": "y"}]}),
    ])
    client, _ = make_client(lambda m, u, b: next(responses), on_exchange=exchanges.append)

    client.get_balance()
    client.send_transfer(Decimal("2.00"), {"pixAddressKey": "k"})

    assert [e["method"] for e in exchanges] == ["GET", "POST"]
    assert exchanges[0]["error"] is None
    assert exchanges[1]["status_code"] == 400
    assert exchanges[1]["request"] == {"value": 2.0, "pixAddressKey": "k"}
    assert exchanges[1]["error"]["message"] == "x: y"
    assert "token-123" not in repr(exchanges)
