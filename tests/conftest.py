# tests/conftest.py

import json
from typing import Any, Callable, Dict, List, Optional

import pytest

from common.asaas.asaas_client import AsaasClient, AsaasConfig


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


class FakeSession:
    """Sustituye requests.Session: cada request se resuelve con `responder`."""

    def __init__(self, responder: Callable[[str, str, Optional[dict]], Any]):
        self.responder = responder
        self.calls: List[Dict[str, Any]] = []

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append({
            "method": method,
            "url": url,
            "headers": headers,
            "json": json,
            "timeout": timeout,
        })
        result = self.responder(method, url, json)
        if isinstance(result, Exception):
            raise result
        return result


class TransferResponder:
    """Responde /transfers con éxito, salvo las llaves PIX listadas en `failures`."""

    def __init__(self, failures: Optional[Dict[str, FakeResponse]] = None, before_response=None):
        self.failures = failures or {}
        self.before_response = before_response
        self.keys: List[str] = []

    def __call__(self, method, url, body):
        key = body.get("pixAddressKey")
        self.keys.append(key)
        if self.before_response:
            self.before_response(key)
        if key in self.failures:
            return self.failures[key]
        return FakeResponse(200, {"id": f"tra_{len(self.keys):03d}", "status": "PENDING", "value": body["value"]})


def make_client(responder, on_exchange=None, environment="sandbox"):
    session = FakeSession(responder)
    client = AsaasClient(
        AsaasConfig(access_token="token-123", environment=environment),
        session=session,
        on_exchange=on_exchange,
    )
    return client, session


@pytest.fixture
def pix_keys_dir(tmp_path):
    def _write(*names: str):
        directory = tmp_path / "pix-keys"
        directory.mkdir(exist_ok=True)
        for name in names:
            (directory / f"{name}.json").write_text(
                json.dumps({"pixAddressKey": f"{name}@ejemplo.com", "pixAddressKeyType": "EMAIL"}),
                encoding="utf-8",
            )
        return directory

    return _write
