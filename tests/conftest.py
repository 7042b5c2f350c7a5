from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

ALICE_RESPONSE = '{"result":{"message":{"role":"Ассистент","text":"Меня зовут Алиса"},"num_tokens":"20"}}'

CONFIG = {
    "token": "123456:test-token",
    "timeout": "1m0s",
    "debug_level": "info",
    "users": [1, 2],
    "chat": {"api_key": "test-key", "proxy": ""},
}


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(body: str = ALICE_RESPONSE, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=body.encode("utf-8"), headers={"Content-Type": "application/json"})

    return handler


def make_update(user_id: int = 1, text: str = "test", message_id: int = 2, username: str = "test"):
    return SimpleNamespace(
        effective_user=SimpleNamespace(id=user_id, username=username),
        effective_message=SimpleNamespace(message_id=message_id, text=text),
        effective_chat=SimpleNamespace(send_message=AsyncMock()),
    )


@pytest.fixture
def write_config(tmp_path):
    def _write(**overrides) -> str:
        data = json.loads(json.dumps(CONFIG))
        data.update(overrides)
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def config_file(write_config) -> str:
    return write_config()
