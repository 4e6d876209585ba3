"""
Pytest fixtures for conflux_wallet tests. HTTP sessions are MagicMocks; no network.
"""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
import requests


def _make_response(payload: Any = None, status_code: int = 200, text: str | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(payload)
    resp.json.side_effect = lambda: json.loads(resp.text)
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        resp.raise_for_status.return_value = None
    return resp


def _envelope(result: Any, code: int = 0, message: str = "") -> dict[str, Any]:
    return {"code": code, "message": message, "result": result}


def _rpc_session(handlers: dict[str, Any]) -> MagicMock:
    """
    Session whose post() answers JSON-RPC by method name.

    A handler is a plain result, a callable(*params) -> result, or an exception to raise.
    """
    session = MagicMock()

    def post(url: str, json: dict[str, Any] | None = None, timeout: float | None = None) -> MagicMock:
        handler = handlers[json["method"]]
        if isinstance(handler, BaseException):
            raise handler
        result = handler(*json["params"]) if callable(handler) else handler
        return _make_response({"jsonrpc": "2.0", "id": json["id"], "result": result})

    session.post.side_effect = post
    return session


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    return _make_response


@pytest.fixture
def envelope() -> Callable[..., dict[str, Any]]:
    return _envelope


@pytest.fixture
def rpc_session() -> Callable[[dict[str, Any]], MagicMock]:
    return _rpc_session


@pytest.fixture(autouse=True)
def _clean_wallet_env(monkeypatch):
    """Keep developer env vars out of config tests."""
    for name in (
        "CFX_SCAN_BACKEND_SCHEME",
        "CFX_SCAN_BACKEND_ADDRESS",
        "CONTRACT_MANAGER_SCHEME",
        "CONTRACT_MANAGER_ADDRESS",
        "ACCOUNT_BALANCES_PATH",
        "ACCOUNT_TOKEN_TX_LIST_PATH",
        "TX_LIST_PATH",
        "CONTRACT_QUERY_PATH",
        "CFX_RPC_URL",
        "RPC_CONCURRENCY",
        "RPC_TASK_TIMEOUT_SEC",
        "REQUEST_TIMEOUT_SEC",
    ):
        monkeypatch.delenv(name, raising=False)
