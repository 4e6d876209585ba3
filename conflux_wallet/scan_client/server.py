"""
HTTP envelope client for the centralized servers (scan backend, contract manager).

Every endpoint answers {"code": int, "message": str, "result": <payload>}.
code != 0 is an application failure; otherwise result is re-serialised and
decoded again into the payload type the caller asks for, because the result
shape differs per endpoint.
"""

from __future__ import annotations

import json
from typing import Any, Callable, TypeVar
from urllib.parse import urlencode

import requests

from conflux_wallet.config.settings import DEFAULT_REQUEST_TIMEOUT_SEC
from conflux_wallet.core.exceptions import ApplicationError, DecodeError, TransportError
from conflux_wallet.wallet_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _param_str(val: Any) -> str:
    if isinstance(val, bool):
        return "true" if val else "false"
    return str(getattr(val, "value", val))


class ScanServer:
    """One centralized server: scheme + host:port + HTTP session."""

    def __init__(
        self,
        scheme: str,
        address: str,
        *,
        session: requests.Session | None = None,
        request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC,
    ) -> None:
        if not scheme.strip() or not address.strip():
            raise ValueError("scheme and address must be non-empty")
        self.scheme = scheme.strip()
        self.address = address.strip()
        self.session = session or requests.Session()
        self._timeout = request_timeout_sec

    def url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build scheme://address/path?params (params url-encoded, None values dropped)."""
        query = urlencode([(k, _param_str(v)) for k, v in (params or {}).items() if v is not None])
        base = f"{self.scheme}://{self.address}{path}"
        return f"{base}?{query}" if query else base

    def get(self, path: str, params: dict[str, Any] | None, decode: Callable[[Any], T]) -> T:
        """
        GET path with params and return decode(result) of the response envelope.

        Raises:
            TransportError: request failed or non-2xx status.
            DecodeError: body is not an envelope, or decode rejects the result.
            ApplicationError: envelope code != 0.
        """
        url = self.url(path, params)
        logger.debug("scan_request", url=url)
        try:
            resp = self.session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e
        if not 200 <= resp.status_code < 300:
            raise TransportError(f"GET {url} returned HTTP {resp.status_code}")

        try:
            envelope = resp.json()
        except ValueError as e:
            raise DecodeError(f"response of {url} is not JSON: {e}") from e
        if not isinstance(envelope, dict) or "code" not in envelope:
            raise DecodeError(f"response of {url} is not a code/message/result envelope")

        code = envelope.get("code")
        if code != 0:
            logger.warning("scan_application_error", url=url, code=code, message=envelope.get("message"))
            raise ApplicationError(code, str(envelope.get("message") or ""))

        # second decode: result is generic until the caller's payload type reads it
        result = json.loads(json.dumps(envelope.get("result")))
        try:
            return decode(result)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"unexpected result shape from {url}: {e!r}") from e
