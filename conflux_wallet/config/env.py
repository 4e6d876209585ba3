"""
Environment variable loading for the Conflux wallet client.

- CFX_SCAN_BACKEND_SCHEME / CFX_SCAN_BACKEND_ADDRESS: scan backend server
- CONTRACT_MANAGER_SCHEME / CONTRACT_MANAGER_ADDRESS: contract manager server
- ACCOUNT_BALANCES_PATH, ACCOUNT_TOKEN_TX_LIST_PATH, TX_LIST_PATH, CONTRACT_QUERY_PATH:
  path overrides on those servers
- CFX_RPC_URL: node JSON-RPC endpoint
- RPC_CONCURRENCY, RPC_TASK_TIMEOUT_SEC, REQUEST_TIMEOUT_SEC: enrichment / HTTP tuning
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from conflux_wallet.core.exceptions import ConfigError

# config is conflux_wallet/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"


def load_wallet_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env vars win."""
    load_dotenv(_ENV_PATH)


def get_env_str(name: str) -> str | None:
    """Return the stripped value of an env var, or None when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or None


def get_env_int(name: str) -> int | None:
    raw = get_env_str(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def get_env_float(name: str) -> float | None:
    raw = get_env_str(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e
