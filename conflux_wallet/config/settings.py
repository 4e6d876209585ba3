"""
Application settings.

Each client receives its own configuration value at construction; nothing here
is mutated after it is built. Every field is independently defaultable: an
empty override keeps the default for that field only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any

from conflux_wallet.config.env import get_env_float, get_env_int, get_env_str, load_wallet_env
from conflux_wallet.core.exceptions import ConfigError

DEFAULT_SCAN_BACKEND_SCHEME = "http"
DEFAULT_SCAN_BACKEND_ADDRESS = "101.201.103.131:8885"
DEFAULT_CONTRACT_MANAGER_SCHEME = "http"
DEFAULT_CONTRACT_MANAGER_ADDRESS = "101.201.103.131:8886"

DEFAULT_ACCOUNT_BALANCES_PATH = "/api/account/token/list"
DEFAULT_ACCOUNT_TOKEN_TX_LIST_PATH = "/future/transfer/list"
DEFAULT_TX_LIST_PATH = "/future/transaction/list"
DEFAULT_CONTRACT_QUERY_PATH = "/api/contract/query"

DEFAULT_RPC_URL = "http://main.confluxrpc.org"
DEFAULT_REQUEST_TIMEOUT_SEC = 30.0

# Max node RPC calls in flight during batch enrichment
DEFAULT_RPC_CONCURRENCE = 10


@dataclass(frozen=True)
class ServerConfig:
    """
    Scan backend and contract manager locations, because centralized servers may change.

    Fields left as None / "" in an override keep their default.
    """

    scan_backend_scheme: str = DEFAULT_SCAN_BACKEND_SCHEME
    scan_backend_address: str = DEFAULT_SCAN_BACKEND_ADDRESS
    contract_manager_scheme: str = DEFAULT_CONTRACT_MANAGER_SCHEME
    contract_manager_address: str = DEFAULT_CONTRACT_MANAGER_ADDRESS

    account_balances_path: str = DEFAULT_ACCOUNT_BALANCES_PATH
    account_token_tx_list_path: str = DEFAULT_ACCOUNT_TOKEN_TX_LIST_PATH
    tx_list_path: str = DEFAULT_TX_LIST_PATH
    contract_query_path: str = DEFAULT_CONTRACT_QUERY_PATH

    def merged(self, overrides: dict[str, Any] | "ServerConfig" | None = None) -> "ServerConfig":
        """Return a copy with every non-empty override applied field by field."""
        if overrides is None:
            return self
        if isinstance(overrides, ServerConfig):
            overrides = {f.name: getattr(overrides, f.name) for f in fields(overrides)}
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"unknown server config fields: {sorted(unknown)}")
        changes = {k: v for k, v in overrides.items() if v not in (None, "")}
        return replace(self, **changes)


@dataclass(frozen=True)
class NodeConfig:
    rpc_url: str = DEFAULT_RPC_URL
    request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC

    def __post_init__(self) -> None:
        if not self.rpc_url.strip():
            raise ConfigError("rpc_url must be non-empty")
        if self.request_timeout_sec <= 0:
            raise ConfigError("request_timeout_sec must be positive")


@dataclass(frozen=True)
class EnricherConfig:
    """
    concurrency: max enrichment tasks in flight (wave size).
    task_timeout_sec: per-wave deadline; None waits for every task.
    """

    concurrency: int = DEFAULT_RPC_CONCURRENCE
    task_timeout_sec: float | None = None

    def __post_init__(self) -> None:
        if int(self.concurrency) < 1:
            raise ConfigError("concurrency must be a positive integer")
        if self.task_timeout_sec is not None and self.task_timeout_sec <= 0:
            raise ConfigError("task_timeout_sec must be positive when set")


@dataclass(frozen=True)
class Settings:
    server: ServerConfig = field(default_factory=ServerConfig)
    node: NodeConfig = field(default_factory=NodeConfig)
    enricher: EnricherConfig = field(default_factory=EnricherConfig)


def _server_config_from_env() -> ServerConfig:
    return ServerConfig().merged({
        "scan_backend_scheme": get_env_str("CFX_SCAN_BACKEND_SCHEME"),
        "scan_backend_address": get_env_str("CFX_SCAN_BACKEND_ADDRESS"),
        "contract_manager_scheme": get_env_str("CONTRACT_MANAGER_SCHEME"),
        "contract_manager_address": get_env_str("CONTRACT_MANAGER_ADDRESS"),
        "account_balances_path": get_env_str("ACCOUNT_BALANCES_PATH"),
        "account_token_tx_list_path": get_env_str("ACCOUNT_TOKEN_TX_LIST_PATH"),
        "tx_list_path": get_env_str("TX_LIST_PATH"),
        "contract_query_path": get_env_str("CONTRACT_QUERY_PATH"),
    })


def get_settings() -> Settings:
    """
    Build settings from environment (and .env) with defaults for anything unset.

    Raises:
        ConfigError: a numeric env var is malformed or out of range.
    """
    load_wallet_env()
    timeout = get_env_float("REQUEST_TIMEOUT_SEC")
    concurrency = get_env_int("RPC_CONCURRENCY")
    return Settings(
        server=_server_config_from_env(),
        node=NodeConfig(
            rpc_url=get_env_str("CFX_RPC_URL") or DEFAULT_RPC_URL,
            request_timeout_sec=timeout if timeout is not None else DEFAULT_REQUEST_TIMEOUT_SEC,
        ),
        enricher=EnricherConfig(
            concurrency=concurrency if concurrency is not None else DEFAULT_RPC_CONCURRENCE,
            task_timeout_sec=get_env_float("RPC_TASK_TIMEOUT_SEC"),
        ),
    )
