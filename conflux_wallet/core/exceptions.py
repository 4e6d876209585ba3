"""
Application-level exceptions.

Service clients, the node client and the transaction builder raise these and
propagate them immediately. The enrichment pipeline is the one place that
collects per-item errors and only raises (BatchEnrichmentFailed) once every
record has been attempted.
"""

from __future__ import annotations

from typing import Any, Sequence


class WalletClientError(Exception):
    """Base class for every error raised by conflux_wallet."""


class ConfigError(WalletClientError):
    """Invalid configuration value (env var or explicit config)."""


class TransportError(WalletClientError):
    """HTTP / network failure talking to a centralized server or the node."""


class DecodeError(WalletClientError):
    """Envelope or payload JSON did not have the expected shape."""


class ApplicationError(WalletClientError):
    """Centralized server answered with a non-zero envelope code."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"code:{code}, message:{message}")


class NodeRpcError(WalletClientError):
    """Node answered a JSON-RPC request with an error object."""

    def __init__(self, method: str, code: Any, message: str) -> None:
        self.method = method
        self.code = code
        self.message = message
        super().__init__(f"rpc {method} error: code:{code}, message:{message}")


class RequestFailed(WalletClientError):
    """
    A failed call with its context attached (endpoint, parameters).

    The underlying error is kept as __cause__ and as .cause.
    """

    def __init__(self, context: str, cause: BaseException) -> None:
        self.context = context
        self.cause = cause
        super().__init__(f"{context}: {cause}")


class UnsupportedContractType(WalletClientError):
    """No transfer call data encoding exists for this contract type."""

    def __init__(self, contract_type: Any) -> None:
        self.contract_type = contract_type
        name = getattr(contract_type, "value", contract_type)
        super().__init__(
            f"Do not support build data for transfer token function of contract type {name}"
        )


class PerItemEnrichmentError(WalletClientError):
    """One record of a batch could not be enriched."""

    def __init__(self, index: int, transaction_hash: str, message: str) -> None:
        self.index = index
        self.transaction_hash = transaction_hash
        self.message = message
        super().__init__(message)


class BatchEnrichmentFailed(WalletClientError):
    """
    At least one record of a batch failed to enrich.

    failures is ordered by record position; str() joins every message with newlines.
    """

    def __init__(self, failures: Sequence[PerItemEnrichmentError]) -> None:
        self.failures = list(failures)
        super().__init__("\n".join(f.message for f in self.failures))

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.failures]
