"""
Core utilities: the exception hierarchy shared by the service clients,
the node client, the enrichment pipeline and the transaction builder.
"""

from conflux_wallet.core.exceptions import (  # noqa: F401
    ApplicationError,
    BatchEnrichmentFailed,
    ConfigError,
    DecodeError,
    NodeRpcError,
    PerItemEnrichmentError,
    RequestFailed,
    TransportError,
    UnsupportedContractType,
    WalletClientError,
)
