"""Conflux node access: JSON-RPC client and the query port used by enrichment."""

from conflux_wallet.node.port import NodeQueryPort
from conflux_wallet.node.rpc_client import NodeRpcClient

__all__ = ["NodeQueryPort", "NodeRpcClient"]
