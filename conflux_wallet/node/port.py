"""
The two node queries the enrichment pipeline depends on.

NodeRpcClient implements this against a live node; tests use in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NodeQueryPort(Protocol):
    def resolve_block_of_transaction(self, tx_hash: str) -> str | None:
        """Hash of the block containing tx_hash, or None when not yet mined."""
        ...

    def resolve_block_confidence(self, block_hash: str) -> float:
        """Revert rate of block_hash in [0, 1]."""
        ...
