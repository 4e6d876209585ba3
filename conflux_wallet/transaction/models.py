"""
Unsigned transaction value returned by the node client and the rich client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UnsignedTransaction:
    """
    Conflux transaction fields ready for signing.

    Integers are kept as ints; to_dict() renders them as 0x hex quantities with
    the node's field names.
    """

    from_address: str
    to_address: str | None
    value: int
    data: str | None
    nonce: int
    gas_price: int
    gas: int
    storage_limit: int
    epoch_height: int
    chain_id: int

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "from": self.from_address,
            "to": self.to_address,
            "value": hex(self.value),
            "nonce": hex(self.nonce),
            "gasPrice": hex(self.gas_price),
            "gas": hex(self.gas),
            "storageLimit": hex(self.storage_limit),
            "epochHeight": hex(self.epoch_height),
            "chainId": hex(self.chain_id),
        }
        if self.data:
            out["data"] = self.data
        return out
