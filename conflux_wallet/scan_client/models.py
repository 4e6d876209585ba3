"""
Data models for scan backend and contract manager responses.

Raw page items come in two shapes (native-coin transactions and token transfer
events); both normalise to TransferRecord so the enrichment pipeline only sees one type.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


def _to_int(val: Any) -> int:
    """Parse int from int, decimal string or 0x-prefixed hex string."""
    if val is None or val == "":
        return 0
    if isinstance(val, bool):
        raise TypeError("bool is not a valid amount")
    if isinstance(val, int):
        return val
    s = str(val).strip()
    if s.lower().startswith("0x"):
        return int(s, 16)
    return int(s)


def _opt_int(val: Any) -> int | None:
    if val is None or val == "":
        return None
    return _to_int(val)


@dataclass
class TransferRecord:
    """
    One transfer of native coin or token touching an address.

    Identity is transaction_hash. block_hash and revert_rate start as None and are
    written once by the enrichment pipeline; revert_rate is the block's
    confirmation risk (0.0 = safe, 1.0 = certain revert).
    """

    transaction_hash: str
    from_address: str
    to_address: str
    value: int
    timestamp: int | None = None
    token_identifier: str | None = None
    block_hash: str | None = None
    revert_rate: float | None = None

    @classmethod
    def from_scan_transfer(cls, item: dict[str, Any], token_identifier: str | None = None) -> "TransferRecord":
        """Build from a token transfer event item of the transfer list endpoint."""
        return cls(
            transaction_hash=item["transactionHash"],
            from_address=item.get("from") or "",
            to_address=item.get("to") or "",
            value=_to_int(item.get("value")),
            timestamp=_opt_int(item.get("timestamp")),
            token_identifier=item.get("address") or token_identifier,
        )

    @classmethod
    def from_scan_transaction(cls, item: dict[str, Any]) -> "TransferRecord":
        """Build from a native-coin transaction item of the transaction list endpoint."""
        return cls(
            transaction_hash=item["hash"],
            from_address=item.get("from") or "",
            to_address=item.get("to") or "",
            value=_to_int(item.get("value")),
            timestamp=_opt_int(item.get("timestamp")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TransferPage:
    total: int
    records: list[TransferRecord] = field(default_factory=list)

    @classmethod
    def from_transfer_list(cls, result: dict[str, Any], token_identifier: str | None = None) -> "TransferPage":
        items = result.get("list") or []
        return cls(
            total=_to_int(result.get("total")),
            records=[TransferRecord.from_scan_transfer(i, token_identifier) for i in items],
        )

    @classmethod
    def from_transaction_list(cls, result: dict[str, Any]) -> "TransferPage":
        items = result.get("list") or []
        return cls(
            total=_to_int(result.get("total")),
            records=[TransferRecord.from_scan_transaction(i) for i in items],
        )


class ContractType(str, Enum):
    ERC20 = "ERC20"
    ERC777 = "ERC777"
    ERC721 = "ERC721"
    FANSCOIN = "FANSCOIN"
    DEX = "DEX"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_type_code(cls, type_code: int | None) -> "ContractType":
        """Contract manager type codes are grouped by hundreds: 1xx ERC20, 2xx ERC777, ..."""
        if type_code is None:
            return cls.UNKNOWN
        return _TYPE_CODE_RANGES.get(int(type_code) // 100, cls.UNKNOWN)


_TYPE_CODE_RANGES = {
    1: ContractType.ERC20,
    2: ContractType.ERC777,
    3: ContractType.ERC721,
    4: ContractType.FANSCOIN,
    5: ContractType.DEX,
}


@dataclass(frozen=True)
class ContractMetadata:
    """Contract manager record: ABI plus type classification and token display data."""

    address: str | None
    abi: list[dict[str, Any]]
    type_code: int | None = None
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    icon: str | None = None

    @property
    def contract_type(self) -> ContractType:
        return ContractType.from_type_code(self.type_code)

    @classmethod
    def from_result(cls, result: dict[str, Any]) -> "ContractMetadata":
        abi = result.get("abi") or []
        if isinstance(abi, str):
            # contract manager stores the ABI as a JSON string
            abi = json.loads(abi)
        if not isinstance(abi, list):
            raise TypeError(f"abi must be a list, got {type(abi).__name__}")
        return cls(
            address=result.get("address"),
            abi=abi,
            type_code=_opt_int(result.get("typeCode")),
            name=result.get("name"),
            symbol=result.get("symbol"),
            decimals=_opt_int(result.get("decimals")),
            icon=result.get("icon"),
        )


@dataclass(frozen=True)
class TokenBalance:
    contract_address: str
    name: str | None
    symbol: str | None
    decimals: int | None
    balance: int

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "TokenBalance":
        return cls(
            contract_address=item.get("address") or item["contractAddress"],
            name=item.get("name"),
            symbol=item.get("symbol"),
            decimals=_opt_int(item.get("decimals")),
            balance=_to_int(item.get("balance")),
        )


@dataclass(frozen=True)
class TokenBalanceList:
    total: int
    tokens: list[TokenBalance]

    @classmethod
    def from_result(cls, result: dict[str, Any]) -> "TokenBalanceList":
        items = result.get("list") or []
        return cls(
            total=_to_int(result.get("total", len(items))),
            tokens=[TokenBalance.from_item(i) for i in items],
        )
