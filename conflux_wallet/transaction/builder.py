"""
Call data for token transfers, chosen by contract type.

ERC20 and FANSCOIN share transfer(address,uint256); ERC777 uses
send(address,uint256,bytes) with empty data. Other types are not supported.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from web3 import Web3
from web3.contract import Contract

from conflux_wallet.core.exceptions import UnsupportedContractType
from conflux_wallet.scan_client.models import ContractMetadata, ContractType

_TRANSFER_METHODS: dict[ContractType, str] = {
    ContractType.ERC20: "transfer",
    ContractType.FANSCOIN: "transfer",
    ContractType.ERC777: "send",
}


def _as_contract_type(tag: ContractType | str) -> ContractType | str:
    if isinstance(tag, ContractType):
        return tag
    try:
        return ContractType(str(tag).upper())
    except ValueError:
        return str(tag)


def transfer_args(contract_type: ContractType | str, to: str, amount: int) -> tuple[str, list[Any]]:
    """
    Method name and arguments of the transfer call for contract_type.

    Raises:
        UnsupportedContractType: no transfer encoding for this tag.
    """
    tag = _as_contract_type(contract_type)
    method = _TRANSFER_METHODS.get(tag) if isinstance(tag, ContractType) else None
    if method is None:
        raise UnsupportedContractType(tag)
    if amount < 0:
        raise ValueError("amount must be non-negative")
    recipient = Web3.to_checksum_address(to)
    if method == "send":
        return method, [recipient, amount, b""]
    return method, [recipient, amount]


def build_transfer_data(contract_type: ContractType | str, contract: Contract, to: str, amount: int) -> str:
    """0x-prefixed call data moving amount of the token to `to`."""
    method, args = transfer_args(contract_type, to, amount)
    return contract.encode_abi(method, args=args)


ContractFactory = Callable[[list[dict[str, Any]], Optional[str]], Contract]


def _offline_contract(abi: list[dict[str, Any]], address: str | None = None) -> Contract:
    w3 = Web3()
    if address is None:
        return w3.eth.contract(abi=abi)
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)


class TransactionBuilder:
    """
    Encodes transfer call data from contract manager metadata.

    contract_factory(abi, address) builds the contract object; RichClient passes
    NodeRpcClient.get_contract so every contract comes from the node client.
    """

    def __init__(self, contract_factory: ContractFactory | None = None) -> None:
        self._contract_factory = contract_factory or _offline_contract

    def contract_for(self, metadata: ContractMetadata, address: str | None = None) -> Contract:
        """Contract for metadata.abi, bound at address (defaults to metadata.address)."""
        return self._contract_factory(metadata.abi, address or metadata.address)

    def build(self, metadata: ContractMetadata, to: str, amount: int, address: str | None = None) -> str:
        """
        Call data for metadata's contract type.

        Raises:
            UnsupportedContractType: metadata type has no transfer encoding.
            ValueError: bad token / recipient address or negative amount.
        """
        return build_transfer_data(metadata.contract_type, self.contract_for(metadata, address), to, amount)
