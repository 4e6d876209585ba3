"""
Conflux node JSON-RPC client over HTTP (requests).

Thin pass-through: one POST per call, no automatic retry (retry policy belongs
to the caller). Also implements NodeQueryPort for the enrichment pipeline.
"""

from __future__ import annotations

import itertools
import threading
from typing import Any

import requests
from web3 import Web3
from web3.contract import Contract

from conflux_wallet.config.settings import DEFAULT_REQUEST_TIMEOUT_SEC
from conflux_wallet.core.exceptions import DecodeError, NodeRpcError, TransportError
from conflux_wallet.transaction.models import UnsignedTransaction
from conflux_wallet.wallet_logging import get_logger

logger = get_logger(__name__)

# Confirmation risk is a fraction scaled to the uint256 range
MAX_UINT256 = 2**256 - 1

EPOCH_LATEST_STATE = "latest_state"


def _hex_to_int(val: Any, field: str) -> int:
    if isinstance(val, int) and not isinstance(val, bool):
        return val
    if not isinstance(val, str):
        raise DecodeError(f"{field}: expected hex quantity, got {val!r}")
    try:
        return int(val, 16)
    except ValueError as e:
        raise DecodeError(f"{field}: invalid hex quantity {val!r}") from e


class NodeRpcClient:
    """
    JSON-RPC 2.0 client for one Conflux node endpoint.

    Safe to share between threads: request ids come from a locked counter and
    requests.Session connection pooling handles concurrent posts.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        session: requests.Session | None = None,
        request_timeout_sec: float = DEFAULT_REQUEST_TIMEOUT_SEC,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.strip()
        self._session = session or requests.Session()
        self._timeout = request_timeout_sec
        self._ids = itertools.count(1)
        self._id_lock = threading.Lock()
        # offline instance: only used for ABI encoding, never sends requests
        self._w3 = Web3()

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def call_rpc(self, method: str, *params: Any) -> Any:
        """
        Call method with positional params and return the "result" member.

        Raises:
            TransportError: HTTP failure, timeout, or non-2xx status.
            NodeRpcError: response carries an error object.
            DecodeError: response is not a JSON-RPC response.
        """
        payload = {"jsonrpc": "2.0", "id": self._next_id(), "method": method, "params": list(params)}
        try:
            r = self._session.post(self._rpc_url, json=payload, timeout=self._timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"rpc {method} request failed: {e}") from e
        try:
            data = r.json()
        except ValueError as e:
            raise DecodeError(f"rpc {method} response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise DecodeError(f"rpc {method} response is not an object")
        err = data.get("error")
        if err:
            if isinstance(err, dict):
                raise NodeRpcError(method, err.get("code"), str(err.get("message") or ""))
            raise NodeRpcError(method, None, str(err))
        if "result" not in data:
            raise DecodeError(f"rpc {method} response has neither result nor error")
        return data["result"]

    def get_transaction_by_hash(self, tx_hash: str) -> dict[str, Any] | None:
        tx = self.call_rpc("cfx_getTransactionByHash", tx_hash)
        if tx is not None and not isinstance(tx, dict):
            raise DecodeError(f"cfx_getTransactionByHash: expected object, got {type(tx).__name__}")
        return tx

    def get_block_revert_rate_by_hash(self, block_hash: str) -> float:
        """Confirmation risk of block_hash as a float in [0, 1]; 0.0 when the node reports none."""
        risk = self.call_rpc("cfx_getConfirmationRiskByHash", block_hash)
        if risk is None:
            return 0.0
        return _hex_to_int(risk, "confirmation risk") / MAX_UINT256

    def get_transactions_from_pool(self) -> list[dict[str, Any]] | None:
        """Pending transactions in the node's pool. Only works against a local node."""
        txs = self.call_rpc("getTransactionsFromPool")
        if txs is None:
            return None
        if not isinstance(txs, list):
            raise DecodeError(f"getTransactionsFromPool: expected list, got {type(txs).__name__}")
        return txs

    def get_contract(self, abi: list[dict[str, Any]], address: str | None = None) -> Contract:
        """Contract bound to abi (and address when given), used to encode call data."""
        if address is None:
            return self._w3.eth.contract(abi=abi)
        return self._w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def create_unsigned_transaction(
        self,
        from_address: str,
        to_address: str,
        value: int | None = None,
        data: str | None = None,
    ) -> UnsignedTransaction:
        """Fill nonce, gas price, gas / storage estimate, epoch height and chain id from the node."""
        value = value or 0
        nonce = _hex_to_int(self.call_rpc("cfx_getNextNonce", from_address), "nonce")
        gas_price = _hex_to_int(self.call_rpc("cfx_gasPrice"), "gasPrice")
        epoch_height = _hex_to_int(self.call_rpc("cfx_epochNumber", EPOCH_LATEST_STATE), "epochNumber")

        status = self.call_rpc("cfx_getStatus")
        if not isinstance(status, dict) or "chainId" not in status:
            raise DecodeError("cfx_getStatus: missing chainId")
        chain_id = _hex_to_int(status["chainId"], "chainId")

        call: dict[str, Any] = {"from": from_address, "to": to_address, "value": hex(value)}
        if data:
            call["data"] = data
        estimate = self.call_rpc("cfx_estimateGasAndCollateral", call, EPOCH_LATEST_STATE)
        if not isinstance(estimate, dict):
            raise DecodeError("cfx_estimateGasAndCollateral: expected object")
        gas = _hex_to_int(estimate.get("gasLimit") or estimate.get("gasUsed"), "gas")
        storage = _hex_to_int(estimate.get("storageCollateralized") or "0x0", "storageCollateralized")

        return UnsignedTransaction(
            from_address=from_address,
            to_address=to_address,
            value=value,
            data=data,
            nonce=nonce,
            gas_price=gas_price,
            gas=gas,
            storage_limit=storage,
            epoch_height=epoch_height,
            chain_id=chain_id,
        )

    # NodeQueryPort

    def resolve_block_of_transaction(self, tx_hash: str) -> str | None:
        tx = self.get_transaction_by_hash(tx_hash)
        if tx is None:
            return None
        return tx.get("blockHash")

    def resolve_block_confidence(self, block_hash: str) -> float:
        return self.get_block_revert_rate_by_hash(block_hash)
