"""
RichClient end to end with mocked scan servers and node: transfers with revert
rate, token transaction building, pass-through queries.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from conflux_wallet.config.settings import EnricherConfig
from conflux_wallet.core.exceptions import (
    BatchEnrichmentFailed,
    NodeRpcError,
    RequestFailed,
    UnsupportedContractType,
)
from conflux_wallet.node import NodeRpcClient
from conflux_wallet.node.rpc_client import MAX_UINT256
from conflux_wallet.rich_client import RichClient
from conflux_wallet.scan_client.models import ContractType

FROM = "0x1aa0000000000000000000000000000000000001"
TO = "0x1bb0000000000000000000000000000000000002"
TOKEN = "0x8cc0000000000000000000000000000000000003"

ERC20_ABI = [
    {
        "type": "function",
        "name": "transfer",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
    }
]

TX_SETUP = {
    "cfx_getNextNonce": "0x1",
    "cfx_gasPrice": "0x1",
    "cfx_epochNumber": "0x10",
    "cfx_getStatus": {"chainId": "0x1"},
    "cfx_estimateGasAndCollateral": {"gasUsed": "0x9c40", "storageCollateralized": "0x0"},
}


def _transfer_list(n: int) -> dict:
    return {
        "total": n,
        "list": [
            {"transactionHash": f"0xt{i}", "from": FROM, "to": TO, "value": i, "address": TOKEN}
            for i in range(n)
        ],
    }


def _node(rpc_session, handlers: dict) -> NodeRpcClient:
    return NodeRpcClient("http://node:12537", session=rpc_session(handlers))


def test_transfers_enriched_with_revert_rate(rpc_session, make_response, envelope):
    node = _node(rpc_session, {
        "cfx_getTransactionByHash": lambda h: None if h == "0xt2" else {"hash": h, "blockHash": f"0xb{h[3:]}"},
        "cfx_getConfirmationRiskByHash": lambda b: hex(MAX_UINT256 // 4),
    })
    scan = MagicMock()
    scan.get.return_value = make_response(envelope(_transfer_list(5)))
    client = RichClient(node, session=scan, enricher_config=EnricherConfig(concurrency=2))

    page = client.get_account_token_transfers(FROM, TOKEN, page=1, page_size=5)

    assert [r.transaction_hash for r in page.records] == [f"0xt{i}" for i in range(5)]
    assert page.records[0].block_hash == "0xb0"
    assert page.records[0].revert_rate == pytest.approx(0.25)
    # unmined
    assert page.records[2].block_hash is None
    assert page.records[2].revert_rate is None
    assert client.client is node


def test_transfers_fail_as_a_whole(rpc_session, make_response, envelope):
    def risk(block_hash):
        if block_hash == "0xb1":
            raise requests.ConnectionError("reset by peer")
        return "0x0"

    node = NodeRpcClient("http://node:12537", session=rpc_session({
        "cfx_getTransactionByHash": lambda h: {"hash": h, "blockHash": f"0xb{h[3:]}"},
        "cfx_getConfirmationRiskByHash": risk,
    }))
    scan = MagicMock()
    scan.get.return_value = make_response(envelope(_transfer_list(3)))
    client = RichClient(node, session=scan, enricher_config=EnricherConfig(concurrency=3))

    with pytest.raises(BatchEnrichmentFailed) as exc_info:
        client.get_account_token_transfers(FROM, TOKEN)
    assert len(exc_info.value.failures) == 1
    assert exc_info.value.failures[0].transaction_hash == "0xt1"
    assert "0xt1" in str(exc_info.value)


def test_empty_page_makes_no_node_calls(rpc_session, make_response, envelope):
    session = rpc_session({})
    node = NodeRpcClient("http://node:12537", session=session)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"total": 0, "list": []}))
    page = RichClient(node, session=scan).get_account_token_transfers(FROM)
    assert page.records == []
    session.post.assert_not_called()


def test_native_transfer_transaction(rpc_session):
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    tx = RichClient(node, session=scan).create_send_token_transaction(FROM, TO, 5 * 10**18)
    assert tx.to_address == TO
    assert tx.value == 5 * 10**18
    assert tx.data is None
    scan.get.assert_not_called()


def test_erc20_token_transaction(rpc_session, make_response, envelope):
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"abi": json.dumps(ERC20_ABI), "typeCode": 100}))
    tx = RichClient(node, session=scan).create_send_token_transaction(FROM, TO, 100, TOKEN)

    parts = urlsplit(scan.get.call_args.args[0])
    assert parts.path == "/api/contract/query"
    assert parse_qs(parts.query) == {"address": [TOKEN], "fields": ["abi,typeCode"]}
    assert tx.to_address == TOKEN
    assert tx.value == 0
    assert tx.data.startswith(Web3.to_hex(Web3.keccak(text="transfer(address,uint256)")[:4]))
    assert TO[2:] in tx.data


def test_unsupported_token_type_wrapped(rpc_session, make_response, envelope):
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"abi": ERC20_ABI, "typeCode": 500}))
    with pytest.raises(RequestFailed) as exc_info:
        RichClient(node, session=scan).create_send_token_transaction(FROM, TO, 1, TOKEN)
    assert isinstance(exc_info.value.cause, UnsupportedContractType)
    assert exc_info.value.cause.contract_type is ContractType.DEX
    assert "DEX" in str(exc_info.value)


def test_token_lookup_and_balances(rpc_session, make_response, envelope):
    node = _node(rpc_session, {})
    scan = MagicMock()
    client = RichClient(node, {"contract_manager_address": "cm.test:1"}, session=scan)

    scan.get.return_value = make_response(envelope({"address": TOKEN, "abi": [], "typeCode": 400, "name": "Fans"}))
    meta = client.get_token_by_identifier(TOKEN)
    assert meta.contract_type is ContractType.FANSCOIN
    assert urlsplit(scan.get.call_args.args[0]).netloc == "cm.test:1"
    assert "fields" not in parse_qs(urlsplit(scan.get.call_args.args[0]).query)

    scan.get.return_value = make_response(envelope({"list": [{"address": TOKEN, "balance": "0x64"}]}))
    balances = client.get_account_tokens(FROM)
    assert balances.total == 1
    assert balances.tokens[0].balance == 100


def test_transactions_from_pool_passthrough(rpc_session, make_response):
    node = _node(rpc_session, {"getTransactionsFromPool": [{"hash": "0xpool"}]})
    assert RichClient(node, session=MagicMock()).get_transactions_from_pool() == [{"hash": "0xpool"}]

    session = MagicMock()
    session.post.return_value = make_response(
        {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}}
    )
    remote = NodeRpcClient("http://node:12537", session=session)
    with pytest.raises(RequestFailed) as exc_info:
        RichClient(remote, session=MagicMock()).get_transactions_from_pool()
    assert isinstance(exc_info.value.cause, NodeRpcError)


def test_token_contract_built_by_node_client(rpc_session, make_response, envelope):
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"abi": ERC20_ABI, "typeCode": 100}))
    with patch.object(node, "get_contract", wraps=node.get_contract) as get_contract:
        RichClient(node, session=scan).create_send_token_transaction(FROM, TO, 1, TOKEN)
    get_contract.assert_called_once_with(ERC20_ABI, TOKEN)


@pytest.mark.parametrize("to_address, amount", [("not-an-address", 1), (TO, -1)])
def test_bad_transfer_arguments_wrapped(rpc_session, make_response, envelope, to_address, amount):
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"abi": ERC20_ABI, "typeCode": 100}))
    with pytest.raises(RequestFailed) as exc_info:
        RichClient(node, session=scan).create_send_token_transaction(FROM, to_address, amount, TOKEN)
    assert isinstance(exc_info.value.cause, ValueError)
    assert "ERC20" in str(exc_info.value)


def test_abi_without_transfer_method_wrapped(rpc_session, make_response, envelope):
    approve_only = [
        {
            "type": "function",
            "name": "approve",
            "stateMutability": "nonpayable",
            "inputs": [{"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}],
            "outputs": [{"name": "", "type": "bool"}],
        }
    ]
    node = _node(rpc_session, TX_SETUP)
    scan = MagicMock()
    scan.get.return_value = make_response(envelope({"abi": approve_only, "typeCode": 100}))
    with pytest.raises(RequestFailed) as exc_info:
        RichClient(node, session=scan).create_send_token_transaction(FROM, TO, 1, TOKEN)
    assert isinstance(exc_info.value.cause, (ValueError, Web3Exception))
