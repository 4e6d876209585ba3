"""
RichClient: node client plus the scan backend and contract manager servers.

Wallet queries that would need many node calls (transfer history with block
confidence, token balances) go through the centralized servers first and only
touch the node for what the servers cannot answer. Each RichClient owns its
configuration; building one never changes another.
"""

from __future__ import annotations

from typing import Any

import requests
from web3.exceptions import Web3Exception

from conflux_wallet.config.settings import EnricherConfig, NodeConfig, ServerConfig, Settings
from conflux_wallet.core.exceptions import RequestFailed, WalletClientError
from conflux_wallet.enrichment.enricher import BatchEnricher
from conflux_wallet.node.rpc_client import NodeRpcClient
from conflux_wallet.scan_client.contract_manager import TRANSFER_FIELDS, ContractMetadataClient
from conflux_wallet.scan_client.index_service import IndexServiceClient
from conflux_wallet.scan_client.models import ContractMetadata, TokenBalanceList, TransferPage
from conflux_wallet.scan_client.server import ScanServer
from conflux_wallet.transaction.builder import TransactionBuilder
from conflux_wallet.transaction.models import UnsignedTransaction
from conflux_wallet.wallet_logging import get_logger
from conflux_wallet.wallet_logging.logger import bind_address

logger = get_logger(__name__)


class RichClient:
    def __init__(
        self,
        client: NodeRpcClient,
        server_config: ServerConfig | dict[str, Any] | None = None,
        *,
        enricher_config: EnricherConfig | None = None,
        session: requests.Session | None = None,
        request_timeout_sec: float | None = None,
    ) -> None:
        """
        Args:
            client: Node RPC client.
            server_config: Overrides for server locations and paths; empty fields keep defaults.
            enricher_config: Concurrency ceiling and task timeout for transfer enrichment.
            session: HTTP session shared by both centralized servers (tests inject a mock).
            request_timeout_sec: HTTP timeout for centralized server requests.
        """
        self._client = client
        self._config = ServerConfig().merged(server_config)
        timeout_kw = {} if request_timeout_sec is None else {"request_timeout_sec": request_timeout_sec}
        self._scan_backend = ScanServer(
            self._config.scan_backend_scheme,
            self._config.scan_backend_address,
            session=session,
            **timeout_kw,
        )
        self._contract_manager = ScanServer(
            self._config.contract_manager_scheme,
            self._config.contract_manager_address,
            session=session,
            **timeout_kw,
        )
        self._index = IndexServiceClient(self._scan_backend, self._config)
        self._contracts = ContractMetadataClient(self._contract_manager, self._config)
        self._enricher = BatchEnricher(client, enricher_config)
        self._builder = TransactionBuilder(client.get_contract)

    @classmethod
    def from_settings(cls, settings: Settings, *, session: requests.Session | None = None) -> "RichClient":
        node = NodeRpcClient(
            settings.node.rpc_url,
            session=session,
            request_timeout_sec=settings.node.request_timeout_sec,
        )
        return cls(
            node,
            settings.server,
            enricher_config=settings.enricher,
            session=session,
            request_timeout_sec=settings.node.request_timeout_sec,
        )

    @property
    def client(self) -> NodeRpcClient:
        return self._client

    @property
    def server_config(self) -> ServerConfig:
        return self._config

    @property
    def scan_backend(self) -> ScanServer:
        return self._scan_backend

    @property
    def contract_manager(self) -> ScanServer:
        return self._contract_manager

    def get_account_token_transfers(
        self,
        address: str,
        token_identifier: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> TransferPage:
        """
        Transfers touching address, each with block hash and revert rate.

        token_identifier is the token contract address: when given, token transfer
        events of that token are returned, otherwise native-coin transactions.

        Raises:
            RequestFailed: scan backend call failed.
            BatchEnrichmentFailed: block / revert rate lookup failed for some record.
        """
        log = bind_address(address).bind(token=token_identifier)
        transfers = self._index.get_transfer_page(address, token_identifier, page, page_size)
        self._enricher.enrich(transfers.records)
        log.info("account_transfers_ready", records=len(transfers.records))
        return transfers

    def create_send_token_transaction(
        self,
        from_address: str,
        to_address: str,
        amount: int,
        token_identifier: str | None = None,
    ) -> UnsignedTransaction:
        """
        Unsigned transaction sending amount to to_address.

        Without token_identifier this is a plain value transfer. With one, the
        contract manager supplies the token ABI and type, and the transaction calls
        the token contract's transfer (ERC20, FANSCOIN) or send (ERC777) method.
        """
        if token_identifier is None:
            try:
                return self._client.create_unsigned_transaction(from_address, to_address, amount, None)
            except WalletClientError as e:
                raise RequestFailed(
                    f"create unsigned transaction by from {{{from_address}}}, to {{{to_address}}}, amount {{{amount}}} error",
                    e,
                ) from e

        metadata = self._contracts.get_contract(token_identifier, TRANSFER_FIELDS)
        try:
            data = self._builder.build(metadata, to_address, amount, token_identifier)
        except (WalletClientError, ValueError, Web3Exception) as e:
            raise RequestFailed(
                f"get data for transfer token method error, contract type {{{metadata.contract_type.value}}}", e
            ) from e

        try:
            tx = self._client.create_unsigned_transaction(from_address, token_identifier, None, data)
        except WalletClientError as e:
            raise RequestFailed(
                f"create transaction with params {{from: {from_address}, to: {token_identifier}, data: {data}}} error",
                e,
            ) from e
        logger.info(
            "token_transaction_created",
            address=from_address,
            token=token_identifier,
            contract_type=metadata.contract_type.value,
        )
        return tx

    def get_token_by_identifier(self, token_identifier: str) -> ContractMetadata:
        """Token detail information (name, symbol, decimals, ABI, type) of a token contract."""
        return self._contracts.get_contract(token_identifier)

    def get_account_tokens(self, address: str) -> TokenBalanceList:
        """Token balances of address."""
        return self._contracts.get_account_tokens(address)

    def get_transactions_from_pool(self) -> list[dict[str, Any]] | None:
        """Pending transactions in the node's pool; only works against a local node."""
        try:
            return self._client.get_transactions_from_pool()
        except WalletClientError as e:
            raise RequestFailed("rpc getTransactionsFromPool error", e) from e
