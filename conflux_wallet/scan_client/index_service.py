"""
Scan backend client: transaction and token transfer pages for an address.

With a token identifier the transfer list endpoint returns token transfer events;
without one the transaction list endpoint returns native-coin transactions.
Both become a TransferPage of TransferRecord.
"""

from __future__ import annotations

from functools import partial

from conflux_wallet.config.settings import ServerConfig
from conflux_wallet.core.exceptions import RequestFailed, WalletClientError
from conflux_wallet.scan_client.models import TransferPage
from conflux_wallet.scan_client.server import ScanServer
from conflux_wallet.wallet_logging import get_logger

logger = get_logger(__name__)

TX_TYPE_ALL = "all"


class IndexServiceClient:
    def __init__(self, server: ScanServer, config: ServerConfig | None = None) -> None:
        self._server = server
        self._config = config or ServerConfig()

    def get_transfer_page(
        self,
        address: str,
        token_identifier: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> TransferPage:
        """
        Fetch one page of transfers touching address.

        Raises:
            ValueError: page or page_size below 1.
            RequestFailed: server call failed; names path and params.
        """
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")
        params: dict[str, object] = {
            "address": address,
            "page": page,
            "pageSize": page_size,
            "txType": TX_TYPE_ALL,
        }
        if token_identifier is not None:
            params["contractAddress"] = token_identifier
            path = self._config.account_token_tx_list_path
            decode = partial(TransferPage.from_transfer_list, token_identifier=token_identifier)
        else:
            path = self._config.tx_list_path
            decode = TransferPage.from_transaction_list

        try:
            result = self._server.get(path, params, decode)
        except WalletClientError as e:
            raise RequestFailed(
                f"get result of scan backend server and path {{{path}}}, params: {{{params}}} error", e
            ) from e
        logger.info(
            "transfer_page_fetched",
            address=address,
            token=token_identifier,
            page=page,
            records=len(result.records),
            total=result.total,
        )
        return result
