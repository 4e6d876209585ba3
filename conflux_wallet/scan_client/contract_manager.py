"""
Contract manager client: contract ABI / type lookup and account token balances.
"""

from __future__ import annotations

from conflux_wallet.config.settings import ServerConfig
from conflux_wallet.core.exceptions import RequestFailed, WalletClientError
from conflux_wallet.scan_client.models import ContractMetadata, TokenBalanceList
from conflux_wallet.scan_client.server import ScanServer

# fields selector used when only the transfer encoding data is needed
TRANSFER_FIELDS = "abi,typeCode"


class ContractMetadataClient:
    def __init__(self, server: ScanServer, config: ServerConfig | None = None) -> None:
        self._server = server
        self._config = config or ServerConfig()

    def get_contract(self, address: str, fields: str | None = None) -> ContractMetadata:
        """Contract metadata by address; fields limits the returned attributes (e.g. "abi,typeCode")."""
        params: dict[str, object] = {"address": address}
        if fields:
            params["fields"] = fields
        path = self._config.contract_query_path
        try:
            return self._server.get(path, params, ContractMetadata.from_result)
        except WalletClientError as e:
            raise RequestFailed(
                f"get and unmarshal result of contract manager server and path {{{path}}}, params: {{{params}}} error", e
            ) from e

    def get_account_tokens(self, address: str) -> TokenBalanceList:
        """Native balance and token balances held by address."""
        params: dict[str, object] = {"address": address}
        path = self._config.account_balances_path
        try:
            return self._server.get(path, params, TokenBalanceList.from_result)
        except WalletClientError as e:
            raise RequestFailed(
                f"get and unmarshal result of contract manager server and path {{{path}}}, params: {{{params}}} error", e
            ) from e
