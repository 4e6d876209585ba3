"""
Clients for the centralized servers: scan backend (transfer index) and
contract manager (contract metadata directory).
"""

from conflux_wallet.scan_client.contract_manager import ContractMetadataClient
from conflux_wallet.scan_client.index_service import IndexServiceClient
from conflux_wallet.scan_client.server import ScanServer

__all__ = ["ContractMetadataClient", "IndexServiceClient", "ScanServer"]
