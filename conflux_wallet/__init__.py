"""
Conflux wallet rich client.

Combines a Conflux node JSON-RPC client with the centralized scan backend
(transaction / token transfer index) and contract manager (contract ABI and
type directory) to answer wallet queries and build unsigned token transfers.
"""

__version__ = "0.1.0"
