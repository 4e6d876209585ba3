"""
Structured logging for the Conflux wallet client.

Use get_logger() in every module; log with an event type first and keyword fields.
"""

from conflux_wallet.wallet_logging.logger import get_logger

__all__ = ["get_logger"]
