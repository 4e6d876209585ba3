"""Unsigned transaction model and token transfer call data encoding."""

from conflux_wallet.transaction.builder import TransactionBuilder, build_transfer_data
from conflux_wallet.transaction.models import UnsignedTransaction

__all__ = ["TransactionBuilder", "UnsignedTransaction", "build_transfer_data"]
