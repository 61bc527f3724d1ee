"""Ledger domain exports"""

from .client import LedgerClient
from .exceptions import (
    ConfirmationTimeoutError,
    LedgerError,
    LedgerInitializationError,
    TransactionRevertedError,
    TransferRejectedError,
)
from .models import PendingTransfer, WalletState

__all__ = [
    "LedgerClient",
    "LedgerError",
    "LedgerInitializationError",
    "TransferRejectedError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
    "PendingTransfer",
    "WalletState",
]
