"""Ledger client errors."""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Network or chain level failure while talking to the ledger."""

    code = "LedgerError"

    def __init__(
        self,
        message: str,
        *,
        reason: str | None = None,
        transaction_hash: str | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.transaction_hash = transaction_hash
        self.data = data

    def details(self) -> dict[str, Any]:
        details: dict[str, Any] = {"reason": self.reason}
        if self.transaction_hash:
            details["transactionHash"] = self.transaction_hash
        if self.data is not None:
            details["data"] = self.data
        return details


class TransferRejectedError(LedgerError):
    """The client or node refused to accept the transfer."""

    code = "TransferRejected"


class TransactionRevertedError(LedgerError):
    """The transfer was mined but the token contract reverted it."""

    code = "TransactionReverted"


class ConfirmationTimeoutError(LedgerError):
    """No receipt arrived in time; the transaction may still be mined later."""

    code = "ConfirmationTimeout"


class LedgerInitializationError(Exception):
    """Raised when the wallet/client handle cannot be constructed at startup."""
