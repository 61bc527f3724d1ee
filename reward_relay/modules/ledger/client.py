"""Protocol for the token ledger client."""

from __future__ import annotations

from typing import Protocol

from .models import PendingTransfer


class LedgerClient(Protocol):
    wallet_address: str
    token_address: str

    def is_valid_address(self, address: str) -> bool:
        ...

    def normalize_address(self, address: str) -> str:
        ...

    async def get_decimals(self) -> int:
        ...

    async def get_token_balance(self) -> int:
        ...

    async def get_native_balance(self) -> int:
        ...

    async def transfer(self, recipient: str, amount: int) -> PendingTransfer:
        ...

    async def wait_for_confirmation(self, tx_hash: str, timeout: float) -> int:
        """Return the block number that included ``tx_hash``."""
        ...

    async def close(self) -> None:
        ...
