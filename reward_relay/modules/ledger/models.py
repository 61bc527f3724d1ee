"""Value objects exchanged with the token ledger client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class WalletState:
    native_balance: int
    token_balance: int
    decimals: int


@dataclass(slots=True, frozen=True)
class PendingTransfer:
    tx_hash: str
