"""Domain models for reward disbursements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class DisbursementRequest:
    recipient_address: str
    points: int


@dataclass(slots=True, frozen=True)
class TransactionResult:
    transaction_hash: str
    recipient_address: str
    amount: int
    confirmation_block: Optional[int] = None


def points_to_token_units(points: int, decimals: int) -> int:
    """
    Scale whole reward points into the token's smallest unit (1 point = 1 token)
    """
    return points * 10 ** decimals
