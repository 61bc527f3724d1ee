"""Disbursement domain exports"""

from .exceptions import (
    DisbursementError,
    InsufficientBalanceError,
    InvalidAddressError,
    InvalidAmountError,
    MissingFieldError,
    RequestValidationError,
)
from .models import DisbursementRequest, TransactionResult, points_to_token_units
from .service import DisbursementService
from .validation import MAX_POINTS, parse_points, validate_disbursement

__all__ = [
    "DisbursementError",
    "RequestValidationError",
    "MissingFieldError",
    "InvalidAddressError",
    "InvalidAmountError",
    "InsufficientBalanceError",
    "DisbursementRequest",
    "TransactionResult",
    "points_to_token_units",
    "DisbursementService",
    "MAX_POINTS",
    "parse_points",
    "validate_disbursement",
]
