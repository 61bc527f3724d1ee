"""Turn a raw /send-tokens body into a DisbursementRequest."""

from __future__ import annotations

import re
from typing import Any

from reward_relay.modules.ledger import LedgerClient

from .exceptions import InvalidAddressError, InvalidAmountError, MissingFieldError
from .models import DisbursementRequest

_DIGITS = re.compile(r"[0-9]+")
# token amounts are uint256, so no valid points value is wider than 2**256 - 1
MAX_POINTS = 2**256 - 1
_MAX_DIGITS = len(str(MAX_POINTS))


def parse_points(value: Any) -> int:
    """
    Strict whole-number parse: JSON integers or plain digit strings only.

    Floats (even ``100.0``), booleans, signs, exponents and separators are rejected
    rather than truncated. Values above ``MAX_POINTS`` are rejected, and over-long
    digit strings never reach ``int()``.
    """
    if isinstance(value, bool):
        raise InvalidAmountError("points must be a positive whole number")
    if isinstance(value, int):
        points = value
    elif isinstance(value, str) and _DIGITS.fullmatch(value.strip()):
        digits = value.strip().lstrip("0") or "0"
        if len(digits) > _MAX_DIGITS:
            raise InvalidAmountError("points is too large")
        points = int(digits)
    else:
        raise InvalidAmountError("points must be a positive whole number")
    if points <= 0:
        raise InvalidAmountError("points must be greater than zero")
    if points > MAX_POINTS:
        raise InvalidAmountError("points is too large")
    return points


def validate_disbursement(payload: Any, ledger: LedgerClient) -> DisbursementRequest:
    if not isinstance(payload, dict):
        raise MissingFieldError("Request body must be a JSON object with address and points")

    address = payload.get("address")
    if isinstance(address, str):
        address = address.strip()
    if address is None or address == "":
        raise MissingFieldError("address is required")
    if payload.get("points") is None:
        raise MissingFieldError("points is required")

    if not isinstance(address, str) or not ledger.is_valid_address(address):
        raise InvalidAddressError(f"Invalid recipient address: {address}")

    points = parse_points(payload["points"])
    return DisbursementRequest(recipient_address=ledger.normalize_address(address), points=points)
