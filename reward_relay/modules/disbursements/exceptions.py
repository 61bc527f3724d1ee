"""Disbursement domain specific exceptions."""


class DisbursementError(Exception):
    """Base class for errors reported back to the caller as a 400."""

    code = "DisbursementError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RequestValidationError(DisbursementError):
    """Raised when the request body cannot become a DisbursementRequest."""

    code = "ValidationError"


class MissingFieldError(RequestValidationError):
    code = "MissingField"


class InvalidAddressError(RequestValidationError):
    code = "InvalidAddress"


class InvalidAmountError(RequestValidationError):
    code = "InvalidAmount"


class InsufficientBalanceError(DisbursementError):
    """Raised when the wallet cannot cover the transfer; nothing is submitted."""

    code = "InsufficientBalance"

    def __init__(self, required: int, available: int) -> None:
        super().__init__("Insufficient token balance on the server wallet")
        self.required = required
        self.available = available
