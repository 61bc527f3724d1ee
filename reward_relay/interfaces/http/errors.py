"""Map domain exceptions onto the JSON error envelope."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from reward_relay.modules.disbursements import DisbursementError
from reward_relay.modules.ledger import LedgerError
from reward_relay.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, payload: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(by_alias=True, exclude_none=True),
    )


async def disbursement_error_handler(request: Request, exc: DisbursementError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(error=exc.message, code=exc.code),
    )


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    logger.error("Ledger failure on %s: %s (%s, reason=%s)", request.url.path, exc.message, exc.code, exc.reason)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error=exc.message, code=exc.code, details=exc.details()),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error="Internal server error", code="InternalError", details=exc.__class__.__name__),
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded for %s: %s", request.client.host if request.client else "unknown", exc.detail)
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorResponse(error=f"Too many requests, rate limit is {exc.detail}", code="RateLimited"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DisbursementError, disbursement_error_handler)
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["register_exception_handlers"]
