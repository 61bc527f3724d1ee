"""Reward disbursement endpoint."""
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request

from reward_relay.core.container import ApplicationContainer
from reward_relay.interfaces.http.deps import get_container, get_disbursement_service
from reward_relay.modules.disbursements import DisbursementService, validate_disbursement
from reward_relay.schemas import ErrorResponse, SendTokensRequest, SendTokensResponse


async def _read_json(request: Request) -> Any:
    # JSONDecodeError, UnicodeDecodeError and the int digit limit are all ValueErrors
    try:
        return await request.json()
    except ValueError:
        return None


async def send_tokens(
    request: Request,
    container: ApplicationContainer = Depends(get_container),
    service: DisbursementService = Depends(get_disbursement_service),
) -> SendTokensResponse:
    payload = await _read_json(request)
    disbursement = validate_disbursement(payload, container.ledger)
    result = await service.disburse(disbursement)
    return SendTokensResponse(
        transaction_hash=result.transaction_hash,
        explorer_link=container.explorer_link(result.transaction_hash),
        block_number=result.confirmation_block,
    )


def create_router(rate_limit: Callable) -> APIRouter:
    router = APIRouter()
    router.add_api_route(
        "/send-tokens",
        rate_limit(send_tokens),
        methods=["POST"],
        response_model=SendTokensResponse,
        summary="Convert reward points into a token transfer",
        openapi_extra={
            "requestBody": {
                "required": True,
                "content": {"application/json": {"schema": SendTokensRequest.model_json_schema(by_alias=True)}},
            }
        },
        responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    return router
