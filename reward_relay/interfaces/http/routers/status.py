"""Service status endpoint."""
from typing import Callable

from fastapi import APIRouter, Depends, Request

from reward_relay.core.container import ApplicationContainer
from reward_relay.interfaces.http.deps import get_container
from reward_relay.schemas import ErrorResponse, PingResponse


async def ping(request: Request, container: ApplicationContainer = Depends(get_container)) -> PingResponse:
    return PingResponse(
        network=container.settings.chain.network_name,
        token_contract=container.ledger.token_address,
        server_address=container.ledger.wallet_address,
    )


def create_router(rate_limit: Callable) -> APIRouter:
    router = APIRouter()
    router.add_api_route(
        "/ping",
        rate_limit(ping),
        methods=["GET"],
        response_model=PingResponse,
        summary="Service status and wallet info",
        responses={429: {"model": ErrorResponse}},
    )
    return router
