from typing import Callable

from fastapi import APIRouter

from reward_relay.interfaces.http.routers import disbursements, status


def create_api_router(rate_limit: Callable, prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(status.create_router(rate_limit), tags=["status"])
    router.include_router(disbursements.create_router(rate_limit), tags=["disbursements"])
    return router


__all__ = [
    "create_api_router",
]
