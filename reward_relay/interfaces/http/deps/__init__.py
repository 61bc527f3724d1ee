"""Reusable FastAPI dependencies."""

from fastapi import Depends, Request

from reward_relay.core.container import ApplicationContainer
from reward_relay.modules.disbursements import DisbursementService


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_disbursement_service(
    container: ApplicationContainer = Depends(get_container),
) -> DisbursementService:
    return container.disbursements


__all__ = [
    "get_container",
    "get_disbursement_service",
]
