from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.util import get_remote_address

from reward_relay import __version__
from reward_relay.core.config import Settings, get_settings
from reward_relay.core.container import create_container
from reward_relay.interfaces.http import create_api_router
from reward_relay.interfaces.http.errors import register_exception_handlers
from reward_relay.modules.ledger import LedgerClient


def create_app(settings: Optional[Settings] = None, ledger: Optional[LedgerClient] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = await create_container(settings, ledger)
        app.state.container = container
        await container.start()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title=settings.project_name,
        description="Relays reward points into ERC20 token transfers",
        version=__version__,
        lifespan=lifespan,
    )

    limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit.enabled)
    app.state.limiter = limiter
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    # one budget per client IP, shared by every route
    app.include_router(create_api_router(limiter.shared_limit(settings.rate_limit.limit, scope="api")))
    return app


app = create_app()
