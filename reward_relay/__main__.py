"""Run the relay with uvicorn: ``python -m reward_relay``."""
import logging

import uvicorn

from reward_relay.core.config import get_settings
from reward_relay.core.logging import configure_logging

logger = logging.getLogger("reward_relay")


def main() -> None:
    settings = get_settings()
    configure_logging(settings.logging)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(
        "reward_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
