"""Logging bootstrap for the service process."""

import logging

from reward_relay.core.config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    logging.basicConfig(level=settings.level.upper(), format=settings.format)
    # web3 logs every provider request at DEBUG
    logging.getLogger("web3").setLevel(max(logging.getLogger().level, logging.INFO))
