"""Simple dependency container for wiring core services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from reward_relay.core.config import Settings
from reward_relay.infrastructure.chain import Web3LedgerClient
from reward_relay.modules.disbursements import DisbursementService
from reward_relay.modules.ledger import LedgerClient
from reward_relay.modules.reporting import BalanceReporter

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    ledger: LedgerClient
    disbursements: DisbursementService
    reporter: BalanceReporter

    @classmethod
    def build(cls, settings: Settings, ledger: LedgerClient) -> "ApplicationContainer":
        return cls(
            settings=settings,
            ledger=ledger,
            disbursements=DisbursementService(ledger, confirmation_timeout=settings.confirmation_timeout),
            reporter=BalanceReporter(ledger, interval=settings.reporter.interval_seconds),
        )

    def explorer_link(self, tx_hash: str) -> str:
        return f"{self.settings.chain.explorer_url.rstrip('/')}/tx/{tx_hash}"

    async def start(self) -> None:
        logger.info(
            "Serving %s from wallet %s on %s",
            self.settings.token_address,
            self.ledger.wallet_address,
            self.settings.chain.network_name,
        )
        if self.settings.reporter.enabled:
            self.reporter.start()

    async def shutdown(self) -> None:
        await self.reporter.stop()
        await self.disbursements.close()
        await self.ledger.close()


async def create_container(settings: Settings, ledger: Optional[LedgerClient] = None) -> ApplicationContainer:
    """
    Build the process-wide container. Without an injected ledger a web3 client is
    created and its RPC endpoint verified; any failure here aborts startup.
    """
    if ledger is None:
        client = Web3LedgerClient.from_settings(settings)
        try:
            await client.connect()
        except Exception:
            await client.close()
            raise
        ledger = client
    return ApplicationContainer.build(settings, ledger)


__all__ = ["ApplicationContainer", "create_container"]
