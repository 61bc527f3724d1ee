"""Periodic wallet balance reporting."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from reward_relay.modules.ledger import LedgerClient, WalletState

logger = logging.getLogger("reward_relay.reporting")

NATIVE_DECIMALS = 18


def format_units(amount: int, decimals: int) -> str:
    return f"{Decimal(amount).scaleb(-decimals):f}"


class BalanceReporter:
    """Logs the service wallet's balances on startup and then every ``interval`` seconds."""

    def __init__(self, ledger: LedgerClient, interval: float = 300.0) -> None:
        self._ledger = ledger
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.last_state: Optional[WalletState] = None

    async def read_state(self) -> WalletState:
        native_balance = await self._ledger.get_native_balance()
        token_balance = await self._ledger.get_token_balance()
        decimals = await self._ledger.get_decimals()
        return WalletState(native_balance=native_balance, token_balance=token_balance, decimals=decimals)

    async def report_once(self) -> Optional[WalletState]:
        try:
            state = await self.read_state()
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("Failed to read wallet balances for %s: %s", self._ledger.wallet_address, exc)
            return None
        self.last_state = state
        logger.info(
            "Wallet %s balances: native=%s token=%s (decimals=%s)",
            self._ledger.wallet_address,
            format_units(state.native_balance, NATIVE_DECIMALS),
            format_units(state.token_balance, state.decimals),
            state.decimals,
        )
        return state

    def start(self) -> None:
        if self._task and not self._task.done():
            return
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self) -> None:
        try:
            while True:
                await self.report_once()
                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            logger.debug("Balance reporter stopped")
            raise
