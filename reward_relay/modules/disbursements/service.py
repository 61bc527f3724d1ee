"""Disbursement orchestration: points in, confirmed token transfer out."""

from __future__ import annotations

import asyncio
import logging

from reward_relay.modules.ledger import ConfirmationTimeoutError, LedgerClient, LedgerError

from .exceptions import InsufficientBalanceError
from .models import DisbursementRequest, TransactionResult, points_to_token_units

logger = logging.getLogger(__name__)


class DisbursementService:
    """
    Converts points to token units and transfers them from the service wallet.

    Balance check and submission run under one lock per wallet, and the amount of
    every unconfirmed transfer stays reserved, so concurrent requests can neither
    overdraw the wallet nor race each other for a nonce.

    A transfer whose confirmation times out may still be mined. Its reservation is
    kept while a background watcher waits one more confirmation window for it.
    """

    def __init__(self, ledger: LedgerClient, *, confirmation_timeout: float) -> None:
        self._ledger = ledger
        self._confirmation_timeout = confirmation_timeout
        self._submission_lock = asyncio.Lock()
        self._reserved = 0
        self._watchers: set[asyncio.Task] = set()

    @property
    def reserved_amount(self) -> int:
        return self._reserved

    async def disburse(self, request: DisbursementRequest) -> TransactionResult:
        async with self._submission_lock:
            decimals = await self._ledger.get_decimals()
            amount = points_to_token_units(request.points, decimals)
            balance = await self._ledger.get_token_balance()
            available = balance - self._reserved
            if available < amount:
                logger.warning(
                    "Rejecting %s points for %s: need %s units, %s available",
                    request.points,
                    request.recipient_address,
                    amount,
                    available,
                )
                raise InsufficientBalanceError(required=amount, available=available)

            logger.info(
                "Sending %s points (%s units) to %s", request.points, amount, request.recipient_address
            )
            pending = await self._ledger.transfer(request.recipient_address, amount)
            self._reserved += amount

        logger.info("Submitted transfer %s", pending.tx_hash)
        handed_off = False
        try:
            block = await self._ledger.wait_for_confirmation(pending.tx_hash, self._confirmation_timeout)
        except LedgerError as exc:
            if exc.transaction_hash is None:
                exc.transaction_hash = pending.tx_hash
            if isinstance(exc, ConfirmationTimeoutError):
                self._watch(pending.tx_hash, amount)
                handed_off = True
            logger.error("Transfer %s failed to confirm: %s", pending.tx_hash, exc.message)
            raise
        finally:
            if not handed_off:
                self._reserved -= amount

        logger.info("Transfer %s confirmed in block %s", pending.tx_hash, block)
        return TransactionResult(
            transaction_hash=pending.tx_hash,
            recipient_address=request.recipient_address,
            amount=amount,
            confirmation_block=block,
        )

    async def close(self) -> None:
        """Stop watching unconfirmed transfers and drop their reservations."""
        watchers = list(self._watchers)
        for task in watchers:
            task.cancel()
        if watchers:
            await asyncio.gather(*watchers, return_exceptions=True)

    def _watch(self, tx_hash: str, amount: int) -> None:
        task = asyncio.create_task(self._await_late_confirmation(tx_hash, amount))
        self._watchers.add(task)
        task.add_done_callback(self._watchers.discard)

    async def _await_late_confirmation(self, tx_hash: str, amount: int) -> None:
        try:
            block = await self._ledger.wait_for_confirmation(tx_hash, self._confirmation_timeout)
            logger.info("Transfer %s confirmed late in block %s", tx_hash, block)
        except LedgerError as exc:
            logger.warning("Releasing reservation for unsettled transfer %s: %s", tx_hash, exc.message)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Watcher for transfer %s failed", tx_hash)
        finally:
            self._reserved -= amount
