import asyncio

import pytest
from web3 import Web3

from reward_relay.modules.disbursements import (
    DisbursementRequest,
    DisbursementService,
    InsufficientBalanceError,
    points_to_token_units,
)
from reward_relay.modules.ledger import ConfirmationTimeoutError, LedgerError, TransferRejectedError

from conftest import RECIPIENT, FakeLedgerClient

RECIPIENT_CHECKSUM = Web3.to_checksum_address(RECIPIENT)


def _request(points: int) -> DisbursementRequest:
    return DisbursementRequest(recipient_address=RECIPIENT_CHECKSUM, points=points)


def test_points_scale_by_token_decimals() -> None:
    assert points_to_token_units(100, 18) == 100 * 10**18
    assert points_to_token_units(7, 0) == 7
    big = 10**40 + 1
    assert points_to_token_units(big, 18) == big * 10**18


def test_transfer_uses_decimals_from_ledger() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=6)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        result = await service.disburse(_request(100))

        assert ledger.transfers == [(RECIPIENT_CHECKSUM, 100 * 10**6)]
        assert result.amount == 100 * 10**6
        assert result.transaction_hash.startswith("0x")
        assert result.confirmation_block == 1001
        assert ledger.calls == ["get_decimals", "get_token_balance", "transfer", "wait_for_confirmation"]

    asyncio.run(run())


def test_insufficient_balance_never_submits() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=18, token_balance=99 * 10**18)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        with pytest.raises(InsufficientBalanceError) as excinfo:
            await service.disburse(_request(100))

        assert "transfer" not in ledger.calls
        assert ledger.transfers == []
        assert excinfo.value.required == 100 * 10**18
        assert excinfo.value.available == 99 * 10**18

    asyncio.run(run())


def test_exact_balance_is_enough() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=2, token_balance=500)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        await service.disburse(_request(5))
        assert ledger.token_balance == 0

    asyncio.run(run())


def test_slow_confirmation_still_submits_exactly_once() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(confirmation_delay=0.05)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        result = await service.disburse(_request(3))

        assert len(ledger.transfers) == 1
        assert ledger.calls.count("transfer") == 1
        assert result.confirmation_block is not None
        assert service.reserved_amount == 0

    asyncio.run(run())


def test_confirmation_timeout_is_distinct_from_rejection() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(confirmation_delay=1.0)
        service = DisbursementService(ledger, confirmation_timeout=0.05)
        with pytest.raises(ConfirmationTimeoutError) as excinfo:
            await service.disburse(_request(1))

        assert not isinstance(excinfo.value, TransferRejectedError)
        assert excinfo.value.code == "ConfirmationTimeout"
        assert excinfo.value.transaction_hash is not None
        assert len(ledger.transfers) == 1
        await service.close()
        assert service.reserved_amount == 0

    asyncio.run(run())


def test_timed_out_transfer_stays_reserved_until_it_lands() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=0, token_balance=100, confirmation_delay=0.08)
        service = DisbursementService(ledger, confirmation_timeout=0.05)
        with pytest.raises(ConfirmationTimeoutError):
            await service.disburse(_request(60))
        assert service.reserved_amount == 60

        # the first transfer is still in flight, so a second one would overdraw
        with pytest.raises(InsufficientBalanceError):
            await service.disburse(_request(60))
        assert len(ledger.transfers) == 1

        await asyncio.sleep(0.1)
        assert ledger.token_balance == 40
        assert service.reserved_amount == 0

    asyncio.run(run())


def test_reservation_is_released_when_late_confirmation_never_comes() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=0, token_balance=100, confirmation_delay=1.0)
        service = DisbursementService(ledger, confirmation_timeout=0.02)
        with pytest.raises(ConfirmationTimeoutError):
            await service.disburse(_request(60))
        assert service.reserved_amount == 60

        await asyncio.sleep(0.1)
        assert service.reserved_amount == 0
        assert ledger.token_balance == 100

    asyncio.run(run())


def test_rejected_submission_surfaces_ledger_error() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(transfer_error=TransferRejectedError("nonce too low", reason="-32000"))
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        with pytest.raises(TransferRejectedError) as excinfo:
            await service.disburse(_request(1))

        assert excinfo.value.reason == "-32000"
        assert "wait_for_confirmation" not in ledger.calls
        assert service.reserved_amount == 0

    asyncio.run(run())


def test_confirmation_failure_carries_transaction_hash() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(confirmation_error=LedgerError("connection reset", reason="network_error"))
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        with pytest.raises(LedgerError) as excinfo:
            await service.disburse(_request(1))

        assert excinfo.value.transaction_hash == "0x" + f"{1:064x}"

    asyncio.run(run())


def test_concurrent_requests_cannot_overdraw_wallet() -> None:
    async def run() -> None:
        # enough for one transfer of 60 points, not two
        ledger = FakeLedgerClient(decimals=0, token_balance=100, confirmation_delay=0.05)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        results = await asyncio.gather(
            service.disburse(_request(60)),
            service.disburse(_request(60)),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, InsufficientBalanceError)]
        assert len(failures) == 1
        assert len(ledger.transfers) == 1
        assert ledger.token_balance == 40

    asyncio.run(run())


def test_concurrent_requests_within_balance_all_confirm() -> None:
    async def run() -> None:
        ledger = FakeLedgerClient(decimals=0, token_balance=100, confirmation_delay=0.02)
        service = DisbursementService(ledger, confirmation_timeout=1.0)
        results = await asyncio.gather(*(service.disburse(_request(10)) for _ in range(5)))

        assert len({r.transaction_hash for r in results}) == 5
        assert len(ledger.transfers) == 5
        assert ledger.token_balance == 50
        assert service.reserved_amount == 0

    asyncio.run(run())
