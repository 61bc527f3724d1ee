import asyncio
import itertools
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from web3 import Web3

from reward_relay.core.config import Settings
from reward_relay.infrastructure.chain import is_valid_address
from reward_relay.main import create_app
from reward_relay.modules.ledger import ConfirmationTimeoutError, PendingTransfer

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
WALLET_ADDRESS = Web3.to_checksum_address("0x" + "ab" * 20)
TOKEN_ADDRESS = "0x72dA30dB47C0999F2891cD328Fc45cB3FffBFDa3"
RECIPIENT = "0x" + "5c" * 20


class FakeLedgerClient:
    """In-memory ledger double that records every network-facing call."""

    def __init__(
        self,
        *,
        decimals: int = 18,
        token_balance: int = 10**30,
        native_balance: int = 5 * 10**18,
        confirmation_delay: float = 0.0,
        transfer_error: Optional[Exception] = None,
        confirmation_error: Optional[Exception] = None,
    ) -> None:
        self.wallet_address = WALLET_ADDRESS
        self.token_address = TOKEN_ADDRESS
        self.decimals = decimals
        self.token_balance = token_balance
        self.native_balance = native_balance
        self.confirmation_delay = confirmation_delay
        self.transfer_error = transfer_error
        self.confirmation_error = confirmation_error
        self.calls: list[str] = []
        self.transfers: list[tuple[str, int]] = []
        self.closed = False
        self._hashes = itertools.count(1)
        self._pending: dict[str, int] = {}
        self._mined_at: dict[str, float] = {}
        self._blocks: dict[str, int] = {}
        self._block = 1000

    def is_valid_address(self, address: str) -> bool:
        return is_valid_address(address)

    def normalize_address(self, address: str) -> str:
        return Web3.to_checksum_address(address)

    async def get_decimals(self) -> int:
        self.calls.append("get_decimals")
        return self.decimals

    async def get_token_balance(self) -> int:
        self.calls.append("get_token_balance")
        return self.token_balance

    async def get_native_balance(self) -> int:
        self.calls.append("get_native_balance")
        return self.native_balance

    async def transfer(self, recipient: str, amount: int) -> PendingTransfer:
        self.calls.append("transfer")
        if self.transfer_error is not None:
            raise self.transfer_error
        self.transfers.append((recipient, amount))
        tx_hash = "0x" + f"{next(self._hashes):064x}"
        self._pending[tx_hash] = amount
        # mined confirmation_delay seconds after submission, however often it is polled
        self._mined_at[tx_hash] = asyncio.get_running_loop().time() + self.confirmation_delay
        return PendingTransfer(tx_hash=tx_hash)

    async def wait_for_confirmation(self, tx_hash: str, timeout: float) -> int:
        self.calls.append("wait_for_confirmation")
        if self.confirmation_error is not None:
            raise self.confirmation_error
        remaining = max(self._mined_at[tx_hash] - asyncio.get_running_loop().time(), 0.0)
        try:
            await asyncio.wait_for(asyncio.sleep(remaining), timeout)
        except asyncio.TimeoutError as exc:
            raise ConfirmationTimeoutError(
                f"Transaction {tx_hash} was not confirmed within {timeout:g} seconds",
                reason="timeout",
                transaction_hash=tx_hash,
            ) from exc
        if tx_hash in self._pending:
            # balance only drops once the transfer is mined
            self.token_balance -= self._pending.pop(tx_hash)
            self._block += 1
            self._blocks[tx_hash] = self._block
        return self._blocks[tx_hash]

    async def close(self) -> None:
        self.closed = True


def make_settings(**overrides) -> Settings:
    sections = {
        "environment": "test",
        "signer": {"private_key": TEST_PRIVATE_KEY},
        "reporter": {"enabled": False},
        "chain": {"confirmation_timeout_seconds": 1.0},
    }
    sections.update(overrides)
    return Settings(_env_file=None, **sections)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def ledger() -> FakeLedgerClient:
    return FakeLedgerClient()


@pytest.fixture
def client(settings, ledger):
    app = create_app(settings=settings, ledger=ledger)
    with TestClient(app) as test_client:
        yield test_client
