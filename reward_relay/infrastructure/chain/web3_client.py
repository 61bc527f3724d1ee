"""Token ledger client backed by web3.py against a JSON-RPC endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception, Web3RPCError

from reward_relay.core.config import Settings
from reward_relay.modules.ledger import (
    ConfirmationTimeoutError,
    LedgerError,
    LedgerInitializationError,
    PendingTransfer,
    TransactionRevertedError,
    TransferRejectedError,
)

logger = logging.getLogger(__name__)

ERC20_ABI = [
    {
        "constant": False,
        "inputs": [
            {"name": "_to", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "name": "transfer",
        "outputs": [{"name": "", "type": "bool"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
]

TRANSPORT_ERRORS = (Web3Exception, aiohttp.ClientError, asyncio.TimeoutError, OSError, ValueError)


def describe_error(exc: BaseException) -> tuple[str, str | None, Any]:
    """Return ``(message, reason, data)`` extracted from a web3/transport error."""
    if isinstance(exc, ContractLogicError):
        return exc.message or "execution reverted", "execution_reverted", exc.data
    if isinstance(exc, Web3RPCError):
        error = (exc.rpc_response or {}).get("error") or {}
        code = error.get("code")
        return (
            error.get("message") or getattr(exc, "message", None) or str(exc),
            str(code) if code is not None else "rpc_error",
            error.get("data"),
        )
    if isinstance(exc, (aiohttp.ClientError, asyncio.TimeoutError, OSError)):
        return str(exc) or exc.__class__.__name__, "network_error", None
    if isinstance(exc, ValueError) and exc.args and isinstance(exc.args[0], dict):
        # older nodes/providers raise ValueError({"code": ..., "message": ...})
        payload = exc.args[0]
        code = payload.get("code")
        return payload.get("message", str(exc)), str(code) if code is not None else None, payload.get("data")
    return str(exc) or exc.__class__.__name__, None, None


def is_valid_address(value: Any) -> bool:
    """Hex address of the right length; mixed-case input must carry a valid EIP-55 checksum."""
    if not isinstance(value, str) or not AsyncWeb3.is_address(value):
        return False
    digits = value[2:] if value[:2].lower() == "0x" else value
    if digits == digits.lower() or digits == digits.upper():
        return True
    return AsyncWeb3.is_checksum_address(value)


class Web3LedgerClient:
    """Single custodial wallet plus a single ERC20 contract."""

    def __init__(
        self,
        w3: AsyncWeb3,
        account: LocalAccount,
        token_address: str,
        *,
        poll_interval: float = 1.0,
    ) -> None:
        self._w3 = w3
        self._account = account
        self.wallet_address = account.address
        self.token_address = AsyncWeb3.to_checksum_address(token_address)
        self._token = w3.eth.contract(address=self.token_address, abi=ERC20_ABI)
        self._poll_interval = poll_interval
        self._chain_id: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Web3LedgerClient":
        private_key = settings.signing_key()
        try:
            account = Account.from_key(private_key)
        except Exception as exc:  # eth-account raises several types for bad keys
            raise LedgerInitializationError("Malformed wallet private key") from exc
        if not is_valid_address(settings.token_address):
            raise LedgerInitializationError(f"Invalid token contract address: {settings.token_address}")

        provider = AsyncHTTPProvider(
            settings.chain.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=settings.chain.request_timeout_seconds)},
        )
        return cls(
            AsyncWeb3(provider),
            account,
            settings.token_address,
            poll_interval=settings.chain.poll_interval_seconds,
        )

    async def connect(self) -> None:
        """Verify the RPC endpoint answers before the service starts serving."""
        try:
            connected = await self._w3.is_connected()
            if connected:
                self._chain_id = await self._w3.eth.chain_id
        except TRANSPORT_ERRORS as exc:
            raise LedgerInitializationError(f"RPC endpoint unreachable: {exc}") from exc
        if not connected:
            raise LedgerInitializationError("RPC endpoint unreachable")
        logger.info("Connected to chain %s as wallet %s", self._chain_id, self.wallet_address)

    def is_valid_address(self, address: str) -> bool:
        return is_valid_address(address)

    def normalize_address(self, address: str) -> str:
        return AsyncWeb3.to_checksum_address(address)

    async def get_decimals(self) -> int:
        return int(await self._call(self._token.functions.decimals().call()))

    async def get_token_balance(self) -> int:
        return int(await self._call(self._token.functions.balanceOf(self.wallet_address).call()))

    async def get_native_balance(self) -> int:
        return int(await self._call(self._w3.eth.get_balance(self.wallet_address)))

    async def transfer(self, recipient: str, amount: int) -> PendingTransfer:
        try:
            nonce = await self._w3.eth.get_transaction_count(self.wallet_address, "pending")
            if self._chain_id is None:
                self._chain_id = await self._w3.eth.chain_id
            tx = await self._token.functions.transfer(recipient, amount).build_transaction(
                {"from": self.wallet_address, "nonce": nonce, "chainId": self._chain_id}
            )
            signed = self._account.sign_transaction(tx)
            tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        except TRANSPORT_ERRORS as exc:
            message, reason, data = describe_error(exc)
            raise TransferRejectedError(message, reason=reason, data=data) from exc
        return PendingTransfer(tx_hash=AsyncWeb3.to_hex(tx_hash))

    async def wait_for_confirmation(self, tx_hash: str, timeout: float) -> int:
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=timeout, poll_latency=self._poll_interval
            )
        except TimeExhausted as exc:
            raise ConfirmationTimeoutError(
                f"Transaction {tx_hash} was not confirmed within {timeout:g} seconds",
                reason="timeout",
                transaction_hash=tx_hash,
            ) from exc
        except TRANSPORT_ERRORS as exc:
            message, reason, data = describe_error(exc)
            raise LedgerError(message, reason=reason, transaction_hash=tx_hash, data=data) from exc

        if receipt["status"] != 1:
            raise TransactionRevertedError(
                f"Transaction {tx_hash} reverted in block {receipt['blockNumber']}",
                reason="reverted",
                transaction_hash=tx_hash,
            )
        return int(receipt["blockNumber"])

    async def close(self) -> None:
        await self._w3.provider.disconnect()

    async def _call(self, awaitable):
        try:
            return await awaitable
        except TRANSPORT_ERRORS as exc:
            message, reason, data = describe_error(exc)
            raise LedgerError(message, reason=reason, data=data) from exc
