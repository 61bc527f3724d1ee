"""Chain backed implementations of the ledger client."""

from .web3_client import Web3LedgerClient, describe_error, is_valid_address

__all__ = ["Web3LedgerClient", "describe_error", "is_valid_address"]
