"""Reward points to ERC20 token relay service."""

__version__ = "0.3.0"
