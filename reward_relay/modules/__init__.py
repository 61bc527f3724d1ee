"""Feature modules and shared exports."""

from . import disbursements, ledger, reporting

__all__ = [
    "disbursements",
    "ledger",
    "reporting",
]
