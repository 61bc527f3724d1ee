"""Balance reporting exports"""

from .service import BalanceReporter, format_units

__all__ = ["BalanceReporter", "format_units"]
