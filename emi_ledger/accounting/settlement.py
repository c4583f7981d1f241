"""Settlement and rounding-tolerance rules.

Equal-installment amortization leaves residues of a few currency units.
Those must never block loan closure or show up as an outstanding due, so
every "is this paid off" decision goes through a ``SettlementEngine``
instead of comparing against zero.
"""

from decimal import Decimal

from emi_ledger.config import SettlementConfig
from emi_ledger.exceptions import ConfigurationError
from emi_ledger.money import ZERO, Number, to_decimal


class SettlementEngine:
    """Decide whether a balance is effectively zero.

    Parameters
    ----------
    tolerance : Number
        Largest residual balance treated as settled (inclusive).
    """

    def __init__(self, tolerance: Number = SettlementConfig.rounding_tolerance) -> None:
        self.tolerance = to_decimal(tolerance)
        if self.tolerance < 0:
            raise ConfigurationError(f"Rounding tolerance must not be negative, got {self.tolerance}")

    @classmethod
    def from_config(cls, config: SettlementConfig) -> "SettlementEngine":
        """Create an engine from a ``SettlementConfig``."""
        return cls(tolerance=config.rounding_tolerance)

    def effective_balance(self, balance: Number) -> Decimal:
        """Return ``balance`` if it exceeds the tolerance, else zero."""
        amount = to_decimal(balance)
        return amount if amount > self.tolerance else ZERO

    def is_effectively_settled(self, balance: Number) -> bool:
        """Return True when ``balance`` is at or below the tolerance.

        Overpayments (negative balances) are settled as well.
        """
        return to_decimal(balance) <= self.tolerance

    def __repr__(self) -> str:
        return f"SettlementEngine(tolerance={self.tolerance})"
