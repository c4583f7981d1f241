"""Derived profit projection."""

from dataclasses import dataclass
from decimal import Decimal

from emi_ledger.models.enums import ProfitStatus


@dataclass(frozen=True)
class ProfitState:
    """Profit recognised on a deal for one snapshot of principal collected.

    Never persisted: recompute it whenever principal collected changes.
    """

    total_profit: Decimal
    realised_profit: Decimal
    pending_profit: Decimal
    status: ProfitStatus
    realised_percent: int  # 0-100, for progress displays
