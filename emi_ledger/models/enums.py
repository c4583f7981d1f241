"""Enumeration types for EMI accounting entities."""

from enum import Enum


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    VOID = "void"


class ProfitStatus(str, Enum):
    REALIZED = "realized"
    PARTIAL = "partial"
    PENDING = "pending"

    @property
    def label(self) -> str:
        """Human-readable label for dashboards."""
        return self.value.capitalize()

    @property
    def style(self) -> str:
        """Display style token consumed by dashboards."""
        return _PROFIT_STATUS_STYLES[self]


_PROFIT_STATUS_STYLES = {
    ProfitStatus.REALIZED: "success",
    ProfitStatus.PARTIAL: "warning",
    ProfitStatus.PENDING: "muted",
}


class PaymentStatus(str, Enum):
    NOT_PAID = "not_paid"
    PARTIAL = "partial"
    PAID = "paid"
