"""Profit realization on installment sales.

A financed sale's profit is recognised in proportion to the principal
actually collected: every rupee of principal carries ``total_profit /
selling_price`` of profit. Interest is not part of it.
"""

from decimal import ROUND_HALF_UP, Decimal

from emi_ledger.accounting.settlement import SettlementEngine
from emi_ledger.config import CurrencyConfig
from emi_ledger.exceptions import InvalidLoanTermsError
from emi_ledger.models import Loan, ProfitState, ProfitStatus
from emi_ledger.money import ZERO, Number, round_money, to_decimal


def _validate_prices(selling_price: Decimal, purchase_price: Decimal) -> None:
    if selling_price < 0 or purchase_price < 0:
        raise InvalidLoanTermsError(
            f"Prices must not be negative (selling={selling_price}, purchase={purchase_price})"
        )


class ProfitRealizationEngine:
    """Project realised and pending profit from principal collected.

    Stateless: every call recomputes from its arguments, so it is safe to
    share between threads and never goes stale.

    Parameters
    ----------
    settlement : SettlementEngine | None
        Tolerance rules applied to pending profit.
    currency : CurrencyConfig | None
        Rounding configuration for realised profit.
    """

    def __init__(
        self,
        settlement: SettlementEngine | None = None,
        currency: CurrencyConfig | None = None,
    ) -> None:
        self.settlement = settlement or SettlementEngine()
        self.currency = currency or CurrencyConfig()

    def total_profit(self, selling_price: Number, purchase_price: Number) -> Decimal:
        """Selling price minus purchase price."""
        selling_price = to_decimal(selling_price)
        purchase_price = to_decimal(purchase_price)
        _validate_prices(selling_price, purchase_price)
        return selling_price - purchase_price

    def profit_ratio(self, selling_price: Number, purchase_price: Number) -> Decimal:
        """Share of every collected rupee that is profit (0 for a zero price)."""
        selling_price = to_decimal(selling_price)
        total = self.total_profit(selling_price, purchase_price)
        if selling_price == 0:
            return ZERO
        return total / selling_price

    def _capped(self, collected: Decimal, selling_price: Decimal, purchase_price: Decimal) -> Decimal:
        total = self.total_profit(selling_price, purchase_price)
        if total <= 0:
            return ZERO
        raw = collected * self.profit_ratio(selling_price, purchase_price)
        return min(raw, total)

    def realised_profit(
        self,
        principal_collected: Number,
        selling_price: Number,
        purchase_price: Number,
    ) -> Decimal:
        """Profit recognised for the principal collected so far.

        Zero for loss-making or break-even deals. Never exceeds the deal's
        total profit, whatever was over-collected.
        """
        collected = to_decimal(principal_collected)
        if collected < 0:
            raise InvalidLoanTermsError(f"Principal collected must not be negative, got {collected}")
        capped = self._capped(collected, to_decimal(selling_price), to_decimal(purchase_price))
        return round_money(capped, self.currency.minor_unit)

    def pending_profit(self, total_profit: Number, realised_profit: Number) -> Decimal:
        """Profit still to be realised, zero once within tolerance."""
        return self.settlement.effective_balance(to_decimal(total_profit) - to_decimal(realised_profit))

    def profit_status(self, pending_profit: Number, total_profit: Number) -> ProfitStatus:
        """Coarse realization label for dashboards."""
        pending = to_decimal(pending_profit)
        total = to_decimal(total_profit)
        if pending <= 0 or self.settlement.is_effectively_settled(pending):
            return ProfitStatus.REALIZED
        if total > 0 and (total - pending) / total * 100 > 0:
            return ProfitStatus.PARTIAL
        return ProfitStatus.PENDING

    def unlocked_profit(
        self,
        previous_collected: Number,
        cumulative_collected: Number,
        selling_price: Number,
        purchase_price: Number,
    ) -> Decimal:
        """Profit newly unlocked between two cumulative collection totals.

        Used for period reports: profit for a month is what the month's
        collections added on top of everything realised before it.
        """
        selling_price = to_decimal(selling_price)
        purchase_price = to_decimal(purchase_price)
        before = self._capped(to_decimal(previous_collected), selling_price, purchase_price)
        after = self._capped(to_decimal(cumulative_collected), selling_price, purchase_price)
        return round_money(max(after - before, ZERO), self.currency.minor_unit)

    def project(
        self,
        principal_collected: Number,
        selling_price: Number,
        purchase_price: Number,
    ) -> ProfitState:
        """Compute the full profit state for one collection snapshot.

        Parameters
        ----------
        principal_collected : Number
            Cumulative principal received (down payment plus EMI principal).
        selling_price : Number
            Deal selling price.
        purchase_price : Number
            Vehicle purchase price.

        Returns
        -------
        ProfitState
            Realised, pending and status for this snapshot.
        """
        total = self.total_profit(selling_price, purchase_price)
        realised = self.realised_profit(principal_collected, selling_price, purchase_price)
        pending = self.pending_profit(total, realised)

        if total > 0:
            percent = int((realised / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        else:
            percent = 0

        return ProfitState(
            total_profit=total,
            realised_profit=realised,
            pending_profit=pending,
            status=self.profit_status(pending, total),
            realised_percent=percent,
        )

    def project_loan(self, loan: Loan, principal_collected: Number) -> ProfitState:
        """``project`` for a ``Loan``'s prices."""
        return self.project(principal_collected, loan.selling_price, loan.purchase_price)
