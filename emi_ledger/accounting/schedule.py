"""Amortization schedule builder.

Turns a financed amount, an annual rate and a tenure into an ordered list of
monthly installments. The EMI is constant; the last installment absorbs
whatever rounding residue is left so the schedule sums exactly to principal
plus total interest.
"""

from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from emi_ledger.config import CurrencyConfig
from emi_ledger.exceptions import InvalidLoanTermsError
from emi_ledger.logging import get_logger
from emi_ledger.models import Installment, Loan
from emi_ledger.money import ZERO, Number, round_money, to_decimal

logger = get_logger(__name__)


def monthly_rate(annual_rate_percent: Number) -> Decimal:
    """Convert an annual percentage rate to a monthly fraction."""
    return to_decimal(annual_rate_percent) / 12 / 100


def due_date_for(start_date: date, sequence_number: int) -> date:
    """Due date of installment ``sequence_number``.

    Always offset from ``start_date`` so a 31st start gives the 30th in
    April and the 31st again in May, never a drifting day.
    """
    return start_date + relativedelta(months=sequence_number)


def validate_terms(principal: Decimal, annual_rate_percent: Decimal, tenure_months: int) -> None:
    """Raise ``InvalidLoanTermsError`` for terms no schedule can be built from."""
    if isinstance(tenure_months, bool) or not isinstance(tenure_months, int):
        raise InvalidLoanTermsError(f"Tenure must be a whole number of months, got {tenure_months!r}")
    if tenure_months < 1:
        raise InvalidLoanTermsError(f"Tenure must be at least 1 month, got {tenure_months}")
    if principal < 0:
        raise InvalidLoanTermsError(f"Principal must not be negative, got {principal}")
    if annual_rate_percent < 0:
        raise InvalidLoanTermsError(f"Interest rate must not be negative, got {annual_rate_percent}")


def reconcile_final_installment(installments: list[Installment], remaining_principal: Decimal) -> None:
    """Make the last installment clear ``remaining_principal``.

    The last installment's principal component becomes whatever principal is
    left after the prior installments, so its amount equals
    ``principal + total interest - sum(prior amounts)``.
    """
    if not installments:
        return
    last = installments[-1]
    last.principal_component += remaining_principal
    last.amount = last.principal_component + last.interest_component


class ScheduleBuilder:
    """Build EMI schedules with a fixed rounding policy.

    Parameters
    ----------
    currency : CurrencyConfig | None
        Rounding configuration (default: whole currency units).
    """

    def __init__(self, currency: CurrencyConfig | None = None) -> None:
        self.currency = currency or CurrencyConfig()

    def emi_amount(self, principal: Number, annual_rate_percent: Number, tenure_months: int) -> Decimal:
        """Calculate the rounded equated monthly installment.

        Parameters
        ----------
        principal : Number
            Amount financed.
        annual_rate_percent : Number
            Annual interest rate in percent.
        tenure_months : int
            Number of monthly installments.

        Returns
        -------
        Decimal
            EMI rounded half-up to the currency minor unit.
        """
        principal = to_decimal(principal)
        annual_rate_percent = to_decimal(annual_rate_percent)
        validate_terms(principal, annual_rate_percent, tenure_months)

        rate = monthly_rate(annual_rate_percent)
        if rate == 0:
            return round_money(principal / tenure_months, self.currency.minor_unit)

        growth = (1 + rate) ** tenure_months
        emi = principal * rate * growth / (growth - 1)
        return round_money(emi, self.currency.minor_unit)

    def build(
        self,
        principal: Number,
        annual_rate_percent: Number,
        tenure_months: int,
        start_date: date,
    ) -> list[Installment]:
        """Build the full installment schedule.

        Parameters
        ----------
        principal : Number
            Amount financed.
        annual_rate_percent : Number
            Annual interest rate in percent.
        tenure_months : int
            Number of monthly installments.
        start_date : date
            Date the schedule is anchored on; installment ``k`` falls due
            ``k`` months later.

        Returns
        -------
        list[Installment]
            Installments ordered by sequence number, all ``PENDING``.
        """
        principal = to_decimal(principal)
        annual_rate_percent = to_decimal(annual_rate_percent)
        emi = self.emi_amount(principal, annual_rate_percent, tenure_months)
        rate = monthly_rate(annual_rate_percent)
        minor_unit = self.currency.minor_unit

        installments: list[Installment] = []
        remaining = principal

        for k in range(1, tenure_months + 1):
            interest = round_money(remaining * rate, minor_unit) if rate > 0 else ZERO
            principal_part = min(max(emi - interest, ZERO), remaining)
            remaining -= principal_part

            installments.append(
                Installment(
                    sequence_number=k,
                    due_date=due_date_for(start_date, k),
                    amount=principal_part + interest,
                    principal_component=principal_part,
                    interest_component=interest,
                )
            )

        reconcile_final_installment(installments, remaining)

        logger.debug(
            "Built %d-month schedule: principal=%s rate=%s%% emi=%s last=%s",
            tenure_months,
            principal,
            annual_rate_percent,
            emi,
            installments[-1].amount,
        )
        return installments

    def build_for_loan(self, loan: Loan) -> list[Installment]:
        """Build the schedule for a ``Loan``'s terms."""
        return self.build(loan.principal, loan.annual_rate_percent, loan.tenure_months, loan.start_date)


def build_schedule(
    principal: Number,
    annual_rate_percent: Number,
    tenure_months: int,
    start_date: date,
) -> list[Installment]:
    """Build a schedule with the default rounding policy."""
    return ScheduleBuilder().build(principal, annual_rate_percent, tenure_months, start_date)
