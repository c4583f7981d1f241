"""Computed EMI fields for invoice and brochure renderers."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Sequence

from emi_ledger.exceptions import InvalidLoanTermsError
from emi_ledger.models import Installment, Loan
from emi_ledger.sinks.serialization import dataclass_to_dict


def ordinal_suffix(n: int) -> str:
    """English ordinal suffix: 1 -> "st", 12 -> "th", 23 -> "rd"."""
    if 10 <= n % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def due_day_description(day: int) -> str:
    """Cadence text such as "Every 5th of the month"."""
    return f"Every {day}{ordinal_suffix(day)} of the month"


@dataclass(frozen=True)
class EmiDocumentFields:
    """Flat field set printed on EMI invoices; renderers use it verbatim."""

    monthly_installment: Decimal
    due_day: int
    due_day_description: str
    tenure_months: int
    tenure_label: str
    interest_rate_label: str
    start_date: date
    end_date: date

    def as_dict(self) -> dict[str, Any]:
        """Serialized fields for template rendering."""
        return dataclass_to_dict(self)


def document_fields(loan: Loan, schedule: Sequence[Installment]) -> EmiDocumentFields:
    """Collect the EMI fields a renderer needs for ``loan``.

    Parameters
    ----------
    loan : Loan
        Financed sale.
    schedule : Sequence[Installment]
        The loan's schedule, ordered by sequence number.

    Returns
    -------
    EmiDocumentFields
        Display-ready values.
    """
    if not schedule:
        raise InvalidLoanTermsError(f"Loan {loan.loan_id} has no installments")

    due_day = loan.start_date.day
    rate = loan.annual_rate_percent.normalize()
    # normalize() turns 10 into 1E+1
    rate_text = format(rate, "f")

    return EmiDocumentFields(
        monthly_installment=schedule[0].amount,
        due_day=due_day,
        due_day_description=due_day_description(due_day),
        tenure_months=loan.tenure_months,
        tenure_label=f"{loan.tenure_months} Months",
        interest_rate_label=f"{rate_text}%",
        start_date=schedule[0].due_date,
        end_date=schedule[-1].due_date,
    )
