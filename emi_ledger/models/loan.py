"""Loan, installment and payment models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from emi_ledger.exceptions import InvalidLoanTermsError
from emi_ledger.models.enums import InstallmentStatus
from emi_ledger.money import ZERO, to_decimal


@dataclass(frozen=True)
class Loan:
    """Financed vehicle sale.

    Created once at sale time and never mutated. Amounts passed as ints,
    floats or strings are normalised to ``Decimal``.
    """

    loan_id: str
    selling_price: Decimal
    purchase_price: Decimal
    principal: Decimal  # Amount financed
    annual_rate_percent: Decimal  # e.g. 9.5 for 9.5% p.a.
    tenure_months: int
    start_date: date
    customer_name: str | None = None
    vehicle: str | None = None

    def __post_init__(self) -> None:
        for name in ("selling_price", "purchase_price", "principal", "annual_rate_percent"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

        if self.selling_price < 0 or self.purchase_price < 0:
            raise InvalidLoanTermsError(
                f"Loan {self.loan_id}: prices must not be negative "
                f"(selling={self.selling_price}, purchase={self.purchase_price})"
            )
        if self.principal < 0:
            raise InvalidLoanTermsError(f"Loan {self.loan_id}: principal must not be negative")
        if self.principal > self.selling_price:
            raise InvalidLoanTermsError(
                f"Loan {self.loan_id}: principal {self.principal} exceeds "
                f"selling price {self.selling_price}"
            )
        if self.annual_rate_percent < 0:
            raise InvalidLoanTermsError(f"Loan {self.loan_id}: interest rate must not be negative")
        if isinstance(self.tenure_months, bool) or not isinstance(self.tenure_months, int):
            raise InvalidLoanTermsError(f"Loan {self.loan_id}: tenure must be a whole number of months")
        if self.tenure_months < 1:
            raise InvalidLoanTermsError(f"Loan {self.loan_id}: tenure must be at least 1 month")

    @property
    def down_payment(self) -> Decimal:
        """Part of the selling price not financed."""
        return self.selling_price - self.principal

    @property
    def total_profit(self) -> Decimal:
        """Deal profit, fixed at sale time."""
        return self.selling_price - self.purchase_price


@dataclass
class Installment:
    """One scheduled EMI due.

    Amounts and dates are fixed at schedule generation; the ``*_paid``
    fields and ``status`` are only changed by the ledger applying payments.
    """

    sequence_number: int  # 1..tenure
    due_date: date
    amount: Decimal
    principal_component: Decimal
    interest_component: Decimal
    status: InstallmentStatus = InstallmentStatus.PENDING
    amount_paid: Decimal = ZERO
    principal_paid: Decimal = ZERO
    interest_paid: Decimal = ZERO
    paid_date: date | None = None

    @property
    def remaining(self) -> Decimal:
        """Amount still owed on this installment (negative if overpaid)."""
        return self.amount - self.amount_paid


@dataclass(frozen=True)
class Payment:
    """Payment applied to an installment."""

    payment_id: str
    loan_id: str
    sequence_number: int
    amount: Decimal
    principal_amount: Decimal
    interest_amount: Decimal
    payment_date: date
