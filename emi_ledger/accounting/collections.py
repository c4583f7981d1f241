"""Collection summaries for dashboards and sale listings."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable

from emi_ledger.accounting.settlement import SettlementEngine
from emi_ledger.models import Installment, InstallmentStatus, Loan, PaymentStatus
from emi_ledger.money import ZERO, Number, to_decimal


@dataclass(frozen=True)
class CollectionSummary:
    """What has been collected on a schedule and what is still owed."""

    interest_collected: Decimal
    interest_due: Decimal  # Unpaid interest on installments already due
    amount_collected: Decimal
    amount_pending: Decimal
    paid_count: int
    overdue_count: int
    installment_count: int


def summarize_collections(
    installments: Iterable[Installment],
    as_of: date,
    settlement: SettlementEngine,
) -> CollectionSummary:
    """Summarize collections on a schedule as of a given date.

    Parameters
    ----------
    installments : Iterable[Installment]
        Schedule snapshot. Void installments are ignored.
    as_of : date
        Reporting date; interest counts as due once its installment's due
        date is on or before it.
    settlement : SettlementEngine
        Tolerance applied to each installment's remaining amount.

    Returns
    -------
    CollectionSummary
        Aggregated figures.
    """
    interest_collected = ZERO
    interest_due = ZERO
    amount_collected = ZERO
    amount_pending = ZERO
    paid = overdue = count = 0

    for installment in installments:
        if installment.status == InstallmentStatus.VOID:
            continue
        count += 1

        interest_collected += installment.interest_paid
        amount_collected += installment.amount_paid
        if installment.due_date <= as_of:
            interest_due += max(installment.interest_component - installment.interest_paid, ZERO)

        amount_pending += settlement.effective_balance(installment.remaining)

        if installment.status == InstallmentStatus.PAID:
            paid += 1
        elif installment.status == InstallmentStatus.OVERDUE or (
            installment.due_date < as_of
            and installment.status in (InstallmentStatus.PENDING, InstallmentStatus.PARTIALLY_PAID)
        ):
            overdue += 1

    return CollectionSummary(
        interest_collected=interest_collected,
        interest_due=interest_due,
        amount_collected=amount_collected,
        amount_pending=amount_pending,
        paid_count=paid,
        overdue_count=overdue,
        installment_count=count,
    )


def customer_pending(loan: Loan, principal_collected: Number, settlement: SettlementEngine) -> Decimal:
    """Principal the customer still owes on the deal, zero within tolerance."""
    return settlement.effective_balance(loan.selling_price - to_decimal(principal_collected))


def payment_status(amount_paid: Number, balance: Number, settlement: SettlementEngine) -> PaymentStatus:
    """Sale-level payment label: nothing paid, partly paid or paid off."""
    if to_decimal(amount_paid) == 0:
        return PaymentStatus.NOT_PAID
    if settlement.effective_balance(balance) > 0:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PAID
