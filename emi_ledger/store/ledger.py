"""In-memory loan ledger.

Reference implementation of the ledger collaborator: it owns installment
status and principal collected, and is the only writer of either. Payment
application is serialized per loan so two concurrent postings can never
both read a stale balance and overwrite each other.
"""

import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from emi_ledger.accounting.profit import ProfitRealizationEngine
from emi_ledger.accounting.schedule import ScheduleBuilder
from emi_ledger.accounting.settlement import SettlementEngine
from emi_ledger.config import EmiLedgerConfig
from emi_ledger.exceptions import (
    InstallmentNotFoundError,
    InvalidEntityStateError,
    InvalidLoanTermsError,
    LoanNotFoundError,
)
from emi_ledger.logging import get_logger
from emi_ledger.models import Installment, InstallmentStatus, Loan, Payment, ProfitState
from emi_ledger.money import ZERO, Number, to_decimal

logger = get_logger(__name__)

_OPEN_STATUSES = (
    InstallmentStatus.PENDING,
    InstallmentStatus.PARTIALLY_PAID,
    InstallmentStatus.OVERDUE,
)


@dataclass
class _LoanAccount:
    """Mutable per-loan state guarded by ``lock``."""

    loan: Loan
    installments: list[Installment]
    down_payment_collected: Decimal = ZERO
    payments: list[Payment] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)

    def principal_collected(self) -> Decimal:
        return self.down_payment_collected + sum(
            (i.principal_paid for i in self.installments), ZERO
        )


class InMemoryLoanLedger:
    """In-memory store of loans, schedules and payments.

    Parameters
    ----------
    config : EmiLedgerConfig | None
        Rounding and tolerance configuration shared by the schedule builder,
        settlement engine and profit engine.
    """

    def __init__(self, config: EmiLedgerConfig | None = None) -> None:
        self.config = config or EmiLedgerConfig()
        self.settlement = SettlementEngine.from_config(self.config.settlement)
        self.schedule_builder = ScheduleBuilder(self.config.currency)
        self.profit_engine = ProfitRealizationEngine(self.settlement, self.config.currency)
        self._accounts: dict[str, _LoanAccount] = {}
        self._registry_lock = threading.Lock()

    def _account(self, loan_id: str) -> _LoanAccount:
        account = self._accounts.get(loan_id)
        if account is None:
            raise LoanNotFoundError(f"Loan {loan_id} not found")
        return account

    @staticmethod
    def _installment(account: _LoanAccount, sequence_number: int) -> Installment:
        for installment in account.installments:
            if installment.sequence_number == sequence_number:
                return installment
        raise InstallmentNotFoundError(
            f"Loan {account.loan.loan_id} has no installment #{sequence_number}"
        )

    def add_loan(self, loan: Loan) -> list[Installment]:
        """Register a loan and generate its schedule.

        Returns
        -------
        list[Installment]
            Copies of the generated installments.
        """
        schedule = self.schedule_builder.build_for_loan(loan)
        with self._registry_lock:
            if loan.loan_id in self._accounts:
                raise InvalidEntityStateError(f"Loan {loan.loan_id} already exists")
            self._accounts[loan.loan_id] = _LoanAccount(loan=loan, installments=schedule)

        logger.info(
            "Registered loan %s: principal=%s tenure=%d emi=%s",
            loan.loan_id,
            loan.principal,
            loan.tenure_months,
            schedule[0].amount,
        )
        return [replace(i) for i in schedule]

    def get_loan(self, loan_id: str) -> Loan:
        """Get a registered loan."""
        return self._account(loan_id).loan

    def record_down_payment(self, loan_id: str, amount: Number) -> Decimal:
        """Record down payment received; returns principal collected."""
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidLoanTermsError(f"Down payment must be positive, got {amount}")

        account = self._account(loan_id)
        with account.lock:
            account.down_payment_collected += amount
            collected = account.principal_collected()

        logger.info("Loan %s: down payment %s recorded", loan_id, amount)
        return collected

    def record_payment(
        self,
        loan_id: str,
        sequence_number: int,
        amount: Number,
        payment_date: date,
    ) -> Payment:
        """Apply a payment to one installment.

        Interest is settled first, the rest goes to principal. On the final
        installment a principal residue within tolerance is closed off.

        Parameters
        ----------
        loan_id : str
            Loan the payment belongs to.
        sequence_number : int
            Installment being paid.
        amount : Number
            Amount received (positive).
        payment_date : date
            Date the payment was received.

        Returns
        -------
        Payment
            The applied payment with its principal/interest split.
        """
        amount = to_decimal(amount)
        if amount <= 0:
            raise InvalidLoanTermsError(f"Payment amount must be positive, got {amount}")

        account = self._account(loan_id)
        with account.lock:
            installment = self._installment(account, sequence_number)
            if installment.status == InstallmentStatus.VOID:
                raise InvalidEntityStateError(
                    f"Loan {loan_id} installment #{sequence_number} is void"
                )

            interest_remaining = max(installment.interest_component - installment.interest_paid, ZERO)
            interest_now = min(interest_remaining, amount)
            principal_now = amount - interest_now

            is_last = sequence_number == len(account.installments)
            principal_remaining = max(installment.principal_component - installment.principal_paid, ZERO)
            if is_last and self.settlement.is_effectively_settled(principal_remaining):
                if principal_now != principal_remaining:
                    logger.warning(
                        "Loan %s: closing final installment with principal residue %s (paid %s)",
                        loan_id,
                        principal_remaining,
                        principal_now,
                    )
                principal_now = principal_remaining

            installment.interest_paid += interest_now
            installment.principal_paid += principal_now
            installment.amount_paid += amount

            if self.settlement.is_effectively_settled(installment.remaining):
                installment.status = InstallmentStatus.PAID
                installment.paid_date = payment_date
            else:
                installment.status = InstallmentStatus.PARTIALLY_PAID

            payment = Payment(
                payment_id=uuid.uuid4().hex,
                loan_id=loan_id,
                sequence_number=sequence_number,
                amount=amount,
                principal_amount=principal_now,
                interest_amount=interest_now,
                payment_date=payment_date,
            )
            account.payments.append(payment)
            status = installment.status

        logger.info(
            "Loan %s: payment %s on installment #%d (principal=%s interest=%s) -> %s",
            loan_id,
            amount,
            sequence_number,
            principal_now,
            interest_now,
            status.value,
        )
        return payment

    def installments(self, loan_id: str) -> tuple[Installment, ...]:
        """Read-only snapshot of a loan's schedule."""
        account = self._account(loan_id)
        with account.lock:
            return tuple(replace(i) for i in account.installments)

    def payments(self, loan_id: str) -> tuple[Payment, ...]:
        """Payments applied to a loan, in posting order."""
        account = self._account(loan_id)
        with account.lock:
            return tuple(account.payments)

    def principal_collected(self, loan_id: str) -> Decimal:
        """Down payments plus principal paid on installments."""
        account = self._account(loan_id)
        with account.lock:
            return account.principal_collected()

    def outstanding(self, loan_id: str) -> Decimal:
        """Unpaid installment amounts, excluding void installments."""
        account = self._account(loan_id)
        with account.lock:
            return sum(
                (
                    i.remaining
                    for i in account.installments
                    if i.status != InstallmentStatus.VOID
                ),
                ZERO,
            )

    def is_closed(self, loan_id: str) -> bool:
        """True once the outstanding balance is within tolerance."""
        return self.settlement.is_effectively_settled(self.outstanding(loan_id))

    def profit_state(self, loan_id: str) -> ProfitState:
        """Current profit projection for a loan."""
        loan = self.get_loan(loan_id)
        return self.profit_engine.project_loan(loan, self.principal_collected(loan_id))

    def mark_overdue(self, as_of: date) -> int:
        """Mark open installments due before ``as_of`` as overdue.

        Returns
        -------
        int
            Number of installments newly marked.
        """
        marked = 0
        for account in list(self._accounts.values()):
            with account.lock:
                for installment in account.installments:
                    if (
                        installment.due_date < as_of
                        and installment.status
                        in (InstallmentStatus.PENDING, InstallmentStatus.PARTIALLY_PAID)
                    ):
                        installment.status = InstallmentStatus.OVERDUE
                        marked += 1

        if marked:
            logger.info("Marked %d installments overdue as of %s", marked, as_of)
        return marked

    def cancel_loan(self, loan_id: str) -> int:
        """Void every installment not yet paid; returns how many were voided."""
        account = self._account(loan_id)
        voided = 0
        with account.lock:
            for installment in account.installments:
                if installment.status in _OPEN_STATUSES:
                    installment.status = InstallmentStatus.VOID
                    voided += 1

        logger.info("Loan %s cancelled: %d installments voided", loan_id, voided)
        return voided

    def loan_ids(self) -> list[str]:
        """IDs of all registered loans."""
        return list(self._accounts)

    def summary(self) -> dict[str, int]:
        """Get counts of stored entities."""
        accounts = list(self._accounts.values())
        return {
            "loans": len(accounts),
            "installments": sum(len(a.installments) for a in accounts),
            "payments": sum(len(a.payments) for a in accounts),
        }
