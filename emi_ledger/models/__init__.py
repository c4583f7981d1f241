"""Domain models for EMI accounting."""

from emi_ledger.models.enums import InstallmentStatus, PaymentStatus, ProfitStatus
from emi_ledger.models.loan import Installment, Loan, Payment
from emi_ledger.models.profit import ProfitState

__all__ = [
    "Installment",
    "InstallmentStatus",
    "Loan",
    "Payment",
    "PaymentStatus",
    "ProfitState",
    "ProfitStatus",
]
