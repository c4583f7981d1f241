"""Custom exception hierarchy for emi-ledger."""


class EmiLedgerError(Exception):
    """Base exception for all emi-ledger errors."""


class InvalidLoanTermsError(EmiLedgerError):
    """Raised when loan terms, prices or amounts are invalid input."""


class ConfigurationError(EmiLedgerError):
    """Raised when configuration is invalid or missing."""


class EntityNotFoundError(EmiLedgerError):
    """Raised when a referenced entity does not exist."""


class LoanNotFoundError(EntityNotFoundError):
    """Raised when a loan is not registered with the ledger."""


class InstallmentNotFoundError(EntityNotFoundError):
    """Raised when a loan has no installment with the given sequence number."""


class InvalidEntityStateError(EmiLedgerError):
    """Raised when an entity is in an invalid state for the operation."""
