"""Ledger collaborator holding loans, schedules and payments."""

from emi_ledger.store.ledger import InMemoryLoanLedger

__all__ = ["InMemoryLoanLedger"]
