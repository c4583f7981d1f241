"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from emi_ledger.accounting import ProfitRealizationEngine, SettlementEngine
from emi_ledger.models import Loan
from emi_ledger.store import InMemoryLoanLedger


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def settlement() -> SettlementEngine:
    """Settlement engine with the default tolerance of 10."""
    return SettlementEngine()


@pytest.fixture
def profit_engine(settlement: SettlementEngine) -> ProfitRealizationEngine:
    """Profit engine using the default settlement rules."""
    return ProfitRealizationEngine(settlement)


@pytest.fixture
def sample_loan() -> Loan:
    """Interest-free deal: 100,000 down, 10 x 40,000."""
    return Loan(
        loan_id="loan-test-001",
        selling_price=Decimal("500000"),
        purchase_price=Decimal("450000"),
        principal=Decimal("400000"),
        annual_rate_percent=Decimal("0"),
        tenure_months=10,
        start_date=date(2024, 1, 10),
        customer_name="Test Customer",
        vehicle="Hyundai Creta",
    )


@pytest.fixture
def interest_loan() -> Loan:
    """12% p.a. deal financing 12,000 over 12 months."""
    return Loan(
        loan_id="loan-test-002",
        selling_price=Decimal("15000"),
        purchase_price=Decimal("13500"),
        principal=Decimal("12000"),
        annual_rate_percent=Decimal("12"),
        tenure_months=12,
        start_date=date(2024, 1, 15),
    )


@pytest.fixture
def ledger() -> InMemoryLoanLedger:
    """Fresh ledger with default configuration."""
    return InMemoryLoanLedger()
