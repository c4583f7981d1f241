"""Tests for the amortization schedule builder."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

import pytest
from dateutil.relativedelta import relativedelta

from emi_ledger.accounting import ScheduleBuilder, build_schedule
from emi_ledger.accounting.schedule import (
    due_date_for,
    monthly_rate,
    reconcile_final_installment,
)
from emi_ledger.config import CurrencyConfig
from emi_ledger.exceptions import InvalidLoanTermsError
from emi_ledger.models import Installment, InstallmentStatus, Loan


def _float_emi(principal: float, annual_rate: float, tenure: int) -> Decimal:
    r = annual_rate / 12 / 100
    emi = principal * r * (1 + r) ** tenure / ((1 + r) ** tenure - 1)
    return Decimal(str(emi)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


class TestEmiAmount:
    """Tests for ScheduleBuilder.emi_amount."""

    def test_standard_formula(self) -> None:
        """500,000 at 9.5% over 48 months."""
        emi = ScheduleBuilder().emi_amount(Decimal("500000"), Decimal("9.5"), 48)

        assert emi == _float_emi(500000, 9.5, 48)
        assert abs(emi - Decimal("12543")) / Decimal("12543") < Decimal("0.01")

    def test_zero_rate_is_equal_split(self) -> None:
        assert ScheduleBuilder().emi_amount(Decimal("100000"), Decimal("0"), 10) == Decimal("10000")

    def test_single_month(self) -> None:
        """One month at 12% p.a. is principal plus 1%."""
        assert ScheduleBuilder().emi_amount(Decimal("1000"), Decimal("12"), 1) == Decimal("1010")

    def test_monthly_rate(self) -> None:
        assert monthly_rate(Decimal("12")) == Decimal("0.01")
        assert monthly_rate(0) == 0


class TestBuildSchedule:
    """Tests for schedule generation."""

    def test_interest_bearing_schedule(self) -> None:
        principal = Decimal("500000")
        schedule = build_schedule(principal, Decimal("9.5"), 48, date(2024, 1, 1))
        emi = ScheduleBuilder().emi_amount(principal, Decimal("9.5"), 48)

        assert len(schedule) == 48
        assert [i.sequence_number for i in schedule] == list(range(1, 49))
        assert all(i.amount == emi for i in schedule[:-1])
        assert all(i.status == InstallmentStatus.PENDING for i in schedule)

        total_interest = sum(i.interest_component for i in schedule)
        assert sum(i.principal_component for i in schedule) == principal
        assert sum(i.amount for i in schedule) == principal + total_interest
        assert schedule[-1].amount == principal + total_interest - sum(i.amount for i in schedule[:-1])
        # Last installment only absorbs a small residue
        assert abs(schedule[-1].amount - emi) < emi * Decimal("0.01")

    def test_components_add_up(self) -> None:
        schedule = build_schedule(Decimal("250000"), Decimal("11.25"), 36, date(2024, 3, 1))
        for installment in schedule:
            assert installment.amount == installment.principal_component + installment.interest_component
            assert installment.principal_component >= 0
            assert installment.interest_component >= 0

    def test_interest_declines(self) -> None:
        schedule = build_schedule(Decimal("300000"), Decimal("10"), 24, date(2024, 1, 1))
        interest = [i.interest_component for i in schedule]
        assert interest == sorted(interest, reverse=True)
        assert interest[0] == Decimal("2500")  # 300,000 x 10% / 12

    def test_zero_rate_exact_split(self) -> None:
        schedule = build_schedule(Decimal("100000"), Decimal("0"), 10, date(2024, 1, 1))

        assert [i.amount for i in schedule] == [Decimal("10000")] * 10
        assert sum(i.amount for i in schedule) == Decimal("100000")
        assert all(i.interest_component == 0 for i in schedule)

    def test_zero_rate_last_installment_reconciles(self) -> None:
        schedule = build_schedule(Decimal("100"), Decimal("0"), 3, date(2024, 1, 1))

        assert [i.amount for i in schedule] == [Decimal("33"), Decimal("33"), Decimal("34")]
        assert sum(i.amount for i in schedule) == Decimal("100")

    def test_paise_minor_unit(self) -> None:
        builder = ScheduleBuilder(CurrencyConfig(minor_unit=Decimal("0.01")))
        schedule = builder.build(Decimal("1000"), Decimal("0"), 3, date(2024, 1, 1))

        assert [i.amount for i in schedule] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]

    def test_single_installment(self) -> None:
        schedule = build_schedule(Decimal("1000"), Decimal("12"), 1, date(2024, 1, 1))

        assert len(schedule) == 1
        assert schedule[0].amount == Decimal("1010")
        assert schedule[0].principal_component == Decimal("1000")
        assert schedule[0].interest_component == Decimal("10")

    def test_zero_principal(self) -> None:
        schedule = build_schedule(Decimal("0"), Decimal("9"), 6, date(2024, 1, 1))
        assert len(schedule) == 6
        assert all(i.amount == 0 for i in schedule)

    def test_accepts_plain_numbers(self) -> None:
        schedule = build_schedule(120000, 0, 12, date(2024, 1, 1))
        assert schedule[0].amount == Decimal("10000")

    def test_build_for_loan(self, sample_loan: Loan) -> None:
        schedule = ScheduleBuilder().build_for_loan(sample_loan)
        assert len(schedule) == sample_loan.tenure_months
        assert schedule[0].amount == Decimal("40000")
        assert schedule[0].due_date == date(2024, 2, 10)

    def test_deterministic(self) -> None:
        first = build_schedule(Decimal("750000"), Decimal("8.75"), 60, date(2024, 5, 20))
        second = build_schedule(Decimal("750000"), Decimal("8.75"), 60, date(2024, 5, 20))
        assert first == second


class TestDueDates:
    """Tests for due date generation."""

    def test_monthly_cadence(self) -> None:
        schedule = build_schedule(Decimal("60000"), Decimal("0"), 6, date(2024, 1, 15))
        assert [i.due_date for i in schedule] == [
            date(2024, 2, 15),
            date(2024, 3, 15),
            date(2024, 4, 15),
            date(2024, 5, 15),
            date(2024, 6, 15),
            date(2024, 7, 15),
        ]

    def test_end_of_month_clamped_without_drift(self) -> None:
        schedule = build_schedule(Decimal("40000"), Decimal("0"), 4, date(2024, 1, 31))
        assert [i.due_date for i in schedule] == [
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
            date(2024, 5, 31),
        ]

    def test_non_leap_february(self) -> None:
        assert due_date_for(date(2023, 1, 30), 1) == date(2023, 2, 28)

    def test_strictly_increasing_one_month_apart(self) -> None:
        start = date(2024, 8, 31)
        schedule = build_schedule(Decimal("840000"), Decimal("9"), 84, start)

        dates = [i.due_date for i in schedule]
        assert all(a < b for a, b in zip(dates, dates[1:]))
        for k, due in enumerate(dates, start=1):
            assert due == start + relativedelta(months=k)

        gaps = [(b - a).days for a, b in zip([start] + dates, dates)]
        assert all(28 <= gap <= 31 for gap in gaps)


class TestInvalidTerms:
    """Tests for invalid-input errors."""

    @pytest.mark.parametrize("tenure", [0, -1, -12])
    def test_tenure_below_one(self, tenure: int) -> None:
        with pytest.raises(InvalidLoanTermsError):
            build_schedule(Decimal("1000"), Decimal("10"), tenure, date(2024, 1, 1))

    def test_fractional_tenure(self) -> None:
        with pytest.raises(InvalidLoanTermsError):
            build_schedule(Decimal("1000"), Decimal("10"), 1.5, date(2024, 1, 1))  # type: ignore[arg-type]

    def test_negative_principal(self) -> None:
        with pytest.raises(InvalidLoanTermsError):
            build_schedule(Decimal("-1"), Decimal("10"), 12, date(2024, 1, 1))

    def test_negative_rate(self) -> None:
        with pytest.raises(InvalidLoanTermsError):
            build_schedule(Decimal("1000"), Decimal("-0.5"), 12, date(2024, 1, 1))

    def test_emi_amount_validates(self) -> None:
        with pytest.raises(InvalidLoanTermsError):
            ScheduleBuilder().emi_amount(Decimal("1000"), Decimal("10"), 0)


class TestReconcileFinalInstallment:
    """Tests for reconcile_final_installment."""

    def test_last_installment_absorbs_remaining_principal(self) -> None:
        installments = [
            Installment(1, date(2024, 2, 1), Decimal("33"), Decimal("33"), Decimal("0")),
            Installment(2, date(2024, 3, 1), Decimal("33"), Decimal("33"), Decimal("0")),
            Installment(3, date(2024, 4, 1), Decimal("33"), Decimal("33"), Decimal("0")),
        ]

        reconcile_final_installment(installments, Decimal("1"))

        assert installments[-1].principal_component == Decimal("34")
        assert installments[-1].amount == Decimal("34")
        assert installments[0].amount == Decimal("33")

    def test_keeps_interest_on_last(self) -> None:
        installments = [Installment(1, date(2024, 2, 1), Decimal("105"), Decimal("100"), Decimal("5"))]

        reconcile_final_installment(installments, Decimal("-2"))

        assert installments[0].principal_component == Decimal("98")
        assert installments[0].amount == Decimal("103")

    def test_empty_schedule(self) -> None:
        installments: list[Installment] = []
        reconcile_final_installment(installments, Decimal("5"))
        assert installments == []
