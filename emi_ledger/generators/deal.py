"""Synthetic financed vehicle deals."""

from __future__ import annotations

import random
from datetime import date
from decimal import Decimal
from typing import Iterator

from emi_ledger.generators.base import BaseGenerator
from emi_ledger.models import Loan


class DealGenerator(BaseGenerator):
    """Generate financed vehicle sales with realistic terms."""

    VEHICLES = [
        "Maruti Suzuki Swift",
        "Maruti Suzuki Baleno",
        "Hyundai Creta",
        "Hyundai i20",
        "Tata Nexon",
        "Tata Punch",
        "Mahindra XUV700",
        "Mahindra Scorpio-N",
        "Honda City",
        "Toyota Innova Crysta",
        "Kia Seltos",
        "Royal Enfield Classic 350",
    ]

    TENURES = [6, 12, 18, 24, 36, 48, 60, 72, 84]

    # Share of deals sold at or below purchase price
    LOSS_RATE = 0.05
    # Share of deals financed interest-free
    ZERO_RATE_RATE = 0.10

    START_WINDOW = (date(2023, 1, 1), date(2025, 12, 31))

    def generate(self) -> Loan:
        """Generate a single deal.

        Returns
        -------
        Loan
            Financed sale with a valid schedule-able set of terms.
        """
        purchase_price = Decimal(random.randint(80, 2500) * 1000)

        if random.random() < self.LOSS_RATE:
            margin = random.uniform(-0.08, 0.0)
        else:
            margin = random.uniform(0.03, 0.20)
        selling_price = Decimal(round(float(purchase_price) * (1 + margin) / 1000) * 1000)
        selling_price = max(selling_price, Decimal(1000))

        # Down payment 10-40% of the selling price, rounded to the thousand
        down_share = random.uniform(0.10, 0.40)
        down_payment = Decimal(round(float(selling_price) * down_share / 1000) * 1000)
        principal = selling_price - min(down_payment, selling_price)

        if random.random() < self.ZERO_RATE_RATE:
            rate = Decimal("0")
        else:
            rate = Decimal(str(round(random.uniform(7.5, 18.0), 2)))

        return Loan(
            loan_id=self.fake.uuid4(),
            selling_price=selling_price,
            purchase_price=purchase_price,
            principal=principal,
            annual_rate_percent=rate,
            tenure_months=random.choice(self.TENURES),
            start_date=self.fake.date_between_dates(*self.START_WINDOW),
            customer_name=self.fake.name(),
            vehicle=random.choice(self.VEHICLES),
        )

    def generate_batch(self, count: int) -> Iterator[Loan]:
        """Generate multiple deals.

        Parameters
        ----------
        count : int
            Number of deals to generate.

        Yields
        ------
        Loan
            Generated deals.
        """
        for _ in range(count):
            yield self.generate()
