#!/usr/bin/env python3
"""Simulate EMI collections on synthetic deals and export the results.

Generates financed vehicle deals, posts down payments and a number of
monthly installments to an in-memory ledger, then writes per-deal schedules,
document fields and profit projections as JSON.
"""

import argparse
import json
import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from emi_ledger.accounting import document_fields, summarize_collections
from emi_ledger.config import EmiLedgerConfig
from emi_ledger.generators import DealGenerator
from emi_ledger.logging import get_logger, setup_logging
from emi_ledger.sinks import serialize_value, to_dict
from emi_ledger.store import InMemoryLoanLedger

logger = get_logger(__name__)


def simulate(ledger: InMemoryLoanLedger, deals: int, seed: int) -> list[dict]:
    """Register deals, post payments and collect per-deal reports."""
    generator = DealGenerator(seed=seed)
    reports = []

    for loan in generator.generate_batch(deals):
        schedule = ledger.add_loan(loan)
        if loan.down_payment > 0:
            ledger.record_down_payment(loan.loan_id, loan.down_payment)

        # Pay a random prefix of the schedule in full
        paid_months = random.randint(0, loan.tenure_months)
        for installment in schedule[:paid_months]:
            if installment.amount <= 0:
                continue
            ledger.record_payment(
                loan.loan_id,
                installment.sequence_number,
                installment.amount,
                installment.due_date,
            )

        as_of = schedule[paid_months - 1].due_date if paid_months else loan.start_date
        installments = ledger.installments(loan.loan_id)
        reports.append(
            {
                "loan": to_dict(loan),
                "document": document_fields(loan, installments).as_dict(),
                "collections": to_dict(summarize_collections(installments, as_of, ledger.settlement)),
                "principal_collected": serialize_value(ledger.principal_collected(loan.loan_id)),
                "profit": to_dict(ledger.profit_state(loan.loan_id)),
                "closed": ledger.is_closed(loan.loan_id),
                "schedule": serialize_value(list(installments)),
            }
        )

    return reports


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Simulate EMI collections on synthetic deals")
    parser.add_argument(
        "--deals",
        type=int,
        default=20,
        help="Number of deals to generate (default: 20)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("local/collections.json"),
        help="Output JSON file (default: local/collections.json)",
    )
    args = parser.parse_args()

    config = EmiLedgerConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    ledger = InMemoryLoanLedger(config)
    reports = simulate(ledger, args.deals, args.seed)

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(reports, f, indent=2, ensure_ascii=False)

    closed = sum(1 for r in reports if r["closed"])
    logger.info("Wrote %d deals to %s (%d closed)", len(reports), args.output, closed)
    logger.info("Ledger summary: %s", ledger.summary())


if __name__ == "__main__":
    main()
