"""EMI accounting core: schedules, settlement tolerance and profit realization."""

from emi_ledger.accounting.collections import (
    CollectionSummary,
    customer_pending,
    payment_status,
    summarize_collections,
)
from emi_ledger.accounting.documents import EmiDocumentFields, document_fields
from emi_ledger.accounting.profit import ProfitRealizationEngine
from emi_ledger.accounting.schedule import ScheduleBuilder, build_schedule
from emi_ledger.accounting.settlement import SettlementEngine

__all__ = [
    "CollectionSummary",
    "EmiDocumentFields",
    "ProfitRealizationEngine",
    "ScheduleBuilder",
    "SettlementEngine",
    "build_schedule",
    "customer_pending",
    "document_fields",
    "payment_status",
    "summarize_collections",
]
