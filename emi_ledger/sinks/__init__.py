"""Output helpers for exporting computed EMI data."""

from emi_ledger.sinks.serialization import dataclass_to_dict, serialize_value, to_dict

__all__ = ["dataclass_to_dict", "serialize_value", "to_dict"]
