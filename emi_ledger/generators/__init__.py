"""Synthetic data generators."""

from emi_ledger.generators.deal import DealGenerator

__all__ = ["DealGenerator"]
