"""EMI accounting core for vehicle dealership installment sales."""

__version__ = "0.1.0"
