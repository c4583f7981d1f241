"""Configuration management for emi-ledger."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from emi_ledger.exceptions import ConfigurationError


def _parse_decimal(name: str, raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from exc


@dataclass(frozen=True)
class CurrencyConfig:
    """Currency rounding configuration.

    ``minor_unit`` is the smallest amount installments and profits are
    rounded to (half-up). The default rounds to whole rupees.
    """

    minor_unit: Decimal = Decimal("1")

    def __post_init__(self) -> None:
        if self.minor_unit <= 0:
            raise ConfigurationError(f"minor_unit must be positive, got {self.minor_unit}")


@dataclass(frozen=True)
class SettlementConfig:
    """Rounding tolerance shared by every settlement decision."""

    rounding_tolerance: Decimal = Decimal("10")

    def __post_init__(self) -> None:
        if self.rounding_tolerance < 0:
            raise ConfigurationError(
                f"rounding_tolerance must not be negative, got {self.rounding_tolerance}"
            )


@dataclass(frozen=True)
class EmiLedgerConfig:
    """Main configuration for emi-ledger."""

    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    settlement: SettlementConfig = field(default_factory=SettlementConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EmiLedgerConfig":
        """Create config from environment variables."""
        import os

        currency = CurrencyConfig(
            minor_unit=_parse_decimal("EMI_MINOR_UNIT", os.getenv("EMI_MINOR_UNIT", "1")),
        )

        settlement = SettlementConfig(
            rounding_tolerance=_parse_decimal(
                "EMI_ROUNDING_TOLERANCE", os.getenv("EMI_ROUNDING_TOLERANCE", "10")
            ),
        )

        return cls(
            currency=currency,
            settlement=settlement,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
