"""Money conversion and rounding policy.

All amounts are ``Decimal``. Rounding is always half-up to the currency
minor unit; nothing relies on ambient float rounding.
"""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
DEFAULT_MINOR_UNIT = Decimal("1")

Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    """Convert a numeric input to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather
    than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a money amount")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number, minor_unit: Decimal = DEFAULT_MINOR_UNIT) -> Decimal:
    """Round to the nearest ``minor_unit``, halves away from zero.

    Parameters
    ----------
    value : Number
        Amount to round.
    minor_unit : Decimal
        Smallest currency denomination, e.g. ``Decimal("1")`` or
        ``Decimal("0.01")``.

    Returns
    -------
    Decimal
        Rounded amount, expressed with the exponent of ``minor_unit``.
    """
    amount = to_decimal(value)
    units = (amount / minor_unit).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return (units * minor_unit).quantize(minor_unit)
