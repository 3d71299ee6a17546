"""Conversion between raw integer amounts and display units."""

from __future__ import annotations

from decimal import Decimal, localcontext

# Raw balances reach 39 digits; keep every one of them through the scaling
RAW_CONTEXT_PRECISION = 60

# No real amount has an exponent this far from zero in either direction
MAX_RAW_EXPONENT = 100

ZERO = Decimal(0)


def parse_raw(value: object) -> Decimal:
    """Parse a raw amount, substituting 0 for anything non-numeric.

    Raw amounts arrive as decimal strings because they do not fit in a
    JSON double. Non-finite values, garbage and magnitudes outside
    10^-100 .. 10^100 are treated as 0.
    """
    if isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, str)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except ArithmeticError:
            return ZERO
    elif isinstance(value, float):
        number = Decimal(repr(value))
    else:
        return ZERO

    if not number.is_finite():
        return ZERO
    if number and abs(number.adjusted()) > MAX_RAW_EXPONENT:
        return ZERO
    return number


def from_raw(value: object, precision: int) -> Decimal:
    """Convert a raw amount to display units (raw x 10^-precision)."""
    with localcontext() as ctx:
        ctx.prec = RAW_CONTEXT_PRECISION
        return parse_raw(value).scaleb(-precision)
