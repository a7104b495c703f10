"""Money rounding: every amount the engine emits goes through round2."""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from settleup.errors import InvalidInputError

MONEY_UNIT = Decimal("0.01")
# Absolute slack allowed when checking that amounts or percentages add up.
TOLERANCE = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest magnitude the calculators accept; keeps their arithmetic exact in the
# default 28-digit context.
MAX_AMOUNT = Decimal("1e15")


def to_decimal(value) -> Decimal:
    """
    Convert a caller-supplied number to Decimal without rounding.
    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        dec = value
    elif isinstance(value, (int, float, str)):
        try:
            dec = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(f"Not a number: {value!r}") from None
    else:
        raise InvalidInputError(f"Not a number: {value!r}")
    if not dec.is_finite():
        raise InvalidInputError(f"Amount must be finite, got {value!r}")
    return dec


def round2(value) -> Decimal:
    """Round half away from zero to 2 decimal places."""
    dec = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(28, dec.adjusted() + 4)
        rounded = dec.quantize(MONEY_UNIT, rounding=ROUND_HALF_UP)
    # -0.00 compares equal to 0.00 but would leak out as "-0.0" in JSON.
    return ZERO if rounded.is_zero() else rounded


def to_amount(value) -> Decimal:
    """to_decimal for calculator inputs, bounded by MAX_AMOUNT."""
    dec = to_decimal(value)
    if abs(dec) > MAX_AMOUNT:
        raise InvalidInputError(f"Amount out of range: {value!r} (limit {MAX_AMOUNT:f})")
    return dec
