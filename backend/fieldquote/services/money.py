"""Presentation rounding for CHF amounts.  Engine values stay full-precision floats."""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

MONEY = Decimal("0.01")
RAPPEN = Decimal("0.05")

# Enough digits to quantize the largest finite float to cents.
_FLOAT_PRECISION = 400


def qmoney(x: Decimal, step: Decimal = MONEY) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _FLOAT_PRECISION
        return (x / step).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * step


def round_chf(value: float, step: Decimal = MONEY) -> float:
    """
    Round a float to ``step`` (default 0.01) half-up.

    Goes through the shortest float repr so 2.675 rounds to 2.68 as a person
    reading the number would expect.  NaN and infinities are returned as is.
    """
    value = float(value)
    if not math.isfinite(value):
        return value
    return float(qmoney(Decimal(repr(value)), step))


def format_chf(value: float) -> str:
    value = float(value)
    if not math.isfinite(value):
        return f"CHF {value}"
    q = qmoney(Decimal(repr(value)))
    return f"CHF {q:,.2f}".replace(",", "'")
