# orders/money.py
from decimal import ROUND_HALF_UP, Decimal

TWODP = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def D(x) -> Decimal:
    """
    Safe Decimal constructor: accepts Decimal/int/str/float.
    Does NOT quantize (so you can sum precisely); quantize at the end.
    """
    if isinstance(x, Decimal):
        return x
    return Decimal(str(x))


def q2(x) -> Decimal:
    """Quantize to 2 dp, half away from zero."""
    return D(x).quantize(TWODP, rounding=ROUND_HALF_UP)


def percent_of(amount, pct) -> Decimal:
    """`pct` percent of `amount`, quantized once at the end."""
    return q2(D(amount) * D(pct) / HUNDRED)
