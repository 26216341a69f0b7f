# sellerdesk/services/money.py
# Decimal helpers shared by the calculators.
# Money is fixed point: floats go through str() so 0.1 stays 0.1.
# Amounts are capped at MAX_AMOUNT; the arithmetic runs in money_context().
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation, localcontext

from sellerdesk.core.errors import ValidationError

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")
MAX_AMOUNT = Decimal("1e15")
PRECISION = 60


class AmountOutOfRange(ValueError):
    pass


def to_decimal(value) -> Decimal:
    """Parse a number-like value; raises ValueError when it is not one."""
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, bool) or value is None:
        raise ValueError(f"not a number: {value!r}")
    else:
        try:
            d = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"not a number: {value!r}") from e
    if not d.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    if abs(d) > MAX_AMOUNT:
        raise AmountOutOfRange(f"{value!r} exceeds {MAX_AMOUNT:f}")
    return d


def to_decimal_or_zero(value) -> Decimal:
    """Like to_decimal, but non-numbers count as 0. Out of range still raises."""
    try:
        return to_decimal(value)
    except AmountOutOfRange:
        raise
    except ValueError:
        return ZERO


def round2(value: Decimal) -> Decimal:
    """Round half up to cents."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@contextmanager
def money_context():
    with localcontext() as ctx:
        ctx.prec = PRECISION
        try:
            yield ctx
        except DecimalException as e:
            raise ValidationError("amounts are out of the supported range") from e
