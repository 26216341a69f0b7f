# sellerdesk/services/pricing.py
# -----------------------------------------------------------------------------
# Pricing / markup calculator
# - cost + desired margin -> base price
# - base price grossed up by the marketplace fee schedule -> final price
# - every monetary and percentage output rounded half up to 2 places
# -----------------------------------------------------------------------------
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Mapping

from sellerdesk.core.errors import (
    FeesExceedRevenue,
    MarginTooHigh,
    ValidationError,
    ZeroCostPrice,
)
from sellerdesk.services.money import (
    HUNDRED,
    ZERO,
    AmountOutOfRange,
    money_context,
    round2,
    to_decimal,
)


@dataclass(frozen=True)
class PricingResult:
    cost_price: Decimal
    desired_margin_pct: Decimal
    total_fee_pct: Decimal
    base_price: Decimal
    final_price: Decimal
    total_fees: Decimal
    actual_profit: Decimal
    actual_margin_pct: Decimal
    markup_pct: Decimal
    fee_schedule: dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> dict:
        """JSON friendly copy (Decimal -> float)."""
        return {
            k: float(v) if isinstance(v, Decimal) else v
            for k, v in asdict(self).items()
        }


def _parse(name: str, value) -> Decimal:
    try:
        d = to_decimal(value)
    except AmountOutOfRange:
        raise ValidationError.for_field(name, f"{name} is too large")
    except ValueError:
        raise ValidationError.for_field(name, f"{name} must be a number")
    if d < 0:
        raise ValidationError.for_field(name, f"{name} must not be negative")
    return d


def compute_pricing(
    cost_price, desired_margin_pct, fee_schedule: Mapping[str, object] | None = None
) -> PricingResult:
    fee_schedule = dict(fee_schedule or {})

    cost = _parse("cost_price", cost_price)
    margin = _parse("desired_margin", desired_margin_pct)
    fees = [_parse(f"marketplace_fees.{k}", v) for k, v in fee_schedule.items()]

    with money_context():
        if margin >= HUNDRED:
            raise MarginTooHigh()
        total_fee_rate = sum(fees, ZERO) / HUNDRED
        if total_fee_rate >= 1:
            raise FeesExceedRevenue()
        if cost == 0:
            raise ZeroCostPrice()

        base_price = cost / (1 - margin / HUNDRED)
        final_price = base_price / (1 - total_fee_rate)
        total_fees = final_price * total_fee_rate
        actual_profit = final_price - cost - total_fees
        actual_margin = (actual_profit / final_price) * HUNDRED if final_price > 0 else ZERO
        markup = (final_price / cost - 1) * HUNDRED

        return PricingResult(
            cost_price=round2(cost),
            desired_margin_pct=round2(margin),
            total_fee_pct=round2(total_fee_rate * HUNDRED),
            base_price=round2(base_price),
            final_price=round2(final_price),
            total_fees=round2(total_fees),
            actual_profit=round2(actual_profit),
            actual_margin_pct=round2(actual_margin),
            markup_pct=round2(markup),
            fee_schedule={k: float(v) for k, v in zip(fee_schedule, fees)},
        )
