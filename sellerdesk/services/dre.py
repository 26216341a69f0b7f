# sellerdesk/services/dre.py
# -----------------------------------------------------------------------------
# DRE (income statement) calculator
# - revenue minus summed costs / expenses -> gross and net profit
# - margins and cost shares as % of revenue, 0 when revenue is 0
# -----------------------------------------------------------------------------
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Mapping

from sellerdesk.core.errors import ValidationError
from sellerdesk.services.money import (
    HUNDRED,
    ZERO,
    AmountOutOfRange,
    money_context,
    round2,
    to_decimal,
    to_decimal_or_zero,
)


@dataclass(frozen=True)
class DREResult:
    revenue: Decimal
    total_costs: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_profit: Decimal
    gross_margin_pct: Decimal
    net_margin_pct: Decimal
    cost_pct: Decimal
    expense_pct: Decimal

    def as_dict(self) -> dict:
        return {k: float(v) for k, v in asdict(self).items()}


def _line_total(section: str, items: Mapping[str, object] | None) -> Decimal:
    # unparseable or missing values count as 0
    total = ZERO
    for key, value in (items or {}).items():
        try:
            total += to_decimal_or_zero(value)
        except AmountOutOfRange:
            raise ValidationError.for_field(f"{section}.{key}", "amount is too large")
    return total


def _share(part: Decimal, revenue: Decimal) -> Decimal:
    return (part / revenue) * HUNDRED if revenue > 0 else ZERO


def compute_dre(
    revenue, costs: Mapping[str, object] | None, expenses: Mapping[str, object] | None
) -> DREResult:
    try:
        rev = to_decimal(revenue)
    except AmountOutOfRange:
        raise ValidationError.for_field("revenue", "revenue is too large")
    except ValueError:
        raise ValidationError.for_field("revenue", "revenue must be a number")
    if rev < 0:
        raise ValidationError.for_field("revenue", "revenue must not be negative")

    with money_context():
        total_costs = _line_total("costs", costs)
        total_expenses = _line_total("expenses", expenses)
        gross_profit = rev - total_costs
        net_profit = gross_profit - total_expenses

        return DREResult(
            revenue=round2(rev),
            total_costs=round2(total_costs),
            total_expenses=round2(total_expenses),
            gross_profit=round2(gross_profit),
            net_profit=round2(net_profit),
            gross_margin_pct=round2(_share(gross_profit, rev)),
            net_margin_pct=round2(_share(net_profit, rev)),
            cost_pct=round2(_share(total_costs, rev)),
            expense_pct=round2(_share(total_expenses, rev)),
        )
