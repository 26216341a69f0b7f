# sellerdesk/schemas/calculators.py
# -----------------------------------------------------------------------------
# DRE / pricing calculator schemas (quick + persisted)
# -----------------------------------------------------------------------------
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


# ── DRE ──────────────────────────────────────────────────────────────────────
class DREQuickRequest(BaseModel):
    revenue: float = Field(ge=0)
    costs: Dict[str, Any]  # label -> amount, unparseable amounts count as 0
    expenses: Dict[str, Any]


class DRECreateRequest(DREQuickRequest):
    name: str = Field(min_length=2, max_length=255)
    period_start: date
    period_end: date

    @model_validator(mode="after")
    def check_period(self):
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class DREResults(BaseModel):
    revenue: float
    total_costs: float
    total_expenses: float
    gross_profit: float
    net_profit: float
    gross_margin_pct: float
    net_margin_pct: float
    cost_pct: float
    expense_pct: float


class DREQuickResponse(BaseModel):
    results: DREResults


class DREOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    period_start: date
    period_end: date
    revenue: float
    costs: Dict[str, Any]
    expenses: Dict[str, Any]
    results: DREResults
    created_at: datetime


class DRECreateResponse(BaseModel):
    message: str
    dre: DREOut


class DREDetailResponse(BaseModel):
    dre: DREOut


class DREListResponse(BaseModel):
    dres: List[DREOut]
    pagination: Pagination


# ── pricing ──────────────────────────────────────────────────────────────────
class PricingQuickRequest(BaseModel):
    cost_price: float = Field(ge=0)
    desired_margin: float = Field(ge=0, le=100)
    marketplace_fees: Optional[Dict[str, float]] = None  # fee name -> %


class PricingCreateRequest(PricingQuickRequest):
    product_name: str = Field(min_length=2, max_length=255)


class PricingResults(BaseModel):
    cost_price: float
    desired_margin_pct: float
    fee_schedule: Dict[str, float]
    total_fee_pct: float
    base_price: float
    final_price: float
    total_fees: float
    actual_profit: float
    actual_margin_pct: float
    markup_pct: float


class PricingQuickResponse(BaseModel):
    results: PricingResults


class PricingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_name: str
    cost_price: float
    desired_margin: float
    marketplace_fees: Dict[str, float]
    calculated_price: float
    calculation_data: PricingResults
    created_at: datetime


class PricingCreateResponse(BaseModel):
    message: str
    pricing: PricingOut


class PricingDetailResponse(BaseModel):
    pricing: PricingOut


class PricingListResponse(BaseModel):
    pricings: List[PricingOut]
    pagination: Pagination
