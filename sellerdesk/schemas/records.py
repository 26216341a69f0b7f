# sellerdesk/schemas/records.py
# -----------------------------------------------------------------------------
# Market research / saved ad schemas
# -----------------------------------------------------------------------------
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sellerdesk.schemas.calculators import Pagination


# ── market research ──────────────────────────────────────────────────────────
class ResearchRequest(BaseModel):
    product_name: str = Field(min_length=2, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    search_data: Optional[Dict[str, Any]] = None


class ResearchOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    product_name: str
    category: Optional[str] = None
    search_data: Optional[Dict[str, Any]] = None
    results: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class ResearchResponse(BaseModel):
    message: Optional[str] = None
    research: ResearchOut


class ResearchListResponse(BaseModel):
    researches: List[ResearchOut]
    pagination: Pagination


# ── saved ads ────────────────────────────────────────────────────────────────
class SavedAdCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    calculator_type: str = Field(min_length=1, max_length=50)
    calculation_data: Dict[str, Any]
    photo_url: Optional[str] = None
    comment: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class SavedAdUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    calculation_data: Optional[Dict[str, Any]] = None
    photo_url: Optional[str] = None
    comment: Optional[str] = None
    tags: Optional[List[str]] = None


class SavedAdOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    calculator_type: str
    calculation_data: Dict[str, Any]
    photo_url: Optional[str] = None
    comment: Optional[str] = None
    tags: List[str]
    created_at: datetime
    updated_at: datetime


class SavedAdResponse(BaseModel):
    success: bool = True
    data: SavedAdOut


class SavedAdListResponse(BaseModel):
    success: bool = True
    data: List[SavedAdOut]
