# sellerdesk/schemas/users.py

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from sellerdesk.schemas.auth import Tier


class UserStats(BaseModel):
    market_researches: int
    store_connections: int
    dre_calculations: int
    pricing_calculations: int
    saved_ads: int
    synced_products: int
    last_activity: Optional[datetime] = None


class StatsResponse(BaseModel):
    stats: UserStats


class Plan(BaseModel):
    id: Tier
    name: str
    price: float
    features: List[str]
    limits: Dict[str, int]  # -1 = unlimited


class PlansResponse(BaseModel):
    plans: List[Plan]
