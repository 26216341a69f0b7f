# sellerdesk/schemas/connections.py
# -----------------------------------------------------------------------------
# Store connection / synced product schemas
# - api_credentials are write-only: no response model carries them
# -----------------------------------------------------------------------------
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sellerdesk.schemas.calculators import Pagination


class StoreType(str, Enum):
    SHOPEE = "shopee"
    MERCADOLIVRE = "mercadolivre"
    SHEIN = "shein"
    AMAZON = "amazon"
    ALIEXPRESS = "aliexpress"


class ApiCredentials(BaseModel):
    model_config = ConfigDict(extra="allow")  # marketplaces add their own keys

    api_key: str = Field(min_length=10)


class ConnectionCreateRequest(BaseModel):
    store_type: StoreType
    store_name: str = Field(min_length=2, max_length=255)
    api_credentials: ApiCredentials


class ConnectionUpdateRequest(BaseModel):
    store_name: Optional[str] = Field(None, min_length=2, max_length=255)
    api_credentials: Optional[ApiCredentials] = None
    is_active: Optional[bool] = None


class ConnectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    store_type: StoreType
    store_name: str
    is_active: bool
    last_sync: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ConnectionResponse(BaseModel):
    message: Optional[str] = None
    connection: ConnectionOut


class ConnectionListResponse(BaseModel):
    connections: List[ConnectionOut]


class SyncResponse(BaseModel):
    message: str
    synced_products: int


class FeedProduct(BaseModel):
    """One product as returned by a store feed."""

    # feeds often send numeric ids
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    external_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: float = Field(0.0, ge=0)
    stock_quantity: int = Field(0, ge=0)
    category: Optional[str] = Field(None, max_length=100)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    connection_id: str
    external_id: str
    name: str
    price: float
    stock_quantity: int
    category: Optional[str] = None
    product_data: Dict[str, Any]
    last_updated: datetime


class ProductListResponse(BaseModel):
    products: List[ProductOut]
    pagination: Pagination
