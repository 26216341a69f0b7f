# sellerdesk/db/models.py
# -----------------------------------------------------------------------------
# ORM models
# - User: accounts and plan tier
# - every other table is tenant data owned through user_id
# -----------------------------------------------------------------------------
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sellerdesk.db.session import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    plan = Column(String(20), nullable=False, default="free")  # free|premium|enterprise
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class DRECalculation(Base):
    __tablename__ = "dre_calculations"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    revenue = Column(Float, nullable=False)
    costs = Column(JSON, default=dict)
    expenses = Column(JSON, default=dict)
    results = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class PricingCalculation(Base):
    __tablename__ = "pricing_calculations"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    product_name = Column(String(255), nullable=False)
    cost_price = Column(Float, nullable=False)
    desired_margin = Column(Float, nullable=False)
    marketplace_fees = Column(JSON, default=dict)
    calculated_price = Column(Float, nullable=False)
    calculation_data = Column(JSON, default=dict)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class StoreConnection(Base):
    __tablename__ = "store_connections"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    store_type = Column(String(30), index=True, nullable=False)
    store_name = Column(String(255), nullable=False)
    api_credentials = Column(JSON, default=dict)  # never returned by the API
    is_active = Column(Boolean, nullable=False, default=True)
    last_sync = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class SyncedProduct(Base):
    __tablename__ = "synced_products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    connection_id = Column(
        String(36), ForeignKey("store_connections.id"), index=True, nullable=False
    )
    external_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Float, default=0.0)
    stock_quantity = Column(Integer, default=0)
    category = Column(String(100), index=True)
    product_data = Column(JSON, default=dict)
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("connection_id", "external_id", name="uq_synced_external"),
        Index("ix_synced_user_updated", "user_id", "last_updated"),
    )


class MarketResearch(Base):
    __tablename__ = "market_research"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    product_name = Column(String(255), nullable=False)
    category = Column(String(100), index=True, nullable=True)
    search_data = Column(JSON, nullable=True)
    results = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class SavedAd(Base):
    """
    A calculator snapshot the user wants to keep
    - calculator_type: "pricing" | "dre" | any client-side calculator name
    - calculation_data: the inputs/outputs exactly as the client sent them
    """

    __tablename__ = "saved_ads"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    calculator_type = Column(String(50), nullable=False)
    calculation_data = Column(JSON, nullable=False)
    photo_url = Column(Text, nullable=True)
    comment = Column(Text, nullable=True)
    tags = Column(JSON, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
