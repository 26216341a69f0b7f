# sellerdesk/db/crud.py
# -----------------------------------------------------------------------------
# Read/write helpers
# - users: lookups by id / email, create, update
# - tenant tables: every query is filtered by the owner's user_id
# - paginated listing (page / limit, newest first)
# -----------------------------------------------------------------------------
import math
from datetime import datetime
from typing import Any, Optional, Sequence

import pydantic
from loguru import logger
from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import DependencyError, NotFoundError
from sellerdesk.db.models import (
    DRECalculation,
    MarketResearch,
    PricingCalculation,
    SavedAd,
    StoreConnection,
    SyncedProduct,
    User,
    utcnow,
)
from sellerdesk.schemas.auth import Principal


# ── users ────────────────────────────────────────────────────────────────────
async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email.strip().lower()))
    return res.scalar_one_or_none()


def to_principal(user: User) -> Principal:
    """Shape a user row into the fixed Principal record."""
    try:
        return Principal.model_validate(user)
    except pydantic.ValidationError as e:
        logger.error(f"[crud] malformed user row {user.id}: {e}")
        raise DependencyError()


async def get_principal(db: AsyncSession, user_id: str) -> Principal | None:
    # always read the current row, not a copy cached in the session
    user = await db.get(User, user_id, populate_existing=True)
    if user is None:
        return None
    return to_principal(user)


async def create_user(
    db: AsyncSession, *, email: str, password_hash: str, name: str, plan: str = "free"
) -> User:
    user = User(
        email=email.strip().lower(),
        password_hash=password_hash,
        name=name,
        plan=plan,
        active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def update_user(db: AsyncSession, user: User, **fields: Any) -> User:
    for k, v in fields.items():
        if v is not None:
            setattr(user, k, v)
    user.updated_at = utcnow()
    await db.commit()
    await db.refresh(user)
    return user


# ── tenant records ───────────────────────────────────────────────────────────
async def insert(db: AsyncSession, row):
    db.add(row)
    await db.commit()
    await db.refresh(row)
    return row


async def get_owned(db: AsyncSession, model, record_id, user_id: str, *filters):
    stmt = select(model).where(model.id == record_id, model.user_id == user_id, *filters)
    row = (await db.execute(stmt)).scalar_one_or_none()
    if row is None:
        raise NotFoundError(f"{model.__tablename__} record not found")
    return row


async def update_owned(db: AsyncSession, row, **fields: Any):
    """Apply only the keys present in `fields`; None is a real value here."""
    for k, v in fields.items():
        setattr(row, k, v)
    if hasattr(row, "updated_at"):
        row.updated_at = utcnow()
    await db.commit()
    await db.refresh(row)
    return row


async def delete_owned(db: AsyncSession, model, record_id, user_id: str) -> bool:
    res = await db.execute(
        delete(model).where(model.id == record_id, model.user_id == user_id)
    )
    await db.commit()
    return bool(res.rowcount)


async def list_owned(
    db: AsyncSession,
    model,
    user_id: str,
    *filters,
    page: int = 1,
    limit: int = 10,
    order_by=None,
) -> tuple[Sequence, dict]:
    """One page of the owner's rows plus the pagination block."""
    where = (model.user_id == user_id, *filters)
    order_col = order_by if order_by is not None else model.created_at

    total = (
        await db.execute(select(func.count()).select_from(model).where(*where))
    ).scalar_one()
    stmt = (
        select(model)
        .where(*where)
        .order_by(desc(order_col))
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).scalars().all()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
    return rows, pagination


# ── store connections ────────────────────────────────────────────────────────
async def get_active_connection_by_type(
    db: AsyncSession, user_id: str, store_type: str
) -> StoreConnection | None:
    stmt = (
        select(StoreConnection)
        .where(
            StoreConnection.user_id == user_id,
            StoreConnection.store_type == store_type,
            StoreConnection.is_active.is_(True),
        )
        .limit(1)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def list_connections(
    db: AsyncSession,
    user_id: str,
    store_type: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Sequence[StoreConnection]:
    stmt = select(StoreConnection).where(StoreConnection.user_id == user_id)
    if store_type:
        stmt = stmt.where(StoreConnection.store_type == store_type)
    if is_active is not None:
        stmt = stmt.where(StoreConnection.is_active.is_(is_active))
    stmt = stmt.order_by(desc(StoreConnection.created_at))
    return (await db.execute(stmt)).scalars().all()


async def delete_connection(db: AsyncSession, connection_id: str, user_id: str) -> bool:
    await db.execute(
        delete(SyncedProduct).where(
            SyncedProduct.connection_id == connection_id,
            SyncedProduct.user_id == user_id,
        )
    )
    return await delete_owned(db, StoreConnection, connection_id, user_id)


async def upsert_synced_products(
    db: AsyncSession, connection: StoreConnection, products: list[dict]
) -> int:
    """Insert or refresh products keyed by (connection_id, external_id)."""
    now = utcnow()
    for p in products:
        stmt = select(SyncedProduct).where(
            SyncedProduct.connection_id == connection.id,
            SyncedProduct.external_id == p["external_id"],
        )
        row = (await db.execute(stmt)).scalar_one_or_none()
        if row is None:
            row = SyncedProduct(
                user_id=connection.user_id,
                connection_id=connection.id,
                external_id=p["external_id"],
            )
            db.add(row)
        row.name = p["name"]
        row.price = p.get("price") or 0.0
        row.stock_quantity = p.get("stock_quantity") or 0
        row.category = p.get("category")
        row.product_data = p.get("product_data") or {}
        row.last_updated = now

    connection.last_sync = now
    await db.commit()
    return len({p["external_id"] for p in products})


# ── stats ────────────────────────────────────────────────────────────────────
_STAT_TABLES = {
    "market_researches": MarketResearch,
    "store_connections": StoreConnection,
    "dre_calculations": DRECalculation,
    "pricing_calculations": PricingCalculation,
    "saved_ads": SavedAd,
}


async def user_stats(db: AsyncSession, user_id: str) -> dict:
    stats: dict[str, Any] = {}
    latest: list[datetime] = []
    for key, model in _STAT_TABLES.items():
        count, last = (
            await db.execute(
                select(func.count(), func.max(model.created_at)).where(
                    model.user_id == user_id
                )
            )
        ).one()
        stats[key] = count
        if last is not None:
            latest.append(last)

    stats["synced_products"] = (
        await db.execute(
            select(func.count())
            .select_from(SyncedProduct)
            .where(SyncedProduct.user_id == user_id)
        )
    ).scalar_one()
    stats["last_activity"] = max(latest) if latest else None
    return stats
