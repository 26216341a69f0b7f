# sellerdesk/routers/connections.py
# -----------------------------------------------------------------------------
# /api/connections        : store connections (create / sync need premium)
# /api/connections/products : products pulled in by sync
# -----------------------------------------------------------------------------
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import ConflictError, NotFoundError, ValidationError
from sellerdesk.db import crud
from sellerdesk.db.models import StoreConnection, SyncedProduct
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import current_principal, get_product_feed, tier_required
from sellerdesk.schemas.auth import MessageResponse, Principal, Tier
from sellerdesk.schemas.connections import (
    ConnectionCreateRequest,
    ConnectionListResponse,
    ConnectionResponse,
    ConnectionUpdateRequest,
    ProductListResponse,
    StoreType,
    SyncResponse,
)
from sellerdesk.services.plans import UNLIMITED, get_plan
from sellerdesk.services.store_sync import ProductFeed, to_rows, validate_store_credentials

router = APIRouter(prefix="/api/connections", tags=["connections"])


def _invalid_credentials() -> ValidationError:
    return ValidationError.for_field("api_credentials", "invalid API credentials")


async def _ensure_can_activate(db: AsyncSession, principal: Principal, store_type: str) -> None:
    """One active connection per store type, and no more than the plan allows."""
    if await crud.get_active_connection_by_type(db, principal.id, store_type):
        raise ConflictError(f"an active {store_type} connection already exists")

    limit = get_plan(principal.plan).limits["store_connections"]
    if limit != UNLIMITED:
        active = await crud.list_connections(db, principal.id, is_active=True)
        if len(active) >= limit:
            raise ConflictError(f"plan {principal.plan.value} allows {limit} active connections")


@router.post("", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
async def create_connection(
    req: ConnectionCreateRequest,
    principal: Principal = Depends(tier_required(Tier.PREMIUM)),
    db: AsyncSession = Depends(get_session),
):
    store_type = req.store_type.value
    await _ensure_can_activate(db, principal, store_type)

    credentials = req.api_credentials.model_dump()
    if not validate_store_credentials(store_type, credentials):
        raise _invalid_credentials()

    row = await crud.insert(
        db,
        StoreConnection(
            user_id=principal.id,
            store_type=store_type,
            store_name=req.store_name.strip(),
            api_credentials=credentials,
            is_active=True,
        ),
    )
    logger.info(f"[connections] {principal.id} connected {store_type} ({row.id})")
    return {"message": "connection created", "connection": row}


@router.get("", response_model=ConnectionListResponse)
async def list_connections(
    store_type: Optional[StoreType] = None,
    is_active: Optional[bool] = None,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    rows = await crud.list_connections(
        db, principal.id, store_type=store_type.value if store_type else None, is_active=is_active
    )
    return {"connections": rows}


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    connection_id: Optional[str] = None,
    category: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    filters = []
    if connection_id:
        filters.append(SyncedProduct.connection_id == connection_id)
    if category:
        filters.append(SyncedProduct.category == category.strip())
    rows, pagination = await crud.list_owned(
        db,
        SyncedProduct,
        principal.id,
        *filters,
        page=page,
        limit=limit,
        order_by=SyncedProduct.last_updated,
    )
    return {"products": rows, "pagination": pagination}


@router.get("/{connection_id}", response_model=ConnectionResponse)
async def get_connection(
    connection_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.get_owned(db, StoreConnection, connection_id, principal.id)
    return {"connection": row}


@router.put("/{connection_id}", response_model=ConnectionResponse)
async def update_connection(
    connection_id: str,
    req: ConnectionUpdateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.get_owned(db, StoreConnection, connection_id, principal.id)

    changes = req.model_dump(exclude_unset=True, exclude={"api_credentials"})
    if "store_name" in changes and changes["store_name"] is not None:
        changes["store_name"] = changes["store_name"].strip()
    changes = {k: v for k, v in changes.items() if v is not None}

    if changes.get("is_active") is True and not row.is_active:
        await _ensure_can_activate(db, principal, row.store_type)

    if req.api_credentials is not None:
        credentials = req.api_credentials.model_dump()
        if not validate_store_credentials(row.store_type, credentials):
            raise _invalid_credentials()
        changes["api_credentials"] = credentials

    row = await crud.update_owned(db, row, **changes)
    return {"message": "connection updated", "connection": row}


@router.delete("/{connection_id}", response_model=MessageResponse)
async def delete_connection(
    connection_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    if not await crud.delete_connection(db, connection_id, principal.id):
        raise NotFoundError("connection not found")
    return MessageResponse(message="connection deleted")


@router.post("/{connection_id}/sync", response_model=SyncResponse)
async def sync_connection(
    connection_id: str,
    principal: Principal = Depends(tier_required(Tier.PREMIUM)),
    db: AsyncSession = Depends(get_session),
    feed: ProductFeed = Depends(get_product_feed),
):
    try:
        row = await crud.get_owned(
            db, StoreConnection, connection_id, principal.id, StoreConnection.is_active.is_(True)
        )
    except NotFoundError:
        raise NotFoundError("connection not found or inactive")

    products = await feed.fetch_products(row.store_type, row.api_credentials or {})
    count = await crud.upsert_synced_products(db, row, to_rows(products))
    logger.info(f"[connections] synced {count} products for {row.id}")
    return SyncResponse(message="sync completed", synced_products=count)
