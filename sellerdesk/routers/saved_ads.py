# sellerdesk/routers/saved_ads.py
# -----------------------------------------------------------------------------
# /api/saved-ads : calculator snapshots saved by the caller
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends, status
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import NotFoundError
from sellerdesk.db import crud
from sellerdesk.db.models import SavedAd
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import current_principal
from sellerdesk.schemas.auth import Principal
from sellerdesk.schemas.records import (
    SavedAdCreateRequest,
    SavedAdListResponse,
    SavedAdResponse,
    SavedAdUpdateRequest,
)

router = APIRouter(prefix="/api/saved-ads", tags=["saved-ads"])


@router.get("", response_model=SavedAdListResponse)
async def list_saved_ads(
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    stmt = (
        select(SavedAd)
        .where(SavedAd.user_id == principal.id)
        .order_by(desc(SavedAd.created_at))
    )
    rows = (await db.execute(stmt)).scalars().all()
    return {"data": rows}


@router.post("", response_model=SavedAdResponse, status_code=status.HTTP_201_CREATED)
async def create_saved_ad(
    req: SavedAdCreateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.insert(db, SavedAd(user_id=principal.id, **req.model_dump()))
    return {"data": row}


@router.get("/{ad_id}", response_model=SavedAdResponse)
async def get_saved_ad(
    ad_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    return {"data": await crud.get_owned(db, SavedAd, ad_id, principal.id)}


@router.put("/{ad_id}", response_model=SavedAdResponse)
async def update_saved_ad(
    ad_id: str,
    req: SavedAdUpdateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.get_owned(db, SavedAd, ad_id, principal.id)
    changes = req.model_dump(exclude_unset=True)
    # name / calculation_data / tags cannot be cleared
    for key in ("name", "calculation_data", "tags"):
        if changes.get(key, ...) is None:
            changes.pop(key)
    row = await crud.update_owned(db, row, **changes)
    return {"data": row}


@router.delete("/{ad_id}")
async def delete_saved_ad(
    ad_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    if not await crud.delete_owned(db, SavedAd, ad_id, principal.id):
        raise NotFoundError("saved ad not found")
    return {"success": True, "message": "saved ad deleted"}
