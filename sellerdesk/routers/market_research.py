# sellerdesk/routers/market_research.py
# -----------------------------------------------------------------------------
# /api/market-research : research records owned by the caller
# -----------------------------------------------------------------------------
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import NotFoundError
from sellerdesk.db import crud
from sellerdesk.db.models import MarketResearch
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import PageParams, current_principal
from sellerdesk.schemas.auth import MessageResponse, Principal
from sellerdesk.schemas.records import ResearchListResponse, ResearchRequest, ResearchResponse

router = APIRouter(prefix="/api/market-research", tags=["market-research"])


def _clean(req: ResearchRequest) -> dict:
    return {
        "product_name": req.product_name.strip(),
        "category": req.category.strip() if req.category else None,
        "search_data": req.search_data,
    }


@router.post("", response_model=ResearchResponse, status_code=status.HTTP_201_CREATED)
async def create_research(
    req: ResearchRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.insert(db, MarketResearch(user_id=principal.id, **_clean(req)))
    return {"message": "market research created", "research": row}


@router.get("", response_model=ResearchListResponse)
async def list_researches(
    page: PageParams = Depends(),
    category: Optional[str] = Query(None, max_length=100),
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    filters = [MarketResearch.category == category.strip()] if category else []
    rows, pagination = await crud.list_owned(
        db, MarketResearch, principal.id, *filters, page=page.page, limit=page.limit
    )
    return {"researches": rows, "pagination": pagination}


@router.get("/{research_id}", response_model=ResearchResponse)
async def get_research(
    research_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    return {"research": await crud.get_owned(db, MarketResearch, research_id, principal.id)}


@router.put("/{research_id}", response_model=ResearchResponse)
async def update_research(
    research_id: str,
    req: ResearchRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    row = await crud.get_owned(db, MarketResearch, research_id, principal.id)
    row = await crud.update_owned(db, row, **_clean(req))
    return {"message": "market research updated", "research": row}


@router.delete("/{research_id}", response_model=MessageResponse)
async def delete_research(
    research_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    if not await crud.delete_owned(db, MarketResearch, research_id, principal.id):
        raise NotFoundError("market research not found")
    return MessageResponse(message="market research deleted")
