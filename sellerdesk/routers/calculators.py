# sellerdesk/routers/calculators.py
# -----------------------------------------------------------------------------
# /api/calculators/dre/quick, /pricing/quick : compute only
# /api/calculators/dre, /pricing             : compute + persist, list, get, delete
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import NotFoundError
from sellerdesk.db import crud
from sellerdesk.db.models import DRECalculation, PricingCalculation
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import PageParams, current_principal
from sellerdesk.schemas.auth import MessageResponse, Principal
from sellerdesk.schemas.calculators import (
    DRECreateRequest,
    DRECreateResponse,
    DREDetailResponse,
    DREListResponse,
    DREQuickRequest,
    DREQuickResponse,
    PricingCreateRequest,
    PricingCreateResponse,
    PricingDetailResponse,
    PricingListResponse,
    PricingQuickRequest,
    PricingQuickResponse,
)
from sellerdesk.services.dre import compute_dre
from sellerdesk.services.pricing import compute_pricing

router = APIRouter(prefix="/api/calculators", tags=["calculators"])


# ── DRE ──────────────────────────────────────────────────────────────────────
@router.post("/dre/quick", response_model=DREQuickResponse)
async def quick_dre(req: DREQuickRequest, principal: Principal = Depends(current_principal)):
    result = compute_dre(req.revenue, req.costs, req.expenses)
    return DREQuickResponse(results=result.as_dict())


@router.post("/dre", response_model=DRECreateResponse, status_code=status.HTTP_201_CREATED)
async def create_dre(
    req: DRECreateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    result = compute_dre(req.revenue, req.costs, req.expenses)
    row = await crud.insert(
        db,
        DRECalculation(
            user_id=principal.id,
            name=req.name.strip(),
            period_start=req.period_start,
            period_end=req.period_end,
            revenue=req.revenue,
            costs=req.costs,
            expenses=req.expenses,
            results=result.as_dict(),
        ),
    )
    return {"message": "DRE created", "dre": row}


@router.get("/dre", response_model=DREListResponse)
async def list_dres(
    page: PageParams = Depends(),
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    rows, pagination = await crud.list_owned(
        db, DRECalculation, principal.id, page=page.page, limit=page.limit
    )
    return {"dres": rows, "pagination": pagination}


@router.get("/dre/{dre_id}", response_model=DREDetailResponse)
async def get_dre(
    dre_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    return {"dre": await crud.get_owned(db, DRECalculation, dre_id, principal.id)}


@router.delete("/dre/{dre_id}", response_model=MessageResponse)
async def delete_dre(
    dre_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    if not await crud.delete_owned(db, DRECalculation, dre_id, principal.id):
        raise NotFoundError("DRE not found")
    return MessageResponse(message="DRE deleted")


# ── pricing ──────────────────────────────────────────────────────────────────
@router.post("/pricing/quick", response_model=PricingQuickResponse)
async def quick_pricing(
    req: PricingQuickRequest, principal: Principal = Depends(current_principal)
):
    result = compute_pricing(req.cost_price, req.desired_margin, req.marketplace_fees)
    return PricingQuickResponse(results=result.as_dict())


@router.post(
    "/pricing", response_model=PricingCreateResponse, status_code=status.HTTP_201_CREATED
)
async def create_pricing(
    req: PricingCreateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    result = compute_pricing(req.cost_price, req.desired_margin, req.marketplace_fees)
    data = result.as_dict()
    row = await crud.insert(
        db,
        PricingCalculation(
            user_id=principal.id,
            product_name=req.product_name.strip(),
            cost_price=req.cost_price,
            desired_margin=req.desired_margin,
            marketplace_fees=req.marketplace_fees or {},
            calculated_price=data["final_price"],
            calculation_data=data,
        ),
    )
    return {"message": "pricing calculation created", "pricing": row}


@router.get("/pricing", response_model=PricingListResponse)
async def list_pricings(
    page: PageParams = Depends(),
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    rows, pagination = await crud.list_owned(
        db, PricingCalculation, principal.id, page=page.page, limit=page.limit
    )
    return {"pricings": rows, "pagination": pagination}


@router.get("/pricing/{pricing_id}", response_model=PricingDetailResponse)
async def get_pricing(
    pricing_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    return {"pricing": await crud.get_owned(db, PricingCalculation, pricing_id, principal.id)}


@router.delete("/pricing/{pricing_id}", response_model=MessageResponse)
async def delete_pricing(
    pricing_id: str,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    if not await crud.delete_owned(db, PricingCalculation, pricing_id, principal.id):
        raise NotFoundError("pricing calculation not found")
    return MessageResponse(message="pricing calculation deleted")
