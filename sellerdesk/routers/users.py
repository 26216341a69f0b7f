# sellerdesk/routers/users.py
# -----------------------------------------------------------------------------
# /api/users/profile : name / email change
# /api/users/plan    : plan change
# /api/users/stats   : per-user record counts
# /api/users/plans   : plan catalog
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import ConflictError, PrincipalNotFound
from sellerdesk.db import crud
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import current_principal
from sellerdesk.schemas.auth import (
    PlanUpdateRequest,
    Principal,
    ProfileUpdateRequest,
    UserResponse,
)
from sellerdesk.schemas.users import PlansResponse, StatsResponse, UserStats
from sellerdesk.services.plans import PLANS

router = APIRouter(prefix="/api/users", tags=["users"])


async def _load_user(db: AsyncSession, principal: Principal):
    user = await crud.get_user_by_id(db, principal.id)
    if user is None:
        raise PrincipalNotFound()
    return user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    req: ProfileUpdateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    user = await _load_user(db, principal)

    if req.email and req.email != user.email:
        other = await crud.get_user_by_email(db, req.email)
        if other and other.id != user.id:
            raise ConflictError("email already in use")

    user = await crud.update_user(db, user, name=req.name and req.name.strip(), email=req.email)
    return UserResponse(message="profile updated", user=crud.to_principal(user))


@router.put("/plan", response_model=UserResponse)
async def update_plan(
    req: PlanUpdateRequest,
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    user = await _load_user(db, principal)
    user = await crud.update_user(db, user, plan=req.plan.value)
    logger.info(f"[users] {user.id} plan {principal.plan.value} -> {req.plan.value}")
    return UserResponse(message="plan updated", user=crud.to_principal(user))


@router.get("/stats", response_model=StatsResponse)
async def stats(
    principal: Principal = Depends(current_principal),
    db: AsyncSession = Depends(get_session),
):
    return StatsResponse(stats=UserStats(**await crud.user_stats(db, principal.id)))


@router.get("/plans", response_model=PlansResponse)
async def plans(principal: Principal = Depends(current_principal)):
    return PlansResponse(plans=PLANS)
