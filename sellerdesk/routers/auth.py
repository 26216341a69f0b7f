# sellerdesk/routers/auth.py
# -----------------------------------------------------------------------------
# /api/auth/register, /login          : public
# /api/auth/refresh, /logout, /profile : bearer token
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.errors import AccountDisabled, ConflictError, InvalidLogin
from sellerdesk.db import crud
from sellerdesk.db.session import get_session
from sellerdesk.routers.deps import current_principal, get_auth_session
from sellerdesk.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    Principal,
    ProfileResponse,
    RegisterRequest,
    Tier,
)
from sellerdesk.services.auth import AuthSession
from sellerdesk.services.passwords import hash_password, verify_password

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    db: AsyncSession = Depends(get_session),
    auth: AuthSession = Depends(get_auth_session),
):
    if await crud.get_user_by_email(db, req.email):
        raise ConflictError("email already in use")

    user = await crud.create_user(
        db,
        email=req.email,
        password_hash=hash_password(req.password),
        name=req.name,
        plan=Tier.FREE.value,
    )
    logger.info(f"[auth] registered user {user.id}")
    return AuthResponse(
        message="user created",
        user=crud.to_principal(user),
        token=auth.issue(user.id),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    db: AsyncSession = Depends(get_session),
    auth: AuthSession = Depends(get_auth_session),
):
    user = await crud.get_user_by_email(db, req.email)
    if user is None:
        raise InvalidLogin()
    if not user.active:
        raise AccountDisabled()
    if not verify_password(req.password, user.password_hash):
        logger.info(f"[auth] wrong password for user {user.id}")
        raise InvalidLogin()

    return AuthResponse(
        message="login successful",
        user=crud.to_principal(user),
        token=auth.issue(user.id),
    )


@router.post("/refresh", response_model=AuthResponse)
async def refresh(
    principal: Principal = Depends(current_principal),
    auth: AuthSession = Depends(get_auth_session),
):
    token = await auth.refresh(principal.id)
    return AuthResponse(message="token refreshed", user=principal, token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(principal: Principal = Depends(current_principal)):
    # tokens are stateless; the client drops its copy
    return MessageResponse(message="logout successful")


@router.get("/profile", response_model=ProfileResponse)
async def profile(principal: Principal = Depends(current_principal)):
    return ProfileResponse(user=principal)
