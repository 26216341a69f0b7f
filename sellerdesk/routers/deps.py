# sellerdesk/routers/deps.py
# -----------------------------------------------------------------------------
# Shared FastAPI dependencies
# - get_auth_session: AuthSession bound to the request's DB session
# - current_principal: Authorization: Bearer <token> -> Principal
# - tier_required(Tier.X): plan gate on top of current_principal
# -----------------------------------------------------------------------------
from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from sellerdesk.core.config import settings
from sellerdesk.db import crud
from sellerdesk.db.session import get_session
from sellerdesk.schemas.auth import Principal, Tier
from sellerdesk.services.auth import AuthSession, require_tier
from sellerdesk.services.store_sync import HttpProductFeed, ProductFeed

bearer = HTTPBearer(auto_error=False)


def get_auth_session(db: AsyncSession = Depends(get_session)) -> AuthSession:
    async def lookup(user_id: str) -> Principal | None:
        return await crud.get_principal(db, user_id)

    return AuthSession.from_settings(lookup, settings)


async def current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    auth: AuthSession = Depends(get_auth_session),
) -> Principal:
    token = credentials.credentials if credentials else None
    return await auth.verify(token)


def tier_required(minimum: Tier):
    async def _gate(principal: Principal = Depends(current_principal)) -> Principal:
        return require_tier(principal, minimum)

    return _gate


def get_product_feed() -> ProductFeed:
    return HttpProductFeed()


class PageParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ):
        self.page = page
        self.limit = limit
