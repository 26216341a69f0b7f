# sellerdesk/services/auth.py
# -----------------------------------------------------------------------------
# AuthSession: bearer token -> Principal, plus the plan tier gate
#
#   verify(token)
#     bad signature / malformed   -> InvalidCredential
#     expired                      -> CredentialExpired
#     user lookup returns None     -> PrincipalNotFound
#     user.active is False         -> AccountDisabled
#     otherwise                    -> Principal
#
# The user lookup is passed in; the active flag is always read fresh from it,
# never from the token.
# -----------------------------------------------------------------------------
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional

import jwt
from loguru import logger

from sellerdesk.core.config import Settings
from sellerdesk.core.errors import (
    AccountDisabled,
    CredentialExpired,
    InsufficientTier,
    InvalidCredential,
    PrincipalNotFound,
)
from sellerdesk.schemas.auth import Principal, Tier

PrincipalLookup = Callable[[str], Awaitable[Optional[Principal]]]


def require_tier(principal: Principal, minimum: Tier) -> Principal:
    """Pass the principal through when its plan ranks at least `minimum`."""
    if principal.plan < minimum:
        raise InsufficientTier(current=principal.plan.value, required=minimum.value)
    return principal


class AuthSession:
    def __init__(
        self,
        lookup: PrincipalLookup,
        *,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(days=7),
    ):
        self._lookup = lookup
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in

    @classmethod
    def from_settings(cls, lookup: PrincipalLookup, settings: Settings) -> "AuthSession":
        return cls(
            lookup,
            secret=settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
            expires_in=timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
        )

    def issue(self, principal_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": str(principal_id), "iat": now, "exp": now + self._expires_in}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise CredentialExpired()
        except jwt.InvalidTokenError as e:
            logger.info(f"[auth] rejected token: {e}")
            raise InvalidCredential()
        return payload["sub"]

    async def _resolve(self, principal_id: str) -> Principal:
        principal = await self._lookup(principal_id)
        if principal is None:
            raise PrincipalNotFound()
        if not principal.active:
            logger.warning(f"[auth] disabled account {principal_id} tried to authenticate")
            raise AccountDisabled()
        return principal

    async def verify(self, token: Optional[str]) -> Principal:
        if not token:
            raise InvalidCredential("access token required")
        return await self._resolve(self._decode(token))

    async def refresh(self, principal_id: str) -> str:
        """New token for a user that still exists and is still active."""
        principal = await self._resolve(principal_id)
        return self.issue(principal.id)

    def require_tier(self, principal: Principal, minimum: Tier) -> Principal:
        return require_tier(principal, minimum)
