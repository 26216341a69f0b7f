# sellerdesk/schemas/auth.py
# -----------------------------------------------------------------------------
# Account schemas
# - Tier: plan levels with a total order (free < premium < enterprise)
# - Principal: fixed record of an authenticated user (no password hash)
# -----------------------------------------------------------------------------
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Tier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_ORDER = (Tier.FREE, Tier.PREMIUM, Tier.ENTERPRISE)


class Principal(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", from_attributes=True)

    id: str
    email: str
    name: str
    plan: Tier
    active: bool
    created_at: datetime
    updated_at: datetime


def _normalize_email(v: str) -> str:
    return v.strip().lower()


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=2, max_length=255)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("name must have at least 2 characters")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return _normalize_email(v)


class AuthResponse(BaseModel):
    message: str
    user: Principal
    token: str


class ProfileResponse(BaseModel):
    user: Principal


class MessageResponse(BaseModel):
    message: str


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return _normalize_email(v) if v else v


class PlanUpdateRequest(BaseModel):
    plan: Tier


class UserResponse(BaseModel):
    message: str
    user: Principal
