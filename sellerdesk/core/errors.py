# sellerdesk/core/errors.py
# -----------------------------------------------------------------------------
# Error taxonomy
# - every error is request scoped and rendered by the handler in main.py
# - status_code / code pick the HTTP response, extra() adds payload fields
# -----------------------------------------------------------------------------
from typing import Any


class SellerDeskError(Exception):
    status_code = 500
    code = "internal_error"
    message = "internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def extra(self) -> dict[str, Any]:
        return {}


# ── input ─────────────────────────────────────────────────────────────────────
class ValidationError(SellerDeskError):
    status_code = 400
    code = "validation_error"
    message = "invalid data"

    def __init__(self, message: str | None = None, details: list[dict] | None = None):
        super().__init__(message)
        self.details = details or []

    def extra(self) -> dict[str, Any]:
        return {"details": self.details}

    @classmethod
    def for_field(cls, field: str, msg: str) -> "ValidationError":
        return cls(msg, details=[{"field": field, "msg": msg}])


# ── mathematically undefined results ─────────────────────────────────────────
class DomainError(SellerDeskError):
    status_code = 422
    code = "domain_error"


class MarginTooHigh(DomainError):
    code = "margin_too_high"
    message = "desired margin must be lower than 100%"


class FeesExceedRevenue(DomainError):
    code = "fees_exceed_revenue"
    message = "marketplace fees must add up to less than 100%"


class ZeroCostPrice(DomainError):
    code = "zero_cost_price"
    message = "markup is undefined for a zero cost price"


# ── authentication / authorization ───────────────────────────────────────────
class AuthError(SellerDeskError):
    status_code = 401
    code = "auth_error"


class InvalidCredential(AuthError):
    code = "invalid_credential"
    message = "invalid token"


class CredentialExpired(AuthError):
    code = "credential_expired"
    message = "token expired"


class PrincipalNotFound(AuthError):
    code = "principal_not_found"
    message = "user not found"


class InvalidLogin(AuthError):
    code = "invalid_login"
    message = "invalid credentials"


class AccountDisabled(AuthError):
    status_code = 403
    code = "account_disabled"
    message = "account disabled"


class InsufficientTier(AuthError):
    status_code = 403
    code = "insufficient_tier"

    def __init__(self, current: str, required: str):
        super().__init__(f"plan {required} required")
        self.current = current
        self.required = required

    def extra(self) -> dict[str, Any]:
        return {"current_plan": self.current, "required_plan": self.required}


# ── records ──────────────────────────────────────────────────────────────────
class NotFoundError(SellerDeskError):
    status_code = 404
    code = "not_found"
    message = "record not found"


class ConflictError(SellerDeskError):
    status_code = 409
    code = "conflict"


# ── external collaborators ───────────────────────────────────────────────────
class DependencyError(SellerDeskError):
    status_code = 503
    code = "dependency_error"
    message = "service temporarily unavailable"
