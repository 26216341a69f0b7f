import asyncio
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from sellerdesk.core.errors import (
    AccountDisabled,
    CredentialExpired,
    InsufficientTier,
    InvalidCredential,
    PrincipalNotFound,
)
from sellerdesk.schemas.auth import Principal, Tier
from sellerdesk.services.auth import AuthSession, require_tier

SECRET = "unit-secret"


def make_principal(id="u1", plan=Tier.FREE, active=True) -> Principal:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Principal(
        id=id,
        email=f"{id}@example.com",
        name="Seller",
        plan=plan,
        active=active,
        created_at=now,
        updated_at=now,
    )


class FakeUsers:
    def __init__(self, *principals):
        self.rows = {p.id: p for p in principals}
        self.calls = 0

    async def __call__(self, user_id):
        self.calls += 1
        return self.rows.get(user_id)


def make_session(users, **kw) -> AuthSession:
    return AuthSession(users, secret=SECRET, **kw)


def test_issue_then_verify_returns_principal():
    users = FakeUsers(make_principal())
    auth = make_session(users)
    principal = asyncio.run(auth.verify(auth.issue("u1")))
    assert principal.id == "u1"
    assert principal.plan is Tier.FREE


def test_missing_token_is_invalid():
    auth = make_session(FakeUsers())
    with pytest.raises(InvalidCredential):
        asyncio.run(auth.verify(None))


def test_garbage_token_is_invalid():
    auth = make_session(FakeUsers(make_principal()))
    with pytest.raises(InvalidCredential):
        asyncio.run(auth.verify("not-a-jwt"))


def test_token_signed_with_other_secret_is_invalid():
    users = FakeUsers(make_principal())
    other = AuthSession(users, secret="someone-else")
    with pytest.raises(InvalidCredential):
        asyncio.run(make_session(users).verify(other.issue("u1")))


def test_token_without_subject_is_invalid():
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)}, SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidCredential):
        asyncio.run(make_session(FakeUsers()).verify(token))


def test_expired_token_is_distinct_from_invalid():
    users = FakeUsers(make_principal())
    auth = make_session(users, expires_in=timedelta(seconds=-10))
    with pytest.raises(CredentialExpired):
        asyncio.run(auth.verify(auth.issue("u1")))
    # the store is never consulted for a dead token
    assert users.calls == 0


def test_unknown_principal_is_rejected():
    auth = make_session(FakeUsers())
    with pytest.raises(PrincipalNotFound):
        asyncio.run(auth.verify(auth.issue("ghost")))


def test_deactivation_after_issue_blocks_verify():
    users = FakeUsers(make_principal(plan=Tier.ENTERPRISE))
    auth = make_session(users)
    token = auth.issue("u1")
    users.rows["u1"] = users.rows["u1"].model_copy(update={"active": False})
    with pytest.raises(AccountDisabled):
        asyncio.run(auth.verify(token))


def test_refresh_re_resolves_the_principal():
    users = FakeUsers(make_principal())
    auth = make_session(users)
    token = asyncio.run(auth.refresh("u1"))
    assert asyncio.run(auth.verify(token)).id == "u1"

    users.rows["u1"] = users.rows["u1"].model_copy(update={"active": False})
    with pytest.raises(AccountDisabled):
        asyncio.run(auth.refresh("u1"))
    with pytest.raises(PrincipalNotFound):
        asyncio.run(auth.refresh("ghost"))


def test_tier_order():
    assert Tier.FREE < Tier.PREMIUM < Tier.ENTERPRISE
    assert Tier.ENTERPRISE >= Tier.PREMIUM
    assert max([Tier.PREMIUM, Tier.ENTERPRISE, Tier.FREE]) is Tier.ENTERPRISE
    assert [t.rank for t in Tier] == [0, 1, 2]


def test_free_plan_fails_premium_gate():
    with pytest.raises(InsufficientTier) as exc:
        require_tier(make_principal(plan=Tier.FREE), Tier.PREMIUM)
    assert exc.value.current == "free"
    assert exc.value.required == "premium"
    assert exc.value.extra() == {"current_plan": "free", "required_plan": "premium"}


@pytest.mark.parametrize("plan", [Tier.PREMIUM, Tier.ENTERPRISE])
def test_premium_gate_passes_for_equal_or_higher_plans(plan):
    p = make_principal(plan=plan)
    assert require_tier(p, Tier.PREMIUM) is p
    assert make_session(FakeUsers()).require_tier(p, Tier.PREMIUM) is p


def test_principal_rejects_unknown_fields_and_plans():
    data = make_principal().model_dump()
    with pytest.raises(ValueError):
        Principal(**data, password_hash="x")
    with pytest.raises(ValueError):
        Principal(**{**data, "plan": "gold"})
