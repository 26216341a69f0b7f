import asyncio
import os
import tempfile

# settings are read at import time, so the environment goes first
_TMP = tempfile.mkdtemp(prefix="sellerdesk-tests-")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP}/unused.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from sellerdesk.db import session as db_session
from sellerdesk.main import app


@pytest.fixture
def db_maker(tmp_path, monkeypatch):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    maker = async_sessionmaker(engine, expire_on_commit=False)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "AsyncSessionLocal", maker)
    return maker


@pytest.fixture
def client(db_maker):
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def run_db(db_maker):
    """Run `await fn(session)` against the test database, outside the app."""

    def _run(fn):
        async def _go():
            async with db_maker() as s:
                return await fn(s)

        return asyncio.run(_go())

    return _run


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    def _register(email="seller@example.com", password="secret123", name="Seller"):
        r = client.post(
            "/api/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert r.status_code == 201, r.text
        body = r.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def premium_user(client, register):
    token, user = register(email="premium@example.com")
    r = client.put("/api/users/plan", json={"plan": "premium"}, headers=bearer(token))
    assert r.status_code == 200, r.text
    return token, r.json()["user"]
