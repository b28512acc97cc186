"""Test fixtures — a fresh in-memory database per test.

Learn: Every test gets its own SQLite database (aiosqlite, StaticPool so
all sessions share the single in-memory connection). The app's get_db is
overridden to open sessions on it, so each HTTP request still gets its
own session, exactly like production.

Auth is NOT mocked: tests register real accounts and send real bearer
tokens, because the auth pipeline is what most of these tests are about.
"""

import os

# Must be set before quizhub.config is imported anywhere.
os.environ.setdefault("QUIZHUB_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("QUIZHUB_JWT_SECRET", "test-secret-do-not-use-anywhere-else")
os.environ.setdefault("QUIZHUB_BCRYPT_ROUNDS", "4")

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quizhub.db.engine import create_schema, get_db
from quizhub.main import app


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Direct session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with get_db pointed at the per-test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ─── Accounts ───────────────────────────────────────────


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Factory: register an account via the API and return the response body."""

    async def _register(
        role: str = "TAKER",
        email: str | None = None,
        name: str = "Test User",
        password: str = "password_123",
    ) -> dict:
        email = email or f"{role.lower()}-{uuid.uuid4().hex[:8]}@example.com"
        r = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _register


@pytest.fixture()
async def owner(register):
    return await register("OWNER", name="Quiz Owner")


@pytest.fixture()
async def taker(register):
    return await register("TAKER", name="Quiz Taker")


@pytest.fixture()
def owner_headers(owner):
    return auth_headers(owner["token"])


@pytest.fixture()
def taker_headers(taker):
    return auth_headers(taker["token"])


# ─── Quiz content ───────────────────────────────────────


@pytest.fixture()
async def quiz(client, owner_headers):
    """A published quiz with 3 questions whose correct indices are [0, 2, 1]."""
    r = await client.post(
        "/api/admin/quiz",
        json={"title": "Capitals", "description": "Europe", "isPublished": True},
        headers=owner_headers,
    )
    assert r.status_code == 201, r.text
    created = r.json()

    questions = []
    for text, options, correct in [
        ("Capital of France?", ["Paris", "Rome", "Oslo"], 0),
        ("Capital of Norway?", ["Rome", "Paris", "Oslo"], 2),
        ("Capital of Italy?", ["Oslo", "Rome", "Paris"], 1),
    ]:
        r = await client.post(
            "/api/admin/question",
            json={
                "quizId": created["id"],
                "text": text,
                "options": options,
                "correctIndex": correct,
            },
            headers=owner_headers,
        )
        assert r.status_code == 201, r.text
        questions.append(r.json())

    created["questions"] = questions
    return created
