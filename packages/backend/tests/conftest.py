"""Test fixtures — a fresh SQLite database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own SQLite file (aiosqlite) with the schema created
   from the models, so tests never see each other's rows.
2. get_db is overridden to hand out sessions from that database, one per
   request, the same way production does.
3. The app's TokenService is replaced with one using a fixed test secret,
   so tests can mint and inspect tokens directly.

Environment is set before the app is imported: cheap bcrypt rounds, a
known secret, and no schema creation against the default database.
"""

import os

os.environ["WEBFORUM_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WEBFORUM_JWT_SECRET"] = "test-secret-0123456789abcdef-0123456789"
os.environ["WEBFORUM_PASSWORD_HASH_ROUNDS"] = "4"
os.environ["WEBFORUM_AUTO_CREATE_SCHEMA"] = "false"

import uuid  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from webforum.auth.jwt import TokenService  # noqa: E402
from webforum.db.engine import get_db  # noqa: E402
from webforum.db.models import Base  # noqa: E402
from webforum.main import app  # noqa: E402

TEST_SECRET = os.environ["WEBFORUM_JWT_SECRET"]


@pytest_asyncio.fixture()
async def engine(tmp_path):
    """Per-test database file with all tables created.

    SQLite leaves foreign keys unenforced unless asked, per connection.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'forum.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _enforce_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture()
def token_service():
    return TokenService(secret=TEST_SECRET)


@pytest_asyncio.fixture()
async def client(session_factory, token_service):
    """HTTP client with the app's database and token service swapped for tests."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_tokens = app.state.token_service
    app.state.token_service = token_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.token_service = original_tokens
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def register(client):
    """Sign up + log in a fresh account; returns (user, auth headers)."""

    async def _register(username: str | None = None, password: str = "password_123"):
        run_id = uuid.uuid4().hex[:8]
        username = username or f"user-{run_id}"
        email = f"{username}@example.com"
        r = await client.post(
            "/api/signup",
            json={"username": username, "email": email, "password": password},
        )
        assert r.status_code == 200, r.text
        user = r.json()["user"]

        r = await client.post("/api/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return user, {"Authorization": f"Bearer {r.json()['token']}"}

    return _register
