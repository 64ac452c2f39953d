"""
Test infrastructure for the Mays API.

Strategy
--------
- SQLite in-memory via aiosqlite, shared through StaticPool so every session
  sees the same database.  Foreign keys are switched on so the storage
  constraints behave as they do on Postgres.
- The app's get_db dependency is overridden with the test session factory.
- Tables are created before and dropped after each test.
- Redis is disabled by setting cache._redis = None; the cache then reports
  misses and skips writes, so every read hits the database.
- Bearer tokens are minted with app.security.create_access_token, signed with
  the same settings the app verifies against.
"""
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.cache import cache
from app.middleware import install_query_counter
from app.models import Comment, Post, User
from app.security import ROLE_CLAIM, create_access_token

# ---------------------------------------------------------------------------
# Test database engine: SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FOREIGN KEY clauses unless the pragma is on per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


install_query_counter(engine_test)

async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    cache._redis = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def seeded() -> dict:
    """
    Commit two users, two posts and one comment by alice on the first post.

    Returns the ids keyed by name so tests can build URLs and tokens.
    """
    async with async_session_test() as session:
        alice = User(user_name="alice", email="alice@example.com", avatar="avatars/alice.png", role="user")
        bob = User(user_name="bob", email="bob@example.com", avatar=None, role="premium")
        session.add_all([alice, bob])
        await session.flush()

        first = Post(
            title="First post",
            date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            content="Hello",
            file_path="uploads/first.png",
            file_type="image/png",
            is_spoiler=False,
            author_id=alice.id,
        )
        second = Post(title="Second post", content="World", is_spoiler=True, author_id=bob.id)
        session.add_all([first, second])
        await session.flush()

        comment = Comment(
            post_id=first.id,
            author_id=alice.id,
            content="Nice one",
            is_spoiler=False,
            date=datetime(2024, 5, 2, 8, 30, tzinfo=timezone.utc),
        )
        session.add(comment)
        await session.commit()

        return {
            "alice": alice.id,
            "bob": bob.id,
            "first_post": first.id,
            "second_post": second.id,
            "comment": comment.id,
        }


def bearer(user_id: str | None, roles="user") -> dict:
    """Authorization header for *user_id*; None omits the Id claim."""
    if user_id is None:
        claims = {ROLE_CLAIM: roles, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
        token = jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    else:
        token = create_access_token(user_id, roles)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth():
    return bearer
