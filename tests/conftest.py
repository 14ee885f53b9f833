"""Shared fixtures and factory helpers.

Each test gets its own SQLite file; the app's ``get_db`` dependency and the
rate limiter are overridden so tests never touch the configured store or
share limiter state.
"""

import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import dytto_api.app.models  # noqa: F401 — register tables
from dytto_api.app.db import Base, enable_sqlite_foreign_keys, get_db
from dytto_api.app.main import app
from dytto_api.app.models.blog_post import BlogPost, BlogPostTag
from dytto_api.app.models.feedback import FeedbackItem, Vote
from dytto_api.app.models.waitlist import WaitlistEntry
from dytto_api.app.services.rate_limiter import FixedWindowRateLimiter, get_rate_limiter


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(clock=clock)


@pytest.fixture
async def client(session_factory, limiter) -> AsyncGenerator[AsyncClient, None]:
    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"user-agent": "pytest-browser", "x-forwarded-for": "203.0.113.7"},
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def _iso(ts: datetime | None = None) -> str:
    return (ts or datetime.now(UTC)).isoformat()


async def create_feedback(
    db: AsyncSession,
    title: str = "Add dark mode",
    body: str | None = None,
    category: str = "idea",
    status: str = "open",
    upvotes: int = 0,
    created_at: str | None = None,
) -> FeedbackItem:
    item = FeedbackItem(
        id=str(uuid.uuid4()),
        title=title,
        body=body,
        category=category,
        status=status,
        upvotes=upvotes,
        created_at=created_at or _iso(),
    )
    db.add(item)
    await db.flush()
    return item


async def create_vote(db: AsyncSession, feedback_id: str, voter_hash: str) -> Vote:
    vote = Vote(
        id=str(uuid.uuid4()),
        feedback_id=feedback_id,
        voter_hash=voter_hash,
        created_at=_iso(),
    )
    db.add(vote)
    await db.flush()
    return vote


async def create_post(
    db: AsyncSession,
    title: str = "Hello world",
    slug: str | None = None,
    content: str = "First post.",
    excerpt: str | None = None,
    status: str = "published",
    tags: list[str] | None = None,
    published_at: str | None = None,
) -> BlogPost:
    post = BlogPost(
        id=str(uuid.uuid4()),
        title=title,
        slug=slug or title.lower().replace(" ", "-"),
        excerpt=excerpt,
        content=content,
        author="Dytto Team",
        status=status,
        published_at=published_at or (_iso() if status == "published" else None),
        created_at=_iso(),
        updated_at=_iso(),
        tag_rows=[BlogPostTag(tag=t) for t in (tags or [])],
    )
    db.add(post)
    await db.flush()
    return post


async def create_waitlist_entry(
    db: AsyncSession,
    email: str = "early@example.com",
    position: int = 1,
    referral_code: str | None = None,
    status: str = "pending",
    referral_count: int = 0,
) -> WaitlistEntry:
    entry = WaitlistEntry(
        id=str(uuid.uuid4()),
        email=email,
        position=position,
        source="website",
        referral_code=referral_code or uuid.uuid4().hex[:8].upper(),
        referral_count=referral_count,
        status=status,
        extra={},
        created_at=_iso(),
    )
    db.add(entry)
    await db.flush()
    return entry
