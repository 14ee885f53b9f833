"""Data access for the ``feedback`` and ``votes`` tables.

The store owns the ``upvotes`` counter: recording a vote bumps the item's
counter in the same transaction, so handlers only ever read it.
"""

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.models.feedback import FeedbackItem, Vote

CLOSED = "closed"

# SQLSTATE for unique_violation (Postgres); SQLite reports it in the message.
_UNIQUE_VIOLATION = "23505"


class DuplicateVoteError(Exception):
    """The voter already has a vote on this feedback item."""


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == _UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(orig)


def _now() -> str:
    return datetime.now(UTC).isoformat()


class FeedbackStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_open(self, limit: int) -> list[FeedbackItem]:
        result = await self.session.execute(
            select(FeedbackItem)
            .where(FeedbackItem.status != CLOSED)
            .order_by(desc(FeedbackItem.upvotes), desc(FeedbackItem.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())

    async def voted_ids(self, voter_hash: str, feedback_ids: Iterable[str]) -> set[str]:
        """Return the subset of ``feedback_ids`` this voter has voted on."""
        ids = list(feedback_ids)
        if not ids:
            return set()
        result = await self.session.execute(
            select(Vote.feedback_id).where(
                Vote.voter_hash == voter_hash,
                Vote.feedback_id.in_(ids),
            )
        )
        return set(result.scalars().all())

    async def get(self, feedback_id: str) -> FeedbackItem | None:
        result = await self.session.execute(
            select(FeedbackItem)
            .where(FeedbackItem.id == feedback_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, title: str, body: str | None, category: str) -> FeedbackItem:
        item = FeedbackItem(
            id=str(uuid.uuid4()),
            title=title,
            body=body,
            category=category,
            status="open",
            upvotes=0,
            created_at=_now(),
        )
        self.session.add(item)
        await self.session.flush()
        return item

    async def add_vote(self, feedback_id: str, voter_hash: str) -> None:
        """Insert a vote and bump the item's counter.

        Raises ``DuplicateVoteError`` when the voter already voted; the
        session is rolled back in that case.
        """
        self.session.add(
            Vote(
                id=str(uuid.uuid4()),
                feedback_id=feedback_id,
                voter_hash=voter_hash,
                created_at=_now(),
            )
        )
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateVoteError(feedback_id) from exc
            raise

        await self.session.execute(
            update(FeedbackItem)
            .where(FeedbackItem.id == feedback_id)
            .values(upvotes=FeedbackItem.upvotes + 1)
            .execution_options(synchronize_session=False)
        )
