"""Data access for the ``waitlist_entries`` table.

Entries are keyed by lower-cased email; joining twice returns the original
entry. Queue positions are handed out as ``max(position) + 1``, and a
referral code credits the referrer's ``referral_count``.
"""

import secrets
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.models.waitlist import WaitlistEntry

PENDING = "pending"
DEFAULT_SOURCE = "website"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def new_referral_code() -> str:
    return secrets.token_hex(4).upper()


class WaitlistStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_email(self, email: str) -> WaitlistEntry | None:
        result = await self.session.execute(
            select(WaitlistEntry).where(WaitlistEntry.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_by_referral_code(self, code: str) -> WaitlistEntry | None:
        result = await self.session.execute(
            select(WaitlistEntry).where(WaitlistEntry.referral_code == code.upper())
        )
        return result.scalar_one_or_none()

    async def pending_count(self) -> int:
        count = await self.session.scalar(
            select(func.count()).select_from(WaitlistEntry).where(WaitlistEntry.status == PENDING)
        )
        return count or 0

    async def _unused_referral_code(self) -> str:
        while True:
            code = new_referral_code()
            if await self.get_by_referral_code(code) is None:
                return code

    async def join(
        self,
        email: str,
        source: str | None = None,
        referral_code: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[WaitlistEntry, bool]:
        """Add ``email`` to the waitlist.

        Returns ``(entry, created)``; ``created`` is False when the email was
        already on the list, in which case nothing is changed.
        """
        existing = await self.get_by_email(email)
        if existing is not None:
            return existing, False

        referrer = await self.get_by_referral_code(referral_code) if referral_code else None
        last_position = await self.session.scalar(select(func.max(WaitlistEntry.position)))

        entry = WaitlistEntry(
            id=str(uuid.uuid4()),
            email=normalize_email(email),
            position=(last_position or 0) + 1,
            source=source or DEFAULT_SOURCE,
            referral_code=await self._unused_referral_code(),
            referred_by=referrer.id if referrer else None,
            referral_count=0,
            status=PENDING,
            extra=metadata or {},
            created_at=datetime.now(UTC).isoformat(),
        )
        self.session.add(entry)
        try:
            await self.session.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            await self.session.rollback()
            existing = await self.get_by_email(email)
            if existing is None:
                raise
            return existing, False

        if referrer is not None:
            await self.session.execute(
                update(WaitlistEntry)
                .where(WaitlistEntry.id == referrer.id)
                .values(referral_count=WaitlistEntry.referral_count + 1)
                .execution_options(synchronize_session=False)
            )
        return entry, True
