from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from dytto_api.app.db import Base


class WaitlistEntry(Base):
    __tablename__ = "waitlist_entries"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="website")
    referral_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    referred_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("waitlist_entries.id", ondelete="SET NULL"), nullable=True
    )
    referral_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # pending | invited | converted | unsubscribed
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    # "metadata" is reserved on declarative classes
    extra: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, nullable=False, default=dict)
    created_at: Mapped[str] = mapped_column(String, nullable=False)
    invited_at: Mapped[str | None] = mapped_column(String, nullable=True)
    converted_at: Mapped[str | None] = mapped_column(String, nullable=True)
