"""Waitlist signup endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.db import get_db
from dytto_api.app.errors import NotFound, UpstreamFailure
from dytto_api.app.schemas.waitlist import (
    WaitlistEntryResponse,
    WaitlistEnvelope,
    WaitlistSignup,
    WaitlistStatsEnvelope,
)
from dytto_api.app.services.waitlist_store import WaitlistStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/waitlist", tags=["waitlist"])


@router.post(
    "",
    response_model=WaitlistEnvelope,
    status_code=201,
    responses={200: {"model": WaitlistEnvelope, "description": "Already on the waitlist"}},
)
async def join_waitlist(
    data: WaitlistSignup, db: AsyncSession = Depends(get_db)
) -> WaitlistEnvelope | JSONResponse:
    store = WaitlistStore(db)
    try:
        entry, created = await store.join(
            email=str(data.email),
            source=data.source,
            referral_code=data.referral_code,
            metadata=data.metadata,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error joining waitlist")
        raise UpstreamFailure("Failed to join waitlist") from exc

    envelope = WaitlistEnvelope(
        data=WaitlistEntryResponse.model_validate(entry), position=entry.position
    )
    if created:
        logger.info("Waitlist signup #%d (%s)", entry.position, entry.source)
        return envelope
    return JSONResponse(status_code=200, content=envelope.model_dump(mode="json"))


@router.get("/stats", response_model=WaitlistStatsEnvelope)
async def waitlist_stats(db: AsyncSession = Depends(get_db)) -> dict:
    try:
        total = await WaitlistStore(db).pending_count()
    except SQLAlchemyError as exc:
        logger.exception("Error getting waitlist stats")
        raise UpstreamFailure("Failed to fetch waitlist stats") from exc
    return {"data": {"total": total}}


@router.get("/{email}", response_model=WaitlistEnvelope)
async def get_waitlist_entry(email: str, db: AsyncSession = Depends(get_db)) -> dict:
    try:
        entry = await WaitlistStore(db).get_by_email(email)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching waitlist entry")
        raise UpstreamFailure("Failed to fetch waitlist entry") from exc

    if entry is None:
        raise NotFound("Waitlist entry not found")
    return {"data": WaitlistEntryResponse.model_validate(entry), "position": entry.position}
