"""Feedback board endpoints: list, submit, vote."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.api.pagination import clamp_limit
from dytto_api.app.config import settings
from dytto_api.app.db import get_db
from dytto_api.app.errors import Conflict, NotFound, RateLimited, UpstreamFailure
from dytto_api.app.models.feedback import FeedbackItem
from dytto_api.app.schemas.feedback import (
    FeedbackCreate,
    FeedbackEnvelope,
    FeedbackListEnvelope,
    FeedbackResponse,
    VoteEnvelope,
)
from dytto_api.app.services.feedback_store import DuplicateVoteError, FeedbackStore
from dytto_api.app.services.rate_limiter import RateLimiter, get_rate_limiter
from dytto_api.app.services.voter_identity import get_voter_hash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/feedback", tags=["feedback"])


def _to_response(item: FeedbackItem, user_has_voted: bool) -> FeedbackResponse:
    return FeedbackResponse.model_validate(item).model_copy(
        update={"user_has_voted": user_has_voted}
    )


# Rate limits run as dependencies so they are checked before the body is validated.


def enforce_submit_limit(
    voter_hash: str = Depends(get_voter_hash),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    if not limiter.allow(
        f"submit_{voter_hash}", settings.submit_rate_limit, settings.submit_rate_window
    ):
        logger.warning("Submit rate limit hit for voter %s", voter_hash[:12])
        raise RateLimited("Rate limit exceeded. Please wait before submitting again.")


def enforce_vote_limit(
    voter_hash: str = Depends(get_voter_hash),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> None:
    if not limiter.allow(
        f"vote_{voter_hash}", settings.vote_rate_limit, settings.vote_rate_window
    ):
        logger.warning("Vote rate limit hit for voter %s", voter_hash[:12])
        raise RateLimited("Rate limit exceeded. Please wait before voting again.")


@router.get("", response_model=FeedbackListEnvelope)
async def list_feedback(
    limit: str | None = None,
    voter_hash: str = Depends(get_voter_hash),
    db: AsyncSession = Depends(get_db),
) -> dict:
    page_size = clamp_limit(limit, settings.feedback_default_limit, settings.feedback_max_limit)
    if page_size == 0:
        return {"data": []}

    store = FeedbackStore(db)
    try:
        items = await store.list_open(page_size)
        voted = await store.voted_ids(voter_hash, (item.id for item in items))
    except SQLAlchemyError as exc:
        logger.exception("Error fetching feedback")
        raise UpstreamFailure("Failed to fetch feedback") from exc

    return {"data": [_to_response(item, item.id in voted) for item in items]}


@router.post(
    "",
    response_model=FeedbackEnvelope,
    status_code=201,
    dependencies=[Depends(enforce_submit_limit)],
)
async def submit_feedback(
    data: FeedbackCreate,
    voter_hash: str = Depends(get_voter_hash),
    db: AsyncSession = Depends(get_db),
) -> dict:
    store = FeedbackStore(db)
    try:
        item = await store.create(title=data.title, body=data.body, category=data.category)
        # The submitter's own upvote
        await store.add_vote(item.id, voter_hash)
        item = await store.get(item.id)
    except (SQLAlchemyError, DuplicateVoteError) as exc:
        logger.exception("Error creating feedback")
        raise UpstreamFailure("Failed to create feedback") from exc

    logger.info("Feedback %s created (%s)", item.id, item.category)
    return {"data": _to_response(item, True)}


@router.post(
    "/{feedback_id}/vote",
    response_model=VoteEnvelope,
    dependencies=[Depends(enforce_vote_limit)],
)
async def vote_feedback(
    feedback_id: str,
    voter_hash: str = Depends(get_voter_hash),
    db: AsyncSession = Depends(get_db),
) -> dict:
    store = FeedbackStore(db)
    try:
        if await store.get(feedback_id) is None:
            raise NotFound("Feedback not found")

        await store.add_vote(feedback_id, voter_hash)
        # Re-read for the store-maintained counter
        item = await store.get(feedback_id)
    except DuplicateVoteError as exc:
        raise Conflict("You have already voted on this feedback") from exc
    except SQLAlchemyError as exc:
        logger.exception("Error recording vote on %s", feedback_id)
        raise UpstreamFailure("Failed to record vote") from exc

    return {"data": _to_response(item, True), "message": "Vote recorded successfully"}
