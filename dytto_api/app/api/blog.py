"""Public, read-only blog endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.api.pagination import clamp_limit, clamp_offset
from dytto_api.app.config import settings
from dytto_api.app.db import get_db
from dytto_api.app.errors import NotFound, UpstreamFailure
from dytto_api.app.schemas.blog import (
    BlogListEnvelope,
    BlogPostEnvelope,
    BlogPostResponse,
    BlogPostSummary,
)
from dytto_api.app.services.blog_store import BlogStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("", response_model=BlogListEnvelope)
async def list_posts(
    limit: str | None = None,
    offset: str | None = None,
    tag: str | None = None,
    search: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> dict:
    try:
        page = await BlogStore(db).list_published(
            limit=clamp_limit(limit, settings.blog_default_limit, settings.blog_max_limit),
            offset=clamp_offset(offset),
            tag=tag,
            search=search,
        )
    except SQLAlchemyError as exc:
        logger.exception("Error fetching blog posts")
        raise UpstreamFailure("Failed to fetch blog posts") from exc

    return {
        "data": [BlogPostSummary.model_validate(post) for post in page.posts],
        "total": page.total,
    }


@router.get("/{id_or_slug}", response_model=BlogPostEnvelope)
async def get_post(id_or_slug: str, db: AsyncSession = Depends(get_db)) -> dict:
    try:
        post = await BlogStore(db).get_published(id_or_slug)
    except SQLAlchemyError as exc:
        logger.exception("Error fetching blog post %s", id_or_slug)
        raise UpstreamFailure("Failed to fetch blog post") from exc

    if post is None:
        raise NotFound("Blog post not found")
    return {"data": BlogPostResponse.model_validate(post)}
