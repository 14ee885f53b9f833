"""Read-only queries against the ``blog_posts`` table."""

import re
from dataclasses import dataclass

from sqlalchemy import Select, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from dytto_api.app.models.blog_post import BlogPost, BlogPostTag

PUBLISHED = "published"

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass
class BlogPage:
    posts: list[BlogPost]
    total: int


def looks_like_uuid(value: str) -> bool:
    return bool(_UUID_RE.match(value))


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BlogStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _published(self, tag: str | None, search: str | None) -> Select:
        query = select(BlogPost).where(BlogPost.status == PUBLISHED)
        if tag:
            query = query.where(
                BlogPost.id.in_(select(BlogPostTag.post_id).where(BlogPostTag.tag == tag))
            )
        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.where(
                or_(
                    BlogPost.title.ilike(pattern, escape="\\"),
                    BlogPost.excerpt.ilike(pattern, escape="\\"),
                    BlogPost.content.ilike(pattern, escape="\\"),
                )
            )
        return query

    async def list_published(
        self,
        limit: int,
        offset: int = 0,
        tag: str | None = None,
        search: str | None = None,
    ) -> BlogPage:
        query = self._published(tag, search)

        total = await self.session.scalar(
            select(func.count()).select_from(query.subquery())
        )
        result = await self.session.execute(
            query.order_by(desc(BlogPost.published_at), desc(BlogPost.created_at))
            .offset(offset)
            .limit(limit)
        )
        return BlogPage(posts=list(result.scalars().all()), total=total or 0)

    async def get_published(self, id_or_slug: str) -> BlogPost | None:
        """Look up by id when the value is UUID-shaped, otherwise by slug."""
        column = BlogPost.id if looks_like_uuid(id_or_slug) else BlogPost.slug
        result = await self.session.execute(
            select(BlogPost).where(column == id_or_slug, BlogPost.status == PUBLISHED)
        )
        return result.scalar_one_or_none()
