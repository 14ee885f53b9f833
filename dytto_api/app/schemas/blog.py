"""Blog schemas."""

from pydantic import BaseModel, ConfigDict


class BlogPostSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    excerpt: str | None = None
    author: str
    tags: list[str] = []
    featured_image: str | None = None
    published_at: str | None = None
    created_at: str
    updated_at: str


class BlogPostResponse(BlogPostSummary):
    content: str
    status: str


class BlogListEnvelope(BaseModel):
    data: list[BlogPostSummary]
    total: int


class BlogPostEnvelope(BaseModel):
    data: BlogPostResponse
