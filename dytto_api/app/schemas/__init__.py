from dytto_api.app.schemas.blog import (
    BlogListEnvelope,
    BlogPostEnvelope,
    BlogPostResponse,
    BlogPostSummary,
)
from dytto_api.app.schemas.feedback import (
    FeedbackCreate,
    FeedbackEnvelope,
    FeedbackListEnvelope,
    FeedbackResponse,
    VoteEnvelope,
)

__all__ = [
    "FeedbackCreate",
    "FeedbackResponse",
    "FeedbackEnvelope",
    "FeedbackListEnvelope",
    "VoteEnvelope",
    "BlogPostSummary",
    "BlogPostResponse",
    "BlogListEnvelope",
    "BlogPostEnvelope",
]
