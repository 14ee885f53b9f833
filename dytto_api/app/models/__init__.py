from dytto_api.app.models.feedback import FeedbackItem, Vote
from dytto_api.app.models.blog_post import BlogPost, BlogPostTag
from dytto_api.app.models.waitlist import WaitlistEntry

__all__ = [
    "FeedbackItem",
    "Vote",
    "BlogPost",
    "BlogPostTag",
    "WaitlistEntry",
]
