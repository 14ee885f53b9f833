"""Feedback schemas."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

Category = Literal["bug", "idea", "ux"]


class FeedbackCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: StrictStr = Field(min_length=3, max_length=200)
    body: Annotated[StrictStr, Field(max_length=1000)] | None = None
    category: Category

    @field_validator("body")
    @classmethod
    def _blank_body_is_none(cls, value: str | None) -> str | None:
        return value or None


class FeedbackResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    body: str | None = None
    category: str
    status: str
    upvotes: int = 0
    created_at: str
    user_has_voted: bool = False


class FeedbackListEnvelope(BaseModel):
    data: list[FeedbackResponse]


class FeedbackEnvelope(BaseModel):
    data: FeedbackResponse


class VoteEnvelope(BaseModel):
    data: FeedbackResponse
    message: str
