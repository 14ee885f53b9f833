"""Waitlist schemas."""

from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, StrictStr


class WaitlistSignup(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr
    source: Annotated[StrictStr, Field(max_length=100)] | None = None
    referral_code: Annotated[StrictStr, Field(max_length=16)] | None = None
    metadata: dict[str, Any] | None = None


class WaitlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    position: int
    source: str
    referral_code: str
    referred_by: str | None = None
    referral_count: int = 0
    status: str
    metadata: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("extra", "metadata")
    )
    created_at: str
    invited_at: str | None = None
    converted_at: str | None = None


class WaitlistEnvelope(BaseModel):
    data: WaitlistEntryResponse
    position: int


class WaitlistStats(BaseModel):
    total: int


class WaitlistStatsEnvelope(BaseModel):
    data: WaitlistStats
