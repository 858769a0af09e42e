"""Pydantic request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.domain.entities import ContentType, InteractionType


# ── Content ────────────────────────────────────────


class ContentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    type: ContentType
    tags: list[str]
    popularity: int
    created_at: datetime


class ContentPageResponse(BaseModel):
    content: list[ContentResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class RatingResponse(BaseModel):
    rating: float | None
    rating_count: int


# ── Interactions ───────────────────────────────────


class InteractionCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    content_id: str = Field(..., min_length=1)
    type: InteractionType
    duration: float | None = Field(None, ge=0)
    comment: str | None = None
    rating: int | None = Field(None, ge=1, le=5)

    @model_validator(mode="after")
    def check_type_payload(self) -> "InteractionCreateRequest":
        if self.type is InteractionType.VIEW and self.duration is None:
            raise ValueError("duration is required for view interactions")
        if self.type is InteractionType.COMMENT and not self.comment:
            raise ValueError("comment is required for comment interactions")
        if self.type is InteractionType.RATING and self.rating is None:
            raise ValueError("rating is required for rating interactions")
        return self


class InteractionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    content_id: str
    type: InteractionType
    timestamp: datetime
    duration: float | None = None
    comment: str | None = None
    rating: int | None = None
