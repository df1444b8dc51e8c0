"""Pydantic schemas for comments."""

from datetime import datetime

from pydantic import Field, field_validator

from datadesk.db.enums import CommentCategory
from datadesk.schemas.base import ApiModel


class CommentCreate(ApiModel):
    """Request to add a comment. The author is the session user."""

    company_id: int = Field(..., gt=0)
    content: str = Field(..., min_length=1, max_length=4000)
    category: CommentCategory
    comment_date: datetime

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content must not be blank")
        return value


class CommentRead(ApiModel):
    id: int
    company_id: int
    user_id: int
    content: str
    category: CommentCategory
    comment_date: datetime
    created_at: datetime
