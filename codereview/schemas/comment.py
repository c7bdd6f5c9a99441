"""Comment Schemas — line-anchored comment payloads.

Invariants:
    - line_number >= 1
    - content is 1-1000 characters (not stripped: a single space is valid content)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from codereview.core.domain_types import (
    MAX_COMMENT_LENGTH, MIN_COMMENT_LENGTH, MIN_LINE_NUMBER,
)


class CommentCreate(BaseModel):
    line_number: int = Field(ge=MIN_LINE_NUMBER)
    content: str = Field(
        min_length=MIN_COMMENT_LENGTH, max_length=MAX_COMMENT_LENGTH,
    )


class CommentUpdate(BaseModel):
    line_number: int | None = Field(None, ge=MIN_LINE_NUMBER)
    content: str | None = Field(
        None, min_length=MIN_COMMENT_LENGTH, max_length=MAX_COMMENT_LENGTH,
    )


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    submission_id: UUID
    reviewer_id: UUID
    line_number: int
    content: str
    created_at: datetime
