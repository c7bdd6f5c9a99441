"""Review Schemas — decision requests, ledger entries, and decision results."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from codereview.core.domain_types import Decision
from codereview.schemas.submission import SubmissionResponse


class ReviewComment(BaseModel):
    """Body for the approve / request-changes shortcuts."""
    comment: str | None = Field(None, max_length=10_000)


class DecisionCreate(BaseModel):
    """Body for a generic decision and for the decision-correction path."""
    decision: Decision
    comment: str | None = Field(None, max_length=10_000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    submission_id: UUID
    reviewer_id: UUID | None = None
    decision: Decision
    comment: str
    created_at: datetime


class DecisionResult(BaseModel):
    """Ledger entry and the submission it moved, returned together."""
    review: ReviewResponse
    submission: SubmissionResponse


class ReviewerStats(BaseModel):
    reviewer_id: UUID
    total_reviews: int
    approved_count: int
    changes_requested_count: int
