"""Review Routes — decisions on submissions and the review ledger.

Invariants:
    - approve / request-changes / generic decision all go through
      ReviewDecisionEngine.submit_decision (one transaction per decision)
    - Decision responses carry the ledger entry AND the updated submission
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.api.dependencies import get_identity
from codereview.core.domain_types import Decision, Identity
from codereview.infrastructure.database import get_db
from codereview.schemas.review import (
    DecisionCreate, DecisionResult, ReviewComment, ReviewerStats, ReviewResponse,
)
from codereview.schemas.submission import SubmissionResponse
from codereview.services.review_decisions import DecisionOutcome, ReviewDecisionEngine

router = APIRouter(prefix="/api/v1", tags=["reviews"])


def _to_result(outcome: DecisionOutcome) -> DecisionResult:
    return DecisionResult(
        review=ReviewResponse.model_validate(outcome.review),
        submission=SubmissionResponse.model_validate(outcome.submission),
    )


@router.post("/submissions/{submission_id}/reviews", response_model=DecisionResult)
async def submit_decision(
    submission_id: UUID,
    body: DecisionCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    outcome = await ReviewDecisionEngine(db).submit_decision(
        identity, submission_id, body.decision, body.comment,
    )
    return _to_result(outcome)


@router.post("/submissions/{submission_id}/approve", response_model=DecisionResult)
async def approve_submission(
    submission_id: UUID,
    body: ReviewComment | None = None,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    outcome = await ReviewDecisionEngine(db).submit_decision(
        identity, submission_id, Decision.APPROVED, body.comment if body else None,
    )
    return _to_result(outcome)


@router.post(
    "/submissions/{submission_id}/request-changes", response_model=DecisionResult,
)
async def request_changes(
    submission_id: UUID,
    body: ReviewComment | None = None,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    outcome = await ReviewDecisionEngine(db).submit_decision(
        identity, submission_id, Decision.CHANGES_REQUESTED,
        body.comment if body else None,
    )
    return _to_result(outcome)


@router.get(
    "/submissions/{submission_id}/reviews", response_model=list[ReviewResponse],
)
async def list_reviews(
    submission_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Full ledger, oldest first."""
    return await ReviewDecisionEngine(db).list_for_submission(identity, submission_id)


@router.get(
    "/submissions/{submission_id}/reviews/latest",
    response_model=ReviewResponse | None,
)
async def latest_review(
    submission_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewDecisionEngine(db).latest_for_submission(identity, submission_id)


@router.get("/reviews/mine", response_model=list[ReviewResponse])
async def list_my_reviews(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewDecisionEngine(db).list_mine(identity)


@router.get("/reviews/stats/{reviewer_id}", response_model=ReviewerStats)
async def reviewer_stats(
    reviewer_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    tally = await ReviewDecisionEngine(db).reviewer_stats(identity, reviewer_id)
    return ReviewerStats(
        reviewer_id=tally.reviewer_id,
        total_reviews=tally.total_reviews,
        approved_count=tally.approved_count,
        changes_requested_count=tally.changes_requested_count,
    )


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await ReviewDecisionEngine(db).get_review(identity, review_id)


@router.put("/reviews/{review_id}", response_model=DecisionResult)
async def correct_decision(
    review_id: UUID,
    body: DecisionCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Decision-correction path (original reviewer only)."""
    outcome = await ReviewDecisionEngine(db).correct_decision(
        identity, review_id, body.decision, body.comment,
    )
    return _to_result(outcome)
