"""Submission Routes — submission CRUD and the direct status set.

Invariants:
    - /mine and /status/{status} declared before /{submission_id}
    - PATCH /{id}/status is the ledger-bypassing escape hatch; decisions go
      through reviews.py instead
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.api.dependencies import get_identity
from codereview.core.domain_types import Identity
from codereview.infrastructure.database import get_db
from codereview.schemas.submission import (
    StatusUpdate, SubmissionCreate, SubmissionResponse, SubmissionUpdate,
)
from codereview.services.submission_lifecycle import SubmissionLifecycleManager

router = APIRouter(prefix="/api/v1/submissions", tags=["submissions"])


@router.post(
    "", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED,
)
async def create_submission(
    body: SubmissionCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Submit code to a project (owner or member only)."""
    return await SubmissionLifecycleManager(db).create_submission(
        identity, body.project_id, body.code,
    )


@router.get("", response_model=list[SubmissionResponse])
async def list_submissions(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await SubmissionLifecycleManager(db).list_all(identity)


@router.get("/mine", response_model=list[SubmissionResponse])
async def list_my_submissions(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await SubmissionLifecycleManager(db).list_mine(identity)


@router.get("/status/{submission_status}", response_model=list[SubmissionResponse])
async def list_submissions_by_status(
    submission_status: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await SubmissionLifecycleManager(db).list_by_status(
        identity, submission_status,
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await SubmissionLifecycleManager(db).get_submission(identity, submission_id)


@router.put("/{submission_id}", response_model=SubmissionResponse)
async def update_submission(
    submission_id: UUID,
    body: SubmissionUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Replace the submitted code (author only). Status is untouched."""
    return await SubmissionLifecycleManager(db).update_code(
        identity, submission_id, body.code,
    )


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await SubmissionLifecycleManager(db).delete_submission(identity, submission_id)
    return {"message": "Submission deleted successfully"}


@router.patch("/{submission_id}/status", response_model=SubmissionResponse)
async def force_set_status(
    submission_id: UUID,
    body: StatusUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Set status directly (owner or reviewer). Does NOT add a review entry."""
    return await SubmissionLifecycleManager(db).force_set_status(
        identity, submission_id, body.status.value,
    )
