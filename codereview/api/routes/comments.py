"""Comment Routes — inline comment threads on submissions.

Invariants:
    - Create is reviewer-only; update/delete author-only (guard in CommentThreadStore)
    - Thread reads are ordered by line, then creation time
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.api.dependencies import get_identity
from codereview.core.domain_types import Identity
from codereview.infrastructure.database import get_db
from codereview.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from codereview.services.comment_threads import CommentThreadStore

router = APIRouter(prefix="/api/v1", tags=["comments"])


@router.post(
    "/submissions/{submission_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    submission_id: UUID,
    body: CommentCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).create_comment(
        identity, submission_id, body.line_number, body.content,
    )


@router.get(
    "/submissions/{submission_id}/comments", response_model=list[CommentResponse],
)
async def list_submission_comments(
    submission_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).list_for_submission(identity, submission_id)


@router.get(
    "/submissions/{submission_id}/comments/line/{line_number}",
    response_model=list[CommentResponse],
)
async def list_line_comments(
    submission_id: UUID,
    line_number: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).list_for_line(
        identity, submission_id, line_number,
    )


@router.get("/comments", response_model=list[CommentResponse])
async def list_comments(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).list_all(identity)


@router.get("/comments/mine", response_model=list[CommentResponse])
async def list_my_comments(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).list_by_author(identity)


@router.get("/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).get_comment(identity, comment_id)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: UUID,
    body: CommentUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await CommentThreadStore(db).update_comment(
        identity, comment_id, line_number=body.line_number, content=body.content,
    )


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await CommentThreadStore(db).delete_comment(identity, comment_id)
    return {"message": "Comment deleted successfully"}
