"""Cascade Deletes — remove dependents explicitly inside the caller's transaction.

Invariants:
    - Deleting a submission removes its comments and reviews
    - Deleting a project removes its memberships, submissions, and their dependents
    - Functions only stage deletes; the caller commits (or rolls back) once

Design Decisions:
    - Explicit DELETE statements instead of relying on ON DELETE CASCADE alone:
      SQLite ignores FK actions unless PRAGMA foreign_keys is on, and the
      guarantee must hold on every store
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.models.comment import Comment
from codereview.models.project import Project
from codereview.models.project_member import ProjectMember
from codereview.models.review import Review
from codereview.models.submission import Submission


async def delete_submissions(db: AsyncSession, submission_ids: Sequence[UUID]) -> int:
    """Delete submissions and everything hanging off them. Returns count deleted."""
    if not submission_ids:
        return 0
    ids = list(submission_ids)
    await db.execute(delete(Comment).where(Comment.submission_id.in_(ids)))
    await db.execute(delete(Review).where(Review.submission_id.in_(ids)))
    result = await db.execute(delete(Submission).where(Submission.id.in_(ids)))
    return result.rowcount or 0


async def delete_project_tree(db: AsyncSession, project_id: UUID) -> None:
    """Delete a project with its memberships, submissions, reviews, comments."""
    result = await db.execute(
        select(Submission.id).where(Submission.project_id == project_id),
    )
    await delete_submissions(db, result.scalars().all())
    await db.execute(
        delete(ProjectMember).where(ProjectMember.project_id == project_id),
    )
    await db.execute(delete(Project).where(Project.id == project_id))


async def delete_user_footprint(db: AsyncSession, user_id: UUID) -> None:
    """Remove what a deleted account owns; keep ledger entries it authored.

    Owned projects and authored submissions go (with dependents), memberships and
    comments go, and review entries keep their decision with reviewer_id nulled.
    """
    owned = await db.execute(select(Project.id).where(Project.created_by == user_id))
    for project_id in owned.scalars().all():
        await delete_project_tree(db, project_id)

    authored = await db.execute(
        select(Submission.id).where(Submission.user_id == user_id),
    )
    await delete_submissions(db, authored.scalars().all())

    await db.execute(delete(ProjectMember).where(ProjectMember.user_id == user_id))
    await db.execute(delete(Comment).where(Comment.reviewer_id == user_id))
    await db.execute(
        update(Review).where(Review.reviewer_id == user_id).values(reviewer_id=None),
    )
