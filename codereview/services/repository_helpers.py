"""Repository Helpers — shared lookups, membership facts, and commit handling.

Invariants:
    - get_*_or_404 raise ResourceNotFoundError; callers look up BEFORE authorizing
    - get_caller_or_401 runs before any lookup when the write stores the caller's id
    - commit_or_conflict maps IntegrityError to ConflictError and rolls back first
    - Nothing here decides permissions (that is core/access_guard.py)
"""

import logging
from typing import TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import ResourceFacts
from codereview.core.domain_types import Identity
from codereview.core.errors import (
    AuthenticationError, ConflictError, ResourceNotFoundError,
)
from codereview.db.base import Base
from codereview.models.comment import Comment
from codereview.models.project import Project
from codereview.models.project_member import ProjectMember
from codereview.models.review import Review
from codereview.models.submission import Submission
from codereview.models.user import User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def _get_or_404(
    db: AsyncSession, model: type[ModelT], resource_type: str, resource_id: UUID,
) -> ModelT:
    result = await db.execute(select(model).where(model.id == resource_id))
    obj = result.scalar_one_or_none()
    if obj is None:
        raise ResourceNotFoundError(resource_type, str(resource_id))
    return obj


async def get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    return await _get_or_404(db, User, "User", user_id)


async def get_caller_or_401(db: AsyncSession, identity: Identity) -> User:
    """Profile row of the caller. Rows that reference users.id need one to exist."""
    result = await db.execute(select(User).where(User.id == identity.user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationError(
            "No user profile for this identity. Register via POST /api/v1/users first.",
        )
    return user


async def get_project_or_404(db: AsyncSession, project_id: UUID) -> Project:
    return await _get_or_404(db, Project, "Project", project_id)


async def get_submission_or_404(db: AsyncSession, submission_id: UUID) -> Submission:
    return await _get_or_404(db, Submission, "Submission", submission_id)


async def get_review_or_404(db: AsyncSession, review_id: UUID) -> Review:
    return await _get_or_404(db, Review, "Review", review_id)


async def get_comment_or_404(db: AsyncSession, comment_id: UUID) -> Comment:
    return await _get_or_404(db, Comment, "Comment", comment_id)


async def is_member(db: AsyncSession, project_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(
        select(ProjectMember.id).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        ),
    )
    return result.first() is not None


async def project_facts(
    db: AsyncSession,
    project: Project,
    user_id: UUID | None = None,
    author_id: UUID | None = None,
) -> ResourceFacts:
    """Ownership facts for a project; membership looked up only when asked."""
    member = False
    if user_id is not None and user_id != project.created_by:
        member = await is_member(db, project.id, user_id)
    return ResourceFacts(
        project_owner_id=project.created_by, is_member=member, author_id=author_id,
    )


async def commit_or_conflict(db: AsyncSession, conflict_message: str) -> None:
    """Commit; a uniqueness violation becomes ConflictError."""
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity violation on commit: {e.orig}")
        raise ConflictError(conflict_message) from None
