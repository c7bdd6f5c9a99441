"""Comment Thread Store — line-anchored comments scoped to a submission.

Invariants:
    - Field validation (line >= 1, content 1..1000) runs before any lookup
    - Only role=reviewer may create; only the author may update or delete
    - The creating reviewer must have a profile row (401 otherwise)
    - Thread reads are ordered by line_number, then created_at
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import authorize, ResourceFacts
from codereview.core.comment_rules import (
    validate_comment_fields, validate_content, validate_line_number,
)
from codereview.core.domain_types import Capability, Identity
from codereview.models.comment import Comment
from codereview.services.repository_helpers import (
    get_caller_or_401, get_comment_or_404, get_submission_or_404,
)

logger = logging.getLogger(__name__)

_THREAD_ORDER = (Comment.line_number, Comment.created_at, Comment.id)


class CommentThreadStore:
    """Inline review comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_comment(
        self,
        identity: Identity,
        submission_id: UUID,
        line_number: int,
        content: str,
    ) -> Comment:
        validate_line_number(line_number)
        validate_content(content)
        await get_caller_or_401(self.db, identity)
        submission = await get_submission_or_404(self.db, submission_id)
        authorize(identity, Capability.CREATE_COMMENT)

        comment = Comment(
            submission_id=submission.id,
            reviewer_id=identity.user_id,
            line_number=line_number,
            content=content,
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)
        logger.info(
            f"Comment added on line {line_number}",
            extra={
                "comment_id": comment.id,
                "submission_id": submission.id,
                "user_id": identity.user_id,
            },
        )
        return comment

    async def update_comment(
        self,
        identity: Identity,
        comment_id: UUID,
        line_number: int | None = None,
        content: str | None = None,
    ) -> Comment:
        updates = validate_comment_fields(line_number=line_number, content=content)
        comment = await get_comment_or_404(self.db, comment_id)
        authorize(
            identity, Capability.UPDATE_COMMENT,
            ResourceFacts(author_id=comment.reviewer_id),
        )
        for field, value in updates.items():
            setattr(comment, field, value)
        await self.db.commit()
        await self.db.refresh(comment)
        return comment

    async def delete_comment(self, identity: Identity, comment_id: UUID) -> None:
        comment = await get_comment_or_404(self.db, comment_id)
        authorize(
            identity, Capability.DELETE_COMMENT,
            ResourceFacts(author_id=comment.reviewer_id),
        )
        await self.db.delete(comment)
        await self.db.commit()
        logger.info(
            "Comment deleted",
            extra={"comment_id": comment_id, "user_id": identity.user_id},
        )

    # ─── Reads ───────────────────────────────────────────────────

    async def list_for_submission(
        self, identity: Identity, submission_id: UUID,
    ) -> list[Comment]:
        authorize(identity, Capability.READ)
        await get_submission_or_404(self.db, submission_id)
        result = await self.db.execute(
            select(Comment)
            .where(Comment.submission_id == submission_id)
            .order_by(*_THREAD_ORDER),
        )
        return list(result.scalars().all())

    async def list_for_line(
        self, identity: Identity, submission_id: UUID, line_number: int,
    ) -> list[Comment]:
        validate_line_number(line_number)
        authorize(identity, Capability.READ)
        await get_submission_or_404(self.db, submission_id)
        result = await self.db.execute(
            select(Comment)
            .where(
                Comment.submission_id == submission_id,
                Comment.line_number == line_number,
            )
            .order_by(*_THREAD_ORDER),
        )
        return list(result.scalars().all())

    async def list_by_author(self, identity: Identity) -> list[Comment]:
        """Comments written by the caller."""
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Comment)
            .where(Comment.reviewer_id == identity.user_id)
            .order_by(Comment.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_comment(self, identity: Identity, comment_id: UUID) -> Comment:
        authorize(identity, Capability.READ)
        return await get_comment_or_404(self.db, comment_id)

    async def list_all(self, identity: Identity) -> list[Comment]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Comment).order_by(Comment.created_at.desc()),
        )
        return list(result.scalars().all())
