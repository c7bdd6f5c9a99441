"""Submission Lifecycle Manager — submission records and their status transitions.

Invariants:
    - New submissions start in INITIAL_STATUS (pending); author fixed at creation
    - Creation requires owner-or-member at creation time (checked against live rows)
    - The author must have a profile row (401 otherwise); it is checked before the project
    - Code updates are author-only and never touch status
    - apply_decision() is the ONLY status write coupled to the review ledger; it
      stages the write and leaves the commit to the caller's transaction
    - force_set_status() bypasses the ledger (audit gap, logged at WARNING)
    - Deleting a submission deletes its reviews and comments in the same commit

Design Decisions:
    - force_set_status kept as a separately named operation instead of merging it
      into the decision path, so the divergence point stays visible in code and logs
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import authorize, ResourceFacts
from codereview.core.domain_types import (
    Capability, Decision, Identity, SubmissionStatus,
)
from codereview.core.submission_lifecycle import (
    INITIAL_STATUS, parse_status, status_for_decision, validate_code,
)
from codereview.models.submission import Submission
from codereview.services.cascades import delete_submissions
from codereview.services.repository_helpers import (
    get_caller_or_401, get_project_or_404, get_submission_or_404, project_facts,
)

logger = logging.getLogger(__name__)


def _touch(submission: Submission) -> None:
    submission.updated_at = datetime.now(timezone.utc)


class SubmissionLifecycleManager:
    """Owns submission rows and every write to Submission.status."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Writes ──────────────────────────────────────────────────

    async def create_submission(
        self, identity: Identity, project_id: UUID, code: str,
    ) -> Submission:
        validate_code(code)
        await get_caller_or_401(self.db, identity)
        project = await get_project_or_404(self.db, project_id)
        facts = await project_facts(self.db, project, user_id=identity.user_id)
        authorize(identity, Capability.CREATE_SUBMISSION, facts)

        submission = Submission(
            project_id=project.id,
            user_id=identity.user_id,
            code=code,
            status=INITIAL_STATUS.value,
        )
        self.db.add(submission)
        await self.db.commit()
        await self.db.refresh(submission)
        logger.info(
            "Submission created",
            extra={
                "submission_id": submission.id,
                "project_id": project.id,
                "user_id": identity.user_id,
            },
        )
        return submission

    async def update_code(
        self, identity: Identity, submission_id: UUID, code: str | None,
    ) -> Submission:
        if code is not None:
            validate_code(code)
        submission = await get_submission_or_404(self.db, submission_id)
        authorize(
            identity, Capability.UPDATE_SUBMISSION,
            ResourceFacts(author_id=submission.user_id),
        )
        if code is not None:
            submission.code = code
            _touch(submission)
        await self.db.commit()
        await self.db.refresh(submission)
        return submission

    async def delete_submission(self, identity: Identity, submission_id: UUID) -> None:
        submission = await get_submission_or_404(self.db, submission_id)
        project = await get_project_or_404(self.db, submission.project_id)
        authorize(
            identity, Capability.DELETE_SUBMISSION,
            ResourceFacts(
                project_owner_id=project.created_by, author_id=submission.user_id,
            ),
        )
        try:
            await delete_submissions(self.db, [submission.id])
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(
            "Submission deleted",
            extra={"submission_id": submission_id, "user_id": identity.user_id},
        )

    async def force_set_status(
        self, identity: Identity, submission_id: UUID, status: str,
    ) -> Submission:
        """Direct status set. Produces NO review entry — ledger and status may diverge."""
        new_status = parse_status(status)
        submission = await get_submission_or_404(self.db, submission_id)
        project = await get_project_or_404(self.db, submission.project_id)
        authorize(
            identity, Capability.FORCE_SET_STATUS,
            ResourceFacts(project_owner_id=project.created_by),
        )
        previous = submission.status
        submission.status = new_status.value
        _touch(submission)
        await self.db.commit()
        await self.db.refresh(submission)
        logger.warning(
            "Submission status set directly, bypassing review ledger",
            extra={
                "submission_id": submission.id,
                "user_id": identity.user_id,
                "previous_status": previous,
                "new_status": new_status.value,
            },
        )
        return submission

    async def apply_decision(
        self, submission: Submission, decision: Decision,
    ) -> SubmissionStatus:
        """Stage the status implied by a decision. Caller owns the transaction."""
        new_status = status_for_decision(decision)
        submission.status = new_status.value
        _touch(submission)
        await self.db.flush()
        return new_status

    # ─── Reads ───────────────────────────────────────────────────

    async def get_submission(self, identity: Identity, submission_id: UUID) -> Submission:
        authorize(identity, Capability.READ)
        return await get_submission_or_404(self.db, submission_id)

    async def list_all(self, identity: Identity) -> list[Submission]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Submission).order_by(Submission.created_at),
        )
        return list(result.scalars().all())

    async def list_by_project(self, identity: Identity, project_id: UUID) -> list[Submission]:
        authorize(identity, Capability.READ)
        await get_project_or_404(self.db, project_id)
        result = await self.db.execute(
            select(Submission)
            .where(Submission.project_id == project_id)
            .order_by(Submission.created_at),
        )
        return list(result.scalars().all())

    async def list_mine(self, identity: Identity) -> list[Submission]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Submission)
            .where(Submission.user_id == identity.user_id)
            .order_by(Submission.created_at),
        )
        return list(result.scalars().all())

    async def list_by_status(self, identity: Identity, status: str) -> list[Submission]:
        wanted = parse_status(status)
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Submission)
            .where(Submission.status == wanted.value)
            .order_by(Submission.created_at),
        )
        return list(result.scalars().all())
