"""Review Decision Engine — the append-only review ledger and its status coupling.

Invariants:
    - submit_decision: caller profile 401 -> submission 404 -> project 404 -> guard 403 -> write
    - The Review insert and the Submission.status write commit together or not at all
    - Submission.status reflects only the most recent decision (last write wins)
    - correct_decision is the only path that edits a ledger entry; it re-derives
      the status only when the corrected entry is the latest one

Design Decisions:
    - Ledger order is (created_at, id) so equal timestamps still order deterministically
    - The engine never writes Submission.status itself; it delegates to
      SubmissionLifecycleManager.apply_decision inside its own transaction
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import authorize, ResourceFacts
from codereview.core.domain_types import Capability, Decision, Identity
from codereview.core.submission_lifecycle import is_latest_entry, parse_decision
from codereview.models.review import Review
from codereview.models.submission import Submission
from codereview.services.repository_helpers import (
    get_caller_or_401, get_project_or_404, get_review_or_404, get_submission_or_404,
)
from codereview.services.submission_lifecycle import SubmissionLifecycleManager

logger = logging.getLogger(__name__)


@dataclass
class DecisionOutcome:
    """Created (or corrected) ledger entry plus the submission after the write."""
    review: Review
    submission: Submission


@dataclass
class ReviewerTally:
    reviewer_id: UUID
    total_reviews: int
    approved_count: int
    changes_requested_count: int


class ReviewDecisionEngine:
    """Records decisions and keeps submission status consistent with them."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.lifecycle = SubmissionLifecycleManager(db)

    async def submit_decision(
        self,
        identity: Identity,
        submission_id: UUID,
        decision: Decision | str,
        comment: str | None = None,
    ) -> DecisionOutcome:
        decision = parse_decision(decision)
        await get_caller_or_401(self.db, identity)
        submission = await get_submission_or_404(self.db, submission_id)
        project = await get_project_or_404(self.db, submission.project_id)
        authorize(
            identity, Capability.SUBMIT_DECISION,
            ResourceFacts(project_owner_id=project.created_by),
        )

        try:
            review = Review(
                submission_id=submission.id,
                reviewer_id=identity.user_id,
                decision=decision.value,
                comment=comment or "",
            )
            self.db.add(review)
            await self.db.flush()
            await self.lifecycle.apply_decision(submission, decision)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(
                "Decision rolled back",
                extra={"submission_id": submission_id, "user_id": identity.user_id},
            )
            raise

        await self.db.refresh(review)
        await self.db.refresh(submission)
        logger.info(
            f"Decision recorded: {decision.value}",
            extra={
                "review_id": review.id,
                "submission_id": submission.id,
                "user_id": identity.user_id,
                "new_status": submission.status,
            },
        )
        return DecisionOutcome(review=review, submission=submission)

    async def correct_decision(
        self,
        identity: Identity,
        review_id: UUID,
        decision: Decision | str,
        comment: str | None = None,
    ) -> DecisionOutcome:
        """Edit an existing ledger entry. Only its reviewer may do so."""
        decision = parse_decision(decision)
        review = await get_review_or_404(self.db, review_id)
        submission = await get_submission_or_404(self.db, review.submission_id)
        authorize(
            identity, Capability.CORRECT_DECISION,
            ResourceFacts(author_id=review.reviewer_id),
        )

        try:
            review.decision = decision.value
            if comment is not None:
                review.comment = comment
            await self.db.flush()
            ledger = await self._ledger_ids(submission.id)
            if is_latest_entry(review.id, ledger):
                await self.lifecycle.apply_decision(submission, decision)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(review)
        await self.db.refresh(submission)
        logger.info(
            f"Decision corrected: {decision.value}",
            extra={"review_id": review.id, "submission_id": submission.id},
        )
        return DecisionOutcome(review=review, submission=submission)

    # ─── Reads ───────────────────────────────────────────────────

    async def list_for_submission(
        self, identity: Identity, submission_id: UUID,
    ) -> list[Review]:
        authorize(identity, Capability.READ)
        await get_submission_or_404(self.db, submission_id)
        result = await self.db.execute(
            select(Review)
            .where(Review.submission_id == submission_id)
            .order_by(Review.created_at, Review.id),
        )
        return list(result.scalars().all())

    async def latest_for_submission(
        self, identity: Identity, submission_id: UUID,
    ) -> Review | None:
        reviews = await self.list_for_submission(identity, submission_id)
        return reviews[-1] if reviews else None

    async def get_review(self, identity: Identity, review_id: UUID) -> Review:
        authorize(identity, Capability.READ)
        return await get_review_or_404(self.db, review_id)

    async def list_mine(self, identity: Identity) -> list[Review]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Review)
            .where(Review.reviewer_id == identity.user_id)
            .order_by(Review.created_at.desc()),
        )
        return list(result.scalars().all())

    async def reviewer_stats(self, identity: Identity, reviewer_id: UUID) -> ReviewerTally:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(
                func.count(Review.id),
                func.count(case((Review.decision == Decision.APPROVED.value, 1))),
                func.count(
                    case((Review.decision == Decision.CHANGES_REQUESTED.value, 1)),
                ),
            ).where(Review.reviewer_id == reviewer_id),
        )
        total, approved, changes = result.one()
        return ReviewerTally(
            reviewer_id=reviewer_id,
            total_reviews=total or 0,
            approved_count=approved or 0,
            changes_requested_count=changes or 0,
        )

    async def _ledger_ids(self, submission_id: UUID) -> list[UUID]:
        result = await self.db.execute(
            select(Review.id)
            .where(Review.submission_id == submission_id)
            .order_by(Review.created_at, Review.id),
        )
        return list(result.scalars().all())
