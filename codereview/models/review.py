"""Review ORM — one entry of a submission's decision ledger.

Invariants:
    - Append-only; only the decision-correction path edits decision/comment
    - decision is approved | changes_requested (CHECK constraint)
    - reviewer_id is nullable: system-issued reviews, or the reviewer account was deleted
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from codereview.db.base import Base


class Review(Base):
    """Review ledger entry."""
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint(
            "decision IN ('approved', 'changes_requested')",
            name="ck_reviews_decision",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    submission_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    reviewer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    decision: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
