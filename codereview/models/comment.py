"""Comment ORM — a reviewer note anchored to one line of a submission.

Invariants:
    - line_number >= 1 (CHECK constraint)
    - 1 <= len(content) <= 1000, validated in core/comment_rules.py
    - reviewer_id (author) is fixed at creation
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Integer, String, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from codereview.db.base import Base


class Comment(Base):
    """Line-anchored comment."""
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint("line_number >= 1", name="ck_comments_line_number"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    submission_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(String(1000), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
