"""User ORM — profile record that identities refer to.

Invariants:
    - id is UUID primary key
    - email is globally unique
    - role is 'reviewer' or 'submitter' (CHECK constraint)

Design Decisions:
    - No credential columns: hashing and token issuance live in the identity provider
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from codereview.db.base import Base


class User(Base):
    """User profile."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('reviewer', 'submitter')", name="ck_users_role",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
