"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProjectId, SubmissionId, ReviewId, CommentId wrap UUIDs
    - All valid states encoded as Enums — no raw string matching
    - Identity is the only shape in which a caller reaches core logic

Design Decisions:
    - NewType over dataclass wrappers for ids: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and compare equal to the stored column values
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProjectId = NewType("ProjectId", UUID)
SubmissionId = NewType("SubmissionId", UUID)
ReviewId = NewType("ReviewId", UUID)
CommentId = NewType("CommentId", UUID)


# ─── Value Bounds ────────────────────────────────────────────────

MIN_LINE_NUMBER: int = 1
MIN_COMMENT_LENGTH: int = 1
MAX_COMMENT_LENGTH: int = 1000


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Global user role carried by the identity."""
    REVIEWER = "reviewer"
    SUBMITTER = "submitter"


class SubmissionStatus(str, Enum):
    """Submission lifecycle states — maps to DB `status` column."""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class Decision(str, Enum):
    """Outcome of a single review ledger entry."""
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes_requested"


class Capability(str, Enum):
    """Operation kinds the access guard knows how to evaluate."""
    READ = "read"
    CREATE_PROJECT = "create_project"
    UPDATE_PROJECT = "update_project"
    DELETE_PROJECT = "delete_project"
    MANAGE_MEMBERS = "manage_members"
    CREATE_SUBMISSION = "create_submission"
    UPDATE_SUBMISSION = "update_submission"
    DELETE_SUBMISSION = "delete_submission"
    FORCE_SET_STATUS = "force_set_status"
    SUBMIT_DECISION = "submit_decision"
    CORRECT_DECISION = "correct_decision"
    CREATE_COMMENT = "create_comment"
    UPDATE_COMMENT = "update_comment"
    DELETE_COMMENT = "delete_comment"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"


# ─── Caller ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Identity:
    """Verified caller, as handed over by the identity gateway."""
    user_id: UserId
    role: Role

    @property
    def is_reviewer(self) -> bool:
        return self.role == Role.REVIEWER
