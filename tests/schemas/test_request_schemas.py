"""Request schemas — boundary validation before any service code runs.

Invariants:
    - Comment line_number >= 1, content 1-1000 chars
    - Status and decision fields only accept their enum values
    - Profile names are stripped and must keep at least 2 characters
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from codereview.core.domain_types import Decision, SubmissionStatus
from codereview.schemas.comment import CommentCreate, CommentUpdate
from codereview.schemas.project import ProjectCreate, ProjectUpdate
from codereview.schemas.review import DecisionCreate
from codereview.schemas.submission import StatusUpdate, SubmissionCreate
from codereview.schemas.user import UserCreate, UserUpdate


# --- Comments -----------------------------------------------------------------

def test_comment_bounds_accepted():
    assert CommentCreate(line_number=1, content="x").line_number == 1
    assert len(CommentCreate(line_number=5, content="a" * 1000).content) == 1000


@pytest.mark.parametrize("payload", [
    {"line_number": 0, "content": "typo"},
    {"line_number": 3, "content": ""},
    {"line_number": 3, "content": "a" * 1001},
])
def test_comment_out_of_bounds_rejected(payload):
    with pytest.raises(ValidationError):
        CommentCreate(**payload)


def test_comment_update_is_partial():
    update = CommentUpdate(content="reworded")
    assert update.line_number is None
    assert update.model_dump(exclude_none=True) == {"content": "reworded"}


# --- Submissions / decisions --------------------------------------------------

def test_status_update_accepts_enum_values_only():
    assert StatusUpdate(status="rejected").status is SubmissionStatus.REJECTED
    with pytest.raises(ValidationError):
        StatusUpdate(status="merged")


def test_submission_requires_code():
    with pytest.raises(ValidationError):
        SubmissionCreate(project_id=uuid4(), code="")


def test_decision_create_parses_decision():
    body = DecisionCreate(decision="changes_requested")
    assert body.decision is Decision.CHANGES_REQUESTED
    assert body.comment is None
    with pytest.raises(ValidationError):
        DecisionCreate(decision="rejected")


# --- Projects / users ---------------------------------------------------------

def test_project_name_stripped():
    assert ProjectCreate(name="  Core  ").name == "Core"
    with pytest.raises(ValidationError):
        ProjectCreate(name="   ")


def test_user_create_validates_email_and_name():
    user = UserCreate(name="  Ada ", email="ada@example.com")
    assert user.name == "Ada"
    with pytest.raises(ValidationError):
        UserCreate(name="Ada", email="not-an-email")
    with pytest.raises(ValidationError):
        UserCreate(name=" A ", email="ada@example.com")


def test_project_update_name_stripped_and_not_blank():
    assert ProjectUpdate(name=" Ledger ").name == "Ledger"
    assert ProjectUpdate(description="only this").name is None
    with pytest.raises(ValidationError):
        ProjectUpdate(name="   ")


def test_user_update_name_length_checked_after_strip():
    assert UserUpdate(name="  Ada ").name == "Ada"
    assert UserUpdate(email="ada@example.com").name is None
    with pytest.raises(ValidationError):
        UserUpdate(name=" a ")
