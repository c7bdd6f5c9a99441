"""Identity Boundary — verifies header parsing into a verified Identity."""

from uuid import uuid4

import pytest

from codereview.core.domain_types import Identity, Role
from codereview.core.errors import AuthenticationError
from codereview.infrastructure.identity import identity_headers, parse_identity


def test_parses_valid_pair():
    uid = uuid4()
    who = parse_identity(str(uid), "Reviewer")
    assert who == Identity(user_id=uid, role=Role.REVIEWER)


@pytest.mark.parametrize("user_id,role", [
    (None, "reviewer"),
    ("", "reviewer"),
    (str(uuid4()), None),
])
def test_missing_values_are_unauthenticated(user_id, role):
    with pytest.raises(AuthenticationError):
        parse_identity(user_id, role)


def test_malformed_user_id():
    with pytest.raises(AuthenticationError, match="Invalid identity"):
        parse_identity("not-a-uuid", "submitter")


def test_unknown_role():
    with pytest.raises(AuthenticationError, match="role"):
        parse_identity(str(uuid4()), "admin")


def test_headers_round_trip():
    who = Identity(user_id=uuid4(), role=Role.SUBMITTER)
    headers = identity_headers(who, "X-User-Id", "X-User-Role")
    assert parse_identity(headers["X-User-Id"], headers["X-User-Role"]) == who
