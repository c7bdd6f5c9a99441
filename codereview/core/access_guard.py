"""Access Control Guard — one permission check per operation kind.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Resource facts are fetched by the caller BEFORE the guard runs, so
      "not found" is always reported ahead of "forbidden"
    - Fails closed: a capability without a rule is denied
    - require_identity runs before any resource lookup

Design Decisions:
    - Rule table keyed by Capability instead of per-route boolean checks
    - Raises AuthorizationError (not an error dict): every caller is a service
      function that wants to abort the operation
"""

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from codereview.core.domain_types import Capability, Identity
from codereview.core.errors import (
    AuthenticationError, AuthorizationError, ErrorContext,
)


@dataclass(frozen=True)
class ResourceFacts:
    """Ownership/membership facts about the target resource."""
    project_owner_id: UUID | None = None
    is_member: bool = False
    author_id: UUID | None = None


_Rule = Callable[[Identity, ResourceFacts], bool]


def _anyone(identity: Identity, facts: ResourceFacts) -> bool:
    return True


def _is_owner(identity: Identity, facts: ResourceFacts) -> bool:
    return facts.project_owner_id is not None and facts.project_owner_id == identity.user_id


def _is_author(identity: Identity, facts: ResourceFacts) -> bool:
    return facts.author_id is not None and facts.author_id == identity.user_id


def _is_reviewer(identity: Identity, facts: ResourceFacts) -> bool:
    return identity.is_reviewer


def _owner_or_member(identity: Identity, facts: ResourceFacts) -> bool:
    return _is_owner(identity, facts) or facts.is_member


def _owner_or_reviewer(identity: Identity, facts: ResourceFacts) -> bool:
    return _is_owner(identity, facts) or _is_reviewer(identity, facts)


def _author_or_owner(identity: Identity, facts: ResourceFacts) -> bool:
    return _is_author(identity, facts) or _is_owner(identity, facts)


_RULES: dict[Capability, tuple[_Rule, str]] = {
    Capability.READ: (_anyone, ""),
    Capability.CREATE_PROJECT: (_anyone, ""),
    Capability.UPDATE_PROJECT: (
        _is_owner, "Only the project owner can update the project",
    ),
    Capability.DELETE_PROJECT: (
        _is_owner, "Only the project owner can delete the project",
    ),
    Capability.MANAGE_MEMBERS: (
        _is_owner, "Only the project owner can manage members",
    ),
    Capability.CREATE_SUBMISSION: (
        _owner_or_member, "You must be a project member to submit code",
    ),
    Capability.UPDATE_SUBMISSION: (
        _is_author, "You can only update your own submissions",
    ),
    Capability.DELETE_SUBMISSION: (
        _author_or_owner,
        "Only the submission author or the project owner can delete a submission",
    ),
    Capability.FORCE_SET_STATUS: (
        _owner_or_reviewer,
        "Only the project owner or reviewers can set submission status",
    ),
    Capability.SUBMIT_DECISION: (
        _owner_or_reviewer,
        "Only the project owner or reviewers can review submissions",
    ),
    Capability.CORRECT_DECISION: (
        _is_author, "You can only correct your own reviews",
    ),
    Capability.CREATE_COMMENT: (
        _is_reviewer, "Only reviewers can add comments",
    ),
    Capability.UPDATE_COMMENT: (
        _is_author, "You can only update your own comments",
    ),
    Capability.DELETE_COMMENT: (
        _is_author, "You can only delete your own comments",
    ),
    Capability.UPDATE_USER: (
        _is_author, "You can only update your own profile",
    ),
    Capability.DELETE_USER: (
        _is_author, "You can only delete your own account",
    ),
}


def require_identity(identity: Identity | None) -> Identity:
    """Reject unauthenticated callers before anything else happens."""
    if identity is None:
        raise AuthenticationError()
    return identity


def is_permitted(
    identity: Identity, capability: Capability, facts: ResourceFacts | None = None,
) -> bool:
    """Evaluate the capability rule. Unknown capabilities are denied."""
    entry = _RULES.get(capability)
    if entry is None:
        return False
    rule, _ = entry
    return rule(identity, facts or ResourceFacts())


def authorize(
    identity: Identity | None,
    capability: Capability,
    facts: ResourceFacts | None = None,
) -> Identity:
    """Single entry point: raise unless identity may perform capability."""
    identity = require_identity(identity)
    if not is_permitted(identity, capability, facts):
        _, message = _RULES.get(capability, (None, "Access forbidden"))
        raise AuthorizationError(
            message or "Access forbidden",
            capability.value,
            ErrorContext(user_id=str(identity.user_id)),
        )
    return identity
