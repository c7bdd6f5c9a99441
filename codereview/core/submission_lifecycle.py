"""Submission Lifecycle Rules — the pure half of the submission state machine.

Invariants:
    - INITIAL_STATUS is pending; every submission starts there
    - A decision maps to exactly one status: approved -> approved,
      changes_requested -> under_review
    - parse_* helpers are the only way raw strings become enums

Design Decisions:
    - The direct status set is NOT a transition rule: it accepts any of the four
      states from any state, so it only needs parse_status
    - Separated from the service layer so the mapping is testable without a DB
"""

from codereview.core.domain_types import Decision, Role, SubmissionStatus
from codereview.core.errors import InputValidationError


INITIAL_STATUS: SubmissionStatus = SubmissionStatus.PENDING

DECISION_TRANSITIONS: dict[Decision, SubmissionStatus] = {
    Decision.APPROVED: SubmissionStatus.APPROVED,
    Decision.CHANGES_REQUESTED: SubmissionStatus.UNDER_REVIEW,
}


def status_for_decision(decision: Decision) -> SubmissionStatus:
    """Status a submission takes after the given decision is recorded."""
    return DECISION_TRANSITIONS[Decision(decision)]


def parse_status(value: str) -> SubmissionStatus:
    try:
        return SubmissionStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in SubmissionStatus)
        raise InputValidationError(
            f"Invalid status '{value}'. Must be one of: {allowed}", "status",
        ) from None


def parse_decision(value: str) -> Decision:
    try:
        return Decision(value)
    except ValueError:
        allowed = ", ".join(d.value for d in Decision)
        raise InputValidationError(
            f"Invalid decision '{value}'. Must be one of: {allowed}", "decision",
        ) from None


def parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InputValidationError(
            f"Invalid role '{value}'. Must be 'reviewer' or 'submitter'", "role",
        ) from None


def validate_code(code: str) -> str:
    """Submitted code must contain something other than whitespace."""
    if not code or not code.strip():
        raise InputValidationError("code cannot be empty", "code")
    return code


def is_latest_entry(entry_id: object, ledger_ids: list) -> bool:
    """True when entry_id is the last element of a chronologically ordered ledger."""
    return bool(ledger_ids) and ledger_ids[-1] == entry_id
