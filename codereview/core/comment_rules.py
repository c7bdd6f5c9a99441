"""Comment Field Rules — per-field validation for line-anchored comments.

Invariants:
    - line_number >= MIN_LINE_NUMBER (1)
    - MIN_COMMENT_LENGTH <= len(content) <= MAX_COMMENT_LENGTH (1..1000)
    - Validation runs before any lookup or mutation (fail fast)
"""

from codereview.core.domain_types import (
    MAX_COMMENT_LENGTH, MIN_COMMENT_LENGTH, MIN_LINE_NUMBER,
)
from codereview.core.errors import InputValidationError


def validate_line_number(line_number: int) -> int:
    if isinstance(line_number, bool) or not isinstance(line_number, int):
        raise InputValidationError("line_number must be an integer", "line_number")
    if line_number < MIN_LINE_NUMBER:
        raise InputValidationError(
            f"line_number must be >= {MIN_LINE_NUMBER}", "line_number",
        )
    return line_number


def validate_content(content: str) -> str:
    if not isinstance(content, str):
        raise InputValidationError("content must be a string", "content")
    if not MIN_COMMENT_LENGTH <= len(content) <= MAX_COMMENT_LENGTH:
        raise InputValidationError(
            f"content must be {MIN_COMMENT_LENGTH}-{MAX_COMMENT_LENGTH} characters",
            "content",
        )
    return content


def validate_comment_fields(
    line_number: int | None = None, content: str | None = None,
) -> dict:
    """Validate whichever fields are present. Returns only the provided ones."""
    updates: dict = {}
    if line_number is not None:
        updates["line_number"] = validate_line_number(line_number)
    if content is not None:
        updates["content"] = validate_content(content)
    return updates
