"""Identity Boundary — turns gateway-verified request headers into an Identity.

Invariants:
    - Token verification happens upstream; this module only parses the verified pair
    - Missing or malformed user id / role -> AuthenticationError (401)
    - Never touches the database: identity is resolved before any resource lookup
"""

from uuid import UUID

from codereview.core.domain_types import Identity, Role, UserId
from codereview.core.errors import AuthenticationError


def parse_identity(user_id: str | None, role: str | None) -> Identity:
    """Build an Identity from raw header values or raise AuthenticationError."""
    if not user_id or not role:
        raise AuthenticationError("No identity provided. Access denied.")
    try:
        uid = UUID(user_id.strip())
    except ValueError:
        raise AuthenticationError("Invalid identity. Access denied.") from None
    try:
        parsed_role = Role(role.strip().lower())
    except ValueError:
        raise AuthenticationError("Invalid identity role. Access denied.") from None
    return Identity(user_id=UserId(uid), role=parsed_role)


def identity_headers(identity: Identity, user_header: str, role_header: str) -> dict[str, str]:
    """Inverse of parse_identity — used by clients and tests behind the gateway."""
    return {
        user_header: str(identity.user_id),
        role_header: identity.role.value,
    }
