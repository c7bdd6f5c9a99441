"""Request Dependencies — identity resolution for every protected route.

Invariants:
    - get_identity runs before the route body and before any DB lookup
    - Header names come from settings (identity_user_header / identity_role_header)
"""

from fastapi import Request

from codereview.config import get_settings
from codereview.core.domain_types import Identity
from codereview.infrastructure.identity import parse_identity


async def get_identity(request: Request) -> Identity:
    """FastAPI dependency: the verified caller, or AuthenticationError (401)."""
    settings = get_settings()
    return parse_identity(
        request.headers.get(settings.identity_user_header),
        request.headers.get(settings.identity_role_header),
    )
