"""Request helpers for service tests — gateway headers for a seeded Identity."""

from codereview.config import get_settings
from codereview.core.domain_types import Identity
from codereview.infrastructure.identity import identity_headers


def headers_for(identity: Identity) -> dict[str, str]:
    settings = get_settings()
    return identity_headers(
        identity, settings.identity_user_header, settings.identity_role_header,
    )
