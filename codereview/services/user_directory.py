"""User Directory — profile records that verified identities point at.

Invariants:
    - A profile's id and initial role are those of the identity that registers it
    - email is globally unique -> ConflictError on duplicates (register and update)
    - Only the user themself may update or delete their profile
    - Deleting a user removes owned projects, authored submissions, memberships and
      comments; their review entries stay in the ledger with reviewer_id = NULL
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import authorize, ResourceFacts
from codereview.core.domain_types import Capability, Identity, Role
from codereview.core.errors import ConflictError
from codereview.core.submission_lifecycle import parse_role
from codereview.models.user import User
from codereview.services.cascades import delete_user_footprint
from codereview.services.repository_helpers import commit_or_conflict, get_user_or_404

logger = logging.getLogger(__name__)

_EMAIL_TAKEN = "Email already in use by another user"


class UserDirectory:
    """User profile CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _email_owner(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(self, identity: Identity, name: str, email: str) -> User:
        """Create the profile for the calling identity.

        The id and role come from the identity provider; credentials never reach
        this service.
        """
        authorize(identity, Capability.READ)
        if await self.db.get(User, identity.user_id) is not None:
            raise ConflictError("A profile already exists for this identity")
        if await self._email_owner(email):
            raise ConflictError(_EMAIL_TAKEN)
        user = User(
            id=identity.user_id, name=name, email=email, role=identity.role.value,
        )
        self.db.add(user)
        await commit_or_conflict(self.db, _EMAIL_TAKEN)
        await self.db.refresh(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def get_user(self, identity: Identity, user_id: UUID) -> User:
        authorize(identity, Capability.READ)
        return await get_user_or_404(self.db, user_id)

    async def list_users(self, identity: Identity) -> list[User]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def list_by_role(self, identity: Identity, role: str) -> list[User]:
        wanted = parse_role(role)
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(User).where(User.role == wanted.value).order_by(User.created_at),
        )
        return list(result.scalars().all())

    async def update_user(
        self,
        identity: Identity,
        user_id: UUID,
        name: str | None = None,
        email: str | None = None,
        role: Role | str | None = None,
    ) -> User:
        new_role = parse_role(role) if role is not None else None
        user = await get_user_or_404(self.db, user_id)
        authorize(identity, Capability.UPDATE_USER, ResourceFacts(author_id=user.id))

        if email is not None and email != user.email:
            holder = await self._email_owner(email)
            if holder is not None and holder.id != user.id:
                raise ConflictError(_EMAIL_TAKEN)
            user.email = email
        if name is not None:
            user.name = name
        if new_role is not None:
            user.role = new_role.value
        await commit_or_conflict(self.db, _EMAIL_TAKEN)
        await self.db.refresh(user)
        return user

    async def delete_user(self, identity: Identity, user_id: UUID) -> None:
        user = await get_user_or_404(self.db, user_id)
        authorize(identity, Capability.DELETE_USER, ResourceFacts(author_id=user.id))
        try:
            await delete_user_footprint(self.db, user.id)
            await self.db.delete(user)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("User deleted", extra={"user_id": user_id})
