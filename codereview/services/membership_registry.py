"""Membership Registry — project ownership and the project <-> user membership relation.

Invariants:
    - Any authenticated identity may create a project and becomes its owner
      (a profile row is required: 401 otherwise)
    - Update, delete, and member management are owner-only
    - A (project, user) pair is added at most once -> ConflictError on repeat
    - The owner is never inserted as a member row
    - Lookup (404) always precedes the guard (403)
"""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.core.access_guard import authorize, ResourceFacts
from codereview.core.domain_types import Capability, Identity
from codereview.core.errors import ConflictError, ResourceNotFoundError
from codereview.models.project import Project
from codereview.models.project_member import ProjectMember
from codereview.services.cascades import delete_project_tree
from codereview.services.repository_helpers import (
    commit_or_conflict, get_caller_or_401, get_project_or_404, get_user_or_404,
    is_member,
)

logger = logging.getLogger(__name__)


class MembershipRegistry:
    """Projects and their members."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Projects ────────────────────────────────────────────────

    async def create_project(
        self, identity: Identity, name: str, description: str | None = None,
    ) -> Project:
        authorize(identity, Capability.CREATE_PROJECT)
        await get_caller_or_401(self.db, identity)
        project = Project(
            name=name, description=description, created_by=identity.user_id,
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)
        logger.info(
            f"Project created: {project.name}",
            extra={"project_id": project.id, "user_id": identity.user_id},
        )
        return project

    async def get_project(self, identity: Identity, project_id: UUID) -> Project:
        authorize(identity, Capability.READ)
        return await get_project_or_404(self.db, project_id)

    async def list_projects(self, identity: Identity) -> list[Project]:
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Project).order_by(Project.created_at.desc()),
        )
        return list(result.scalars().all())

    async def list_owned(self, identity: Identity) -> list[Project]:
        """Projects created by the caller."""
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Project)
            .where(Project.created_by == identity.user_id)
            .order_by(Project.created_at.desc()),
        )
        return list(result.scalars().all())

    async def list_memberships(self, identity: Identity) -> list[Project]:
        """Projects the caller has joined as a member."""
        authorize(identity, Capability.READ)
        result = await self.db.execute(
            select(Project)
            .join(ProjectMember, ProjectMember.project_id == Project.id)
            .where(ProjectMember.user_id == identity.user_id)
            .order_by(ProjectMember.joined_at.desc()),
        )
        return list(result.scalars().all())

    async def update_project(
        self,
        identity: Identity,
        project_id: UUID,
        name: str | None = None,
        description: str | None = None,
    ) -> Project:
        project = await get_project_or_404(self.db, project_id)
        authorize(
            identity, Capability.UPDATE_PROJECT,
            ResourceFacts(project_owner_id=project.created_by),
        )
        if name is not None:
            project.name = name
        if description is not None:
            project.description = description
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def delete_project(self, identity: Identity, project_id: UUID) -> None:
        project = await get_project_or_404(self.db, project_id)
        authorize(
            identity, Capability.DELETE_PROJECT,
            ResourceFacts(project_owner_id=project.created_by),
        )
        try:
            await delete_project_tree(self.db, project.id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(
            "Project deleted", extra={"project_id": project_id, "user_id": identity.user_id},
        )

    # ─── Members ─────────────────────────────────────────────────

    async def list_members(self, identity: Identity, project_id: UUID) -> list[ProjectMember]:
        authorize(identity, Capability.READ)
        await get_project_or_404(self.db, project_id)
        result = await self.db.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.joined_at),
        )
        return list(result.scalars().all())

    async def add_member(
        self, identity: Identity, project_id: UUID, user_id: UUID,
    ) -> ProjectMember:
        project = await get_project_or_404(self.db, project_id)
        authorize(
            identity, Capability.MANAGE_MEMBERS,
            ResourceFacts(project_owner_id=project.created_by),
        )
        await get_user_or_404(self.db, user_id)
        if user_id == project.created_by:
            raise ConflictError("The project owner is already part of this project")
        if await is_member(self.db, project_id, user_id):
            raise ConflictError("User is already a member of this project")

        membership = ProjectMember(project_id=project_id, user_id=user_id)
        self.db.add(membership)
        await commit_or_conflict(
            self.db, "User is already a member of this project",
        )
        await self.db.refresh(membership)
        logger.info(
            "Member added",
            extra={"project_id": project_id, "user_id": user_id},
        )
        return membership

    async def remove_member(
        self, identity: Identity, project_id: UUID, user_id: UUID,
    ) -> None:
        project = await get_project_or_404(self.db, project_id)
        authorize(
            identity, Capability.MANAGE_MEMBERS,
            ResourceFacts(project_owner_id=project.created_by),
        )
        result = await self.db.execute(
            delete(ProjectMember).where(
                ProjectMember.project_id == project_id,
                ProjectMember.user_id == user_id,
            ),
        )
        if not result.rowcount:
            await self.db.rollback()
            raise ResourceNotFoundError("Member", str(user_id))
        await self.db.commit()
        logger.info(
            "Member removed",
            extra={"project_id": project_id, "user_id": user_id},
        )
