"""Project Routes — project CRUD, membership management, project submissions.

Invariants:
    - /mine and /memberships declared before /{project_id}
    - Owner-only operations enforced by MembershipRegistry via the guard
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.api.dependencies import get_identity
from codereview.core.domain_types import Identity
from codereview.infrastructure.database import get_db
from codereview.schemas.project import (
    MemberAdd, MemberResponse, ProjectCreate, ProjectResponse, ProjectUpdate,
)
from codereview.schemas.submission import SubmissionResponse
from codereview.services.membership_registry import MembershipRegistry
from codereview.services.submission_lifecycle import SubmissionLifecycleManager

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post(
    "", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).create_project(
        identity, body.name, body.description,
    )


@router.get("", response_model=list[ProjectResponse])
async def list_projects(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).list_projects(identity)


@router.get("/mine", response_model=list[ProjectResponse])
async def list_my_projects(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Projects the caller owns."""
    return await MembershipRegistry(db).list_owned(identity)


@router.get("/memberships", response_model=list[ProjectResponse])
async def list_my_memberships(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Projects the caller is a member of."""
    return await MembershipRegistry(db).list_memberships(identity)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).get_project(identity, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: UUID,
    body: ProjectUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).update_project(
        identity, project_id, name=body.name, description=body.description,
    )


@router.delete("/{project_id}")
async def delete_project(
    project_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await MembershipRegistry(db).delete_project(identity, project_id)
    return {"message": "Project deleted successfully"}


# ─── Members ─────────────────────────────────────────────────────

@router.get("/{project_id}/members", response_model=list[MemberResponse])
async def list_members(
    project_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).list_members(identity, project_id)


@router.post(
    "/{project_id}/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    project_id: UUID,
    body: MemberAdd,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await MembershipRegistry(db).add_member(
        identity, project_id, body.user_id,
    )


@router.delete("/{project_id}/members/{user_id}")
async def remove_member(
    project_id: UUID,
    user_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await MembershipRegistry(db).remove_member(identity, project_id, user_id)
    return {"message": "Member removed successfully"}


@router.get(
    "/{project_id}/submissions", response_model=list[SubmissionResponse],
)
async def list_project_submissions(
    project_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await SubmissionLifecycleManager(db).list_by_project(identity, project_id)
