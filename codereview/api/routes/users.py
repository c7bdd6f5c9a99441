"""User Routes — profile registration and self-service management.

Invariants:
    - /me and /role/{role} declared before /{user_id} so they are not parsed as ids
    - Update/delete are self-only (enforced by the guard, not here)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from codereview.api.dependencies import get_identity
from codereview.core.domain_types import Identity
from codereview.infrastructure.database import get_db
from codereview.schemas.user import UserCreate, UserResponse, UserUpdate
from codereview.services.user_directory import UserDirectory

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def register_user(
    body: UserCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Create the profile for the calling identity."""
    return await UserDirectory(db).register(identity, body.name, body.email)


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).get_user(identity, identity.user_id)


@router.get("", response_model=list[UserResponse])
async def list_users(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).list_users(identity)


@router.get("/role/{role}", response_model=list[UserResponse])
async def list_users_by_role(
    role: str,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).list_by_role(identity, role)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).get_user(identity, user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).update_user(
        identity, user_id, name=body.name, email=body.email, role=body.role,
    )


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    await UserDirectory(db).delete_user(identity, user_id)
    return {"message": "User deleted successfully"}
