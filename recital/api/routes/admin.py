"""Admin Routes — project statistics, user management and token issue.

Invariants:
    - Stats and the user list are visible to curators
    - Creating users, issuing tokens and deleting users require ADMIN
    - Role changes: curators may change CONTRIBUTOR/OBSERVER/MANAGER roles;
      anything touching ADMIN requires an ADMIN (enforced in the service)

Design Decisions:
    - Token issue is a POST: each call rotates the secret
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from recital.api.dependencies import require_admin, require_curator
from recital.infrastructure.database import get_db
from recital.infrastructure.file_storage import LocalFileStore, get_file_store
from recital.models.user import User
from recital.schemas.admin import (
    AdminStats, IssuedToken, UserCreate, UserDeleted, UserResponse,
    UserRoleUpdate,
)
from recital.services.admin_stats import collect_stats
from recital.services.users import UserService

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    return await collect_stats(db)


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    return await UserService(db).list_users()


@router.post(
    "/users", response_model=IssuedToken, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    user, token = await UserService(db).create(body.email, body.name, body.role)
    return IssuedToken(user=UserResponse.model_validate(user), token=token)


@router.post("/users/{user_id}/token", response_model=IssuedToken)
async def issue_token(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    user, token = await UserService(db).issue_token(user_id)
    return IssuedToken(user=UserResponse.model_validate(user), token=token)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user_role(
    user_id: UUID,
    body: UserRoleUpdate,
    db: AsyncSession = Depends(get_db),
    actor: User = Depends(require_curator),
):
    return await UserService(db).update_role(actor, user_id, body.role)


@router.delete("/users/{user_id}", response_model=UserDeleted)
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    actor: User = Depends(require_admin),
):
    deleted = await UserService(db, file_store).delete(actor, user_id)
    return UserDeleted(
        deleted_recordings=deleted,
        message=f"User deleted along with {deleted} recording(s)",
    )
