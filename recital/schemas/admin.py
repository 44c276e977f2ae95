"""Admin Schemas — user management, token issue and project statistics.

Invariants:
    - Raw tokens appear only in IssuedToken, returned once at issue time
    - UserResponse never exposes api_token_hash
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from recital.core.domain_types import UserRole


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str | None = Field(None, max_length=200)
    role: UserRole = UserRole.CONTRIBUTOR


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str
    role: str
    created_at: datetime


class IssuedToken(BaseModel):
    """A freshly issued bearer token. Shown once; only its digest is stored."""
    user: UserResponse
    token: str


class UserDeleted(BaseModel):
    success: bool = True
    deleted_recordings: int
    message: str


class AdminStats(BaseModel):
    total_recordings: int
    recordings_by_status: dict[str, int]
    pending_recordings: int
    approved_recordings: int
    rejected_recordings: int
    queued_recordings: int
    total_users: int
    total_name_lists: int
    total_duration: float
    total_file_size: int
