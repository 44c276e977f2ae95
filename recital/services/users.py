"""User Service — accounts, roles and bearer token issue.

Invariants:
    - At least one ADMIN exists once bootstrapped: the last admin can be
      neither demoted nor deleted
    - Nobody deletes their own account
    - Deleting a user deletes their recordings, detaches them from the
      exhibition queue and compacts it in the same transaction; audio files
      are removed after commit
    - Only sha256 digests are stored; the raw token leaves this module once

Design Decisions:
    - Token issue rotates: issuing a new token invalidates the previous one
    - Bootstrap admin comes from settings so a fresh deployment can reach the
      admin routes without database access
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from recital.core.access import generate_token, hash_token
from recital.core.domain_types import UserId, UserRole
from recital.core.errors import (
    ConflictError, ErrorContext, InvalidStateError, PermissionDeniedError,
    ResourceNotFoundError,
)
from recital.core.repository_protocols import AudioFileStore
from recital.models.recording import Recording
from recital.models.user import User
from recital.services.exhibition_queue import ExhibitionQueueService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: AsyncSession, file_store: AudioFileStore | None = None):
        self.db = db
        self.file_store = file_store

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def get(self, user_id: UserId) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError(
                "User", str(user_id), ErrorContext(user_id=str(user_id)),
            )
        return user

    async def create(
        self, email: str, name: str | None = None,
        role: UserRole = UserRole.CONTRIBUTOR,
    ) -> tuple[User, str]:
        """New account with a first token. Returns (user, raw token)."""
        email = email.strip().lower()
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"A user with email {email} already exists")

        token, digest = generate_token()
        user = User(email=email, name=name, role=role.value, api_token_hash=digest)
        self.db.add(user)
        await self.db.commit()
        logger.info(
            f"User created with role {role.value}", extra={"user_id": str(user.id)},
        )
        return user, token

    async def issue_token(self, user_id: UserId) -> tuple[User, str]:
        """Rotate the user's bearer token."""
        user = await self.get(user_id)
        token, digest = generate_token()
        user.api_token_hash = digest
        await self.db.commit()
        logger.info("Token issued", extra={"user_id": str(user_id)})
        return user, token

    async def update_role(self, actor: User, user_id: UserId, role: UserRole) -> User:
        user = await self.get(user_id)
        granting_admin = role is UserRole.ADMIN or user.role == UserRole.ADMIN.value
        if granting_admin and actor.role != UserRole.ADMIN.value:
            raise PermissionDeniedError(
                [UserRole.ADMIN.value], ErrorContext(user_id=str(actor.id)),
            )
        if user.role == UserRole.ADMIN.value and role is not UserRole.ADMIN:
            await self._require_other_admin()

        user.role = role.value
        await self.db.commit()
        logger.info(
            f"Role set to {role.value}", extra={"user_id": str(user_id)},
        )
        return user

    async def delete(self, actor: User, user_id: UserId) -> int:
        """Delete a user and their recordings. Returns recordings deleted."""
        if actor.id == user_id:
            raise InvalidStateError("Cannot delete your own account")
        user = await self.get(user_id)
        if user.role == UserRole.ADMIN.value:
            await self._require_other_admin()

        rows = (await self.db.execute(
            select(Recording.id, Recording.file_name).where(Recording.user_id == user_id),
        )).all()
        recording_ids = [rid for rid, _ in rows]
        try:
            if recording_ids:
                await ExhibitionQueueService(self.db).detach_recordings(recording_ids)
                await self.db.execute(
                    delete(Recording)
                    .where(Recording.user_id == user_id)
                    .execution_options(synchronize_session=False),
                )
            await self.db.execute(
                delete(User)
                .where(User.id == user_id)
                .execution_options(synchronize_session=False),
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        self.db.expunge(user)

        if self.file_store is not None:
            for _, file_name in rows:
                self.file_store.delete(file_name)
        logger.info(
            f"User deleted with {len(rows)} recording(s)",
            extra={"user_id": str(user_id), "affected": len(rows)},
        )
        return len(rows)

    async def ensure_admin(self, email: str, token: str) -> User | None:
        """Create the bootstrap admin unless an admin already exists."""
        admins = await self._admin_count()
        if admins:
            return None
        email = email.strip().lower()
        user = (await self.db.execute(
            select(User).where(User.email == email),
        )).scalar_one_or_none()
        if user is None:
            user = User(email=email, name="Administrator")
            self.db.add(user)
        user.role = UserRole.ADMIN.value
        user.api_token_hash = hash_token(token)
        await self.db.commit()
        logger.info("Bootstrap admin created", extra={"user_id": str(user.id)})
        return user

    async def _admin_count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(User)
            .where(User.role == UserRole.ADMIN.value),
        )
        return result.scalar_one()

    async def _require_other_admin(self) -> None:
        if await self._admin_count() <= 1:
            raise InvalidStateError("Cannot remove the last admin user")
