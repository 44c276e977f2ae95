"""Request Dependencies — caller identification and role gates.

Invariants:
    - Missing or unknown bearer token -> AuthenticationError (401)
    - Known user with a role outside the allowed set -> PermissionDeniedError (403)
    - Token lookups compare sha256 digests only

Design Decisions:
    - HTTPBearer(auto_error=False): FastAPI's own 403 for a missing header is
      replaced by our 401 envelope
    - require_roles returns a dependency so each route states its roles inline
"""

from typing import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recital.core.access import hash_token, require_role
from recital.core.domain_types import CURATOR_ROLES, UserRole
from recital.core.errors import AuthenticationError
from recital.infrastructure.database import get_db
from recital.models.user import User

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    result = await db.execute(
        select(User).where(
            User.api_token_hash == hash_token(credentials.credentials),
        ),
    )
    user = result.scalar_one_or_none()
    if not user:
        raise AuthenticationError("Invalid or expired token")
    return user


def require_roles(*roles: UserRole) -> Callable:
    allowed = roles or CURATOR_ROLES

    async def _dependency(user: User = Depends(get_current_user)) -> User:
        require_role(user.role, allowed, str(user.id))
        return user

    return _dependency


require_curator = require_roles(*CURATOR_ROLES)
require_admin = require_roles(UserRole.ADMIN)
