"""Access Rules — bearer token hashing and role checks.

Invariants:
    - Tokens are compared by sha256 digest only; raw tokens never reach the DB
    - require_role raises PermissionDeniedError, never returns False

Design Decisions:
    - Role check in core: routes declare the allowed roles, core decides
    - Playback is wider than curation: approved audio feeds the exhibition,
      so any signed-in user may stream it
"""

import hashlib
import secrets

from recital.core.domain_types import CURATOR_ROLES, RecordingStatus, UserRole
from recital.core.errors import PermissionDeniedError, ErrorContext


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_token() -> tuple[str, str]:
    """New (token, digest) pair. Hand the token out once, store the digest."""
    token = secrets.token_urlsafe(32)
    return token, hash_token(token)


def require_role(
    role: str, allowed: tuple[UserRole, ...], user_id: str | None = None,
) -> None:
    if role not in {r.value for r in allowed}:
        raise PermissionDeniedError(
            [r.value for r in allowed], ErrorContext(user_id=user_id),
        )


PUBLIC_PLAYBACK_STATUSES: frozenset[str] = frozenset({
    RecordingStatus.APPROVED.value,
    RecordingStatus.QUEUED_FOR_EXHIBITION.value,
})


def require_playback(
    role: str, user_id: str, owner_id: str, recording_status: str,
) -> None:
    """Owners and curators hear anything; others only approved recordings."""
    if user_id == owner_id or role in {r.value for r in CURATOR_ROLES}:
        return
    if recording_status in PUBLIC_PLAYBACK_STATUSES:
        return
    raise PermissionDeniedError(
        [r.value for r in CURATOR_ROLES], ErrorContext(user_id=user_id),
    )
