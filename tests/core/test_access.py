"""Access Rules — token digests and role checks."""

import pytest

from recital.core.access import (
    generate_token, hash_token, require_playback, require_role,
)
from recital.core.domain_types import CURATOR_ROLES, UserRole
from recital.core.errors import PermissionDeniedError


def test_hash_token_is_stable_sha256():
    digest = hash_token("secret")
    assert digest == hash_token("secret")
    assert len(digest) == 64
    assert digest != hash_token("secret2")


def test_generate_token_returns_matching_digest():
    token, digest = generate_token()
    assert hash_token(token) == digest
    assert generate_token()[0] != token


@pytest.mark.parametrize("role", ["ADMIN", "MANAGER"])
def test_require_role_allows_curators(role):
    require_role(role, CURATOR_ROLES)


@pytest.mark.parametrize("role", ["CONTRIBUTOR", "OBSERVER", "UNKNOWN"])
def test_require_role_rejects_others(role):
    with pytest.raises(PermissionDeniedError) as exc_info:
        require_role(role, CURATOR_ROLES, user_id="u-1")
    assert exc_info.value.http_status == 403
    assert exc_info.value.context.user_id == "u-1"


def test_require_role_admin_only():
    with pytest.raises(PermissionDeniedError) as exc_info:
        require_role("MANAGER", (UserRole.ADMIN,))
    assert exc_info.value.required_roles == ["ADMIN"]


def test_playback_owner_hears_unreviewed():
    require_playback("CONTRIBUTOR", "u-1", "u-1", "UPLOADED")


def test_playback_curator_hears_anything():
    require_playback("MANAGER", "u-2", "u-1", "REJECTED")


@pytest.mark.parametrize("status", ["APPROVED", "QUEUED_FOR_EXHIBITION"])
def test_playback_public_statuses(status):
    require_playback("OBSERVER", "u-2", "u-1", status)


def test_playback_others_denied_unreviewed():
    with pytest.raises(PermissionDeniedError):
        require_playback("OBSERVER", "u-2", "u-1", "UPLOADED")
