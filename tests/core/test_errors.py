"""Error Hierarchy — status codes, categories and the response envelope.

Tests cover:
    - each domain error maps to its HTTP status and code
    - to_response() carries the context ids
    - infrastructure errors are critical
"""

import pytest

from recital.core.errors import (
    AuthenticationError, ConflictError, DatabaseError, ErrorCategory,
    ErrorContext, ErrorSeverity, InvalidArgumentError, InvalidStateError,
    PermissionDeniedError, RecitalError, ResourceNotFoundError,
)


@pytest.mark.parametrize(
    "error, status, code",
    [
        (ResourceNotFoundError("Recording", "r1"), 404, "RESOURCE_NOT_FOUND"),
        (InvalidStateError("not approved"), 400, "INVALID_STATE"),
        (ConflictError("already queued"), 409, "CONFLICT"),
        (InvalidArgumentError("out of range", "position"), 400, "INVALID_ARGUMENT"),
        (AuthenticationError(), 401, "UNAUTHENTICATED"),
        (PermissionDeniedError(["ADMIN"]), 403, "FORBIDDEN"),
        (DatabaseError("timeout", "execute"), 503, "DATABASE_ERROR"),
    ],
)
def test_status_and_code(error, status, code):
    assert isinstance(error, RecitalError)
    assert error.http_status == status
    assert error.code == code


def test_not_found_message_names_resource():
    error = ResourceNotFoundError("Queue entry", "e1")
    assert error.message == "Queue entry 'e1' not found"
    assert error.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_to_response_envelope():
    error = ConflictError(
        "Recording is already in the exhibition queue",
        ErrorContext(entry_id="e1", recording_id="r1"),
    )
    body = error.to_response()["error"]
    assert body["code"] == "CONFLICT"
    assert body["category"] == "conflict"
    assert body["context"] == {"entry_id": "e1", "recording_id": "r1"}
    assert "timestamp" in body


def test_database_error_is_critical():
    error = DatabaseError("lost connection", "commit")
    assert error.severity is ErrorSeverity.CRITICAL
    assert error.message == "Database commit failed: lost connection"


def test_invalid_argument_keeps_field():
    assert InvalidArgumentError("bad", "position").field == "position"


def test_only_authentication_error_carries_challenge():
    assert AuthenticationError().headers == {"WWW-Authenticate": "Bearer"}
    assert PermissionDeniedError(["ADMIN"]).headers is None
