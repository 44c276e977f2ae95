"""Error Handlers — envelope, auth challenge and constraint mapping.

Invariants:
    - 401 carries WWW-Authenticate: Bearer
    - IntegrityError escaping a route -> 409 CONFLICT envelope
    - Unknown routes -> 404 RESOURCE_NOT_FOUND envelope
    - Unhandled exceptions -> 500 INTERNAL_ERROR without the exception text
    - DatabaseSessionManager maps constraint violations to ConflictError
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError

from recital.api.error_handlers import register_error_handlers
from recital.core.errors import AuthenticationError, ConflictError
from recital.infrastructure.database import DatabaseSessionManager


def _unique_violation() -> IntegrityError:
    return IntegrityError(
        "UPDATE exhibition_queue SET position=?", {},
        Exception("UNIQUE constraint failed: exhibition_queue.position"),
    )


@pytest.fixture
async def bare_client():
    """Minimal app with only the error handlers and failing routes."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/conflict")
    async def conflict():
        raise _unique_violation()

    @app.get("/anonymous")
    async def anonymous():
        raise AuthenticationError()

    @app.get("/crash")
    async def crash():
        raise RuntimeError("secret connection string")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_integrity_error_becomes_conflict(bare_client):
    res = await bare_client.get("/conflict")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"
    assert "UNIQUE" not in res.json()["error"]["message"]


async def test_authentication_error_sets_bearer_challenge(bare_client):
    res = await bare_client.get("/anonymous")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


async def test_unhandled_exception_hides_details(bare_client):
    res = await bare_client.get("/crash")
    assert res.status_code == 500
    body = res.json()["error"]
    assert body["code"] == "INTERNAL_ERROR"
    assert "secret" not in body["message"]


async def test_missing_token_on_real_route_has_challenge(client):
    res = await client.get("/api/v1/exhibition-queue")
    assert res.status_code == 401
    assert res.headers["www-authenticate"] == "Bearer"


async def test_unknown_route_uses_envelope(client):
    res = await client.get("/api/v1/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_wrong_method_uses_envelope(client):
    res = await client.put("/api/v1/health/")
    assert res.status_code == 405
    assert res.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


async def test_validation_details_split_location_and_field(client, auth_headers):
    res = await client.post(
        "/api/v1/exhibition-queue", json={"position": 1}, headers=auth_headers(),
    )
    assert res.status_code == 400
    details = res.json()["error"]["details"]
    assert {"location": "body", "field": "recording_id"} == {
        k: details[0][k] for k in ("location", "field")
    }


async def test_session_manager_maps_integrity_error():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    with pytest.raises(ConflictError) as exc_info:
        async with manager.session():
            raise _unique_violation()
    assert exc_info.value.http_status == 409
    await manager.dispose()
