"""Service test fixtures — async DB, seeded users/recordings and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session factory
    - get_file_store overridden to a per-test tmp directory
    - Each seeded user has a bearer token exposed through auth_headers

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the unique index on
      position is enforced per row just like PostgreSQL, so shift ordering bugs
      surface here too
    - make_recording factory over fixed fixtures: queue tests need N recordings
"""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from recital.core.access import generate_token
from recital.core.domain_types import RecordingStatus, UserRole
from recital.db.base import Base
from recital.infrastructure.database import get_db, DatabaseSessionManager
from recital.infrastructure.file_storage import LocalFileStore, get_file_store
from recital.models.exhibition_queue import ExhibitionQueueEntry
from recital.models.name_list import NameList
from recital.models.recording import Recording
from recital.models.user import User
import recital.infrastructure.database as db_module
from recital.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def file_store(tmp_path):
    return LocalFileStore(tmp_path / "uploads")


@pytest.fixture
async def client(test_engine, test_session_factory, file_store):
    """FastAPI test client with DB and storage dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_store] = lambda: file_store

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _make_user(db: AsyncSession, role: UserRole) -> tuple[User, str]:
    token, digest = generate_token()
    user = User(
        name=f"{role.value.title()} User",
        email=f"{role.value.lower()}@example.org",
        role=role.value,
        api_token_hash=digest,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user, token


@pytest.fixture
async def users(test_db):
    """One user per role: {role: (User, token)}."""
    return {role: await _make_user(test_db, role) for role in UserRole}


@pytest.fixture
def auth_headers(users):
    """auth_headers(role) -> Authorization header for that role's user."""
    def _headers(role: UserRole = UserRole.ADMIN) -> dict:
        return {"Authorization": f"Bearer {users[role][1]}"}
    return _headers


@pytest.fixture
async def name_list(test_db):
    names = ["Ada Lovelace", "Grace Hopper", "Alan Turing", "Edsger Dijkstra", "Barbara Liskov"]
    nl = NameList(title="Page 1", page_number=1, names=names, total_names=len(names))
    test_db.add(nl)
    await test_db.commit()
    await test_db.refresh(nl)
    return nl


@pytest.fixture
def make_recording(test_db, users, name_list):
    """Factory: await make_recording(status=..., title=...) -> Recording."""
    counter = {"n": 0}

    async def _make(
        status: RecordingStatus = RecordingStatus.APPROVED,
        title: str | None = None,
    ) -> Recording:
        counter["n"] += 1
        recording = Recording(
            title=title or f"Recording {counter['n']}",
            file_name=f"recording_{counter['n']}.wav",
            file_size=1024,
            mime_type="audio/wav",
            duration=15.0,
            status=status.value,
            user_id=users[UserRole.CONTRIBUTOR][0].id,
            name_list_id=name_list.id,
        )
        test_db.add(recording)
        await test_db.commit()
        await test_db.refresh(recording)
        return recording

    return _make


@pytest.fixture
def queue_state(test_db):
    """queue_state() -> [(recording_id, position), ...] ordered by position."""
    async def _state() -> list[tuple]:
        result = await test_db.execute(
            select(ExhibitionQueueEntry.recording_id, ExhibitionQueueEntry.position)
            .order_by(ExhibitionQueueEntry.position),
        )
        return [tuple(row) for row in result.all()]
    return _state
