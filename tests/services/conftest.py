"""Service test fixtures — async DB + FastAPI test client + seeded identities.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Foreign keys and their ON DELETE actions are enforced, as on PostgreSQL
    - get_db dependency overridden to use test DB session
    - db_manager replaced so the readiness probe sees the test engine
    - Seeded users have a profile row whose id matches their Identity

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Identities travel as gateway headers built by identity_headers(), the same
      shape a real deployment receives
"""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from codereview.core.domain_types import Identity, Role, UserId
from codereview.db.base import Base
from codereview.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from codereview.models.user import User
import codereview.infrastructure.database as db_module
from codereview.main import app
from tests.services.helpers import headers_for


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
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
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

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


@pytest.fixture
def seed_user(test_db):
    """Factory: insert a profile and return the matching Identity."""
    async def _seed(role: Role = Role.SUBMITTER, name: str = "Test User") -> Identity:
        identity = Identity(user_id=UserId(uuid4()), role=role)
        test_db.add(User(
            id=identity.user_id,
            name=name,
            email=f"{identity.user_id.hex[:12]}@example.com",
            role=role.value,
        ))
        await test_db.commit()
        return identity
    return _seed


@pytest.fixture
async def owner(seed_user):
    return await seed_user(Role.SUBMITTER, "Project Owner")


@pytest.fixture
async def member(seed_user):
    return await seed_user(Role.SUBMITTER, "Project Member")


@pytest.fixture
async def outsider(seed_user):
    return await seed_user(Role.SUBMITTER, "Outsider")


@pytest.fixture
async def reviewer(seed_user):
    return await seed_user(Role.REVIEWER, "Reviewer One")


@pytest.fixture
async def second_reviewer(seed_user):
    return await seed_user(Role.REVIEWER, "Reviewer Two")


@pytest.fixture
async def project(client, owner, member):
    """Project owned by `owner` with `member` added."""
    res = await client.post(
        "/api/v1/projects",
        json={"name": "Payments", "description": "Billing service"},
        headers=headers_for(owner),
    )
    assert res.status_code == 201
    body = res.json()
    res = await client.post(
        f"/api/v1/projects/{body['id']}/members",
        json={"user_id": str(member.user_id)},
        headers=headers_for(owner),
    )
    assert res.status_code == 201
    return body


@pytest.fixture
async def submission(client, project, member):
    """Pending submission authored by `member`."""
    res = await client.post(
        "/api/v1/submissions",
        json={"project_id": project["id"], "code": "def add(a, b):\n    return a + b\n"},
        headers=headers_for(member),
    )
    assert res.status_code == 201
    return res.json()


@pytest.fixture
def unregistered_reviewer():
    """Verified identity that has no profile row."""
    return Identity(user_id=UserId(uuid4()), role=Role.REVIEWER)
