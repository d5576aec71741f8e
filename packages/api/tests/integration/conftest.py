# This project was developed with assistance from AI tools.
"""Integration test fixtures -- real PostgreSQL + real MinIO, no mocks.

Session-scoped containers (started once per test run) provide real PostgreSQL
and MinIO instances. Function-scoped fixtures give each test an isolated DB
session with savepoint rollback so tests don't leak state, including tests
whose code under test calls ``commit()``.
"""

import os

import httpx
import pytest
import pytest_asyncio
from alembic import command
from alembic.config import Config
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.minio import MinioContainer
from testcontainers.postgres import PostgresContainer

import db.database as db_mod
from db import get_db
from localaid.main import app
from localaid.middleware.auth import get_current_user
from localaid.services import storage as storage_mod

pytestmark = pytest.mark.integration

_DB_PACKAGE = os.path.join(os.path.dirname(__file__), "..", "..", "..", "db")


# ---------------------------------------------------------------------------
# Session-scoped: containers + engine + migrations
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def pg_container():
    """Start postgres:16 via testcontainers."""
    with PostgresContainer(
        image="postgres:16",
        username="test",
        password="test",
        dbname="test",
    ) as pg:
        yield pg


@pytest.fixture(scope="session")
def minio_container():
    """Start minio/minio:latest via testcontainers."""
    with MinioContainer() as mc:
        yield mc


@pytest.fixture(scope="session")
def db_url(pg_container):
    """Async DB URL for asyncpg."""
    host = pg_container.get_container_host_ip()
    port = pg_container.get_exposed_port(5432)
    return f"postgresql+asyncpg://test:test@{host}:{port}/test"


@pytest.fixture(scope="session", autouse=True)
def _run_migrations(db_url):
    """alembic upgrade head against the test container."""
    alembic_cfg = Config(os.path.join(_DB_PACKAGE, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(_DB_PACKAGE, "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", db_url)
    command.upgrade(alembic_cfg, "head")


@pytest.fixture(scope="session")
def async_engine(db_url, _run_migrations):
    """Create an async engine pointing at the test container."""
    engine = create_async_engine(db_url, echo=False, poolclass=NullPool)
    yield engine


@pytest.fixture(scope="session", autouse=True)
def _patch_db_service(async_engine):
    """Point the health check's DatabaseService at the test database."""
    db_mod._db_service = db_mod.DatabaseService(async_engine)
    yield
    db_mod._db_service = None


@pytest.fixture(scope="session", autouse=True)
def _init_storage(minio_container):
    """Initialize the StorageService singleton with test MinIO."""
    host = minio_container.get_container_host_ip()
    port = minio_container.get_exposed_port(9000)

    storage_mod._service = storage_mod.StorageService(
        endpoint=f"http://{host}:{port}",
        access_key=minio_container.access_key,
        secret_key=minio_container.secret_key,
        bucket="test-localaid",
    )
    yield storage_mod._service
    storage_mod._service = None


@pytest.fixture
def storage(_init_storage):
    return _init_storage


# ---------------------------------------------------------------------------
# Function-scoped: per-test session with savepoint rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session(async_engine):
    """Per-test DB session with savepoint rollback."""
    conn = await async_engine.connect()
    txn = await conn.begin()
    session = AsyncSession(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
    yield session
    await session.close()
    await txn.rollback()
    await conn.close()


@pytest.fixture
def client_factory(db_session):
    """Factory returning an async httpx client bound to ``db_session``.

    Pass ``None`` as the user to exercise unauthenticated routes.
    """

    async def _make(user=None):
        async def _get_db():
            yield db_session

        app.dependency_overrides[get_db] = _get_db
        if user is not None:

            async def _get_current_user():
                return user

            app.dependency_overrides[get_current_user] = _get_current_user
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _make

    app.dependency_overrides.clear()
