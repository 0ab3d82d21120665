"""
Test infrastructure for the Jobly API.

Strategy
--------
- SQLite in-memory via aiosqlite stands in for Postgres, so the suite needs
  no running database.
- StaticPool forces every task onto the same in-memory connection; a new
  connection would see an empty database.
- SQLite ignores foreign keys unless ``PRAGMA foreign_keys=ON`` is issued on
  each connection, so a ``connect`` listener turns them on.  Job creation
  for an unknown company depends on it.
- The app's get_db dependency is overridden so every request uses the test
  session factory; the lifespan (and the production engine) never runs.
- All tables are created fresh before each test and dropped after.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import jobly.models  # noqa: F401
from jobly.database import Base, get_db
from jobly.main import app
from jobly.middleware import install_statement_counter
from jobly.services import company_service

# ---------------------------------------------------------------------------
# Test database engine - SQLite in-memory with aiosqlite
# ---------------------------------------------------------------------------

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine_test = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

install_statement_counter(engine_test)


@event.listens_for(engine_test.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async_session_test = async_sessionmaker(
    engine_test,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ---------------------------------------------------------------------------
# Dependency override - replace production get_db with the test session factory
# ---------------------------------------------------------------------------

async def override_get_db():
    async with async_session_test() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_db] = override_get_db


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after to guarantee isolation."""
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session() -> AsyncSession:
    """Yield a live AsyncSession for calling the services directly."""
    async with async_session_test() as session:
        yield session


@pytest_asyncio.fixture
async def async_client() -> AsyncClient:
    """Yield an httpx.AsyncClient wired to the FastAPI app via ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def companies(db_session: AsyncSession) -> list[dict]:
    """
    Three committed companies: c1 (1 employee), c2 (2), c3 (3).

    Committed so that HTTP tests (which use their own sessions) see them.
    """
    created = []
    for n in (1, 2, 3):
        created.append(await company_service.create_company(db_session, {
            "handle": f"c{n}",
            "name": f"C{n}",
            "description": f"Desc{n}",
            "numEmployees": n,
            "logoUrl": f"http://c{n}.img",
        }))
    await db_session.commit()
    return created
