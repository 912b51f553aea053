import os
import uuid

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOG_FILE", os.devnull)

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.ai_feature.service import get_generation_client
from app.core.chat.retrieval import RetrievalError
from app.core.security import create_access_token, hash_password
from app.main import app
from app.core import models
from app.core.database import Base, get_db

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def make_engine():
    # One shared in-memory connection so every session sees the same tables
    return create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


class FakeGenerator:
    """Stands in for the Gemini client and remembers every prompt it got."""

    def __init__(self, reply="Here is what the data says.", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


class FakeExecutor:
    """
    In-memory QueryExecutor.
    rows: {table: [row, ...]} returned as-is for any predicate set.
    stored: {(table, column): {values}} answered by value_exists.
    """

    def __init__(self, rows=None, stored=None, failing_probes=()):
        self.rows = rows or {}
        self.stored = stored or {}
        self.failing_probes = set(failing_probes)
        self.fetched = []
        self.probes = []

    async def fetch_rows(self, predicates, limit=None):
        self.fetched.append(predicates)
        if limit is None:
            limit = 5
        return list(self.rows.get(predicates.table, []))[:limit]

    async def value_exists(self, table, column, value):
        self.probes.append((table, column))
        if (table, column) in self.failing_probes:
            raise RetrievalError(f"probe on {table}.{column} failed")
        return value in self.stored.get((table, column), set())


# Fresh database for every test
@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine):
    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_generator():
    return FakeGenerator()


# Client
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, fake_generator: FakeGenerator):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_client] = lambda: fake_generator

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# Statistics rows
async def add_row(db_session: AsyncSession, model, **values):
    await db_session.execute(insert(model.__table__).values(**values))


@pytest_asyncio.fixture(scope="function")
async def seeded_db(db_session: AsyncSession):
    """
    baselinedata: Fufore 2021 + 2022, Maiduguri 2021
    needsdata:    Fufore Health 2021, Maiduguri WASH 2022
    severitydata: Maiduguri Health 2021
    """
    await add_row(
        db_session,
        models.BaselineData,
        Response_Year=2021,
        State="Adamawa",
        State_Pcode="NG002",
        LGA="Fufore",
        LGA_Pcode="NG002005",
        IDP_Girls=10,
        IDP_Women=5,
        IDP_Elderly_Women=1,
        Returnee_Women=2,
        Host_Community_Elderly_Women=3,
    )
    await add_row(
        db_session,
        models.BaselineData,
        Response_Year=2022,
        State="Adamawa",
        State_Pcode="NG002",
        LGA="Fufore",
        LGA_Pcode="NG002005",
        IDP_Girls=20,
        IDP_Boys=4,
    )
    await add_row(
        db_session,
        models.BaselineData,
        Response_Year=2021,
        State="Borno",
        State_Pcode="NG008",
        LGA="Maiduguri",
        LGA_Pcode="NG008016",
        IDP_Girls=0,
        Host_Community_Men=7,
    )
    await add_row(
        db_session,
        models.NeedsData,
        Response_Year=2021,
        Sector="Health",
        State="Adamawa",
        State_Pcode="NG002",
        LGA="Fufore",
        LGA_Pcode="NG002005",
        IDP_Girls=4,
        IDP_Women=3,
    )
    await add_row(
        db_session,
        models.NeedsData,
        Response_Year=2022,
        Sector="WASH",
        State="Borno",
        State_Pcode="NG008",
        LGA="Maiduguri",
        LGA_Pcode="NG008016",
        Returnee_Boys=6,
    )
    await add_row(
        db_session,
        models.SeverityData,
        Response_Year=2021,
        Sector="Health",
        State="Borno",
        State_Pcode="NG008",
        LGA="Maiduguri",
        LGA_Pcode="NG008016",
        IDP_Severity=3,
        Returnee_Severity=2,
        Host_Community_Severity=1,
        Final_Severity=4,
    )
    await db_session.commit()
    return db_session


# Operators
async def create_user(db_session: AsyncSession, role: str):
    user = models.User(
        email=f"{role}_{uuid.uuid4().hex[:8]}@example.com",
        password=hash_password("password123"),
        role=role,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture(scope="function")
async def auth_headers_user(db_session: AsyncSession):
    user = await create_user(db_session, "user")
    token = create_access_token({"user_id": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture(scope="function")
async def auth_headers_admin(db_session: AsyncSession):
    admin = await create_user(db_session, "admin")
    token = create_access_token({"user_id": admin.id})
    return {"Authorization": f"Bearer {token}"}

