from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.core.database.base import Base
from src.core.database import get_db
from src.main import app
from src.modules.students.models import Student
from src.modules.teachers.models import Teacher
from src.modules.users.models import User, UserRole

# In-memory SQLite; StaticPool keeps a single connection so every session sees the same data
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create tables before each test and drop them after."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Get test database session."""
    session_factory = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Get test HTTP client with overridden database dependency."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_teacher(db_session: AsyncSession):
    """Factory: create a teacher with its user account."""

    async def _make(
        first_name: str | None = "Amina",
        last_name: str | None = "Diallo",
        email: str | None = None,
        **fields,
    ) -> Teacher:
        user = User(
            email=email or f"{(first_name or 'teacher').lower()}.{uuid4().hex[:8]}@school.test",
            first_name=first_name,
            last_name=last_name,
            role=UserRole.TEACHER.value,
        )
        teacher = Teacher(user=user, **fields)
        db_session.add(teacher)
        await db_session.flush()
        return teacher

    return _make


@pytest.fixture
def make_student(db_session: AsyncSession):
    """Factory: create a student with its user account."""

    async def _make(
        first_name: str | None = "Lina",
        last_name: str | None = "Haddad",
        email: str | None = None,
        payment_status: str | None = None,
    ) -> Student:
        user = User(
            email=email or f"{(first_name or 'student').lower()}.{uuid4().hex[:8]}@school.test",
            first_name=first_name,
            last_name=last_name,
            role=UserRole.STUDENT.value,
        )
        student = Student(user=user, payment_status=payment_status)
        db_session.add(student)
        await db_session.flush()
        return student

    return _make
