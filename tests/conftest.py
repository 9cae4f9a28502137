"""Pytest configuration for all tests."""

import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from collabportal.domain.entities import UserRole
from collabportal.infrastructure.auth import hash_password, jwt_service
from collabportal.infrastructure.persistence import models  # noqa: F401
from collabportal.infrastructure.persistence.database import Base
from collabportal.infrastructure.persistence.models import AuthAccountModel, UserModel
from collabportal.infrastructure.services.email.email_provider import EmailProvider
from collabportal.infrastructure.services.email_service import EmailService
from collabportal.infrastructure.storage import LocalStorageProvider

DEFAULT_PASSWORD = "secret-pass"


class RecordingEmailProvider(EmailProvider):
    """Email provider that keeps outgoing messages in memory."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
        reply_to: str | None = None,
    ) -> bool:
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "html": html_body, "text": text_body})
        return True

    async def test_connection(self) -> tuple[bool, str | None]:
        return True, None

    def to(self, email: str) -> list[dict]:
        return [m for m in self.sent if m["to"] == email]


@pytest.fixture
def email_provider() -> RecordingEmailProvider:
    return RecordingEmailProvider()


@pytest.fixture
def email_service(email_provider: RecordingEmailProvider) -> EmailService:
    return EmailService(email_provider)


@pytest.fixture
def storage(tmp_path) -> LocalStorageProvider:
    return LocalStorageProvider(str(tmp_path / "storage"), "http://test/storage")


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


async def create_user(
    session: AsyncSession,
    email: str | None = None,
    role: UserRole = UserRole.USER,
    full_name: str | None = "Test User",
    password: str = DEFAULT_PASSWORD,
) -> UserModel:
    """Insert an auth account and its profile."""
    user_id = str(uuid.uuid4())
    email = email or f"user-{uuid.uuid4().hex[:8]}@example.com"
    session.add(
        AuthAccountModel(
            id=user_id,
            email=email,
            password_hash=hash_password(password),
            email_confirmed=True,
            user_metadata={"full_name": full_name} if full_name else {},
        )
    )
    user = UserModel(id=user_id, email=email, full_name=full_name, role=role.value)
    session.add(user)
    await session.commit()
    return user


def token_for(user: UserModel) -> str:
    return jwt_service.create_access_token(user_id=user.id, email=user.email, role=user.role)


def auth_headers(user: UserModel) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> UserModel:
    return await create_user(db_session, email="admin@example.com", role=UserRole.ADMIN, full_name="Admin")


@pytest_asyncio.fixture
async def regular_user(db_session: AsyncSession) -> UserModel:
    return await create_user(db_session, email="creator@example.com", full_name="Casey Creator")


@pytest.fixture
def admin_headers(admin_user: UserModel) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user: UserModel) -> dict[str, str]:
    return auth_headers(regular_user)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    email_service: EmailService,
    storage: LocalStorageProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database, email and storage dependencies."""
    from collabportal.infrastructure.api.app import app
    from collabportal.infrastructure.persistence.database import get_db_session
    from collabportal.infrastructure.services.email_service import get_email_service
    from collabportal.infrastructure.storage import get_storage_provider

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_storage_provider] = lambda: storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory inserting users into the test database."""

    async def _make(**kwargs) -> UserModel:
        return await create_user(db_session, **kwargs)

    return _make


@pytest.fixture
def headers_for():
    """Build bearer headers for a user."""
    return auth_headers
