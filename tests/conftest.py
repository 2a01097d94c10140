from __future__ import annotations

import os

os.environ.setdefault("ENVIRONMENT", "test")

from collections.abc import AsyncIterator, Awaitable, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from mini_crm.core.config import Settings, get_settings  # noqa: E402
from mini_crm.core.security import create_access_token  # noqa: E402
from mini_crm.db import init_db  # noqa: E402
from mini_crm.deps import get_db_session  # noqa: E402
from mini_crm.main import create_app  # noqa: E402
from mini_crm.models import Customer, User, UserRole  # noqa: E402
from mini_crm.services import CustomerService, UserService  # noqa: E402

UserFactory = Callable[..., Awaitable[User]]
CustomerFactory = Callable[..., Awaitable[Customer]]


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite+aiosqlite:///:memory:",
        jwt_secret_key="test-secret-key",
    )


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine: AsyncEngine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest_asyncio.fixture
async def app(session: AsyncSession, settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings)

    async def _override_db_session() -> AsyncIterator[AsyncSession]:
        yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    application.dependency_overrides[get_settings] = lambda: settings
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def user_factory(session: AsyncSession) -> UserFactory:
    counter = {"value": 0}

    async def _create(
        *,
        role: UserRole = UserRole.EMPLOYEE,
        name: str | None = None,
        email: str | None = None,
        password: str = "password123",
    ) -> User:
        counter["value"] += 1
        index = counter["value"]
        return await UserService(session).create_user(
            name=name or f"{role.value.title()} {index}",
            email=email or f"{role.value.lower()}{index}@example.com",
            password=password,
            role=role,
        )

    return _create


@pytest.fixture()
def customer_factory(session: AsyncSession) -> CustomerFactory:
    counter = {"value": 0}

    async def _create(**overrides) -> Customer:
        counter["value"] += 1
        index = counter["value"]
        payload = {
            "name": f"Customer {index:02d}",
            "email": f"customer{index:02d}@example.com",
            "phone": f"70000000{index:02d}",
            "company": "Acme",
        }
        payload.update(overrides)
        return await CustomerService(session).create_customer(payload)

    return _create


@pytest.fixture()
def auth_headers(settings: Settings) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        assert user.id is not None
        token = create_access_token(user_id=user.id, role=user.role, settings=settings)
        return {"Authorization": f"Bearer {token.token}"}

    return _headers
