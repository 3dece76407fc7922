"""
Общие фикстуры тестов: SQLite в памяти, сессия и HTTP-клиент приложения.
"""
import os

# Настройки читаются при импорте quithero.core.config
os.environ.setdefault("SECURITY__JWT_SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DB__DB_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("SEED_ACHIEVEMENTS_ON_STARTUP", "false")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quithero.core.database import db_helper
from quithero.models import Base
from quithero.repositories.achievement_repository import AchievementRepository
from quithero.services.auth_service import login_rate_limiter


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded_session(session):
    """Сессия с каталогом достижений по умолчанию"""
    await AchievementRepository(session).seed_defaults()
    return session


@pytest.fixture
async def client(session_factory):
    from main import app

    async def override_session_getter():
        async with session_factory() as session:
            yield session

    async with session_factory() as session:
        await AchievementRepository(session).seed_defaults()

    login_rate_limiter.attempts.clear()
    app.dependency_overrides[db_helper.session_getter] = override_session_getter
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    """Регистрирует пользователя и возвращает заголовок авторизации"""
    async def _login_as(email: str = "hero@example.com", password: str = "quitting2day") -> dict:
        response = await client.post("/api/v1/auth/register", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        response = await client.post("/api/v1/auth/login", data={"username": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login_as


@pytest.fixture
async def auth_headers(login_as):
    return await login_as()
