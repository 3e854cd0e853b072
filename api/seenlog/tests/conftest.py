"""Shared pytest fixtures: an isolated database per test and an ASGI client."""

from __future__ import annotations

import os
import uuid

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./seenlog_test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from passlib.context import CryptContext
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from seenlog.api.deps import get_db
from seenlog.core import security
from seenlog.core.config import settings
from seenlog.db.base import Base
from seenlog.main import app


def _isolated_engine(tmp_path) -> tuple[AsyncEngine, str | None]:
    """SQLite file under tmp_path by default; a throwaway schema when TEST_DATABASE_URL is Postgres."""
    if not settings.test_database_url:
        return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'seenlog.db'}"), None
    engine = create_async_engine(settings.test_database_url)
    if not make_url(settings.test_database_url).drivername.startswith("postgresql"):
        return engine, None
    schema_name = f"test_{uuid.uuid4().hex}"
    return engine.execution_options(schema_translate_map={None: schema_name}), schema_name


@pytest.fixture(autouse=True)
def _use_plaintext_passwords(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(security, "pwd_context", CryptContext(schemes=["plaintext"]))


@pytest_asyncio.fixture()
async def session(tmp_path) -> AsyncSession:
    engine, schema_name = _isolated_engine(tmp_path)
    async with engine.begin() as conn:
        if schema_name:
            await conn.exec_driver_sql(f'CREATE SCHEMA IF NOT EXISTS "{schema_name}"')
        await conn.run_sync(Base.metadata.create_all)
    try:
        async with async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)() as session:
            yield session
    finally:
        async with engine.begin() as conn:
            if schema_name:
                await conn.exec_driver_sql(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE')
            else:
                await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()


@pytest_asyncio.fixture()
async def client(session: AsyncSession) -> AsyncClient:
    async def _get_test_db():
        yield session

    app.dependency_overrides[get_db] = _get_test_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as async_client:
            yield async_client
    finally:
        app.dependency_overrides.pop(get_db, None)
