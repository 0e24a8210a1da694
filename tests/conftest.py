"""
Pytest configuration and fixtures for testing
"""
import hashlib
import hmac
import json
import os
import time

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_gomeraway.db")
os.environ.setdefault("STORAGE_PUBLIC_URL", "https://project.storage.example")

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

import database_models  # noqa: F401
from auth_utils import create_jwt
from config.settings import settings
from database import Base, get_db
from main import app


@pytest.fixture
async def test_engine(tmp_path):
    """
    Fresh file-backed SQLite database per test. NullPool keeps connections
    from leaking between the app and the test session.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest.fixture
async def test_db(session_factory):
    """Isolated AsyncSession for direct repository and service tests"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory):
    """
    Async HTTP client against the app, with get_db pointed at the test database.
    """
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


def auth_headers(user_id: str, email: str = "guest@example.com", **user_metadata) -> dict:
    token = create_jwt(user_id, email=email, user_metadata=user_metadata)
    return {"Authorization": f"Bearer {token}"}


def stripe_signature(payload: str, secret: str = None, timestamp: int = None) -> str:
    """Build a Stripe-Signature header the way Stripe signs webhook deliveries"""
    secret = secret or settings.stripe_webhook_secret
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def checkout_completed_event(mode: str, metadata: dict, event_id: str = "evt_test_1", **session_fields) -> str:
    session = {
        "id": "cs_test_1",
        "object": "checkout.session",
        "mode": mode,
        "metadata": metadata,
        **session_fields,
    }
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": "checkout.session.completed",
        "data": {"object": session},
    })
