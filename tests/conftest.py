"""
Test configuration and fixtures for the property listing app.
Provides a fresh database per test, an HTTP client and image/user factories.
"""

import os
import tempfile

# Settings are read at import time by app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="property-uploads-"))

import io
import pytest
from typing import AsyncGenerator, Callable, Dict
from httpx import AsyncClient, ASGITransport
from PIL import Image

from app.config import Settings
from app.database import Database
from app.main import create_app
from app.models.user import User
from app.services.auth import AuthService


TEST_SECRET = "test-session-secret-with-enough-length-0123456789"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a SQLite file and upload directory private to the test."""
    return Settings(
        environment="testing",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        session_secret=TEST_SECRET,
        bcrypt_rounds=4,
        db_pool_size=5,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with all tables created."""
    database = Database.from_settings(settings)
    await database.create_tables()
    yield database
    await database.dispose()


@pytest.fixture
def app(settings: Settings, database: Database):
    return create_app(settings, database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client talking to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def user_credentials() -> Dict[str, str]:
    return {
        "username": "alice",
        "email": "alice@example.com",
        "password": "correct-horse-battery",
    }


@pytest.fixture
async def test_user(
    database: Database,
    settings: Settings,
    user_credentials: Dict[str, str]
) -> User:
    """A registered user."""
    async with database.session() as db:
        return await AuthService(db, bcrypt_rounds=settings.bcrypt_rounds).register_user(
            user_credentials["username"],
            user_credentials["email"],
            user_credentials["password"],
        )


@pytest.fixture
async def auth_headers(
    client: AsyncClient,
    settings: Settings,
    test_user: User,
    user_credentials: Dict[str, str]
) -> Dict[str, str]:
    """Log in through the login form and return a Cookie header for the session."""
    response = await client.post(
        "/login",
        data={"email": user_credentials["email"], "password": user_credentials["password"]},
    )
    assert response.status_code == 303

    cookie = response.headers["set-cookie"].split(";", 1)[0]
    assert cookie.startswith(f"{settings.session_cookie_name}=")
    client.cookies.clear()
    return {"Cookie": cookie}


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for small valid image files."""

    def _make_image(fmt: str = "PNG", color=(200, 40, 40)) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (8, 8), color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make_image
