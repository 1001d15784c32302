"""Pytest configuration and fixtures."""

import io
import os
import uuid

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_USE_REDIS"] = "false"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_cms.core.database import Base, get_db_session
from hotel_cms.main import app
from hotel_cms.models.user import ROLE_ADMIN, ROLE_SUPER_ADMIN, User
from hotel_cms.schemas.website import WebsiteCreate
from hotel_cms.services.file_storage import FileStorage, get_file_storage
from hotel_cms.services.token_service import TokenService
from hotel_cms.services.website_service import WebsiteService

# Test database URL (using SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEFAULT_PASSWORD = "password123"


@pytest_asyncio.fixture
async def db_session():
    """Create a fresh in-memory database and a session on it."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
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

    await engine.dispose()


@pytest.fixture
def file_storage(tmp_path):
    """File storage rooted in a temporary public directory."""
    return FileStorage(
        public_dir=str(tmp_path / "public"),
        max_file_size=5 * 1024 * 1024,
        allowed_types=["image/jpeg", "image/png", "image/webp"],
        max_files_per_request=10,
    )


@pytest_asyncio.fixture
async def client(db_session, file_storage):
    """Create a test client with database and storage dependency overrides."""

    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db_session] = get_test_db
    app.dependency_overrides[get_file_storage] = lambda: file_storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory persisting a user, optionally assigned to a website."""

    async def _make_user(
        email: str,
        role: str = ROLE_ADMIN,
        website=None,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email,
            name=name,
            role=role,
            website_access=[],
            is_active=is_active,
        )
        user.set_password(password)
        db_session.add(user)
        if website is not None:
            await WebsiteService(db_session).set_assigned_admin(website=website, admin=user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_website(db_session, file_storage):
    """Factory creating a website through the service."""

    async def _make_website(name: str, domain: str, subdomain=None):
        service = WebsiteService(db_session, file_storage)
        return await service.create_website(WebsiteCreate(name=name, domain=domain, subdomain=subdomain))

    return _make_website


@pytest_asyncio.fixture
async def website(make_website):
    return await make_website("Seaside Hotel", "seaside.example.com")


@pytest_asyncio.fixture
async def other_website(make_website):
    return await make_website("Mountain Lodge", "mountain.example.com")


@pytest_asyncio.fixture
async def super_admin(make_user):
    return await make_user("root@example.com", role=ROLE_SUPER_ADMIN, name="Root")


@pytest_asyncio.fixture
async def admin(make_user, website):
    """Admin assigned to ``website``."""
    return await make_user("admin@example.com", website=website, name="Site Admin")


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user."""
    tokens = TokenService()

    def _auth_headers(user: User):
        pair = tokens.issue(user.id, user.role, user.website_id)
        return {"Authorization": f"Bearer {pair.access_token}"}

    return _auth_headers


@pytest.fixture
def png_bytes():
    """Small PNG image generated with Pillow."""

    def _png_bytes(width: int = 64, height: int = 48, color=(200, 30, 30)) -> bytes:
        buffer = io.BytesIO()
        Image.new("RGB", (width, height), color).save(buffer, "PNG")
        return buffer.getvalue()

    return _png_bytes


@pytest.fixture
def stored_image(file_storage, png_bytes):
    """Write an image into a website's folder and return its stored path."""

    async def _stored_image(website_name: str) -> str:
        return await file_storage.save(png_bytes(), website_name, "photo.png")

    return _stored_image


@pytest.fixture
def sample_room_data():
    return {
        "name": "Deluxe Sea View",
        "description": "Corner room facing the bay",
        "maxOccupancy": 2,
        "bedType": "King",
        "size": 32,
        "basePrice": 180,
        "amenities": ["wifi", "minibar"],
    }
