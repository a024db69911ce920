"""
Test configuration and fixtures for the Realty CMS API.
Provides a fresh SQLite database per test, an HTTP client bound to the app,
users for every seeded role and factories for common records.
"""

import os
import tempfile

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "realty-cms-test-uploads"))

import io
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image as PILImage
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.database import Base, build_engine, get_db
from app.main import app
from app.models.agent import Agent
from app.models.blog import Category, Tag, Post, PostStatus, Comment, CommentStatus
from app.models.catalog import PropertyType, Location, Amenity
from app.models.property import Property, ListingType, PropertyStatus
from app.models.team import Team
from app.models.user import User, Role
from app.permissions import RoleName
from app.seeders import seed_roles_and_permissions
from app.utils.auth import create_access_token
from app.utils.validators import ValidationUtils

API = settings.api_v1_prefix
DEFAULT_PASSWORD = "testpassword123"


@pytest.fixture
async def engine(tmp_path):
    """A throwaway SQLite database file with the full schema."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data, with the role matrix seeded."""
    async with session_factory() as session:
        await seed_roles_and_permissions(session)
        yield session


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Uploaded files land in the test's temporary directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings, "upload_dir", str(directory))
    return directory


@pytest.fixture
async def async_client(db_session: AsyncSession, session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app; every request gets its own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for the user."""
    token = create_access_token(user_id=user.id, email=user.email, roles=user.role_names)
    return {"Authorization": f"Bearer {token}"}


def make_image_bytes(width: int = 200, height: int = 200, fmt: str = "JPEG") -> bytes:
    """Encoded solid-colour image."""
    buffer = io.BytesIO()
    PILImage.new("RGB", (width, height), color=(30, 120, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


# Test data factories
class Factory:
    """Creates committed records on the test session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self, obj):
        self.session.add(obj)
        await self.session.commit()
        await self.session.refresh(obj)
        return obj

    async def user(
        self,
        roles: Optional[List[str]] = None,
        email: Optional[str] = None,
        name: str = "Test User",
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True
    ) -> User:
        role_names = roles if roles is not None else [RoleName.USER.value]
        result = await self.session.execute(select(Role).where(Role.name.in_(role_names)))
        user = User(
            name=name,
            email=email or f"user{uuid.uuid4().hex[:8]}@example.com",
            is_active=is_active,
            roles=list(result.scalars().all()),
        )
        user.set_password(password)
        self.session.add(user)
        await self.session.flush()

        team = Team(user_id=user.id, name=f"{user.first_name}'s Team", personal_team=True)
        self.session.add(team)
        await self.session.flush()
        user.current_team_id = team.id
        return await self._commit(user)

    async def agent(self, user: Optional[User] = None, name: str = "Test Agent", **values) -> Agent:
        agent = Agent(
            name=name,
            email=values.pop("email", None) or f"agent{uuid.uuid4().hex[:8]}@example.com",
            user_id=user.id if user else None,
            **values,
        )
        agent = await self._commit(agent)
        if user is not None:
            await self.session.refresh(user, ["agent_profile"])
        return agent

    async def _slugged(self, model, name: str, **values):
        return await self._commit(model(name=name, slug=ValidationUtils.slugify(name), **values))

    async def property_type(self, name: str = "Apartment", **values) -> PropertyType:
        return await self._slugged(PropertyType, name, **values)

    async def location(self, name: str = "Dhaka", **values) -> Location:
        return await self._slugged(Location, name, **values)

    async def amenity(self, name: str = "Swimming Pool", **values) -> Amenity:
        return await self._slugged(Amenity, name, **values)

    async def category(self, name: str = "Market Trends", **values) -> Category:
        return await self._slugged(Category, name, **values)

    async def tag(self, name: str = "investment", **values) -> Tag:
        return await self._slugged(Tag, name, **values)

    async def listing(
        self,
        title: str = "Test Property",
        property_type: Optional[PropertyType] = None,
        location: Optional[Location] = None,
        agent: Optional[Agent] = None,
        **values
    ) -> Property:
        property_type = property_type or await self.property_type(f"Type {uuid.uuid4().hex[:6]}")
        location = location or await self.location(f"Location {uuid.uuid4().hex[:6]}")
        fields = {
            "listing_type": ListingType.SALE.value,
            "status": PropertyStatus.AVAILABLE.value,
            "price": Decimal("1500000.00"),
            "bedrooms": 3,
            "bathrooms": 2,
            "address": "Road 12, Banani",
        }
        fields.update(values)
        listing = Property(
            title=title,
            slug=f"{ValidationUtils.slugify(title)}-{uuid.uuid4().hex[:6]}",
            property_type_id=property_type.id,
            location_id=location.id,
            agent_id=agent.id if agent else None,
            **fields,
        )
        return await self._commit(listing)

    async def post(
        self,
        author: User,
        title: str = "Test Post",
        status: str = PostStatus.PUBLISHED.value,
        category: Optional[Category] = None,
        tags: Optional[List[Tag]] = None,
        **values
    ) -> Post:
        fields = {"content": "<p>Body of the post.</p>", "allow_comments": True}
        if status == PostStatus.PUBLISHED.value:
            fields["published_at"] = values.pop("published_at", None) or _past()
        fields.update(values)
        post = Post(
            title=title,
            slug=f"{ValidationUtils.slugify(title)}-{uuid.uuid4().hex[:6]}",
            status=status,
            user_id=author.id,
            category_id=category.id if category else None,
            **fields,
        )
        if tags:
            post.tags = list(tags)
        return await self._commit(post)

    async def comment(
        self,
        post: Post,
        content: str = "Great article!",
        status: str = CommentStatus.APPROVED.value,
        parent: Optional[Comment] = None,
        user: Optional[User] = None,
        **values
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            parent_id=parent.id if parent else None,
            user_id=user.id if user else None,
            author_name=values.pop("author_name", user.name if user else "Guest Reader"),
            author_email=values.pop("author_email", user.email if user else "guest@example.com"),
            content=content,
            status=status,
            **values,
        )
        return await self._commit(comment)


def _past() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=1)


@pytest.fixture
def factory(db_session: AsyncSession) -> Factory:
    return Factory(db_session)


# Common users
@pytest.fixture
async def admin_user(factory: Factory) -> User:
    return await factory.user([RoleName.ADMIN.value], email="admin@example.com", name="Site Admin")


@pytest.fixture
async def agent_user(factory: Factory) -> User:
    """Agent-role account with a linked agent profile."""
    user = await factory.user([RoleName.AGENT.value], email="agent@example.com", name="Listing Agent")
    await factory.agent(user=user, name="Listing Agent", email="agent.profile@example.com")
    return user


@pytest.fixture
async def moderator_user(factory: Factory) -> User:
    return await factory.user([RoleName.MODERATOR.value], email="moderator@example.com", name="Content Moderator")


@pytest.fixture
async def regular_user(factory: Factory) -> User:
    return await factory.user(email="reader@example.com", name="Regular Reader")


@pytest.fixture
async def inactive_user(factory: Factory) -> User:
    return await factory.user(email="inactive@example.com", name="Inactive User", is_active=False)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def agent_headers(agent_user: User) -> Dict[str, str]:
    return auth_headers(agent_user)


@pytest.fixture
def moderator_headers(moderator_user: User) -> Dict[str, str]:
    return auth_headers(moderator_user)


@pytest.fixture
def user_headers(regular_user: User) -> Dict[str, str]:
    return auth_headers(regular_user)


# Utility functions for tests
def assert_success(response, status_code: int = 200) -> dict:
    """Assert the success envelope and return its body."""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is True
    assert body["code"] == status_code
    assert body["timestamp"].endswith("Z")
    return body


def assert_error(response, status_code: int) -> dict:
    """Assert the error envelope and return its body."""
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["code"] == status_code
    return body
