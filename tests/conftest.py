"""
Pytest fixtures for platform tests.
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from cogni.ai.advisor import AdvisoryService
from cogni.domain.user import User, UserRole
from cogni.kernel.identity.jwt import JWTManager
from cogni.kernel.identity.password import PasswordHasher
from cogni.kernel.store.document_store import InMemoryDocumentStore
from cogni.services.platform import LearningPlatform
from tests.factories import make_user


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """bcrypt at its minimum cost keeps the suite fast."""
    monkeypatch.setattr(PasswordHasher, "rounds", 4)


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def citizen() -> User:
    return make_user(level=2, xp=300, email="citizen@example.com")


@pytest.fixture
def newcomer() -> User:
    return make_user(level=0, email="new@example.com")


@pytest.fixture
def teacher() -> User:
    return make_user(role=UserRole.TEACHER, level=5, name="Teacher", email="teacher@example.com")


@pytest.fixture
def offline_advisor() -> AdvisoryService:
    """Advisor without an API key: always answers with the fallback."""
    return AdvisoryService(api_key="")


@pytest_asyncio.fixture
async def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest_asyncio.fixture
async def platform(store, offline_advisor) -> LearningPlatform:
    """Freshly loaded platform with the placement exam only."""
    return await LearningPlatform(store, advisor=offline_advisor).load()


@pytest.fixture
def jwt_manager() -> JWTManager:
    """Create a JWT manager for tests."""
    return JWTManager(
        secret_key="test-secret-key-for-testing-only",
        algorithm="HS256",
        access_token_expire_minutes=30,
    )
