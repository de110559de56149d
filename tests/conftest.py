"""
Shared test fixtures.

Provides:
- a clean Settings environment per test (no provider keys, temp blob dir)
- store: the real DocumentStore over an in-process mongomock-motor database
- blob_store: BlobStore rooted in a temp directory
- make_client: TestClient for the app with store/blob/user dependencies overridden
"""

from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from dreamdesk.api.auth import get_current_user_id
from dreamdesk.api.deps import get_blob_store, get_document_store
from dreamdesk.config import get_settings
from dreamdesk.main import create_application
from dreamdesk.models.user import EmailAddress, EmailVerification, IdentityUser
from dreamdesk.services.blob_store import BlobStore
from dreamdesk.services.document_store import DocumentStore
from dreamdesk.services.user_sync import UserSyncService

_ENV_KEYS = [
    "CLERK_SECRET_KEY",
    "CLERK_WEBHOOK_SECRET",
    "CLERK_JWT_KEY",
    "CLERK_JWKS_URL",
    "FAL_API_KEY",
    "OPENAI_API_KEY",
    "GROQ_API_KEY",
    "YOUTUBE_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Each test starts with no provider credentials and a private blob dir."""
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
    monkeypatch.setenv("BLOB_DIR", str(tmp_path / "blobs"))
    monkeypatch.setenv("PUBLIC_BASE_URL", "http://testserver")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def set_env(monkeypatch):
    """Set environment variables and refresh the cached settings."""

    def _set(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    return _set


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore(AsyncMongoMockClient()["dreamdesk_test"])


@pytest.fixture
def user_sync(store) -> UserSyncService:
    return UserSyncService(store)


@pytest.fixture
def blob_store(tmp_path) -> BlobStore:
    return BlobStore(tmp_path / "blobs", "http://testserver")


@pytest.fixture
def make_client(store, blob_store) -> Callable[..., TestClient]:
    """
    Build a TestClient acting as user_id (None = signed out).
    Extra dependency overrides can be passed as {dependency: replacement}.
    """

    def _make(user_id: Optional[str] = "user_1", overrides: Optional[dict] = None) -> TestClient:
        app = create_application()
        app.dependency_overrides[get_document_store] = lambda: store
        app.dependency_overrides[get_blob_store] = lambda: blob_store
        app.dependency_overrides[get_current_user_id] = lambda: user_id
        for dependency, replacement in (overrides or {}).items():
            app.dependency_overrides[dependency] = replacement
        return TestClient(app)

    return _make


def identity_user(
    user_id: str = "user_1",
    email: str = "ada@example.com",
    first_name: Optional[str] = "Ada",
    last_name: Optional[str] = "Lovelace",
    verified: bool = True,
) -> IdentityUser:
    return IdentityUser(
        id=user_id,
        email_addresses=[
            EmailAddress(
                email_address=email,
                verification=EmailVerification(status="verified" if verified else "unverified"),
            )
        ],
        first_name=first_name,
        last_name=last_name,
        image_url="https://img.example.com/ada.png",
        created_at=1_700_000_000_000,
        updated_at=1_700_000_500_000,
        last_sign_in_at=1_700_000_900_000,
    )


@pytest.fixture
def make_identity() -> Callable[..., IdentityUser]:
    return identity_user
