"""
Pytest configuration and fixtures for GuideForge backend tests.
"""

import os
import shutil
import tempfile

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
_TEST_ROOT = tempfile.mkdtemp(prefix="guideforge_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_ROOT}/api.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["MAX_UPLOAD_SIZE"] = "1024"
os.environ["LOG_LEVEL"] = "warning"

from guideforge.db.session import Database  # noqa: E402
from guideforge.main import app  # noqa: E402
from guideforge.models.user import User  # noqa: E402
from guideforge.services.manuals.manual_service import ManualService  # noqa: E402
from guideforge.services.storage.storage_service import LocalStorageService  # noqa: E402
from guideforge.services.users.auth_service import AuthService  # noqa: E402
from guideforge.services.users.user_service import UserService  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(scope="session", autouse=True)
def test_root():
    """Remove the shared test directory after the session."""
    yield _TEST_ROOT
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


# =============================================================================
# Service-level fixtures (fresh database and blob directory per test)
# =============================================================================


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    await db.init_models()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_maker() as session:
        yield session


@pytest.fixture
async def storage(tmp_path):
    store = LocalStorageService(str(tmp_path / "blobs"))
    await store.ensure_ready()
    return store


@pytest.fixture
def manual_service(session, storage):
    return ManualService(session, storage, max_upload_size=1024)


@pytest.fixture
def user_service(session, storage):
    return UserService(session, storage, max_upload_size=1024)


@pytest.fixture
def auth_service(session):
    return AuthService(session)


async def _create_user(session, username: str) -> User:
    user = User(username=username, email=f"{username}@example.com", password_hash="not-a-real-hash")
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def owner(session):
    return await _create_user(session, "owner")


@pytest.fixture
async def other_user(session):
    return await _create_user(session, "intruder")


@pytest.fixture
async def manual(manual_service, owner):
    return await manual_service.create_manual(owner.id, title="Assemble the shelf")


@pytest.fixture
def png_bytes():
    return PNG_BYTES


# =============================================================================
# HTTP fixtures
# =============================================================================


@pytest.fixture
def client():
    """Create a test client for the FastAPI app (runs the lifespan)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user with a unique email and return (auth headers, user json)."""
    counter = {"n": 0}

    def _register(username: str = "author") -> tuple[dict[str, str], dict]:
        counter["n"] += 1
        email = f"{username}-{os.urandom(4).hex()}-{counter['n']}@example.com"
        response = client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": email, "password": "correct horse"},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]

    return _register
