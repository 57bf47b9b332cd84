"""
Test configuration and fixtures.

Environment is set before the application is imported so the cached
settings pick it up.
"""
import os
from typing import Generator

import pytest
from faker import Faker

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["BASE_URL"] = "https://certs.example.org"
os.environ["SUPER_ADMIN_EMAIL"] = "root@example.org"
os.environ["SUPER_ADMIN_PASSWORD"] = "admin-pass-123"
for _var in ("SMTP_HOST", "SMTP_USERNAME", "SMTP_PASSWORD"):
    os.environ.pop(_var, None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from app.core.config import get_settings  # noqa: E402
from app.core.errors import DependencyError  # noqa: E402
from app.core.storage_utils import get_storage  # noqa: E402
from app.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.services.notification_service import Notifier, get_notifier  # noqa: E402

fake = Faker()

ADMIN_EMAIL = os.environ["SUPER_ADMIN_EMAIL"]
ADMIN_PASSWORD = os.environ["SUPER_ADMIN_PASSWORD"]

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class FakeStorage:
    """Records uploads instead of talking to Supabase."""

    def __init__(self):
        self.uploads: list[tuple[str, str, str]] = []
        self.deleted: list[str] = []
        self.fail_folders: set[str] = set()

    def upload(self, folder: str, ext: str, file_bytes: bytes, content_type: str) -> str:
        if folder in self.fail_folders:
            raise DependencyError("File upload failed")
        url = f"https://storage.test/{folder}/{len(self.uploads)}.{ext}"
        self.uploads.append((folder, url, content_type))
        return url

    def delete_public_url(self, url: str) -> None:
        self.deleted.append(url)


class FakeNotifier(Notifier):
    """Records outgoing emails; can be told to fail like a broken relay."""

    def __init__(self):
        self.sent: list[dict[str, str]] = []
        self.fail = False

    def send(self, to: str, subject: str, html: str) -> bool:
        if self.fail:
            return False
        self.sent.append({"to": to, "subject": subject, "html": html})
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def client(engine, storage, notifier) -> Generator[TestClient, None, None]:
    """Test client with database and collaborators overridden."""

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def backup_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "BACKUP_DIR", str(tmp_path / "backups"))
    return tmp_path / "backups"


def make_registration(**overrides) -> dict[str, str]:
    data = {
        "title": "Mr",
        "name": fake.name(),
        "father_husband_name": fake.name(),
        "mobile_no": fake.numerify("9#########"),
        "email": fake.unique.email(),
        "date_of_birth": "1990-05-17",
        "passout_percentage": "78.5",
        "state": "Maharashtra",
        "address": fake.address().replace("\n", ", "),
        "course_name": "General Nursing and Midwifery",
        "experience": "3 years",
        "college_name": "City Nursing College",
    }
    data.update(overrides)
    return data


def register(client: TestClient, photo: bytes | None = PNG_BYTES, seed_qr: bytes | None = None, **overrides):
    files = {}
    if photo is not None:
        files["photo"] = ("photo.png", photo, "image/png")
    if seed_qr is not None:
        files["qr_code"] = ("qr.png", seed_qr, "image/png")
    return client.post("/api/register", data=make_registration(**overrides), files=files)


@pytest.fixture
def registered(client) -> dict:
    """A registered user: form data plus the response body."""
    form = make_registration(mobile_no="9876543210", email="a@b.com")
    files = {"photo": ("photo.png", PNG_BYTES, "image/png")}
    response = client.post("/api/register", data=form, files=files)
    assert response.status_code == 201, response.text
    return {"form": form, "user": response.json()["user"]}


@pytest.fixture
def user_token(client, registered) -> str:
    response = client.post(
        "/api/login",
        json={"identifier": registered["form"]["email"], "password": registered["form"]["mobile_no"]},
    )
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def auth_headers(user_token) -> dict:
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def admin_headers(client) -> dict:
    response = client.post(
        "/api/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
