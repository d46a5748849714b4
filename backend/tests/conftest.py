import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from backoffice.database import Base, get_db
from backoffice.main import app
from backoffice.models.user import User
from backoffice.services.cleanup_scheduler import CleanupScheduler, get_cleanup_scheduler
from backoffice.services.cleanup_service import CleanupService, get_cleanup_service

TEST_DB_URL = "sqlite:///./test_backoffice.db"
SENTINEL = ".gitkeep"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@store.test", name="Admin", role="admin"),
        "staff": User(email="staff@store.test", name="Staff", role="staff"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def upload_dir(tmp_path):
    root = tmp_path / "uploads"
    root.mkdir()
    (root / SENTINEL).write_bytes(b"")
    return root


@pytest.fixture
def cleanup_service(upload_dir):
    return CleanupService(
        upload_dir=str(upload_dir),
        session_factory=TestingSession,
        sentinel_filename=SENTINEL,
        recheck_references=True,
    )


@pytest.fixture
def api_cleanup(cleanup_service):
    scheduler = CleanupScheduler(cleanup_service, hour=18, minute=30)
    app.dependency_overrides[get_cleanup_service] = lambda: cleanup_service
    app.dependency_overrides[get_cleanup_scheduler] = lambda: scheduler
    yield cleanup_service, scheduler
    app.dependency_overrides.pop(get_cleanup_service, None)
    app.dependency_overrides.pop(get_cleanup_scheduler, None)


def write_files(root, *names, content=b"img"):
    for name in names:
        (root / name).write_bytes(content)


def get_token(client, email: str) -> str:
    resp = client.post("/api/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}
