import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from homework_board.database import Base, get_db
from homework_board.main import app
from homework_board.models.user import User
from homework_board.models.approved_user import ApprovedUser

TEST_DB_URL = "sqlite:///./test_homework_board.db"

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
        "admin": User(id="admin-001", email="admin@example.com", name="관리자", role="admin"),
        "member": User(id="user-001", email="member@example.com", name="김철수", role="user"),
        "other": User(id="user-002", email="other@example.com", name="이영희", role="user"),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    db.add_all(
        [
            ApprovedUser(name="김철수", phone="01011112222", is_verified=True, user_id="user-001"),
            ApprovedUser(name="이영희", phone="01033334444", is_verified=True, user_id="user-002"),
        ]
    )
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_approved(db):
    row = ApprovedUser(name="홍길동", phone="01012345678", is_verified=False)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def identity_payload(subject_id: str, email: str | None = None, name: str = "테스트") -> dict:
    return {
        "subject_id": subject_id,
        "email": email or f"{subject_id}@example.com",
        "name": name,
        "profile_image": None,
        "google_id": f"g-{subject_id}",
    }


def get_token(client, subject_id: str, email: str | None = None, name: str = "테스트") -> str:
    resp = client.post("/api/auth/login", json=identity_payload(subject_id, email, name))
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, subject_id: str, email: str | None = None, name: str = "테스트") -> dict:
    return {"Authorization": f"Bearer {get_token(client, subject_id, email, name)}"}
