# tests/conftest.py
import os
import shutil
import sys
import tempfile

import pytest

# Make the backend modules importable when pytest runs from the repository root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are read at import time, so the environment is prepared first
STORAGE_DIR = tempfile.mkdtemp(prefix="apd-storage-")
os.environ["STORAGE_DIR"] = STORAGE_DIR
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("SMTP_SERVER", None)

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models.users import User
from utils.hashing import get_password_hash
from utils.storage import bucket_root

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_EMAIL = "admin@ptkarya.co.id"
STAFF_EMAIL = "staff@ptkarya.co.id"
PASSWORD = "Rahasia123"


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(STORAGE_DIR, ignore_errors=True)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_bucket():
    root = bucket_root()
    for child in root.iterdir():
        if child.is_dir():
            shutil.rmtree(child)
        else:
            child.unlink()
    yield root


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session):
    admin = User(email=ADMIN_EMAIL, password_hash=get_password_hash(PASSWORD), role="admin", full_name="Admin K3")
    staff = User(email=STAFF_EMAIL, password_hash=get_password_hash(PASSWORD), role="staff", full_name="Staff K3")
    db_session.add_all([admin, staff])
    db_session.commit()
    return {"admin": admin, "staff": staff}


def _login(client, email, password=PASSWORD):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client, users):
    return _login(client, ADMIN_EMAIL)


@pytest.fixture()
def staff_headers(client, users):
    return _login(client, STAFF_EMAIL)


@pytest.fixture()
def bengkel(client, auth_headers):
    resp = client.post("/apd/bengkel", json={"name": "Bengkel Mesin"}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture()
def apd_item(client, auth_headers):
    resp = client.post("/apd/items", json={"name": "Sarung Tangan", "satuan": "Pasang", "jumlah": 100}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
