import os
import tempfile

# Settings are read at import time, configure the test environment first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="studio-uploads-")
os.environ.pop("BREVO_API_KEY", None)
os.environ.pop("UPLOADTHING_SECRET", None)

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from studio.main import app
from studio.core.security import create_access_token, reset_rate_limits
from studio.db.base import Base
from studio.db.models import Admin
from studio.db.seed import seed_admin
from studio.db.session import SessionLocal, engine

client = TestClient(app)


# Reset database and rate limits before each test
@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    yield
    Base.metadata.drop_all(bind=engine)


# Capture outgoing emails instead of calling Brevo
@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr("studio.services.email._send_email", mock)
    return mock


@pytest.fixture
def api():
    return client


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin(db):
    seed_admin(db)
    return db.query(Admin).first()


@pytest.fixture
def admin_headers(admin):
    token = create_access_token({"sub": str(admin.id), "type": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def package(api, admin_headers):
    res = api.post(
        "/packages",
        json={"name": "Portrait Session", "price": 150, "duration": 1},
        headers=admin_headers,
    )
    assert res.status_code == 201
    return res.json()


@pytest.fixture
def book(api, package):
    """Submit a public booking request, returns the response."""

    def _book(date="2030-06-01", start="10:00", end="11:00", **overrides):
        payload = {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "555-0100",
            "date": date,
            "startTime": start,
            "endTime": end,
            "packageId": package["id"],
        }
        payload.update(overrides)
        return api.post("/bookings", json=payload)

    return _book
