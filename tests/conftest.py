"""Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database wired into the app through
``dependency_overrides``. Users are created through the real OTP login flow.

Fixture overview
----------------
client       - TestClient bound to the fresh database
make_user    - factory: log a phone in, optionally set up a profile, return auth headers
customer     - headers for a customer with a completed profile
tailor       - headers for a tailor with a completed profile and an active tailor listing
admin        - headers for an admin (phone listed in ADMIN_PHONES)
"""

import os
from datetime import datetime, timedelta, timezone

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_PHONES"] = "+256700000099"
os.environ["TAILOR_AUTO_ACTIVATE"] = "true"
for _key in ("AT_USERNAME", "AT_API_KEY", "AFRICASTALKING_USERNAME", "AFRICASTALKING_APIKEY"):
    os.environ.pop(_key, None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.database import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.routers.auth import otp_store  # noqa: E402

ADMIN_PHONE = "+256700000099"


def future(days: int = 2) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    otp_store.clear()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


def login(client, phone: str) -> dict:
    resp = client.post("/auth/send-otp", json={"phone": phone})
    assert resp.status_code == 200
    otp = otp_store[phone][0]
    resp = client.post("/auth/login", json={"phone": phone, "otp": otp})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def make_user(client):
    counter = {"n": 0}

    def _make(role=None, name=None, phone=None):
        counter["n"] += 1
        phone = phone or f"+2567000{counter['n']:05d}"
        headers = login(client, phone)
        if role:
            resp = client.put(
                "/users/me/profile",
                json={"name": name or f"{role.title()} {counter['n']}", "role": role},
                headers=headers,
            )
            assert resp.status_code == 200, resp.text
        return headers

    return _make


@pytest.fixture
def customer(make_user):
    return make_user("customer", name="Carol Customer")


@pytest.fixture
def make_tailor(client, make_user):
    def _make(name="Tom Tailor"):
        headers = make_user("tailor", name=name)
        resp = client.post(
            "/tailors/",
            json={"name": name, "address": "12 Needle Lane", "bio": "Alterations and hemming"},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        return headers, resp.json()

    return _make


@pytest.fixture
def tailor(make_tailor):
    return make_tailor()


@pytest.fixture
def admin(make_user):
    return make_user("admin", name="Ada Admin", phone=ADMIN_PHONE)


@pytest.fixture
def booking(client, customer):
    resp = client.post(
        "/bookings/",
        json={"address": "5 Button Street", "scheduled_at": future()},
        headers=customer,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
