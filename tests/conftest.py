"""Shared fixtures and utilities for tests."""

import os

# Settings are read once at import time, so configure before importing the app.
os.environ["MONGODB_DB"] = "skillgate_test"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-min-32-chars-long-for-security"
os.environ["ADMIN_EMAIL"] = "admin@skillgate.com"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["ENFORCE_DRIVE_OWNERSHIP"] = "true"
os.environ["ENFORCE_STATUS_TRANSITIONS"] = "false"

import itertools

import mongomock
import pytest
from fastapi.testclient import TestClient

from skillgate.core import auth
from skillgate.db import mongodb
from skillgate.main import app

# Fast hashing for tests
auth.pwd_context.update(bcrypt__rounds=4)

_emails = itertools.count(1)

FUTURE = "2099-06-30T18:00:00Z"
PAST = "2001-01-01T00:00:00Z"


@pytest.fixture(autouse=True)
def mongo_db():
    """Fresh in-memory MongoDB (with the real indexes) for every test."""
    mongodb.set_mongo_client(mongomock.MongoClient())
    mongodb.init_mongo_indexes()
    yield mongodb.get_mongo_db()
    mongodb.set_mongo_client(None)


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app, raise_server_exceptions=False)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/auth/login", json={"email": "admin@skillgate.com", "password": "admin123"})
    assert response.status_code == 200
    return bearer(response.json()["token"])


@pytest.fixture
def make_account(client, admin_headers):
    """
    Register an account through the API, approve it (unless told not to)
    and apply profile fields. Returns the profile plus ready-made headers.
    """
    def _make(role="student", approved=True, name=None, **profile):
        email = f"{role}{next(_emails)}@example.com"
        response = client.post("/api/auth/register", json={
            "name": name or f"{role.title()} {email.split('@')[0]}",
            "email": email,
            "password": "pw123456",
            "role": role,
        })
        assert response.status_code == 201, response.text
        account = response.json()
        headers = bearer(account["token"])

        if approved and role != "admin":
            r = client.put(f"/api/admin/users/{account['id']}/status", json={"status": "approved"}, headers=admin_headers)
            assert r.status_code == 200, r.text

        if profile:
            r = client.put("/api/auth/profile", json=profile, headers=headers)
            assert r.status_code == 200, r.text
            account = r.json()

        account["headers"] = headers
        account["email"] = email
        return account
    return _make


@pytest.fixture
def drive_payload():
    def _payload(**overrides):
        payload = {
            "title": "Graduate Software Engineer",
            "description": "Backend services in Python",
            "batchYear": 2025,
            "cgpaCutoff": 7.5,
            "skills": "Python, SQL ,  Docker",
            "salary": "12 LPA",
            "deadline": FUTURE,
            "questions": [
                {"text": "Explain a Python generator", "kind": "text", "marks": 10},
                {"text": "Which is immutable?", "options": ["list", "tuple"], "kind": "mcq", "marks": 5},
            ],
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def company(make_account):
    return make_account("company", name="Acme")


@pytest.fixture
def drive(client, company, drive_payload):
    response = client.post("/api/drives", json=drive_payload(), headers=company["headers"])
    assert response.status_code == 201, response.text
    return response.json()
