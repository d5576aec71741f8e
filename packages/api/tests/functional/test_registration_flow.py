# This project was developed with assistance from AI tools.
"""Functional tests: sign-up and login.

Workers register asynchronously (queued, then polled). Clients register in
the request. Both then log in with email and password.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db import get_db
from db.enums import UserRole, UserStatus
from fastapi.testclient import TestClient

from localaid.core.auth import hash_password
from localaid.services.queue import QueueSendError

from .mock_db import make_mock_session

pytestmark = pytest.mark.functional

WORKER_FORM = {
    "email": "Priya@Example.com",
    "password": "s3cure-pass",
    "firstName": "Priya",
    "lastName": "Nair",
    "mobile": "0400 000 000",
    "location": "Parramatta, NSW 2150",
    "age": 34,
    "services": ["Support Worker"],
    "supportWorkerCategories": ["personal-care"],
}

CLIENT_FORM = {
    "email": "grace@example.com",
    "password": "another-pass",
    "firstName": "Grace",
    "lastName": "Lee",
    "mobile": "0411 111 111",
    "isSelfManaged": False,
    "fundingType": "NDIS",
    "relationshipToClient": "PARENT",
    "clientFirstName": "Sam",
    "clientLastName": "Lee",
    "servicesRequested": {
        "support-worker": {
            "categoryName": "Support Worker",
            "subCategories": [{"id": "personal-care", "name": "Personal care"}],
        }
    },
    "location": "Newtown NSW 2042",
    "consent": True,
}


@pytest.fixture
def anon_client(app):
    """Unauthenticated client; registration routes take no user."""
    return TestClient(app)


@pytest.fixture
def db_client(app):
    """Unauthenticated client backed by the given mock session."""

    def _make(session) -> TestClient:
        async def fake_db():
            yield session

        app.dependency_overrides[get_db] = fake_db
        return TestClient(app)

    return _make


def _id_assigning_session(count: int = 0):
    """Mock session whose flush() gives every added row an id."""
    session = make_mock_session(count=count)
    added: list = []
    session.add.side_effect = added.append
    session.add_all.side_effect = added.extend

    async def _flush():
        for index, obj in enumerate(added):
            if getattr(obj, "id", None) is None:
                obj.id = f"row-{index}"

    session.flush = AsyncMock(side_effect=_flush)
    return session


class TestWorkerAsyncRegistration:
    """POST /api/auth/register/worker-async and the status poll."""

    def test_queues_registration(self, anon_client):
        with patch(
            "localaid.routes.auth.queue_worker_registration",
            new=AsyncMock(return_value="job-123"),
        ) as queued:
            resp = anon_client.post("/api/auth/register/worker-async", json=WORKER_FORM)

        assert resp.status_code == 202
        assert resp.json()["jobId"] == "job-123"
        payload = queued.await_args.args[0]
        assert "password" not in payload
        assert payload["passwordHash"].startswith("$pbkdf2-sha256$")
        assert payload["supportWorkerCategories"] == ["personal-care"]

    def test_invalid_form_returns_field_map(self, anon_client):
        form = {**WORKER_FORM, "password": "short", "firstName": ""}
        resp = anon_client.post("/api/auth/register/worker-async", json=form)

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "Validation failed"
        assert set(body["details"]) >= {"password", "firstName"}

    def test_broker_unavailable_is_503(self, anon_client):
        with patch(
            "localaid.routes.auth.queue_worker_registration",
            new=AsyncMock(side_effect=QueueSendError("send returned null")),
        ):
            resp = anon_client.post("/api/auth/register/worker-async", json=WORKER_FORM)

        assert resp.status_code == 503
        assert "temporarily unavailable" in resp.json()["error"]

    def test_status_completed(self, anon_client):
        job = MagicMock(state="SUCCESS", result={"success": True, "user_id": "user-9"})
        with patch("localaid.services.queue._result_for", return_value=job):
            resp = anon_client.get("/api/auth/registration-status/job-123")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "completed"
        assert data["userId"] == "user-9"
        assert data["message"] == "Registration completed successfully"

    def test_status_business_failure(self, anon_client):
        job = MagicMock(
            state="SUCCESS",
            result={"success": False, "error": "An account with this email already exists"},
        )
        with patch("localaid.services.queue._result_for", return_value=job):
            resp = anon_client.get("/api/auth/registration-status/job-123")

        data = resp.json()
        assert data["status"] == "failed"
        assert data["error"] == "An account with this email already exists"

    def test_status_unknown_job_is_processing(self, anon_client):
        job = MagicMock(state="PENDING")
        with patch("localaid.services.queue._result_for", return_value=job):
            resp = anon_client.get("/api/auth/registration-status/never-seen")

        assert resp.json()["status"] == "processing"


class TestClientRegistration:
    """POST /api/auth/register/client."""

    def test_creates_client_and_participant(self, db_client):
        session = _id_assigning_session(count=0)
        resp = db_client(session).post("/api/auth/register/client", json=CLIENT_FORM)

        assert resp.status_code == 201
        data = resp.json()
        assert data["message"] == "Registration successful"
        assert data["userId"]
        assert data["participantId"]
        session.commit.assert_awaited_once()

        participant = session.add_all.call_args.args[0][2]
        assert (participant.first_name, participant.last_name) == ("Sam", "Lee")
        assert participant.postal_code == "2042"

    def test_duplicate_email_is_409(self, db_client):
        session = make_mock_session(count=1)
        resp = db_client(session).post("/api/auth/register/client", json=CLIENT_FORM)

        assert resp.status_code == 409
        assert resp.json()["error"] == "An account with this email already exists"
        session.add_all.assert_not_called()

    def test_missing_consent_is_400(self, db_client):
        form = {k: v for k, v in CLIENT_FORM.items() if k != "consent"}
        resp = db_client(make_mock_session()).post("/api/auth/register/client", json=form)
        assert resp.status_code == 400
        assert "consent" in resp.json()["details"]


class TestLogin:
    """POST /api/auth/login."""

    def _user(self, status=UserStatus.ACTIVE):
        user = MagicMock()
        user.id = "worker-user-001"
        user.email = "priya@example.com"
        user.password_hash = hash_password("s3cure-pass")
        user.role = UserRole.WORKER
        user.status = status
        user.worker_profile.first_name = "Priya"
        user.worker_profile.last_name = "Nair"
        return user

    def _client(self, db_client, user):
        return db_client(make_mock_session(single=user))

    def test_login_returns_token(self, db_client):
        client = self._client(db_client, self._user())
        resp = client.post("/api/auth/login", json={"email": "Priya@example.com", "password": "s3cure-pass"})

        assert resp.status_code == 200
        data = resp.json()
        assert data["token_type"] == "bearer"
        assert data["role"] == "worker"
        assert data["access_token"].count(".") == 2

    def test_wrong_password_is_401(self, db_client):
        client = self._client(db_client, self._user())
        resp = client.post("/api/auth/login", json={"email": "priya@example.com", "password": "nope-nope"})
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid email or password"

    def test_suspended_user_is_401(self, db_client):
        client = self._client(db_client, self._user(status=UserStatus.SUSPENDED))
        resp = client.post("/api/auth/login", json={"email": "priya@example.com", "password": "s3cure-pass"})
        assert resp.status_code == 401
