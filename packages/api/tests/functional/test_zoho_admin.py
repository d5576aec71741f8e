# This project was developed with assistance from AI tools.
"""Functional tests: admin Zoho CRM endpoints."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from localaid.services.zoho import ZohoAPIError, ZohoAuthError

from .mock_db import make_mock_session
from .personas import admin, worker_priya

pytestmark = pytest.mark.functional


@pytest.fixture
def zoho():
    client = MagicMock()
    client.is_configured = True
    client.client_id = "cid"
    client.client_secret = "secret"
    with patch("localaid.routes.admin.get_zoho_client", return_value=client):
        yield client


@pytest.fixture
def admin_client(make_client):
    return make_client(admin(), make_mock_session())


class TestAuthorize:
    """GET /api/admin/zoho/authorize."""

    def test_returns_consent_url(self, admin_client, zoho):
        zoho.get_authorization_url.return_value = "https://accounts.example.com/oauth/v2/auth?x=1"
        resp = admin_client.get("/api/admin/zoho/authorize")
        assert resp.status_code == 200
        assert resp.json()["authorizationUrl"].startswith("https://accounts.example.com/")

    def test_missing_client_id_is_503(self, admin_client, zoho):
        zoho.client_id = None
        assert admin_client.get("/api/admin/zoho/authorize").status_code == 503

    def test_worker_denied(self, make_client, zoho):
        client = make_client(worker_priya(), make_mock_session())
        assert client.get("/api/admin/zoho/authorize").status_code == 403


class TestCallback:
    """GET /api/admin/zoho/callback -- reached by browser redirect, no bearer token."""

    def test_exchanges_code_for_tokens(self, app, zoho):
        zoho.exchange_code = AsyncMock(
            return_value={"access_token": "a", "refresh_token": "r-123", "expires_in": 3600}
        )
        resp = TestClient(app).get("/api/admin/zoho/callback", params={"code": "one-time"})

        assert resp.status_code == 200
        assert resp.json()["refreshToken"] == "r-123"
        assert resp.json()["expiresIn"] == 3600
        zoho.exchange_code.assert_awaited_once_with("one-time")

    def test_denied_consent_is_400(self, app, zoho):
        resp = TestClient(app).get("/api/admin/zoho/callback", params={"error": "access_denied"})
        assert resp.status_code == 400
        assert resp.json()["details"] == "access_denied"

    def test_missing_code_is_400(self, app, zoho):
        resp = TestClient(app).get("/api/admin/zoho/callback")
        assert resp.status_code == 400
        assert resp.json()["error"] == "No authorization code received"

    def test_rejected_code_is_502(self, app, zoho):
        zoho.exchange_code = AsyncMock(side_effect=ZohoAuthError("Token request rejected: invalid_code"))
        resp = TestClient(app).get("/api/admin/zoho/callback", params={"code": "stale"})
        assert resp.status_code == 502
        assert "invalid_code" in resp.json()["details"]


class TestSubmitContractor:
    """POST /api/admin/zoho/submit-contractor."""

    def test_creates_record(self, admin_client, zoho):
        zoho.create_contractor = AsyncMock(
            return_value={"data": [{"status": "success", "details": {"id": "5501"}}]}
        )
        resp = admin_client.post(
            "/api/admin/zoho/submit-contractor",
            json={
                "firstName": "Priya",
                "lastName": "Nair",
                "email": "priya@example.com",
                "services": ["Support Worker"],
                "hasVehicle": True,
            },
        )

        assert resp.status_code == 201
        assert resp.json()["crmRecordId"] == "5501"
        form = zoho.create_contractor.await_args.args[0]
        assert form["firstName"] == "Priya"
        assert form["hasVehicle"] is True

    def test_missing_required_fields_is_400(self, admin_client, zoho):
        zoho.create_contractor = AsyncMock()
        resp = admin_client.post("/api/admin/zoho/submit-contractor", json={"firstName": "Priya"})

        assert resp.status_code == 400
        assert resp.json()["details"] == ["lastName", "email"]
        zoho.create_contractor.assert_not_awaited()

    def test_rejected_record_is_502(self, admin_client, zoho):
        zoho.create_contractor = AsyncMock(side_effect=ZohoAPIError("duplicate data"))
        resp = admin_client.post(
            "/api/admin/zoho/submit-contractor",
            json={"firstName": "Priya", "lastName": "Nair", "email": "priya@example.com"},
        )
        assert resp.status_code == 502
        assert resp.json()["error"] == "Failed to submit contractor"


class TestMetadataLookups:
    """Module, field, search and record lookups."""

    def test_modules(self, admin_client, zoho):
        zoho.get_modules = AsyncMock(return_value={"modules": [{"api_name": "Contractors"}]})
        resp = admin_client.get("/api/admin/zoho/modules")
        assert resp.status_code == 200
        assert resp.json()["data"]["modules"][0]["api_name"] == "Contractors"

    def test_fields_for_module(self, admin_client, zoho):
        zoho.get_module_fields = AsyncMock(return_value={"fields": [{"api_name": "Email"}]})
        resp = admin_client.get("/api/admin/zoho/fields/Contractors")
        assert resp.status_code == 200
        zoho.get_module_fields.assert_awaited_once_with("Contractors")

    def test_search_defaults_to_contractors(self, admin_client, zoho):
        zoho.search_records = AsyncMock(return_value=[{"id": "7"}])
        resp = admin_client.get(
            "/api/admin/zoho/search", params={"criteria": "(Email:equals:priya@example.com)"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"] == [{"id": "7"}]
        zoho.search_records.assert_awaited_once_with("Contractors", "(Email:equals:priya@example.com)")

    def test_search_requires_criteria(self, admin_client, zoho):
        assert admin_client.get("/api/admin/zoho/search").status_code == 422

    def test_record_lookup(self, admin_client, zoho):
        zoho.get_contact_by_id = AsyncMock(return_value={"id": "5501", "Email": "priya@example.com"})
        resp = admin_client.get("/api/admin/zoho/records/5501")
        assert resp.status_code == 200
        assert resp.json()["data"]["Email"] == "priya@example.com"

    def test_missing_record_is_404(self, admin_client, zoho):
        zoho.get_contact_by_id = AsyncMock(return_value=None)
        assert admin_client.get("/api/admin/zoho/records/404404").status_code == 404

    def test_unconfigured_is_503(self, admin_client, zoho):
        zoho.is_configured = False
        zoho.get_modules = AsyncMock()
        resp = admin_client.get("/api/admin/zoho/modules")
        assert resp.status_code == 503
        zoho.get_modules.assert_not_awaited()


class TestSyncContractors:
    """POST /api/admin/zoho/sync-contractors."""

    def test_since_is_passed_through(self, admin_client, zoho):
        summary = {
            "stats": {"total": 1, "synced": 1, "created": 1, "updated": 0, "skipped": 0, "errors": 0},
            "duration_ms": 12,
            "error_messages": [],
        }
        sync = AsyncMock(return_value=summary)
        with patch("localaid.routes.admin.sync_contractors", sync):
            resp = admin_client.post(
                "/api/admin/zoho/sync-contractors", params={"since": "2026-05-01T00:00:00Z"}
            )

        assert resp.status_code == 200
        assert resp.json()["message"] == "Synced 1 of 1 contractors"
        assert sync.await_args.kwargs["since"].year == 2026

    def test_upstream_failure_is_502(self, admin_client, zoho):
        sync = AsyncMock(side_effect=ZohoAPIError("Zoho GET Contractors failed: 500"))
        with patch("localaid.routes.admin.sync_contractors", sync):
            resp = admin_client.post("/api/admin/zoho/sync-contractors")
        assert resp.status_code == 502
        assert resp.json()["error"] == "Failed to sync contractors"
