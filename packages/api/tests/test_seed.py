# This project was developed with assistance from AI tools.
"""Tests for service catalog seeding and the admin seed endpoint."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from db import AuditLog, CategoryDocument, SubcategoryDocument, get_db
from db.enums import CatalogCategory, RequirementLevel, UserRole
from fastapi import FastAPI
from fastapi.testclient import TestClient

from localaid.middleware.auth import get_current_user
from localaid.routes.admin import router
from localaid.schemas.auth import UserContext
from localaid.services.seed.fixtures import CATEGORIES, DOCUMENT_SETS, DOCUMENTS
from localaid.services.seed.seeder import (
    category_links,
    expand_document_refs,
    get_catalog_status,
    seed_catalog,
)

_ADMIN_USER = UserContext(
    user_id="admin",
    role=UserRole.ADMIN,
    email="admin@localaid.com.au",
    name="Admin User",
)


def _seed_session():
    session = AsyncMock()
    session.add = MagicMock()
    return session


def _added(session, model):
    return [c.args[0] for c in session.add.call_args_list if isinstance(c.args[0], model)]


# ---------------------------------------------------------------------------
# Fixture data
# ---------------------------------------------------------------------------


def test_every_referenced_document_exists():
    """All links, including expanded sets, point at master documents."""
    for category in CATEGORIES:
        for link in category_links(category, DOCUMENT_SETS):
            assert link["document_id"] in DOCUMENTS, (category["id"], link["document_id"])
        for sub in category.get("subcategories", []):
            extra = (sub.get("additional_documents") or {}).get("required", [])
            for doc_id in expand_document_refs(extra, DOCUMENT_SETS):
                assert doc_id in DOCUMENTS


def test_every_category_requires_base_compliance():
    base = set(DOCUMENT_SETS["baseCompliance"])
    for category in CATEGORIES:
        required = {
            link["document_id"]
            for link in category_links(category, DOCUMENT_SETS)
            if link["document_type"] == RequirementLevel.REQUIRED
        }
        assert base <= required, category["id"]


def test_document_ids_unique_and_categorised():
    assert all(isinstance(doc["category"], CatalogCategory) for doc in DOCUMENTS.values())
    ids = [c["id"] for c in CATEGORIES]
    assert len(ids) == len(set(ids))


# ---------------------------------------------------------------------------
# Reference expansion
# ---------------------------------------------------------------------------


def test_expand_nested_refs_preserves_order():
    assert expand_document_refs(["$ref:supportTrainings"], DOCUMENT_SETS) == [
        "ndis-worker-orientation",
        "infection-control-training",
        "effective-communication",
        "safe-enjoyable-meals",
    ]


def test_expand_drops_repeats_and_unknown_sets():
    sets = {"a": ["x", "y"], "b": ["$ref:a", "z"]}
    assert expand_document_refs(["y", "$ref:b", "$ref:missing"], sets) == ["y", "x", "z"]


def test_expand_accepts_single_string():
    assert expand_document_refs("$ref:transport", DOCUMENT_SETS) == ["drivers-licence", "car-insurance"]


# ---------------------------------------------------------------------------
# Category links
# ---------------------------------------------------------------------------


def test_category_links_levels_and_conditions():
    support = next(c for c in CATEGORIES if c["id"] == "support-worker")
    links = {link["document_id"]: link for link in category_links(support, DOCUMENT_SETS)}

    assert links["police-check"]["document_type"] == RequirementLevel.REQUIRED
    assert links["first-aid-cpr"]["document_type"] == RequirementLevel.OPTIONAL
    assert links["drivers-licence"]["document_type"] == RequirementLevel.CONDITIONAL
    assert links["drivers-licence"]["condition_key"] == "hasVehicle"
    assert links["drivers-licence"]["required_if_true"] is True
    assert links["working-with-children"]["condition_key"] == "worksWithChildren"


def test_category_links_first_level_wins():
    category = {
        "id": "x",
        "documents": {"required": ["police-check"], "optional": ["police-check", "manual-handling"]},
    }
    links = category_links(category, DOCUMENT_SETS)
    assert [(link["document_id"], link["document_type"]) for link in links] == [
        ("police-check", RequirementLevel.REQUIRED),
        ("manual-handling", RequirementLevel.OPTIONAL),
    ]


def test_category_links_from_shared_documents():
    therapy = next(c for c in CATEGORIES if c["id"] == "therapeutic-supports")
    doc_ids = [link["document_id"] for link in category_links(therapy, DOCUMENT_SETS)]
    assert doc_ids[:5] == DOCUMENT_SETS["baseCompliance"]
    assert "professional-indemnity" in doc_ids


# ---------------------------------------------------------------------------
# seed_catalog
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_seed_catalog_upserts_and_links():
    session = _seed_session()

    result = await seed_catalog(session)

    expected_links = sum(len(category_links(c, DOCUMENT_SETS)) for c in CATEGORIES)
    expected_subs = sum(len(c.get("subcategories", [])) for c in CATEGORIES)
    assert result["status"] == "seeded"
    assert result["documents"] == len(DOCUMENTS)
    assert result["categories"] == len(CATEGORIES)
    assert result["subcategories"] == expected_subs
    assert result["category_documents"] == expected_links
    assert result["subcategory_documents"] == 5

    assert session.merge.await_count == len(DOCUMENTS) + len(CATEGORIES) + expected_subs
    assert len(_added(session, CategoryDocument)) == expected_links
    assert len(_added(session, SubcategoryDocument)) == 5
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_seed_catalog_writes_audit_row():
    session = _seed_session()
    await seed_catalog(session)

    (audit,) = _added(session, AuditLog)
    assert audit.event_type == "catalog_seeded"
    assert audit.user_id == "system"
    assert audit.event_data["categories"] == len(CATEGORIES)


@pytest.mark.asyncio
async def test_force_clears_catalog_tables_first():
    plain, forced = _seed_session(), _seed_session()

    await seed_catalog(plain)
    await seed_catalog(forced, force=True)

    assert forced.execute.await_count - plain.execute.await_count == 5


@pytest.mark.asyncio
async def test_catalog_status_counts():
    session = AsyncMock()
    counts = [MagicMock(scalar=MagicMock(return_value=n)) for n in (21, 7, 0)]
    session.execute = AsyncMock(side_effect=counts)

    status = await get_catalog_status(session)
    assert status == {"seeded": True, "documents": 21, "categories": 7, "subcategories": 0}


# ---------------------------------------------------------------------------
# Admin endpoint
# ---------------------------------------------------------------------------


def _make_app(session, user: UserContext = _ADMIN_USER) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix="/api/admin")

    async def fake_user():
        return user

    async def fake_db():
        yield session

    app.dependency_overrides[get_current_user] = fake_user
    app.dependency_overrides[get_db] = fake_db
    return app


def test_seed_endpoint_returns_summary():
    client = TestClient(_make_app(_seed_session()))
    resp = client.post("/api/admin/seed")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "seeded"
    assert body["categoryDocuments"] > 0
    assert body["subcategoryDocuments"] == 5


def test_seed_endpoint_requires_admin():
    worker = UserContext(
        user_id="w", role=UserRole.WORKER, email="w@example.com", name="W",
    )
    client = TestClient(_make_app(_seed_session(), worker))
    assert client.post("/api/admin/seed").status_code == 403
