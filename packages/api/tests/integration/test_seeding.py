# This project was developed with assistance from AI tools.
"""Catalog seeding against a real database."""

import pytest
from db import AuditLog, CategoryDocument, Document, SubcategoryDocument
from sqlalchemy import func, select

from localaid.services.seed.seeder import get_catalog_status, seed_catalog
from localaid.services.seed.fixtures import CATEGORIES, DOCUMENTS
from tests.functional.personas import admin

pytestmark = pytest.mark.integration


async def _count(session, model):
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def test_seed_populates_catalog(db_session):
    result = await seed_catalog(db_session)

    assert result["status"] == "seeded"
    assert await _count(db_session, Document) == len(DOCUMENTS)
    assert await _count(db_session, CategoryDocument) == result["category_documents"]
    assert await _count(db_session, SubcategoryDocument) == result["subcategory_documents"]

    status = await get_catalog_status(db_session)
    assert status["seeded"] is True
    assert status["categories"] == len(CATEGORIES)


async def test_seed_is_idempotent(db_session):
    first = await seed_catalog(db_session)
    second = await seed_catalog(db_session)

    assert first == second
    assert await _count(db_session, CategoryDocument) == first["category_documents"]
    assert await _count(db_session, SubcategoryDocument) == first["subcategory_documents"]


async def test_force_reseed_rebuilds_links(db_session):
    await seed_catalog(db_session)
    result = await seed_catalog(db_session, force=True)

    assert await _count(db_session, CategoryDocument) == result["category_documents"]
    audit = await db_session.execute(
        select(func.count()).select_from(AuditLog).where(AuditLog.event_type == "catalog_seeded")
    )
    assert audit.scalar_one() == 2


async def test_seed_endpoint(client_factory):
    client = await client_factory(admin())
    async with client:
        resp = await client.post("/api/admin/seed")

    assert resp.status_code == 200
    body = resp.json()
    assert body["documents"] == len(DOCUMENTS)
    assert body["subcategoryDocuments"] == 5
