# This project was developed with assistance from AI tools.
"""Service catalog seeding.

Loads the master documents, service categories, subcategories and their
document links from ``fixtures``. Documents, categories and subcategories are
upserted by id; each owner's links are replaced wholesale, so re-running the
seed converges on the fixture contents.
"""

import logging

from db import (
    AuditLog,
    CategoryDocument,
    Document,
    ServiceCategory,
    Subcategory,
    SubcategoryDocument,
)
from db.enums import RequirementLevel
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .fixtures import CATEGORIES, DOCUMENT_SETS, DOCUMENTS

logger = logging.getLogger(__name__)

REF_PREFIX = "$ref:"


def expand_document_refs(docs: list[str] | str, document_sets: dict[str, list[str]]) -> list[str]:
    """Replace ``$ref:<name>`` entries with the referenced set, recursively.

    Unknown set names expand to nothing. Order is preserved and repeats dropped.
    """
    if isinstance(docs, str):
        docs = [docs]
    expanded: list[str] = []
    for doc in docs:
        if doc.startswith(REF_PREFIX):
            ref = doc[len(REF_PREFIX):]
            if ref not in document_sets:
                logger.warning("Unknown document set %r", ref)
                continue
            items = expand_document_refs(document_sets[ref], document_sets)
        else:
            items = [doc]
        for item in items:
            if item not in expanded:
                expanded.append(item)
    return expanded


def category_links(category: dict, document_sets: dict[str, list[str]]) -> list[dict]:
    """Flatten a category's document rules into CategoryDocument column values."""
    links: list[dict] = []
    seen: set[str] = set()

    def add(doc_id: str, level: RequirementLevel, condition: str | None = None, required_if=None):
        if doc_id in seen:
            return
        seen.add(doc_id)
        links.append(
            {
                "document_id": doc_id,
                "document_type": level,
                "condition_key": condition,
                "required_if_true": required_if,
            }
        )

    rules = category.get("documents") or {}
    for doc_id in expand_document_refs(rules.get("required", []), document_sets):
        add(doc_id, RequirementLevel.REQUIRED)
    for doc_id in expand_document_refs(rules.get("optional", []), document_sets):
        add(doc_id, RequirementLevel.OPTIONAL)
    for cond in rules.get("conditional", []):
        for doc_id in expand_document_refs(cond["documents"], document_sets):
            add(doc_id, RequirementLevel.CONDITIONAL, cond["condition"], cond.get("required_if"))

    shared = category.get("shared_documents") or {}
    for doc_id in expand_document_refs(shared.get("required", []), document_sets):
        add(doc_id, RequirementLevel.REQUIRED)
    return links


async def _clear_catalog(session: AsyncSession) -> None:
    await session.execute(delete(SubcategoryDocument))
    await session.execute(delete(CategoryDocument))
    await session.execute(delete(Subcategory))
    await session.execute(delete(ServiceCategory))
    await session.execute(delete(Document))


async def seed_catalog(session: AsyncSession, force: bool = False) -> dict:
    """Upsert the catalog. ``force`` wipes catalog tables first."""
    if force:
        logger.info("Clearing service catalog before re-seed")
        await _clear_catalog(session)

    for doc in DOCUMENTS.values():
        await session.merge(Document(**doc))

    category_link_count = 0
    subcategory_count = 0
    subcategory_link_count = 0
    for category in CATEGORIES:
        await session.merge(
            ServiceCategory(
                id=category["id"],
                name=category["name"],
                requires_qualification=category.get("requires_qualification", False),
            )
        )
        await session.execute(delete(CategoryDocument).where(CategoryDocument.category_id == category["id"]))
        for link in category_links(category, DOCUMENT_SETS):
            session.add(CategoryDocument(category_id=category["id"], **link))
            category_link_count += 1

        for sub in category.get("subcategories", []):
            await session.merge(
                Subcategory(
                    id=sub["id"],
                    category_id=category["id"],
                    name=sub["name"],
                    requires_registration=sub.get("requires_registration"),
                )
            )
            subcategory_count += 1
            await session.execute(
                delete(SubcategoryDocument).where(SubcategoryDocument.subcategory_id == sub["id"])
            )
            additional = (sub.get("additional_documents") or {}).get("required", [])
            for doc_id in expand_document_refs(additional, DOCUMENT_SETS):
                session.add(
                    SubcategoryDocument(
                        subcategory_id=sub["id"],
                        document_id=doc_id,
                        document_type=RequirementLevel.REQUIRED,
                    )
                )
                subcategory_link_count += 1

    summary = {
        "documents": len(DOCUMENTS),
        "categories": len(CATEGORIES),
        "subcategories": subcategory_count,
        "category_documents": category_link_count,
        "subcategory_documents": subcategory_link_count,
    }
    session.add(
        AuditLog(
            user_id="system",
            user_role="system",
            event_type="catalog_seeded",
            event_data=summary,
        )
    )
    await session.commit()
    logger.info("Service catalog seeded: %s", summary)
    return {"status": "seeded", **summary}


async def get_catalog_status(session: AsyncSession) -> dict:
    """Row counts for the catalog tables."""
    counts = {}
    for label, model in (
        ("documents", Document),
        ("categories", ServiceCategory),
        ("subcategories", Subcategory),
    ):
        result = await session.execute(select(func.count()).select_from(model))
        counts[label] = result.scalar() or 0
    return {"seeded": counts["documents"] > 0, **counts}
