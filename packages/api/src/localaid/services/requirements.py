# This project was developed with assistance from AI tools.
"""Requirement derivation from a worker's selected services.

Service strings have the form ``"Category"`` or ``"Category:Subcategory"``.
Each is resolved against the seeded service catalog; the catalog documents
linked to the category (and subcategory) are grouped into the five sections
the onboarding wizards consume.
"""

import logging

from db import (
    CatalogCategory,
    CategoryDocument,
    ServiceCategory,
    Subcategory,
    SubcategoryDocument,
    WorkerProfile,
)
from db.enums import RequirementLevel
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from ..schemas.requirements import GroupedRequirements, ParsedService, RequirementDocument
from .service_catalog import get_qualifications_for_service, slugify

logger = logging.getLogger(__name__)

_SECTION_FOR_CATEGORY = {
    CatalogCategory.IDENTITY: "base_compliance",
    CatalogCategory.BUSINESS: "base_compliance",
    CatalogCategory.COMPLIANCE: "base_compliance",
    CatalogCategory.TRAINING: "trainings",
    CatalogCategory.QUALIFICATION: "qualifications",
    CatalogCategory.INSURANCE: "insurance",
    CatalogCategory.TRANSPORT: "transport",
}


def parse_service(service: str) -> ParsedService:
    category_name, _, subcategory_name = service.partition(":")
    category_name = category_name.strip()
    subcategory_name = subcategory_name.strip() or None
    return ParsedService(
        category_name=category_name,
        subcategory_name=subcategory_name,
        category_id=slugify(category_name),
        subcategory_id=slugify(subcategory_name) if subcategory_name else None,
    )


def parse_services(services: list[str]) -> list[ParsedService]:
    """Parse service strings, skipping blanks and exact repeats."""
    seen: set[str] = set()
    parsed: list[ParsedService] = []
    for raw in services:
        service = raw.strip()
        if not service or service in seen:
            continue
        seen.add(service)
        parsed.append(parse_service(service))
    return parsed


def split_services_param(value: str | None) -> list[str]:
    """``"a,b"`` query parameter -> ``["a", "b"]``."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


async def get_worker_profile_for_user(session: AsyncSession, user_id: str) -> WorkerProfile | None:
    stmt = (
        select(WorkerProfile)
        .options(selectinload(WorkerProfile.services))
        .where(WorkerProfile.user_id == user_id)
    )
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


def worker_service_strings(profile: WorkerProfile) -> list[str]:
    return [ws.service_string for ws in profile.services or []]


def _catalog_link_to_requirement(
    link: CategoryDocument | SubcategoryDocument,
    *,
    service_category: str,
    subcategory: str | None = None,
) -> RequirementDocument:
    doc = link.document
    return RequirementDocument(
        id=doc.id,
        name=doc.name,
        category=doc.category,
        description=doc.description,
        has_expiration=bool(doc.has_expiration),
        document_type=link.document_type or RequirementLevel.REQUIRED,
        service_category=service_category,
        subcategory=subcategory,
        condition_key=link.condition_key,
        required_if_true=link.required_if_true,
    )


def group_requirements(documents: list[RequirementDocument]) -> GroupedRequirements:
    """Place each document in its wizard section, first occurrence of an id wins."""
    grouped = GroupedRequirements()
    seen: set[str] = set()
    for doc in documents:
        if doc.id in seen:
            continue
        seen.add(doc.id)
        getattr(grouped, _SECTION_FOR_CATEGORY[doc.category]).append(doc)
    return grouped


def qualification_requirements(parsed: list[ParsedService]) -> list[RequirementDocument]:
    """Service-scoped qualification documents, ids namespaced as ``service:type``."""
    docs: list[RequirementDocument] = []
    for service in parsed:
        for qual in get_qualifications_for_service(service.category_name):
            docs.append(
                RequirementDocument(
                    id=f"{service.category_id}:{qual.type}",
                    name=qual.name,
                    category=CatalogCategory.QUALIFICATION,
                    description=qual.description,
                    has_expiration=qual.expiry_years is not None,
                    document_type=RequirementLevel.OPTIONAL,
                    service_category=service.category_name,
                )
            )
    return docs


async def get_requirements_for_services(
    session: AsyncSession,
    services: list[str],
) -> tuple[list[ParsedService], GroupedRequirements]:
    """Resolve services against the catalog and group the applicable documents."""
    parsed = parse_services(services)
    if not parsed:
        return parsed, GroupedRequirements()

    category_ids = sorted({p.category_id for p in parsed})
    category_names = sorted({p.category_name for p in parsed})
    cat_stmt = (
        select(ServiceCategory)
        .options(
            selectinload(ServiceCategory.documents).joinedload(CategoryDocument.document),
        )
        .where(or_(ServiceCategory.id.in_(category_ids), ServiceCategory.name.in_(category_names)))
    )
    cat_result = await session.execute(cat_stmt)
    categories = {c.id: c for c in cat_result.unique().scalars().all()}

    subcategory_ids = sorted({p.subcategory_id for p in parsed if p.subcategory_id})
    subcategories: dict[str, Subcategory] = {}
    if subcategory_ids:
        sub_stmt = (
            select(Subcategory)
            .options(
                selectinload(Subcategory.documents).joinedload(SubcategoryDocument.document),
            )
            .where(Subcategory.id.in_(subcategory_ids))
        )
        sub_result = await session.execute(sub_stmt)
        subcategories = {s.id: s for s in sub_result.unique().scalars().all()}

    by_name = {c.name: c for c in categories.values()}
    documents: list[RequirementDocument] = []
    for service in parsed:
        category = categories.get(service.category_id) or by_name.get(service.category_name)
        if category is None:
            logger.warning("Unknown service category %r", service.category_name)
            continue
        for link in category.documents:
            documents.append(
                _catalog_link_to_requirement(link, service_category=category.name)
            )
        subcategory = subcategories.get(service.subcategory_id) if service.subcategory_id else None
        if subcategory is not None:
            for link in subcategory.documents:
                documents.append(
                    _catalog_link_to_requirement(
                        link, service_category=category.name, subcategory=subcategory.name,
                    )
                )

    documents.extend(qualification_requirements(parsed))
    return parsed, group_requirements(documents)


async def get_requirements_for_worker(
    session: AsyncSession,
    user_id: str,
) -> tuple[list[ParsedService], GroupedRequirements] | None:
    """Requirements for the worker's saved services. None if no worker profile."""
    profile = await get_worker_profile_for_user(session, user_id)
    if profile is None:
        return None
    return await get_requirements_for_services(session, worker_service_strings(profile))

