# This project was developed with assistance from AI tools.
"""Tests for ORM model metadata (no database required)."""

from sqlalchemy import UniqueConstraint

from db import Base, WorkerService

EXPECTED_TABLES = {
    "users",
    "worker_profiles",
    "worker_services",
    "verification_requirements",
    "documents",
    "service_categories",
    "subcategories",
    "category_documents",
    "subcategory_documents",
    "client_profiles",
    "participants",
    "contractor_profiles",
    "audit_logs",
}


def _unique_constraints(table_name: str) -> set[str]:
    table = Base.metadata.tables[table_name]
    return {c.name for c in table.constraints if isinstance(c, UniqueConstraint)}


def test_all_tables_registered():
    assert EXPECTED_TABLES <= set(Base.metadata.tables)


def test_catalog_links_are_unique_per_owner():
    assert "uq_category_document" in _unique_constraints("category_documents")
    assert "uq_subcategory_document" in _unique_constraints("subcategory_documents")
    assert "uq_worker_service" in _unique_constraints("worker_services")


def test_user_email_is_unique():
    assert Base.metadata.tables["users"].c.email.unique


def test_service_string():
    assert WorkerService(category_name="Support Worker").service_string == "Support Worker"
    service = WorkerService(category_name="Support Worker", subcategory_name="Personal care")
    assert service.service_string == "Support Worker:Personal care"
