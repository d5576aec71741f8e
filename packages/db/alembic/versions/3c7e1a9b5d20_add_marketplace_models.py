# This project was developed with assistance from AI tools.
"""add marketplace models

Revision ID: 3c7e1a9b5d20
Revises:
Create Date: 2026-10-18 09:12:41.508113

"""

import sqlalchemy as sa
from alembic import op

revision = "3c7e1a9b5d20"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(6), nullable=False),
        sa.Column("status", sa.String(9), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "worker_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("mobile", sa.String(30), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=True),
        sa.Column("introduction", sa.Text(), nullable=True),
        sa.Column("street_address", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("latitude", sa.String(32), nullable=True),
        sa.Column("longitude", sa.String(32), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(30), nullable=True),
        sa.Column("abn", sa.String(20), nullable=True),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_status", sa.String(14), nullable=False),
        sa.Column("profile_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("setup_progress", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "worker_services",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("worker_profile_id", sa.String(36), nullable=False),
        sa.Column("category_id", sa.String(100), nullable=False),
        sa.Column("category_name", sa.String(255), nullable=False),
        sa.Column("subcategory_id", sa.String(100), nullable=True),
        sa.Column("subcategory_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["worker_profile_id"], ["worker_profiles.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("worker_profile_id", "category_id", "subcategory_id", name="uq_worker_service"),
    )
    op.create_index("ix_worker_services_worker_profile_id", "worker_services", ["worker_profile_id"])

    op.create_table(
        "verification_requirements",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("worker_profile_id", sa.String(36), nullable=False),
        sa.Column("requirement_type", sa.String(255), nullable=False),
        sa.Column("requirement_name", sa.String(255), nullable=False),
        sa.Column("document_category", sa.String(21), nullable=True),
        sa.Column("status", sa.String(9), nullable=False),
        sa.Column("is_required", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("document_url", sa.Text(), nullable=True),
        sa.Column("document_uploaded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.String(255), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["worker_profile_id"], ["worker_profiles.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "ix_verification_requirements_worker_profile_id",
        "verification_requirements",
        ["worker_profile_id"],
    )
    op.create_index(
        "ix_verification_requirements_requirement_type",
        "verification_requirements",
        ["requirement_type"],
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("category", sa.String(13), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("has_expiration", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "service_categories",
        sa.Column("id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("requires_qualification", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "subcategories",
        sa.Column("id", sa.String(100), nullable=False),
        sa.Column("category_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("requires_registration", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["category_id"], ["service_categories.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_subcategories_category_id", "subcategories", ["category_id"])

    for table, owner_col, owner_table, uq in (
        ("category_documents", "category_id", "service_categories", "uq_category_document"),
        ("subcategory_documents", "subcategory_id", "subcategories", "uq_subcategory_document"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column(owner_col, sa.String(100), nullable=False),
            sa.Column("document_id", sa.String(100), nullable=False),
            sa.Column("document_type", sa.String(11), nullable=False),
            sa.Column("condition_key", sa.String(100), nullable=True),
            sa.Column("required_if_true", sa.Boolean(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.ForeignKeyConstraint([owner_col], [f"{owner_table}.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["document_id"], ["documents.id"], ondelete="CASCADE"),
            sa.UniqueConstraint(owner_col, "document_id", name=uq),
        )
        op.create_index(f"ix_{table}_{owner_col}", table, [owner_col])

    op.create_table(
        "client_profiles",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("mobile", sa.String(30), nullable=True),
        sa.Column("is_self_managed", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "participants",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("client_profile_id", sa.String(36), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("relationship_to_client", sa.String(14), nullable=True),
        sa.Column("funding_type", sa.String(9), nullable=True),
        sa.Column("services", sa.JSON(), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["client_profile_id"], ["client_profiles.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_participants_client_profile_id", "participants", ["client_profile_id"])

    op.create_table(
        "contractor_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("zoho_contact_id", sa.String(64), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("postcode", sa.String(10), nullable=True),
        sa.Column("services", sa.JSON(), nullable=True),
        sa.Column("years_of_experience", sa.Integer(), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("has_vehicle", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_abn", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("zoho_contact_id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_contractor_profiles_zoho_contact_id", "contractor_profiles", ["zoho_contact_id"])

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=True),
        sa.Column("user_role", sa.String(50), nullable=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=True),
        sa.Column("entity_id", sa.String(100), nullable=True),
        sa.Column("event_data", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"])
    op.create_index("ix_audit_logs_event_type", "audit_logs", ["event_type"])
    op.create_index("ix_audit_logs_entity_id", "audit_logs", ["entity_id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("contractor_profiles")
    op.drop_table("participants")
    op.drop_table("client_profiles")
    op.drop_table("subcategory_documents")
    op.drop_table("category_documents")
    op.drop_table("subcategories")
    op.drop_table("service_categories")
    op.drop_table("documents")
    op.drop_table("verification_requirements")
    op.drop_table("worker_services")
    op.drop_table("worker_profiles")
    op.drop_table("users")
