# This project was developed with assistance from AI tools.
"""
LocalAid -- domain models

Care-services marketplace models covering accounts, worker and client
profiles, the verification requirement lifecycle, the master document
catalog, Zoho-synced contractors, and the audit trail.
"""

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    CatalogCategory,
    DocumentCategory,
    FundingType,
    Relationship,
    RequirementLevel,
    RequirementStatus,
    UserRole,
    UserStatus,
    VerificationStatus,
)


def _uuid() -> str:
    return str(uuid.uuid4())


class User(Base):
    """Login identity shared by admins, workers and clients."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, name="user_role", native_enum=False), nullable=False)
    status = Column(
        Enum(UserStatus, name="user_status", native_enum=False),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    worker_profile = relationship(
        "WorkerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )
    client_profile = relationship(
        "ClientProfile", back_populates="user", uselist=False, cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class WorkerProfile(Base):
    """Support worker / contractor profile."""

    __tablename__ = "worker_profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    mobile = Column(String(30), nullable=True)
    photos = Column(JSON, nullable=True)
    introduction = Column(Text, nullable=True)
    street_address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    postal_code = Column(String(10), nullable=True)
    latitude = Column(String(32), nullable=True)
    longitude = Column(String(32), nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(30), nullable=True)
    abn = Column(String(20), nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    verification_status = Column(
        Enum(VerificationStatus, name="verification_status", native_enum=False),
        nullable=False,
        default=VerificationStatus.NOT_STARTED,
    )
    profile_completed = Column(Boolean, nullable=False, default=False)
    setup_progress = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="worker_profile")
    services = relationship(
        "WorkerService", back_populates="worker_profile", cascade="all, delete-orphan",
    )
    requirements = relationship(
        "VerificationRequirement", back_populates="worker_profile", cascade="all, delete-orphan",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<WorkerProfile(id={self.id}, name='{self.first_name} {self.last_name}')>"


class WorkerService(Base):
    """A service category (optionally subcategory) offered by a worker."""

    __tablename__ = "worker_services"
    __table_args__ = (
        UniqueConstraint("worker_profile_id", "category_id", "subcategory_id", name="uq_worker_service"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_profile_id = Column(
        String(36), ForeignKey("worker_profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    category_id = Column(String(100), nullable=False)
    category_name = Column(String(255), nullable=False)
    subcategory_id = Column(String(100), nullable=True)
    subcategory_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    worker_profile = relationship("WorkerProfile", back_populates="services")

    @property
    def service_string(self) -> str:
        if self.subcategory_name:
            return f"{self.category_name}:{self.subcategory_name}"
        return self.category_name

    def __repr__(self):
        return f"<WorkerService(id={self.id}, service='{self.service_string}')>"


class VerificationRequirement(Base):
    """One compliance document's lifecycle for one worker."""

    __tablename__ = "verification_requirements"

    id = Column(String(36), primary_key=True, default=_uuid)
    worker_profile_id = Column(
        String(36), ForeignKey("worker_profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    requirement_type = Column(String(255), nullable=False, index=True)
    requirement_name = Column(String(255), nullable=False)
    document_category = Column(
        Enum(DocumentCategory, name="document_category", native_enum=False),
        nullable=True,
    )
    status = Column(
        Enum(RequirementStatus, name="requirement_status", native_enum=False),
        nullable=False,
        default=RequirementStatus.PENDING,
    )
    is_required = Column(Boolean, nullable=False, default=True)
    document_url = Column(Text, nullable=True)
    document_uploaded_at = Column(DateTime(timezone=True), nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(String(255), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    # "metadata" is reserved on declarative classes
    requirement_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    worker_profile = relationship("WorkerProfile", back_populates="requirements")

    def __repr__(self):
        return f"<VerificationRequirement(id={self.id}, type='{self.requirement_type}', status='{self.status}')>"


class Document(Base):
    """Master catalog entry describing a requirement document kind."""

    __tablename__ = "documents"

    id = Column(String(100), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(Enum(CatalogCategory, name="catalog_category", native_enum=False), nullable=False)
    description = Column(Text, nullable=True)
    has_expiration = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Document(id='{self.id}', category='{self.category}')>"


class ServiceCategory(Base):
    """Top-level service offering (e.g. Support Worker)."""

    __tablename__ = "service_categories"

    id = Column(String(100), primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    requires_qualification = Column(Boolean, nullable=False, default=False)

    subcategories = relationship(
        "Subcategory", back_populates="category", cascade="all, delete-orphan",
    )
    documents = relationship(
        "CategoryDocument", back_populates="category", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<ServiceCategory(id='{self.id}')>"


class Subcategory(Base):
    """Service subcategory (e.g. Personal care)."""

    __tablename__ = "subcategories"

    id = Column(String(100), primary_key=True)
    category_id = Column(
        String(100), ForeignKey("service_categories.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = Column(String(255), nullable=False)
    requires_registration = Column(String(255), nullable=True)

    category = relationship("ServiceCategory", back_populates="subcategories")
    documents = relationship(
        "SubcategoryDocument", back_populates="subcategory", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Subcategory(id='{self.id}', category='{self.category_id}')>"


class CategoryDocument(Base):
    """Links a service category to a catalog document."""

    __tablename__ = "category_documents"
    __table_args__ = (UniqueConstraint("category_id", "document_id", name="uq_category_document"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(
        String(100), ForeignKey("service_categories.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    document_id = Column(String(100), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    document_type = Column(
        Enum(RequirementLevel, name="requirement_level", native_enum=False),
        nullable=False,
        default=RequirementLevel.REQUIRED,
    )
    condition_key = Column(String(100), nullable=True)
    required_if_true = Column(Boolean, nullable=True)

    category = relationship("ServiceCategory", back_populates="documents")
    document = relationship("Document")


class SubcategoryDocument(Base):
    """Links a service subcategory to a catalog document."""

    __tablename__ = "subcategory_documents"
    __table_args__ = (UniqueConstraint("subcategory_id", "document_id", name="uq_subcategory_document"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    subcategory_id = Column(
        String(100), ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    document_id = Column(String(100), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    document_type = Column(
        Enum(RequirementLevel, name="requirement_level", native_enum=False),
        nullable=False,
        default=RequirementLevel.REQUIRED,
    )
    condition_key = Column(String(100), nullable=True)
    required_if_true = Column(Boolean, nullable=True)

    subcategory = relationship("Subcategory", back_populates="documents")
    document = relationship("Document")


class ClientProfile(Base):
    """Account holder on the client side (self-managed or representative)."""

    __tablename__ = "client_profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    mobile = Column(String(30), nullable=True)
    is_self_managed = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="client_profile")
    participants = relationship(
        "Participant", back_populates="client_profile", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<ClientProfile(id={self.id}, name='{self.first_name} {self.last_name}')>"


class Participant(Base):
    """Person receiving support; may differ from the registering client."""

    __tablename__ = "participants"

    id = Column(String(36), primary_key=True, default=_uuid)
    client_profile_id = Column(
        String(36), ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    relationship_to_client = Column(
        Enum(Relationship, name="participant_relationship", native_enum=False),
        nullable=True,
    )
    funding_type = Column(
        Enum(FundingType, name="funding_type", native_enum=False),
        nullable=True,
    )
    services = Column(JSON, nullable=True)
    postal_code = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    client_profile = relationship("ClientProfile", back_populates="participants")

    def __repr__(self):
        return f"<Participant(id={self.id}, name='{self.first_name} {self.last_name}')>"


class ContractorProfile(Base):
    """Contractor imported from Zoho CRM."""

    __tablename__ = "contractor_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    zoho_contact_id = Column(String(64), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(50), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    postcode = Column(String(10), nullable=True)
    services = Column(JSON, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    photo_url = Column(Text, nullable=True)
    has_vehicle = Column(Boolean, nullable=False, default=False)
    has_abn = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ContractorProfile(id={self.id}, zoho_contact_id='{self.zoho_contact_id}')>"


class AuditLog(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_id = Column(String(255), nullable=True, index=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    entity_type = Column(String(100), nullable=True)
    entity_id = Column(String(100), nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, type='{self.event_type}')>"
