# This project was developed with assistance from AI tools.
"""
Domain enums for the care-services marketplace.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package).
"""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    WORKER = "worker"
    CLIENT = "client"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SUSPENDED = "suspended"


class VerificationStatus(str, enum.Enum):
    """Worker-level verification state shown on the admin dashboard."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_REVIEW = "PENDING_REVIEW"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class RequirementStatus(str, enum.Enum):
    """Lifecycle of a single verification requirement row."""

    PENDING = "PENDING"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"

    @classmethod
    def valid_transitions(cls) -> dict["RequirementStatus", frozenset["RequirementStatus"]]:
        """Allowed status transitions for admin review actions."""
        return {
            cls.PENDING: frozenset(),
            cls.SUBMITTED: frozenset({cls.APPROVED, cls.REJECTED}),
            cls.APPROVED: frozenset({cls.REJECTED, cls.SUBMITTED}),
            cls.REJECTED: frozenset({cls.APPROVED, cls.SUBMITTED}),
            cls.EXPIRED: frozenset(),
        }

    @classmethod
    def sources_for(cls, target: "RequirementStatus") -> frozenset["RequirementStatus"]:
        """Statuses from which ``target`` may be reached."""
        return frozenset(
            src for src, targets in cls.valid_transitions().items() if target in targets
        )


class DocumentCategory(str, enum.Enum):
    """Coarse tag stored on a requirement row (identity points, working rights, ...)."""

    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    WORKING_RIGHTS = "WORKING_RIGHTS"
    SERVICE_QUALIFICATION = "SERVICE_QUALIFICATION"


class CatalogCategory(str, enum.Enum):
    """Category of a master-catalog document definition."""

    IDENTITY = "IDENTITY"
    BUSINESS = "BUSINESS"
    COMPLIANCE = "COMPLIANCE"
    TRAINING = "TRAINING"
    QUALIFICATION = "QUALIFICATION"
    INSURANCE = "INSURANCE"
    TRANSPORT = "TRANSPORT"

    @classmethod
    def base_compliance(cls) -> frozenset["CatalogCategory"]:
        """Categories that make up the base compliance wizard."""
        return frozenset({cls.IDENTITY, cls.BUSINESS, cls.COMPLIANCE})


class RequirementLevel(str, enum.Enum):
    REQUIRED = "REQUIRED"
    OPTIONAL = "OPTIONAL"
    CONDITIONAL = "CONDITIONAL"


class FundingType(str, enum.Enum):
    NDIS = "NDIS"
    AGED_CARE = "AGED_CARE"
    INSURANCE = "INSURANCE"
    PRIVATE = "PRIVATE"
    OTHER = "OTHER"


class Relationship(str, enum.Enum):
    PARENT = "PARENT"
    LEGAL_GUARDIAN = "LEGAL_GUARDIAN"
    SPOUSE_PARTNER = "SPOUSE_PARTNER"
    CHILDREN = "CHILDREN"
    OTHER = "OTHER"
