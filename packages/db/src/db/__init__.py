# This project was developed with assistance from AI tools.
__version__ = "0.1.0"

from .database import Base, DatabaseService, SessionLocal, engine, get_db, get_db_service
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
from .models import (
    AuditLog,
    CategoryDocument,
    ClientProfile,
    ContractorProfile,
    Document,
    Participant,
    ServiceCategory,
    Subcategory,
    SubcategoryDocument,
    User,
    VerificationRequirement,
    WorkerProfile,
    WorkerService,
)

__all__ = [
    "Base",
    "DatabaseService",
    "SessionLocal",
    "engine",
    "get_db",
    "get_db_service",
    "__version__",
    # Enums
    "CatalogCategory",
    "DocumentCategory",
    "FundingType",
    "Relationship",
    "RequirementLevel",
    "RequirementStatus",
    "UserRole",
    "UserStatus",
    "VerificationStatus",
    # Models
    "AuditLog",
    "CategoryDocument",
    "ClientProfile",
    "ContractorProfile",
    "Document",
    "Participant",
    "ServiceCategory",
    "Subcategory",
    "SubcategoryDocument",
    "User",
    "VerificationRequirement",
    "WorkerProfile",
    "WorkerService",
]
