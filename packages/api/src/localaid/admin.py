# This project was developed with assistance from AI tools.
"""
SQLAdmin configuration for database administration UI

Access the admin panel at: http://localhost:8000/admin

When AUTH_DISABLED=false, requires admin credentials via login form.
When AUTH_DISABLED=true, admin panel is open (dev mode).
"""

from db import (
    AuditLog,
    ClientProfile,
    ContractorProfile,
    Document,
    Participant,
    ServiceCategory,
    Subcategory,
    User,
    VerificationRequirement,
    WorkerProfile,
    WorkerService,
)
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy import create_engine
from starlette.requests import Request
from starlette.responses import Response

from .core.config import settings

# SQLAdmin requires a sync engine; derive from the async DATABASE_URL
_sync_url = settings.DATABASE_URL.replace("+asyncpg", "")
engine = create_engine(_sync_url, echo=False)


class AdminAuth(AuthenticationBackend):
    """Session-based auth gate for SQLAdmin.

    When AUTH_DISABLED=true, authenticate() always returns True (dev mode).
    Otherwise, requires login with SQLADMIN_USER / SQLADMIN_PASSWORD.
    """

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = form.get("username")
        password = form.get("password")
        if username == settings.SQLADMIN_USER and password == settings.SQLADMIN_PASSWORD:
            request.session.update({"admin_authenticated": True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> Response | bool:
        if settings.AUTH_DISABLED:
            return True
        return request.session.get("admin_authenticated", False)


class UserAdmin(ModelView, model=User):
    column_list = [User.id, User.email, User.role, User.status, User.created_at]
    column_searchable_list = [User.email]
    column_sortable_list = [User.email, User.role, User.created_at]
    column_default_sort = [(User.created_at, True)]
    form_excluded_columns = [User.password_hash]
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"


class WorkerProfileAdmin(ModelView, model=WorkerProfile):
    column_list = [
        WorkerProfile.id,
        WorkerProfile.first_name,
        WorkerProfile.last_name,
        WorkerProfile.city,
        WorkerProfile.state,
        WorkerProfile.verification_status,
        WorkerProfile.is_published,
        WorkerProfile.updated_at,
    ]
    column_searchable_list = [WorkerProfile.first_name, WorkerProfile.last_name, WorkerProfile.city]
    column_sortable_list = [WorkerProfile.last_name, WorkerProfile.verification_status, WorkerProfile.updated_at]
    column_default_sort = [(WorkerProfile.updated_at, True)]
    name = "Worker"
    name_plural = "Workers"
    icon = "fa-solid fa-user-nurse"


class WorkerServiceAdmin(ModelView, model=WorkerService):
    column_list = [
        WorkerService.id,
        WorkerService.worker_profile_id,
        WorkerService.category_name,
        WorkerService.subcategory_name,
    ]
    column_searchable_list = [WorkerService.category_name]
    name = "Worker Service"
    name_plural = "Worker Services"
    icon = "fa-solid fa-hands-helping"


class VerificationRequirementAdmin(ModelView, model=VerificationRequirement):
    column_list = [
        VerificationRequirement.id,
        VerificationRequirement.worker_profile_id,
        VerificationRequirement.requirement_type,
        VerificationRequirement.status,
        VerificationRequirement.submitted_at,
        VerificationRequirement.expires_at,
    ]
    column_searchable_list = [VerificationRequirement.requirement_type]
    column_sortable_list = [
        VerificationRequirement.requirement_type,
        VerificationRequirement.status,
        VerificationRequirement.submitted_at,
    ]
    column_default_sort = [(VerificationRequirement.created_at, True)]
    name = "Requirement"
    name_plural = "Requirements"
    icon = "fa-solid fa-clipboard-check"


class DocumentAdmin(ModelView, model=Document):
    column_list = [Document.id, Document.name, Document.category, Document.has_expiration]
    column_searchable_list = [Document.id, Document.name]
    column_sortable_list = [Document.id, Document.category]
    name = "Catalog Document"
    name_plural = "Catalog Documents"
    icon = "fa-solid fa-file-alt"


class ServiceCategoryAdmin(ModelView, model=ServiceCategory):
    column_list = [ServiceCategory.id, ServiceCategory.name, ServiceCategory.requires_qualification]
    column_searchable_list = [ServiceCategory.name]
    name = "Service Category"
    name_plural = "Service Categories"
    icon = "fa-solid fa-layer-group"


class SubcategoryAdmin(ModelView, model=Subcategory):
    column_list = [Subcategory.id, Subcategory.category_id, Subcategory.name, Subcategory.requires_registration]
    column_searchable_list = [Subcategory.name]
    name = "Subcategory"
    name_plural = "Subcategories"
    icon = "fa-solid fa-sitemap"


class ClientProfileAdmin(ModelView, model=ClientProfile):
    column_list = [
        ClientProfile.id,
        ClientProfile.first_name,
        ClientProfile.last_name,
        ClientProfile.is_self_managed,
        ClientProfile.created_at,
    ]
    column_searchable_list = [ClientProfile.first_name, ClientProfile.last_name]
    column_default_sort = [(ClientProfile.created_at, True)]
    name = "Client"
    name_plural = "Clients"
    icon = "fa-solid fa-user-friends"


class ParticipantAdmin(ModelView, model=Participant):
    column_list = [
        Participant.id,
        Participant.client_profile_id,
        Participant.first_name,
        Participant.last_name,
        Participant.funding_type,
    ]
    name = "Participant"
    name_plural = "Participants"
    icon = "fa-solid fa-child"


class ContractorProfileAdmin(ModelView, model=ContractorProfile):
    column_list = [
        ContractorProfile.id,
        ContractorProfile.zoho_contact_id,
        ContractorProfile.first_name,
        ContractorProfile.last_name,
        ContractorProfile.email,
        ContractorProfile.last_synced_at,
    ]
    column_searchable_list = [ContractorProfile.first_name, ContractorProfile.last_name, ContractorProfile.email]
    column_sortable_list = [ContractorProfile.last_name, ContractorProfile.last_synced_at]
    column_default_sort = [(ContractorProfile.last_synced_at, True)]
    name = "Contractor"
    name_plural = "Contractors"
    icon = "fa-solid fa-id-card"


class AuditLogAdmin(ModelView, model=AuditLog):
    column_list = [
        AuditLog.id,
        AuditLog.timestamp,
        AuditLog.event_type,
        AuditLog.user_id,
        AuditLog.user_role,
        AuditLog.entity_type,
        AuditLog.entity_id,
    ]
    column_sortable_list = [AuditLog.id, AuditLog.timestamp, AuditLog.event_type]
    column_default_sort = [(AuditLog.timestamp, True)]
    can_create = False
    can_edit = False
    can_delete = False
    name = "Audit Log"
    name_plural = "Audit Log"
    icon = "fa-solid fa-shield-alt"


def setup_admin(app):
    """Set up SQLAdmin and mount it to the FastAPI app."""
    auth_backend = AdminAuth(
        secret_key=settings.SQLADMIN_SECRET_KEY,
    )
    admin = Admin(app, engine, title="LocalAid Admin", authentication_backend=auth_backend)

    for view in (
        UserAdmin,
        WorkerProfileAdmin,
        WorkerServiceAdmin,
        VerificationRequirementAdmin,
        DocumentAdmin,
        ServiceCategoryAdmin,
        SubcategoryAdmin,
        ClientProfileAdmin,
        ParticipantAdmin,
        ContractorProfileAdmin,
        AuditLogAdmin,
    ):
        admin.add_view(view)

    return admin
