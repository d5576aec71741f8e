# This project was developed with assistance from AI tools.
"""Registration and registration-job schemas."""

from typing import Literal

from db.enums import FundingType, Relationship
from pydantic import Field

from . import CamelModel


class WorkerRegistrationRequest(CamelModel):
    """Worker sign-up payload, queued for background processing."""

    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    mobile: str = Field(min_length=6, max_length=30)
    location: str | None = None
    age: int | None = Field(default=None, ge=18, le=100)
    gender: str | None = None
    languages: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)
    support_worker_categories: list[str] = Field(default_factory=list)
    experience: str | None = None
    introduction: str | None = None
    qualifications: list[str] = Field(default_factory=list)
    has_vehicle: bool | None = None
    photos: list[str] = Field(default_factory=list)
    consent_profile_share: bool = False
    consent_marketing: bool = False


class RequestedSubcategory(CamelModel):
    id: str
    name: str


class RequestedService(CamelModel):
    category_name: str
    sub_categories: list[RequestedSubcategory] = Field(default_factory=list)


class ClientRegistrationRequest(CamelModel):
    """Client sign-up: a self-managed participant or a representative."""

    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    mobile: str = Field(min_length=6, max_length=30)
    is_self_managed: bool = True
    funding_type: FundingType
    relationship_to_client: Relationship | None = None
    client_first_name: str | None = None
    client_last_name: str | None = None
    services_requested: dict[str, RequestedService] = Field(default_factory=dict)
    additional_info: str | None = None
    location: str | None = None
    consent: Literal[True]


class RegistrationQueuedResponse(CamelModel):
    success: bool = True
    job_id: str
    message: str


class RegistrationStatusResponse(CamelModel):
    success: bool = True
    job_id: str
    status: Literal["processing", "retrying", "completed", "failed"]
    message: str
    user_id: str | None = None
    error: str | None = None


class ClientRegistrationResponse(CamelModel):
    success: bool = True
    message: str
    user_id: str
    participant_id: str


class ParticipantItem(CamelModel):
    id: str
    first_name: str
    last_name: str
    relationship_to_client: Relationship | None = None
    funding_type: FundingType | None = None
    services: dict | list | None = None
    postal_code: str | None = None


class ParticipantsResponse(CamelModel):
    success: bool = True
    participants: list[ParticipantItem]
    total: int


class ParticipantResponse(CamelModel):
    success: bool = True
    message: str | None = None
    participant: ParticipantItem


class ParticipantUpdateRequest(CamelModel):
    """Partial update; omitted fields are left unchanged."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    relationship_to_client: Relationship | None = None
    funding_type: FundingType | None = None
    services: dict | list | None = None
    postal_code: str | None = Field(default=None, max_length=10)


class QueueStatsResponse(CamelModel):
    success: bool = True
    active: int = 0
    scheduled: int = 0
    reserved: int = 0
    message: str | None = None
