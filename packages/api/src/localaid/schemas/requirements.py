# This project was developed with assistance from AI tools.
"""Worker requirement catalog and setup-wizard step schemas."""

from db.enums import CatalogCategory, RequirementLevel
from pydantic import Field

from . import CamelModel


class RequirementDocument(CamelModel):
    """A catalog document that applies to a worker because of their services."""

    id: str
    name: str
    category: CatalogCategory
    description: str | None = None
    has_expiration: bool = False
    document_type: RequirementLevel = RequirementLevel.REQUIRED
    service_category: str | None = None
    subcategory: str | None = None
    condition_key: str | None = None
    required_if_true: bool | None = None


class GroupedRequirements(CamelModel):
    base_compliance: list[RequirementDocument] = Field(default_factory=list)
    trainings: list[RequirementDocument] = Field(default_factory=list)
    qualifications: list[RequirementDocument] = Field(default_factory=list)
    insurance: list[RequirementDocument] = Field(default_factory=list)
    transport: list[RequirementDocument] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.base_compliance
            or self.trainings
            or self.qualifications
            or self.insurance
            or self.transport
        )


class ParsedService(CamelModel):
    """A ``"Category:Subcategory"`` service string split into slugs and names."""

    category_name: str
    subcategory_name: str | None = None
    category_id: str
    subcategory_id: str | None = None


class RequirementsResponse(CamelModel):
    success: bool = True
    services: list[str]
    worker_services: list[ParsedService]
    requirements: GroupedRequirements


class SetupStep(CamelModel):
    """One page of the onboarding wizard."""

    id: int
    slug: str
    title: str
    component: str
    document_id: str | None = None
    requirement: RequirementDocument | None = None
    api_endpoint: str | None = None


class SetupStepsResponse(CamelModel):
    success: bool = True
    steps: list[SetupStep]
    is_dynamic: bool
