# This project was developed with assistance from AI tools.
"""Onboarding wizard step generation.

Turns the grouped requirements for a worker's services into an ordered list
of wizard steps. Each step names the frontend component that renders it and
the endpoint its upload posts to. When the catalog yields nothing for the
compliance wizard, the fixed mandatory step list is used instead.
"""

import logging
from collections.abc import Iterable

from ..schemas.requirements import GroupedRequirements, RequirementDocument, SetupStep

logger = logging.getLogger(__name__)

GENERIC_COMPONENT = "GenericComplianceDocument"
GENERIC_TRAINING_COMPONENT = "GenericTrainingDocument"
GENERIC_ENDPOINT = "/api/worker/compliance-documents"

REQUIREMENTS_SETUP_PATH = "/dashboard/worker/requirements/setup"
TRAININGS_SETUP_PATH = "/dashboard/worker/trainings/setup"

# Requirement id -> (component, api endpoint) for documents with a bespoke step
CUSTOM_STEP_MAPPING: dict[str, tuple[str, str]] = {
    "identity-points-100": ("Step1ProofOfIdentity", "/api/worker/identity-documents"),
    "abn-contractor": ("Step6ABN", "/api/worker/profile/update-step"),
    "ndis-screening-check": ("Step0WorkerScreeningCheck", "/api/worker/screening-check"),
    "police-check": ("Step2PoliceCheck", "/api/worker/police-check"),
    "working-with-children": ("Step3WorkingWithChildren", "/api/worker/working-with-children"),
    "ndis-worker-orientation": ("Step4NDISTraining", "/api/worker/ndis-training"),
    "infection-control-training": ("Step5InfectionControl", "/api/worker/infection-control"),
    "right-to-work": ("StepRightToWork", GENERIC_ENDPOINT),
}

MANDATORY_REQUIREMENTS_STEPS: tuple[SetupStep, ...] = (
    SetupStep(id=1, slug="worker-screening-check", title="Worker screening check",
              component="Step0WorkerScreeningCheck"),
    SetupStep(id=2, slug="police-check", title="Police check", component="Step2PoliceCheck"),
    SetupStep(id=3, slug="working-with-children", title="Working with children",
              component="Step3WorkingWithChildren"),
    SetupStep(id=4, slug="ndis-orientation", title="NDIS Worker Orientation",
              component="Step4aNDISOrientation"),
    SetupStep(id=5, slug="ndis-training", title="NDIS Training Upload", component="Step4NDISTraining"),
    SetupStep(id=6, slug="infection-control", title="Infection control",
              component="Step5InfectionControl"),
    SetupStep(id=7, slug="other-requirements", title="Other requirements",
              component="Step6OtherRequirements"),
)


def _build_steps(
    requirements: Iterable[RequirementDocument],
    default_component: str = GENERIC_COMPONENT,
) -> list[SetupStep]:
    """One step per requirement, in input order. Repeated ids keep the first."""
    steps: list[SetupStep] = []
    seen: set[str] = set()
    for req in requirements:
        if req.id in seen:
            logger.warning("Duplicate setup step slug %r dropped", req.id)
            continue
        seen.add(req.id)
        component, endpoint = CUSTOM_STEP_MAPPING.get(req.id, (default_component, GENERIC_ENDPOINT))
        steps.append(
            SetupStep(
                id=len(steps) + 1,
                slug=req.id,
                title=req.name,
                component=component,
                document_id=req.id,
                requirement=req,
                api_endpoint=endpoint,
            )
        )
    return steps


def generate_compliance_steps(requirements: GroupedRequirements | None) -> list[SetupStep]:
    """Steps for the compliance wizard, falling back to the mandatory list."""
    if requirements is None or not requirements.base_compliance:
        return [step.model_copy() for step in MANDATORY_REQUIREMENTS_STEPS]
    return _build_steps(requirements.base_compliance)


def generate_training_steps(requirements: GroupedRequirements | None) -> list[SetupStep]:
    """Steps for the trainings wizard. Empty when no trainings apply."""
    if requirements is None:
        return []
    return _build_steps(requirements.trainings, GENERIC_TRAINING_COMPONENT)


def is_dynamic(requirements: GroupedRequirements | None) -> bool:
    return requirements is not None and bool(requirements.base_compliance)


def find_step_by_slug(steps: list[SetupStep], slug: str) -> SetupStep | None:
    return next((step for step in steps if step.slug == slug), None)


def get_step_index(steps: list[SetupStep], slug: str) -> int:
    """Zero-based position of ``slug``, or -1."""
    for index, step in enumerate(steps):
        if step.slug == slug:
            return index
    return -1


def build_step_url(slug: str) -> str:
    return f"{REQUIREMENTS_SETUP_PATH}?step={slug}"


def build_training_step_url(slug: str) -> str:
    return f"{TRAININGS_SETUP_PATH}?step={slug}"
