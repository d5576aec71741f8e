# This project was developed with assistance from AI tools.
"""Static service offerings and their qualification requirements.

Each qualification listed here becomes a ``"{service}:{type}"`` verification
requirement when a worker offers that service.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceQualification:
    type: str
    name: str
    description: str | None = None
    expiry_years: int | None = None


SERVICE_QUALIFICATION_REQUIREMENTS: dict[str, tuple[ServiceQualification, ...]] = {
    "Support Worker": (
        ServiceQualification("cert3-aged-care", "Certificate 3 Aged Care", "Aged care qualification"),
        ServiceQualification(
            "cert3-disabilities",
            "Certificate 3 in Disabilities",
            "Disabilities support qualification",
        ),
        ServiceQualification(
            "cert3-individual-support",
            "Certificate 3 Individual Support",
            "Individual support qualification",
        ),
        ServiceQualification(
            "cert3-individual-support-aged-care",
            "Certificate 3 Individual Support (Aged Care)",
            "Individual support specializing in aged care",
        ),
        ServiceQualification(
            "cert3-individual-support-disability",
            "Certificate 3 Individual Support (Disability)",
            "Individual support specializing in disability",
        ),
        ServiceQualification(
            "cert3-home-community-care",
            "Certificate 3 in Home and Community Care",
            "Home and community care qualification",
        ),
        ServiceQualification(
            "cert4-aged-care",
            "Certificate 4 Aged Care",
            "Advanced aged care qualification",
        ),
        ServiceQualification(
            "cert4-disabilities",
            "Certificate 4 in Disabilities",
            "Advanced disabilities support qualification",
        ),
    ),
    "Therapeutic Supports": (),
    "Home Modifications": (),
    "Fitness and Rehabilitation": (),
    "Cleaning Services": (),
    "Nursing Services": (),
    "Home and Yard Maintenance": (),
}


def slugify(name: str) -> str:
    """``"Support Worker"`` -> ``"support-worker"``."""
    return "-".join(name.strip().lower().split())


def get_qualifications_for_service(service_title: str) -> list[ServiceQualification]:
    return list(SERVICE_QUALIFICATION_REQUIREMENTS.get(service_title, ()))

