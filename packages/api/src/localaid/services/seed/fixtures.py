# This project was developed with assistance from AI tools.
"""
Service catalog fixture data.

Master document definitions, reusable document sets and the service
categories/subcategories that reference them. Document lists may contain
``"$ref:<set name>"`` entries which expand to the named set.
"""

from db.enums import CatalogCategory

# ---------------------------------------------------------------------------
# Master document catalog
# ---------------------------------------------------------------------------

DOCUMENTS: dict[str, dict] = {
    doc["id"]: doc
    for doc in (
        # Identity
        {"id": "identity-points-100", "name": "100 Points of ID", "category": CatalogCategory.IDENTITY,
         "description": "One primary and one secondary identity document", "has_expiration": False},
        {"id": "right-to-work", "name": "Right to Work", "category": CatalogCategory.IDENTITY,
         "description": "Citizenship or visa evidence of working rights", "has_expiration": True},
        # Business
        {"id": "abn-contractor", "name": "ABN", "category": CatalogCategory.BUSINESS,
         "description": "Australian Business Number for contractors", "has_expiration": False},
        # Compliance checks
        {"id": "ndis-screening-check", "name": "NDIS Worker Screening Check",
         "category": CatalogCategory.COMPLIANCE, "description": None, "has_expiration": True},
        {"id": "police-check", "name": "National Police Check", "category": CatalogCategory.COMPLIANCE,
         "description": "Issued within the last 3 years", "has_expiration": True},
        {"id": "working-with-children", "name": "Working with Children Check",
         "category": CatalogCategory.COMPLIANCE, "description": None, "has_expiration": True},
        {"id": "code-of-conduct", "name": "Code of Conduct", "category": CatalogCategory.COMPLIANCE,
         "description": "Signed acknowledgement of the NDIS Code of Conduct", "has_expiration": False},
        # Training modules
        {"id": "ndis-worker-orientation", "name": "NDIS Worker Orientation Module",
         "category": CatalogCategory.TRAINING, "description": "'Quality, Safety and You'",
         "has_expiration": False},
        {"id": "infection-control-training", "name": "Infection Control Training",
         "category": CatalogCategory.TRAINING, "description": None, "has_expiration": False},
        {"id": "effective-communication", "name": "Supporting Effective Communication",
         "category": CatalogCategory.TRAINING, "description": None, "has_expiration": False},
        {"id": "safe-enjoyable-meals", "name": "Supporting Safe and Enjoyable Meals",
         "category": CatalogCategory.TRAINING, "description": None, "has_expiration": False},
        {"id": "manual-handling", "name": "Manual Handling", "category": CatalogCategory.TRAINING,
         "description": None, "has_expiration": False},
        {"id": "medication-training", "name": "Medication Administration",
         "category": CatalogCategory.TRAINING, "description": None, "has_expiration": False},
        # Qualifications
        {"id": "first-aid-cpr", "name": "First Aid and CPR", "category": CatalogCategory.QUALIFICATION,
         "description": "HLTAID011 or equivalent", "has_expiration": True},
        {"id": "ahpra-registration", "name": "AHPRA Registration", "category": CatalogCategory.QUALIFICATION,
         "description": "Current registration with the relevant national board", "has_expiration": True},
        {"id": "trade-licence", "name": "Trade Licence", "category": CatalogCategory.QUALIFICATION,
         "description": "State licence for the trade performed", "has_expiration": True},
        {"id": "nursing-registration", "name": "Nursing Registration",
         "category": CatalogCategory.QUALIFICATION, "description": None, "has_expiration": True},
        # Insurance
        {"id": "public-liability-10m", "name": "Public Liability ($10M)",
         "category": CatalogCategory.INSURANCE, "description": None, "has_expiration": True},
        {"id": "professional-indemnity", "name": "Professional Indemnity Insurance",
         "category": CatalogCategory.INSURANCE, "description": None, "has_expiration": True},
        # Transport
        {"id": "drivers-licence", "name": "Driver's Licence", "category": CatalogCategory.TRANSPORT,
         "description": None, "has_expiration": True},
        {"id": "car-insurance", "name": "Comprehensive Car Insurance",
         "category": CatalogCategory.TRANSPORT, "description": None, "has_expiration": True},
    )
}

# ---------------------------------------------------------------------------
# Reusable document sets
# ---------------------------------------------------------------------------

DOCUMENT_SETS: dict[str, list[str]] = {
    "baseCompliance": [
        "identity-points-100",
        "right-to-work",
        "abn-contractor",
        "ndis-screening-check",
        "police-check",
    ],
    "ndisTrainings": [
        "ndis-worker-orientation",
        "infection-control-training",
    ],
    "supportTrainings": [
        "$ref:ndisTrainings",
        "effective-communication",
        "safe-enjoyable-meals",
    ],
    "transport": ["drivers-licence", "car-insurance"],
}

# ---------------------------------------------------------------------------
# Service categories
# ---------------------------------------------------------------------------

CATEGORIES: list[dict] = [
    {
        "id": "support-worker",
        "name": "Support Worker",
        "requires_qualification": False,
        "documents": {
            "required": ["$ref:baseCompliance", "$ref:supportTrainings"],
            "optional": ["first-aid-cpr", "manual-handling", "medication-training"],
            "conditional": [
                {"condition": "hasVehicle", "required_if": True, "documents": "$ref:transport"},
                {"condition": "worksWithChildren", "required_if": True,
                 "documents": ["working-with-children"]},
            ],
        },
        "subcategories": [
            {"id": "personal-care", "name": "Personal care"},
            {"id": "community-access", "name": "Community access"},
            {"id": "in-home-support", "name": "In-home support"},
            {"id": "overnight-support", "name": "Overnight support"},
            {"id": "transport-assistance", "name": "Transport assistance",
             "additional_documents": {"required": ["drivers-licence", "car-insurance"]}},
        ],
    },
    {
        "id": "therapeutic-supports",
        "name": "Therapeutic Supports",
        "requires_qualification": True,
        "shared_documents": {"required": ["$ref:baseCompliance", "professional-indemnity"]},
        "subcategories": [
            {"id": "occupational-therapy", "name": "Occupational therapy",
             "requires_registration": "AHPRA",
             "additional_documents": {"required": ["ahpra-registration"]}},
            {"id": "physiotherapy", "name": "Physiotherapy", "requires_registration": "AHPRA",
             "additional_documents": {"required": ["ahpra-registration"]}},
            {"id": "speech-pathology", "name": "Speech pathology",
             "requires_registration": "Speech Pathology Australia"},
            {"id": "psychology", "name": "Psychology", "requires_registration": "AHPRA",
             "additional_documents": {"required": ["ahpra-registration"]}},
        ],
    },
    {
        "id": "home-modifications",
        "name": "Home Modifications",
        "requires_qualification": True,
        "documents": {
            "required": ["$ref:baseCompliance", "trade-licence", "public-liability-10m"],
        },
        "subcategories": [],
    },
    {
        "id": "fitness-and-rehabilitation",
        "name": "Fitness and Rehabilitation",
        "requires_qualification": True,
        "documents": {
            "required": ["$ref:baseCompliance", "first-aid-cpr"],
            "optional": ["public-liability-10m"],
        },
        "subcategories": [
            {"id": "exercise-physiology", "name": "Exercise physiology",
             "requires_registration": "ESSA"},
            {"id": "personal-training", "name": "Personal training"},
        ],
    },
    {
        "id": "cleaning-services",
        "name": "Cleaning Services",
        "requires_qualification": False,
        "documents": {
            "required": ["$ref:baseCompliance"],
            "optional": ["public-liability-10m"],
        },
        "subcategories": [],
    },
    {
        "id": "nursing-services",
        "name": "Nursing Services",
        "requires_qualification": True,
        "documents": {
            "required": ["$ref:baseCompliance", "nursing-registration", "$ref:ndisTrainings"],
            "optional": ["professional-indemnity"],
        },
        "subcategories": [
            {"id": "registered-nurse", "name": "Registered nurse", "requires_registration": "AHPRA"},
            {"id": "enrolled-nurse", "name": "Enrolled nurse", "requires_registration": "AHPRA"},
        ],
    },
    {
        "id": "home-and-yard-maintenance",
        "name": "Home and Yard Maintenance",
        "requires_qualification": False,
        "documents": {
            "required": ["$ref:baseCompliance"],
            "optional": ["public-liability-10m"],
        },
        "subcategories": [
            {"id": "gardening", "name": "Gardening"},
            {"id": "handyperson", "name": "Handyperson"},
        ],
    },
]
