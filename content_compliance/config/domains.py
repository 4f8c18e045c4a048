"""
Compliance domain definitions and their category weight tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

from content_compliance.services.types import Category


@dataclass(frozen=True, slots=True)
class DomainProfile:
    """Named validator profile: which categories are scored and how they weigh in."""

    name: str
    description: str
    weights: Mapping[Category, float]

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self.weights)


TGA_THERAPEUTIC = "tga_therapeutic"
PROFESSIONAL_BOUNDARIES = "professional_boundaries"
PATIENT_PREVIEW = "patient_preview"

DOMAINS: Dict[str, DomainProfile] = {
    TGA_THERAPEUTIC: DomainProfile(
        name=TGA_THERAPEUTIC,
        description="TGA therapeutic goods advertising claims",
        weights={
            Category.THERAPEUTIC_CLAIMS: 0.30,
            Category.DRUG_MENTIONS: 0.25,
            Category.MEDICAL_DEVICES: 0.20,
            Category.ADVERTISING_COMPLIANCE: 0.15,
            Category.EVIDENCE_REQUIREMENTS: 0.10,
        },
    ),
    PROFESSIONAL_BOUNDARIES: DomainProfile(
        name=PROFESSIONAL_BOUNDARIES,
        description="AHPRA professional boundary guidance",
        weights={
            Category.PATIENT_RELATIONSHIP: 0.25,
            Category.CONFIDENTIALITY: 0.25,
            Category.PROFESSIONAL_DISTANCE: 0.15,
            Category.THERAPEUTIC_RELATIONSHIP: 0.15,
            Category.DUTY_OF_CARE: 0.20,
        },
    ),
    PATIENT_PREVIEW: DomainProfile(
        name=PATIENT_PREVIEW,
        description="Patient-appropriateness and patient-safety phrasing",
        weights={
            Category.PROFESSIONAL_BOUNDARIES: 0.30,
            Category.READABILITY: 0.20,
            Category.APPROPRIATENESS: 0.20,
            Category.DIAGNOSTIC_ADVICE: 0.10,
            Category.TREATMENT_RECOMMENDATION: 0.10,
            Category.EMERGENCY_SITUATION: 0.10,
        },
    ),
}


def get_domain(name: str) -> DomainProfile:
    if name not in DOMAINS:
        raise KeyError(f"Compliance domain '{name}' is not defined.")
    return DOMAINS[name]


__all__ = [
    "DomainProfile",
    "DOMAINS",
    "TGA_THERAPEUTIC",
    "PROFESSIONAL_BOUNDARIES",
    "PATIENT_PREVIEW",
    "get_domain",
]
