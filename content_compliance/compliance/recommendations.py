"""
Remediation advice derived from a validation result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from content_compliance.config.settings import EngineConfig
from content_compliance.services.types import Category, Severity, Specialty, ValidationResult


@dataclass(frozen=True, slots=True)
class CategoryGuidance:
    """Template advice for a category, plus a disclaimer for patient-safety categories."""

    label: str
    recommendation: str
    disclaimer: Optional[str] = None

    @property
    def safety_flag(self) -> bool:
        return self.disclaimer is not None


EMERGENCY_DISCLAIMER = (
    "In medical emergencies, call 000 immediately. This information is not a substitute for emergency medical care."
)
DIAGNOSTIC_DISCLAIMER = (
    "This information is not a diagnosis. Consult a healthcare professional for proper assessment."
)
TREATMENT_DISCLAIMER = (
    "This is general information only. Treatment decisions should always be made in consultation "
    "with a qualified healthcare professional."
)

CATEGORY_GUIDANCE: Dict[Category, CategoryGuidance] = {
    Category.THERAPEUTIC_CLAIMS: CategoryGuidance(
        "therapeutic claims", "Improve therapeutic claims compliance"
    ),
    Category.DRUG_MENTIONS: CategoryGuidance("drug mentions", "Improve drug mentions compliance"),
    Category.MEDICAL_DEVICES: CategoryGuidance("medical devices", "Improve medical devices compliance"),
    Category.ADVERTISING_COMPLIANCE: CategoryGuidance(
        "advertising compliance", "Improve advertising compliance"
    ),
    Category.EVIDENCE_REQUIREMENTS: CategoryGuidance(
        "evidence requirements", "Improve evidence requirements compliance"
    ),
    Category.PATIENT_RELATIONSHIP: CategoryGuidance(
        "patient relationship", "Review content for AHPRA professional boundary compliance"
    ),
    Category.CONFIDENTIALITY: CategoryGuidance(
        "confidentiality", "Remove or de-identify all patient-specific details"
    ),
    Category.PROFESSIONAL_DISTANCE: CategoryGuidance(
        "professional distance", "Keep language professional and focused on health information"
    ),
    Category.THERAPEUTIC_RELATIONSHIP: CategoryGuidance(
        "therapeutic relationship", "Limit public content to general education and refer to consultation"
    ),
    Category.DUTY_OF_CARE: CategoryGuidance(
        "duty of care",
        "Direct readers to appropriate professional or emergency care",
        disclaimer=EMERGENCY_DISCLAIMER,
    ),
    Category.PROFESSIONAL_BOUNDARIES: CategoryGuidance(
        "professional boundaries", "Review content for AHPRA professional boundary compliance"
    ),
    Category.READABILITY: CategoryGuidance(
        "readability", "Simplify language for better patient understanding"
    ),
    Category.APPROPRIATENESS: CategoryGuidance(
        "appropriateness", "Review content for cultural sensitivity and age appropriateness"
    ),
    Category.DIAGNOSTIC_ADVICE: CategoryGuidance(
        "diagnostic advice",
        "Remove diagnostic language and encourage professional assessment",
        disclaimer=DIAGNOSTIC_DISCLAIMER,
    ),
    Category.TREATMENT_RECOMMENDATION: CategoryGuidance(
        "treatment recommendation",
        "Replace specific treatment directions with general information",
        disclaimer=TREATMENT_DISCLAIMER,
    ),
    Category.EMERGENCY_SITUATION: CategoryGuidance(
        "emergency situation",
        "Direct readers to emergency services instead of giving emergency guidance",
        disclaimer=EMERGENCY_DISCLAIMER,
    ),
    Category.CONTENT_VALIDITY: CategoryGuidance(
        "content", "Provide non-empty content before requesting validation"
    ),
}

GENERAL_DISCLAIMER = "This information is general in nature and should not replace professional medical advice."

SPECIALTY_DISCLAIMERS: Dict[Specialty, str] = {
    Specialty.PSYCHOLOGY: "If you are experiencing mental health concerns, please seek professional help.",
    Specialty.SPECIALIST: "This information should not replace specialist medical consultation.",
    Specialty.ALLIED_HEALTH: "Individual treatment plans should be developed with your healthcare provider.",
}

CALLS_TO_ACTION: Dict[Specialty, str] = {
    Specialty.GP: "Book an appointment with your GP to discuss your individual health needs.",
    Specialty.PSYCHOLOGY: "Contact a qualified psychologist for professional mental health support.",
    Specialty.ALLIED_HEALTH: "Consult with an allied health professional for personalized treatment advice.",
    Specialty.SPECIALIST: "Ask your GP for a referral to discuss this with a specialist.",
    Specialty.DENTISTRY: "Schedule a dental consultation for personalized oral health advice.",
    Specialty.NURSING: "Speak with a healthcare professional for guidance specific to your situation.",
}

REVIEW_VIOLATIONS = "Review and address all compliance violations before publication"
SUBSTANTIAL_REVISION = "Content requires substantial revision before publication"
CONSIDER_WARNINGS = "Consider addressing warnings to improve compliance confidence"


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop exact duplicates and empty strings, keeping first-seen order."""
    seen: set[str] = set()
    ordered: List[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            ordered.append(item)
    return ordered


class RecommendationEngine:
    """Build the deduplicated remediation list attached to a result."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def recommend(self, result: ValidationResult, specialty: Optional[Specialty] = None) -> List[str]:
        """Return remediation advice for ``result``.

        Order: violation fixes, templates for non-compliant categories, safety
        disclaimers (prefixed by the general disclaimer and followed by the
        practitioner's call to action), the specialty disclaimer when any
        violation exists, then general review advice.
        """
        items: List[str] = [violation.suggested_fix for violation in result.violations]

        for category, category_result in result.categories.items():
            if not category_result.compliant:
                items.append(CATEGORY_GUIDANCE[category].recommendation)

        safety = self._safety_disclaimers(result)
        if safety:
            items.append(f"Add disclaimer: {GENERAL_DISCLAIMER}")
            items.extend(safety)
            if specialty is not None:
                items.append(f"Add call to action: {CALLS_TO_ACTION[Specialty(specialty)]}")

        if specialty is not None and result.violations:
            specialty_disclaimer = SPECIALTY_DISCLAIMERS.get(Specialty(specialty))
            if specialty_disclaimer:
                items.append(f"Add disclaimer: {specialty_disclaimer}")

        if result.violations:
            items.append(REVIEW_VIOLATIONS)
        if result.overall_score < self.config.compliance_threshold:
            items.append(SUBSTANTIAL_REVISION)
        if result.warnings:
            items.append(CONSIDER_WARNINGS)
        return dedupe(items)

    @staticmethod
    def _safety_disclaimers(result: ValidationResult) -> List[str]:
        flagged: List[Category] = []
        for category, category_result in result.categories.items():
            if CATEGORY_GUIDANCE[category].safety_flag and not category_result.compliant:
                flagged.append(category)
        for violation in result.violations:
            guidance = CATEGORY_GUIDANCE[violation.category]
            if guidance.safety_flag and violation.severity.rank >= Severity.HIGH.rank:
                if violation.category not in flagged:
                    flagged.append(violation.category)
        return [f"Add disclaimer: {CATEGORY_GUIDANCE[category].disclaimer}" for category in flagged]


__all__ = [
    "CategoryGuidance",
    "CATEGORY_GUIDANCE",
    "RecommendationEngine",
    "dedupe",
    "REVIEW_VIOLATIONS",
    "SUBSTANTIAL_REVISION",
    "CONSIDER_WARNINGS",
    "GENERAL_DISCLAIMER",
    "SPECIALTY_DISCLAIMERS",
    "CALLS_TO_ACTION",
]
