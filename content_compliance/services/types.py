"""
Dataclasses and enums describing validation request/response payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class Category(str, Enum):
    """Closed set of rule categories across every compliance domain."""

    # TGA therapeutic advertising
    THERAPEUTIC_CLAIMS = "therapeutic_claims"
    DRUG_MENTIONS = "drug_mentions"
    MEDICAL_DEVICES = "medical_devices"
    ADVERTISING_COMPLIANCE = "advertising_compliance"
    EVIDENCE_REQUIREMENTS = "evidence_requirements"
    # AHPRA professional boundaries
    PATIENT_RELATIONSHIP = "patient_relationship"
    CONFIDENTIALITY = "confidentiality"
    PROFESSIONAL_DISTANCE = "professional_distance"
    THERAPEUTIC_RELATIONSHIP = "therapeutic_relationship"
    DUTY_OF_CARE = "duty_of_care"
    # Patient-appropriate preview
    PROFESSIONAL_BOUNDARIES = "professional_boundaries"
    READABILITY = "readability"
    APPROPRIATENESS = "appropriateness"
    DIAGNOSTIC_ADVICE = "diagnostic_advice"
    TREATMENT_RECOMMENDATION = "treatment_recommendation"
    EMERGENCY_SITUATION = "emergency_situation"
    # Input validation only; never weighted.
    CONTENT_VALIDITY = "content_validity"


class Severity(str, Enum):
    """Ordinal rule importance."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def parse(cls, value: Union[str, "Severity"]) -> "Severity":
        """Accept enum members, canonical names and the legacy major/minor labels."""
        if isinstance(value, Severity):
            return value
        label = str(value).strip().lower()
        label = _SEVERITY_ALIASES.get(label, label)
        return cls(label)

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = (Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)
_SEVERITY_ALIASES = {"major": "high", "minor": "medium", "info": "low"}


class ContentType(str, Enum):
    BLOG_POST = "blog_post"
    SOCIAL_MEDIA = "social_media"
    NEWSLETTER = "newsletter"
    WEBSITE = "website"
    ADVERTISEMENT = "advertisement"
    PATIENT_EDUCATION = "patient_education"


class Specialty(str, Enum):
    GP = "gp"
    SPECIALIST = "specialist"
    ALLIED_HEALTH = "allied_health"
    PSYCHOLOGY = "psychology"
    DENTISTRY = "dentistry"
    NURSING = "nursing"


class TargetAudience(str, Enum):
    PATIENTS = "patients"
    CURRENT_PATIENTS = "current_patients"
    POTENTIAL_PATIENTS = "potential_patients"
    PROFESSIONALS = "professionals"
    GENERAL_PUBLIC = "general_public"


class Platform(str, Enum):
    WEBSITE = "website"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"
    EMAIL = "email"
    PRINT = "print"


@dataclass(frozen=True, slots=True)
class RequestFlags:
    """Author-declared content characteristics."""

    includes_medical_claims: bool = False
    mentions_medications: bool = False
    includes_device_claims: bool = False

    def is_set(self, name: str) -> bool:
        return bool(getattr(self, name, False))


@dataclass(slots=True)
class ValidationRequest:
    """Content submitted for compliance scoring."""

    content: Union[str, bytes, None]
    content_type: ContentType = ContentType.BLOG_POST
    specialty: Specialty = Specialty.GP
    target_audience: TargetAudience = TargetAudience.GENERAL_PUBLIC
    platform: Platform = Platform.WEBSITE
    flags: RequestFlags = field(default_factory=RequestFlags)
    actor_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Match:
    """Single trigger hit inside submitted content."""

    rule_id: str
    found_text: str
    category: Category
    severity: Severity
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class Violation:
    """Penalised finding."""

    severity: Severity
    category: Category
    description: str
    found_text: str
    rule_reference: str
    penalty: int
    suggested_fix: str


@dataclass(frozen=True, slots=True)
class ContentWarning:
    """Observation that is reported but never penalised."""

    category: Category
    description: str
    found_text: str
    recommendation: str


@dataclass(slots=True)
class CategoryResult:
    """Score for one category, starting at 100 and reduced by penalties."""

    category: Category
    score: int
    compliant: bool
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass(slots=True)
class ValidationResult:
    """Outcome of one validation call."""

    is_compliant: bool
    overall_score: int
    violations: List[Violation] = field(default_factory=list)
    warnings: List[ContentWarning] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    requires_review: bool = False
    categories: Dict[Category, CategoryResult] = field(default_factory=dict)
    domain: Optional[str] = None
    rule_set_version: Optional[str] = None


__all__ = [
    "Category",
    "Severity",
    "ContentType",
    "Specialty",
    "TargetAudience",
    "Platform",
    "RequestFlags",
    "ValidationRequest",
    "Match",
    "Violation",
    "ContentWarning",
    "CategoryResult",
    "ValidationResult",
]
