"""
Built-in rule tables used when the hosted rule store is unavailable.

Each domain gets a factory returning a fresh `RuleSet`; nothing here is
shared mutable state.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

from content_compliance.config.domains import (
    PATIENT_PREVIEW,
    PROFESSIONAL_BOUNDARIES,
    TGA_THERAPEUTIC,
)
from content_compliance.services.types import Category, ContentType, Severity

from .rules import CompanionRule, RequirementRule, Rule, RuleSet

BUILTIN_VERSION = "builtin-2024.1"

DISCLAIMER_TOKENS: Tuple[str, ...] = ("disclaimer", "consult", "medical advice")
EVIDENCE_TOKENS: Tuple[str, ...] = ("study", "studies", "research", "clinical")
REFERENCE_TOKENS: Tuple[str, ...] = ("reference", "references", "study:", "journal", "pubmed")


def _tga_rules() -> Tuple[Rule, ...]:
    return (
        Rule(
            rule_id="TGA-TC-001",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.CRITICAL,
            triggers=("cure", "cures", "cured"),
            code="TGA-TC-001",
            description="Claims to cure diseases without therapeutic approval",
            recommendation="Remove cure claims or reframe as supportive care",
            alternatives=("may help manage", "supports treatment of", "assists in managing"),
        ),
        Rule(
            rule_id="TGA-TC-002",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.HIGH,
            triggers=("treat",),
            code="TGA-TC-002",
            description="Treatment claims require therapeutic approval",
            recommendation="Qualify treatment claims",
            alternatives=("may support", "can assist with", "helps maintain"),
        ),
        Rule(
            rule_id="TGA-TC-003",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.HIGH,
            triggers=("prevent",),
            code="TGA-TC-003",
            description="Prevention claims require substantial evidence",
            recommendation="Qualify prevention claims",
            alternatives=("may reduce risk of", "supports healthy", "contributes to"),
        ),
        Rule(
            rule_id="TGA-TC-004",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.CRITICAL,
            triggers=("heal",),
            code="TGA-TC-004",
            description="Healing claims are therapeutic and regulated",
            recommendation="Remove healing claims",
            alternatives=("supports recovery", "aids healing process", "assists recovery"),
        ),
        Rule(
            rule_id="TGA-TC-005",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.CRITICAL,
            triggers=("diagnose",),
            code="TGA-TC-005",
            description="Diagnostic claims are medical device claims",
            recommendation="Remove diagnostic claims",
            alternatives=("may indicate", "could suggest", "provides information about"),
        ),
        Rule(
            rule_id="TGA-EC-001",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.HIGH,
            triggers=("most effective",),
            code="TGA-EC-001",
            description="Comparative efficacy claims require clinical evidence",
            recommendation="Remove comparative efficacy claims",
            alternatives=("effective", "evidence-based"),
        ),
        Rule(
            rule_id="TGA-EC-002",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.CRITICAL,
            triggers=("guaranteed results", "guaranteed", "100% effective"),
            code="TGA-EC-002",
            description="Outcome guarantees are prohibited in therapeutic advertising",
            recommendation="Remove outcome guarantees",
            alternatives=("clinically shown", "studies indicate", "may provide"),
        ),
        Rule(
            rule_id="TGA-SC-001",
            category=Category.THERAPEUTIC_CLAIMS,
            severity=Severity.HIGH,
            triggers=("side effect free", "no side effects", "completely safe"),
            code="TGA-SC-001",
            description="Absolute safety claims are misleading",
            recommendation="Replace absolute safety claims with balanced risk information",
            alternatives=("generally well tolerated", "low incidence of side effects", "consult healthcare provider"),
        ),
        Rule(
            rule_id="TGA-DA-001",
            category=Category.DRUG_MENTIONS,
            severity=Severity.CRITICAL,
            triggers=("botox", "dysport", "xeomin", "jeuveau"),
            code="TGA-DA-001",
            description="Prescription-only botulinum toxin brand names cannot be advertised to the public",
            recommendation="Remove brand name or ensure full TGA prescription drug advertising compliance",
        ),
        Rule(
            rule_id="TGA-DA-002",
            category=Category.DRUG_MENTIONS,
            severity=Severity.CRITICAL,
            triggers=("juvederm", "restylane", "belotero", "teosyal"),
            code="TGA-DA-001",
            description="Prescription-only dermal filler brand names cannot be advertised to the public",
            recommendation="Remove brand name or ensure full TGA prescription drug advertising compliance",
        ),
        Rule(
            rule_id="TGA-DA-003",
            category=Category.DRUG_MENTIONS,
            severity=Severity.HIGH,
            triggers=("medical cannabis", "medicinal cannabis", "cbd", "thc"),
            code="TGA-DA-003",
            description="Restricted cannabis products may only be referenced for approved therapeutic uses",
            recommendation="Limit cannabis references to approved therapeutic uses with appropriate disclaimers",
        ),
        Rule(
            rule_id="TGA-DA-004",
            category=Category.DRUG_MENTIONS,
            severity=Severity.HIGH,
            triggers=(
                "cosmetic enhancement",
                "anti-aging",
                "wrinkle removal",
                "permanent results",
                "fountain of youth",
                "age reversal",
                "cure all",
                "miracle medicine",
                "natural cure",
            ),
            code="TGA-DA-004",
            description="Prohibited claim about a scheduled medicine",
            recommendation="Remove prohibited medicine claims or provide appropriate medical disclaimers",
        ),
        Rule(
            rule_id="TGA-MD-001",
            category=Category.MEDICAL_DEVICES,
            severity=Severity.HIGH,
            triggers=("medical grade", "hospital grade"),
            code="TGA-MD-001",
            description="Medical grade claims imply TGA classification",
            recommendation="Verify ARTG inclusion before describing equipment as medical grade",
            alternatives=("professional standard", "clinical quality", "healthcare standard"),
        ),
        Rule(
            rule_id="TGA-MD-002",
            category=Category.MEDICAL_DEVICES,
            severity=Severity.HIGH,
            triggers=("fda approved", "tga approved"),
            code="TGA-MD-002",
            description="Regulatory approval claims must be verifiable",
            recommendation="Verify TGA approval status or add appropriate disclaimers",
        ),
        Rule(
            rule_id="TGA-EV-001",
            category=Category.EVIDENCE_REQUIREMENTS,
            severity=Severity.MEDIUM,
            triggers=("clinically proven", "scientifically tested"),
            code="TGA-EV-001",
            description="Clinical evidence claims must be substantiated",
            recommendation="Substantiate clinical evidence claims",
            alternatives=("studies suggest", "research indicates", "evidence supports"),
        ),
    )


def _tga_companions() -> Tuple[CompanionRule, ...]:
    return (
        CompanionRule(
            rule_id="TGA-W-001",
            category=Category.EVIDENCE_REQUIREMENTS,
            keywords=("effective", "treatment", "therapy", "remedy", "relief"),
            companions=EVIDENCE_TOKENS,
            description="Therapeutic claim may require evidence citation",
            recommendation="Consider adding references to supporting evidence or qualifying language",
        ),
        CompanionRule(
            rule_id="TGA-W-002",
            category=Category.EVIDENCE_REQUIREMENTS,
            keywords=(
                "clinically proven",
                "scientifically tested",
                "research shows",
                "studies demonstrate",
                "clinical trials",
                "peer reviewed",
            ),
            companions=REFERENCE_TOKENS,
            description="Evidence claims should be supported by citations",
            recommendation="Add citations to peer-reviewed studies or clinical trials",
        ),
        CompanionRule(
            rule_id="TGA-W-003",
            category=Category.MEDICAL_DEVICES,
            keywords=("laser", "ultrasound", "radiofrequency", "ipl", "led therapy", "therapeutic device"),
            companions=("artg", "tga", "registered device"),
            description="Device-based procedure mentioned without ARTG registration details",
            recommendation="Verify TGA approval status or add appropriate disclaimers",
        ),
    )


def _tga_requirements() -> Tuple[RequirementRule, ...]:
    return (
        RequirementRule(
            rule_id="TGA-AD-001",
            category=Category.ADVERTISING_COMPLIANCE,
            severity=Severity.HIGH,
            required=DISCLAIMER_TOKENS,
            code="TGA-AD-001",
            description="Missing required medical disclaimer for therapeutic claims",
            recommendation="Add disclaimer about consulting healthcare professionals",
            when_categories=(Category.THERAPEUTIC_CLAIMS, Category.DRUG_MENTIONS),
            when_flags=("includes_medical_claims", "mentions_medications"),
        ),
        RequirementRule(
            rule_id="TGA-AD-002",
            category=Category.ADVERTISING_COMPLIANCE,
            severity=Severity.MEDIUM,
            required=("18+", "adult only", "adults only"),
            code="TGA-AD-002",
            description="Prescription drug advertising may require age restrictions",
            recommendation="Consider adding age restrictions for prescription drug content",
            when_categories=(Category.DRUG_MENTIONS,),
            content_types=(ContentType.ADVERTISEMENT,),
        ),
        RequirementRule(
            rule_id="TGA-AD-003",
            category=Category.MEDICAL_DEVICES,
            severity=Severity.MEDIUM,
            required=("artg", "tga"),
            code="TGA-AD-003",
            description="Device claims declared without ARTG registration reference",
            recommendation="Reference the ARTG entry for any promoted medical device",
            when_flags=("includes_device_claims",),
        ),
    )


def _boundary_rules() -> Tuple[Rule, ...]:
    return (
        Rule(
            rule_id="PB-001",
            category=Category.PATIENT_RELATIONSHIP,
            severity=Severity.CRITICAL,
            triggers=("personal relationship", "friendship", "dating", "personal contact", "social media friend"),
            code="AHPRA-PR-001",
            description="Content suggests inappropriate personal relationships with patients",
            recommendation="Maintain professional boundaries and avoid personal relationship references",
        ),
        Rule(
            rule_id="PB-002",
            category=Category.PATIENT_RELATIONSHIP,
            severity=Severity.HIGH,
            triggers=("business partner", "family friend", "neighbor", "neighbour", "personal services"),
            code="AHPRA-PR-002",
            description="Content suggests dual relationships which compromise professional boundaries",
            recommendation="Ensure all patient interactions remain strictly professional",
        ),
        Rule(
            rule_id="PB-003",
            category=Category.CONFIDENTIALITY,
            severity=Severity.CRITICAL,
            triggers=("patient story", "case study", "individual patient", "my patient", "this patient"),
            code="AHPRA-CF-001",
            description="Content may compromise patient confidentiality",
            recommendation="Use only de-identified, generalized examples or avoid patient-specific content",
        ),
        Rule(
            rule_id="PB-004",
            category=Category.CONFIDENTIALITY,
            severity=Severity.CRITICAL,
            triggers=("patient name", "specific case", "unique condition", "rare diagnosis"),
            code="AHPRA-CF-002",
            description="Content contains potentially identifiable patient information",
            recommendation="Remove all potentially identifying information and use general examples only",
        ),
        Rule(
            rule_id="PB-005",
            category=Category.PROFESSIONAL_DISTANCE,
            severity=Severity.MEDIUM,
            triggers=("my friend", "sweetie", "honey", "babe", "darling"),
            code="AHPRA-PD-001",
            description="Content uses inappropriate informal or personal language",
            recommendation="Use professional, respectful language appropriate for healthcare communication",
        ),
        Rule(
            rule_id="PB-006",
            category=Category.PROFESSIONAL_DISTANCE,
            severity=Severity.MEDIUM,
            triggers=("personally believe", "my opinion", "political view", "religious belief"),
            code="AHPRA-PD-002",
            description="Content includes personal opinions on non-medical matters",
            recommendation="Focus on evidence-based medical information and professional expertise",
        ),
        Rule(
            rule_id="PB-007",
            category=Category.THERAPEUTIC_RELATIONSHIP,
            severity=Severity.HIGH,
            triggers=("therapy session", "counseling", "counselling", "personal advice", "individual guidance"),
            code="AHPRA-TR-001",
            description="Content attempts to provide therapy or individual counseling",
            recommendation="Provide general educational information only, refer to professional consultation",
        ),
        Rule(
            rule_id="PB-008",
            category=Category.THERAPEUTIC_RELATIONSHIP,
            severity=Severity.HIGH,
            triggers=("you might have", "sounds like you have", "probably have"),
            code="AHPRA-TR-002",
            description="Content suggests diagnoses without proper assessment",
            recommendation="Encourage professional medical assessment for individual concerns",
        ),
        Rule(
            rule_id="PB-009",
            category=Category.DUTY_OF_CARE,
            severity=Severity.CRITICAL,
            triggers=("emergency", "life threatening", "life-threatening", "crisis"),
            code="AHPRA-DC-001",
            description="Content provides advice for emergency situations",
            recommendation="Direct to emergency services and avoid providing emergency medical guidance",
        ),
        Rule(
            rule_id="PB-010",
            category=Category.DUTY_OF_CARE,
            severity=Severity.HIGH,
            triggers=("you should take", "i recommend", "best treatment", "try this medication"),
            code="AHPRA-DC-002",
            description="Content provides treatment recommendations without proper assessment",
            recommendation="Provide general information only and encourage professional consultation",
        ),
    )


def _boundary_companions() -> Tuple[CompanionRule, ...]:
    return (
        CompanionRule(
            rule_id="PB-W-001",
            category=Category.DUTY_OF_CARE,
            keywords=("symptoms", "condition", "medication"),
            companions=("consult", "speak with", "see your", "book an appointment"),
            description="Health information given without directing readers to professional care",
            recommendation="Encourage readers to consult a registered practitioner about individual concerns",
        ),
    )


def _preview_rules() -> Tuple[Rule, ...]:
    return (
        Rule(
            rule_id="PP-BND-001",
            category=Category.PROFESSIONAL_BOUNDARIES,
            severity=Severity.CRITICAL,
            triggers=("patient story", "case study", "my patient", "this patient", "patient name"),
            code="AHPRA-CF-001",
            description="Content may compromise patient confidentiality",
            recommendation="Use only de-identified, generalized examples or avoid patient-specific content",
        ),
        Rule(
            rule_id="PP-BND-002",
            category=Category.PROFESSIONAL_BOUNDARIES,
            severity=Severity.MEDIUM,
            triggers=("sweetie", "honey", "babe", "darling", "my friend"),
            code="AHPRA-PD-001",
            description="Content uses inappropriate informal or personal language",
            recommendation="Use professional, respectful language appropriate for healthcare communication",
        ),
        Rule(
            rule_id="PP-READ-001",
            category=Category.READABILITY,
            severity=Severity.MEDIUM,
            triggers=(
                "pathophysiology",
                "etiology",
                "aetiology",
                "contraindication",
                "comorbidity",
                "pharmacokinetics",
                "differential diagnosis",
                "prognosis",
            ),
            code="PP-READ-001",
            description="Content contains complex medical terminology",
            recommendation="Use plain language explanations or provide definitions",
        ),
        Rule(
            rule_id="PP-APP-001",
            category=Category.APPROPRIATENESS,
            severity=Severity.MEDIUM,
            triggers=("graphic details", "explicit", "disturbing images", "traumatic"),
            code="PP-APP-001",
            description="Content may not be appropriate for all ages",
            recommendation="Consider age-appropriate language and content warnings",
        ),
        Rule(
            rule_id="PP-APP-002",
            category=Category.APPROPRIATENESS,
            severity=Severity.HIGH,
            triggers=("exotic", "primitive", "backwards", "civilized", "normal families"),
            code="PP-APP-002",
            description="Content may not be culturally sensitive",
            recommendation="Use inclusive, culturally sensitive language",
        ),
        Rule(
            rule_id="PP-DX-001",
            category=Category.DIAGNOSTIC_ADVICE,
            severity=Severity.HIGH,
            triggers=(
                "you have",
                "you might have",
                "sounds like",
                "probably have",
                "diagnosis is",
                "you are suffering from",
            ),
            code="AHPRA-TR-002",
            description="Content appears to provide diagnostic advice",
            recommendation="Encourage professional medical assessment for individual concerns",
        ),
        Rule(
            rule_id="PP-TX-001",
            category=Category.TREATMENT_RECOMMENDATION,
            severity=Severity.HIGH,
            triggers=(
                "you should take",
                "i recommend",
                "best treatment is",
                "try this",
                "stop taking",
                "increase dosage",
            ),
            code="AHPRA-DC-002",
            description="Content provides specific treatment recommendations",
            recommendation="Provide general information only and encourage professional consultation",
        ),
        Rule(
            rule_id="PP-EM-001",
            category=Category.EMERGENCY_SITUATION,
            severity=Severity.CRITICAL,
            triggers=(
                "emergency",
                "call ambulance",
                "life threatening",
                "urgent care",
                "immediately seek",
                "rush to hospital",
            ),
            code="AHPRA-DC-001",
            description="Content addresses emergency medical situations",
            recommendation="Direct readers to emergency services (000) rather than giving emergency guidance",
        ),
    )


def _preview_companions() -> Tuple[CompanionRule, ...]:
    return (
        CompanionRule(
            rule_id="PP-W-001",
            category=Category.READABILITY,
            keywords=("diagnosis", "syndrome", "chronic", "acute"),
            companions=("means", "this is when", "in other words", "also called"),
            description="Clinical term used without a plain-language explanation",
            recommendation="Explain clinical terms in plain language for patient audiences",
        ),
    )


def _preview_requirements() -> Tuple[RequirementRule, ...]:
    return (
        RequirementRule(
            rule_id="PP-DIS-001",
            category=Category.TREATMENT_RECOMMENDATION,
            severity=Severity.MEDIUM,
            required=("general information", "general in nature", "consult", "medical advice"),
            code="AHPRA-AD-001",
            description="Patient-facing content with medical claims lacks a general-information disclaimer",
            recommendation="State that the information is general in nature and not a substitute for medical advice",
            when_categories=(Category.DIAGNOSTIC_ADVICE, Category.TREATMENT_RECOMMENDATION),
            when_flags=("includes_medical_claims", "mentions_medications"),
        ),
    )


def tga_rule_set() -> RuleSet:
    return RuleSet(
        domain=TGA_THERAPEUTIC,
        version=BUILTIN_VERSION,
        rules=_tga_rules(),
        companion_rules=_tga_companions(),
        requirement_rules=_tga_requirements(),
    )


def boundary_rule_set() -> RuleSet:
    return RuleSet(
        domain=PROFESSIONAL_BOUNDARIES,
        version=BUILTIN_VERSION,
        rules=_boundary_rules(),
        companion_rules=_boundary_companions(),
    )


def preview_rule_set() -> RuleSet:
    return RuleSet(
        domain=PATIENT_PREVIEW,
        version=BUILTIN_VERSION,
        rules=_preview_rules(),
        companion_rules=_preview_companions(),
        requirement_rules=_preview_requirements(),
    )


DEFAULT_RULE_SETS: Dict[str, Callable[[], RuleSet]] = {
    TGA_THERAPEUTIC: tga_rule_set,
    PROFESSIONAL_BOUNDARIES: boundary_rule_set,
    PATIENT_PREVIEW: preview_rule_set,
}


def default_rule_set(domain: str) -> RuleSet:
    """Return the built-in rule set for ``domain``."""
    try:
        factory = DEFAULT_RULE_SETS[domain]
    except KeyError:
        raise KeyError(f"No built-in rules for compliance domain '{domain}'.") from None
    return factory()


__all__ = [
    "BUILTIN_VERSION",
    "DEFAULT_RULE_SETS",
    "default_rule_set",
    "tga_rule_set",
    "boundary_rule_set",
    "preview_rule_set",
]
