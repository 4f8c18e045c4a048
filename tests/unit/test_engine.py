import pytest

from content_compliance.compliance.catalog import RuleCatalog
from content_compliance.compliance.defaults import BUILTIN_VERSION
from content_compliance.compliance.recommendations import (
    CALLS_TO_ACTION,
    CONSIDER_WARNINGS,
    REVIEW_VIOLATIONS,
    SPECIALTY_DISCLAIMERS,
)
from content_compliance.compliance.rules import Rule, RuleSet
from content_compliance.config.domains import DOMAINS, DomainProfile
from content_compliance.config.settings import ConfigurationError
from content_compliance.services.engine import MISSING_CONTENT, ComplianceEngine
from content_compliance.services.formatter import serialize_result
from content_compliance.services.types import (
    Category,
    ContentType,
    RequestFlags,
    Severity,
    Specialty,
    ValidationRequest,
)
from content_compliance.storage.audit import AuditDispatcher, MemoryAuditSink
from content_compliance.utils.checksum import sha256_text


def make_engine(*rules, weights=None, audit=None):
    weights = weights or {Category.THERAPEUTIC_CLAIMS: 0.5, Category.DRUG_MENTIONS: 0.5}
    rule_set = RuleSet(domain="synthetic", version="test-1", rules=rules)
    return ComplianceEngine(
        domain="synthetic",
        catalog=RuleCatalog(defaults=lambda domain: rule_set),
        profile=DomainProfile(name="synthetic", description="Synthetic profile", weights=weights),
        audit=audit,
    )


def make_rule(rule_id, trigger, severity, category=Category.THERAPEUTIC_CLAIMS):
    return Rule(
        rule_id=rule_id,
        category=category,
        severity=severity,
        triggers=(trigger,),
        code=rule_id,
        description=f"{rule_id} description",
        recommendation=f"{rule_id} fix",
    )


def test_cure_claim_without_disclaimer():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(ValidationRequest(content="This treatment will cure your condition."))

    therapeutic = result.categories[Category.THERAPEUTIC_CLAIMS]
    assert therapeutic.score == 70
    assert result.categories[Category.ADVERTISING_COMPLIANCE].score == 80
    assert result.overall_score == 88
    assert not result.is_compliant
    assert result.requires_review

    critical = [v for v in result.violations if v.severity is Severity.CRITICAL]
    assert len(critical) == 1
    assert critical[0].found_text == "cure"
    assert critical[0].rule_reference == "TGA-TC-001"
    assert [w.found_text for w in result.warnings] == ["treatment"]
    assert result.recommendations == [
        'Replace "cure" with: may help manage or supports treatment of or assists in managing',
        "Add disclaimer about consulting healthcare professionals",
        REVIEW_VIOLATIONS,
        CONSIDER_WARNINGS,
    ]
    assert result.domain == "tga_therapeutic"
    assert result.rule_set_version == BUILTIN_VERSION


def test_clean_content_scores_full_marks():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(ValidationRequest(content="Our clinic opens at 9am on weekdays."))

    assert result.overall_score == 100
    assert result.is_compliant
    assert not result.requires_review
    assert result.violations == []
    assert result.warnings == []
    assert result.recommendations == []


def test_low_severity_match_rounds_half_up():
    engine = make_engine(make_rule("SYN-1", "soothing", Severity.LOW))
    result = engine.validate(ValidationRequest(content="A soothing visit."))

    assert result.categories[Category.THERAPEUTIC_CLAIMS].score == 95
    assert result.overall_score == 98
    assert result.is_compliant
    assert not result.requires_review


def test_boundary_score_is_compliant_and_flagged_for_review():
    engine = make_engine(
        make_rule("SYN-1", "alpha", Severity.MEDIUM),
        make_rule("SYN-2", "beta", Severity.MEDIUM),
        make_rule("SYN-3", "gamma", Severity.MEDIUM),
        weights={Category.THERAPEUTIC_CLAIMS: 1.0},
    )
    result = engine.validate(ValidationRequest(content="alpha beta gamma"))

    assert result.overall_score == 70
    assert result.is_compliant
    assert result.requires_review


def test_critical_violation_vetoes_high_score():
    engine = make_engine(
        make_rule("SYN-1", "guaranteed", Severity.CRITICAL),
        weights={Category.THERAPEUTIC_CLAIMS: 0.1, Category.DRUG_MENTIONS: 0.9},
    )
    result = engine.validate(ValidationRequest(content="Guaranteed comfort."))

    assert result.overall_score == 97
    assert not result.is_compliant


def test_same_fix_from_two_rules_is_recommended_once():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(
        ValidationRequest(content="Ask about botox or juvederm. Please consult your doctor.")
    )

    fix = "Remove brand name or ensure full TGA prescription drug advertising compliance"
    assert [v.rule_reference for v in result.violations] == ["TGA-DA-001", "TGA-DA-001"]
    assert result.recommendations.count(fix) == 1
    assert result.categories[Category.DRUG_MENTIONS].score == 40


@pytest.mark.parametrize("content", ["", "   \n\t", None, b"\xff\xfe\xfa", "\ud800", "We cure it \ud800."])
def test_missing_content_is_rejected(content):
    engine = ComplianceEngine(domain="professional_boundaries")
    result = engine.validate(ValidationRequest(content=content))

    assert result.overall_score == 0
    assert not result.is_compliant
    assert result.requires_review
    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.severity is Severity.CRITICAL
    assert violation.category is Category.CONTENT_VALIDITY
    assert violation.description == MISSING_CONTENT
    assert set(result.categories) == set(DOMAINS["professional_boundaries"].categories)
    assert all(category.score == 0 and not category.compliant for category in result.categories.values())
    assert result.recommendations == [violation.suggested_fix]


def test_bytes_content_is_decoded():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(ValidationRequest(content="We cure it.".encode("utf-8")))

    assert result.violations[0].found_text == "cure"


def test_unknown_enum_value_is_rejected_with_field_name():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(ValidationRequest(content="Hello", content_type="podcast"))

    assert result.overall_score == 0
    assert not result.is_compliant
    assert result.requires_review
    violation = result.violations[0]
    assert violation.category is Category.CONTENT_VALIDITY
    assert violation.rule_reference == "INPUT-002"
    assert "content_type" in violation.description
    assert violation.found_text == "podcast"
    assert "blog_post" in violation.suggested_fix
    assert all(category.score == 0 for category in result.categories.values())


def test_empty_content_with_unknown_enum_value_still_returns_result():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(ValidationRequest(content="", specialty="astrology"))

    assert result.overall_score == 0
    assert result.violations[0].description == MISSING_CONTENT


def test_rejected_surrogate_content_is_still_audited():
    sink = MemoryAuditSink()
    dispatcher = AuditDispatcher(sink)
    engine = ComplianceEngine(domain="tga_therapeutic", audit=dispatcher)

    result = engine.validate(ValidationRequest(content="We cure it \ud800."))
    dispatcher.flush(timeout=5)
    dispatcher.close()

    assert result.overall_score == 0
    assert len(sink.records) == 1
    assert sink.records[0].result["overallScore"] == 0
    assert sink.records[0].content_hash == sha256_text("We cure it \ud800.")


def test_validate_many_preserves_request_order():
    engine = make_engine(make_rule("SYN-1", "soothing", Severity.LOW))
    results = engine.validate_many(
        [
            ValidationRequest(content="A soothing visit."),
            ValidationRequest(content="   "),
            ValidationRequest(content="Opening hours."),
        ]
    )

    assert [result.overall_score for result in results] == [98, 0, 100]
    assert engine.validate_many([]) == []


def test_specialty_shapes_recommendations():
    engine = ComplianceEngine(domain="patient_preview")
    content = "In an emergency, keep calm."

    psychology = engine.validate(ValidationRequest(content=content, specialty=Specialty.PSYCHOLOGY))
    gp = engine.validate(ValidationRequest(content=content, specialty="gp"))

    assert f"Add call to action: {CALLS_TO_ACTION[Specialty.PSYCHOLOGY]}" in psychology.recommendations
    assert f"Add disclaimer: {SPECIALTY_DISCLAIMERS[Specialty.PSYCHOLOGY]}" in psychology.recommendations
    assert f"Add call to action: {CALLS_TO_ACTION[Specialty.GP]}" in gp.recommendations
    gp_disclaimers = {f"Add disclaimer: {text}" for text in SPECIALTY_DISCLAIMERS.values()}
    assert not gp_disclaimers.intersection(gp.recommendations)
    assert psychology.overall_score == gp.overall_score


def test_string_enum_values_are_accepted():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(
        ValidationRequest(content="Ask about botox. Adults only. Consult your GP.", content_type="advertisement")
    )

    assert [v.rule_reference for v in result.violations] == ["TGA-DA-001"]


def test_advertisement_with_drug_mention_needs_age_restriction():
    engine = ComplianceEngine(domain="tga_therapeutic")
    result = engine.validate(
        ValidationRequest(content="Ask about botox. Consult your GP.", content_type=ContentType.ADVERTISEMENT)
    )

    assert "TGA-AD-002" in [v.rule_reference for v in result.violations]


def test_device_flag_requires_artg_reference():
    engine = ComplianceEngine(domain="tga_therapeutic")
    request = ValidationRequest(
        content="Our new skin device is available now.",
        flags=RequestFlags(includes_device_claims=True),
    )

    result = engine.validate(request)
    assert [v.rule_reference for v in result.violations] == ["TGA-AD-003"]
    assert result.categories[Category.MEDICAL_DEVICES].score == 90


def test_validation_is_deterministic():
    engine = ComplianceEngine(domain="patient_preview")
    request = ValidationRequest(
        content="Sounds like you have a chronic condition. In an emergency you should take aspirin.",
    )

    first = serialize_result(engine.validate(request))
    second = serialize_result(engine.validate(request))
    assert first == second


def test_scores_stay_within_bounds_for_heavy_content():
    content = (
        "Emergency! Life threatening crisis. My patient, this patient, case study, patient name. "
        "Sweetie, honey, darling. I recommend you should take this. You might have it, probably have it. "
        "Counseling in a therapy session. Guaranteed cure, heal, diagnose, botox, juvederm."
    )
    for domain in DOMAINS:
        result = ComplianceEngine(domain=domain).validate(ValidationRequest(content=content))
        assert 0 <= result.overall_score <= 100
        assert all(0 <= category.score <= 100 for category in result.categories.values())
        assert not result.is_compliant


def test_preview_emergency_adds_disclaimer():
    engine = ComplianceEngine(domain="patient_preview")
    result = engine.validate(ValidationRequest(content="In an emergency, keep calm."))

    assert result.categories[Category.EMERGENCY_SITUATION].score == 70
    assert any(item.startswith("Add disclaimer: In medical emergencies, call 000") for item in result.recommendations)


def test_invalid_weights_fail_at_construction():
    with pytest.raises(ConfigurationError):
        make_engine(weights={Category.THERAPEUTIC_CLAIMS: 0.6, Category.DRUG_MENTIONS: 0.6})


def test_unknown_domain_raises_key_error():
    with pytest.raises(KeyError):
        ComplianceEngine(domain="cosmetics")


def test_every_validation_is_audited():
    sink = MemoryAuditSink()
    dispatcher = AuditDispatcher(sink)
    engine = make_engine(make_rule("SYN-1", "soothing", Severity.LOW), audit=dispatcher)

    engine.validate(ValidationRequest(content="A soothing visit.", actor_id="editor"))
    engine.validate(ValidationRequest(content=" "))
    dispatcher.flush(timeout=5)
    dispatcher.close()

    assert len(sink.records) == 2
    assert sink.records[0].actor_id == "editor"
    assert sink.records[0].rule_set_version == "test-1"
    assert sink.records[1].result["overallScore"] == 0


def test_audit_failure_does_not_break_validation():
    class BrokenSink:
        def record(self, record):
            raise RuntimeError("audit store offline")

    dispatcher = AuditDispatcher(BrokenSink())
    engine = make_engine(make_rule("SYN-1", "soothing", Severity.LOW), audit=dispatcher)

    result = engine.validate(ValidationRequest(content="A soothing visit."))
    dispatcher.flush(timeout=5)
    dispatcher.close()
    assert result.overall_score == 98
