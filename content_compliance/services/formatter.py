"""
Result formatting helpers.

Converts `ValidationResult` dataclasses into the camelCase JSON shape shared
by the HTTP API, the CLI script and the audit trail.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .types import CategoryResult, ContentWarning, ValidationResult, Violation


def serialize_violation(violation: Violation) -> Dict[str, Any]:
    return {
        "type": violation.severity.value,
        "category": violation.category.value,
        "description": violation.description,
        "foundText": violation.found_text,
        "reference": violation.rule_reference,
        "penalty": violation.penalty,
        "suggestedFix": violation.suggested_fix,
    }


def serialize_warning(warning: ContentWarning) -> Dict[str, Any]:
    return {
        "category": warning.category.value,
        "description": warning.description,
        "foundText": warning.found_text,
        "recommendation": warning.recommendation,
    }


def serialize_category(result: CategoryResult) -> Dict[str, Any]:
    return {
        "compliant": result.compliant,
        "score": result.score,
        "issues": list(result.issues),
        "recommendations": list(result.recommendations),
    }


def serialize_result(result: ValidationResult) -> Dict[str, Any]:
    """Return the JSON-compatible payload for a validation result."""
    violations: List[Dict[str, Any]] = [serialize_violation(v) for v in result.violations]
    return {
        "isCompliant": result.is_compliant,
        "overallScore": result.overall_score,
        "requiresReview": result.requires_review,
        "violations": violations,
        "warnings": [serialize_warning(w) for w in result.warnings],
        "recommendations": list(result.recommendations),
        "categories": {
            category.value: serialize_category(category_result)
            for category, category_result in result.categories.items()
        },
        "domain": result.domain,
        "ruleSetVersion": result.rule_set_version,
    }


__all__ = [
    "serialize_result",
    "serialize_violation",
    "serialize_warning",
    "serialize_category",
]
