"""
Request models and JSON schema helpers for the validation API.

The pydantic models accept the camelCase payload used by the web client and
convert it into the `ValidationRequest` dataclass consumed by the engine.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from content_compliance.compliance.rules import RuleSet, trigger_label
from content_compliance.services.formatter import serialize_result
from content_compliance.services.types import (
    ContentType,
    Platform,
    RequestFlags,
    Specialty,
    TargetAudience,
    ValidationRequest,
)


class FlagsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    includes_medical_claims: bool = Field(False, alias="includesMedicalClaims")
    mentions_medications: bool = Field(False, alias="mentionsMedications")
    includes_device_claims: bool = Field(False, alias="includesDeviceClaims")


class ValidationRequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    content_type: ContentType = Field(ContentType.BLOG_POST, alias="contentType")
    specialty: Specialty = Specialty.GP
    target_audience: TargetAudience = Field(TargetAudience.GENERAL_PUBLIC, alias="targetAudience")
    platform: Platform = Platform.WEBSITE
    flags: FlagsModel = Field(default_factory=FlagsModel)
    actor_id: Optional[str] = Field(None, alias="actorId")

    def to_request(self) -> ValidationRequest:
        return ValidationRequest(
            content=self.content,
            content_type=self.content_type,
            specialty=self.specialty,
            target_audience=self.target_audience,
            platform=self.platform,
            flags=RequestFlags(
                includes_medical_claims=self.flags.includes_medical_claims,
                mentions_medications=self.flags.mentions_medications,
                includes_device_claims=self.flags.includes_device_claims,
            ),
            actor_id=self.actor_id,
        )


def serialize_rule_set(rule_set: RuleSet) -> Dict[str, Any]:
    """Summarise a rule set for administrative listings."""
    rules: List[Dict[str, Any]] = [
        {
            "id": rule.rule_id,
            "category": rule.category.value,
            "severity": rule.severity.value,
            "triggers": [trigger_label(trigger) for trigger in rule.triggers],
            "code": rule.code,
            "description": rule.description,
            "recommendation": rule.recommendation,
            "alternatives": list(rule.alternatives),
        }
        for rule in rule_set.rules
    ]
    return {
        "domain": rule_set.domain,
        "version": rule_set.version,
        "source": rule_set.source,
        "rules": rules,
        "companionRules": [rule.rule_id for rule in rule_set.companion_rules],
        "requirementRules": [rule.rule_id for rule in rule_set.requirement_rules],
    }


def get_validation_result_schema() -> Dict[str, Any]:
    """Return the JSON Schema definition for a serialised validation result."""

    category_result = {
        "type": "object",
        "required": ["compliant", "score", "issues", "recommendations"],
        "properties": {
            "compliant": {"type": "boolean"},
            "score": {"type": "integer", "minimum": 0, "maximum": 100},
            "issues": {"type": "array", "items": {"type": "string"}},
            "recommendations": {"type": "array", "items": {"type": "string"}},
        },
        "additionalProperties": False,
    }
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "$id": "https://content-compliance/schema/validation-result.json",
        "title": "ValidationResult",
        "type": "object",
        "required": [
            "isCompliant",
            "overallScore",
            "requiresReview",
            "violations",
            "warnings",
            "recommendations",
            "categories",
        ],
        "properties": {
            "isCompliant": {"type": "boolean"},
            "overallScore": {"type": "integer", "minimum": 0, "maximum": 100},
            "requiresReview": {"type": "boolean"},
            "violations": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["type", "category", "description", "foundText", "reference", "penalty", "suggestedFix"],
                    "properties": {
                        "type": {"enum": ["low", "medium", "high", "critical"]},
                        "category": {"type": "string"},
                        "description": {"type": "string"},
                        "foundText": {"type": "string"},
                        "reference": {"type": "string"},
                        "penalty": {"type": "integer", "minimum": 0},
                        "suggestedFix": {"type": "string"},
                    },
                },
            },
            "warnings": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["category", "description", "foundText", "recommendation"],
                },
            },
            "recommendations": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
            "categories": {"type": "object", "additionalProperties": category_result},
            "domain": {"type": ["string", "null"]},
            "ruleSetVersion": {"type": ["string", "null"]},
        },
        "additionalProperties": False,
    }


__all__ = [
    "FlagsModel",
    "ValidationRequestModel",
    "serialize_result",
    "serialize_rule_set",
    "get_validation_result_schema",
]
