"""
Weighted aggregation of category scores into a single compliance verdict.
"""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional

from content_compliance.config.settings import ConfigurationError, EngineConfig
from content_compliance.services.types import Category, CategoryResult, Severity, ValidationResult

from .scorer import MAX_SCORE, ScoreCard

WEIGHT_TOLERANCE = 1e-9


def validate_weights(weights: Mapping[Category, float]) -> Dict[Category, float]:
    """Return a copy of ``weights`` or raise `ConfigurationError`."""
    if not weights:
        raise ConfigurationError("At least one category weight is required.")
    cleaned: Dict[Category, float] = {}
    for category, weight in weights.items():
        if not isinstance(category, Category):
            raise ConfigurationError(f"Unknown category in weight table: {category!r}")
        if category is Category.CONTENT_VALIDITY:
            raise ConfigurationError("content_validity cannot be weighted.")
        value = float(weight)
        if value < 0 or math.isnan(value):
            raise ConfigurationError(f"Weight for {category.value} must be non-negative, got {weight!r}")
        cleaned[category] = value
    total = math.fsum(cleaned.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise ConfigurationError(f"Category weights must sum to 1.0, got {total!r}")
    return cleaned


def round_half_up(value: float) -> int:
    # Absorb float noise such as 69.99999999999999 before rounding.
    return int(math.floor(round(value, 6) + 0.5))


class Aggregator:
    """Combine category scores with fixed weights; severity can veto the result."""

    def __init__(self, weights: Mapping[Category, float], config: Optional[EngineConfig] = None):
        self.weights = validate_weights(weights)
        self.config = config or EngineConfig()

    def overall_score(self, categories: Mapping[Category, CategoryResult]) -> int:
        total = math.fsum(
            (categories[category].score if category in categories else MAX_SCORE) * weight
            for category, weight in self.weights.items()
        )
        return max(0, min(MAX_SCORE, round_half_up(total)))

    def aggregate(self, scorecard: ScoreCard) -> ValidationResult:
        overall = self.overall_score(scorecard.categories)
        has_critical = any(v.severity is Severity.CRITICAL for v in scorecard.violations)
        has_high = any(v.severity is Severity.HIGH for v in scorecard.violations)

        ordered = {
            category: scorecard.categories[category]
            for category in self.weights
            if category in scorecard.categories
        }
        return ValidationResult(
            is_compliant=overall >= self.config.compliance_threshold and not has_critical,
            overall_score=overall,
            violations=list(scorecard.violations),
            warnings=list(scorecard.warnings),
            recommendations=[],
            requires_review=overall < self.config.review_threshold or has_high,
            categories=ordered,
        )


__all__ = ["Aggregator", "validate_weights", "round_half_up", "WEIGHT_TOLERANCE"]
