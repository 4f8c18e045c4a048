"""
Engine tuning knobs.

Penalties and thresholds are heuristic defaults inherited from the hosted
validators; every value can be overridden through `CONTENT_COMPLIANCE_*`
environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from content_compliance.services.types import Severity


class ConfigurationError(ValueError):
    """Raised when an engine is built with an invalid configuration."""


DEFAULT_SEVERITY_PENALTIES: Dict[Severity, int] = {
    Severity.CRITICAL: 30,
    Severity.HIGH: 20,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Scoring constants shared by the scorer, aggregator and recommender."""

    severity_penalties: Mapping[Severity, int] = field(
        default_factory=lambda: dict(DEFAULT_SEVERITY_PENALTIES)
    )
    category_threshold: int = 70
    compliance_threshold: int = 70
    review_threshold: int = 85
    long_sentence_words: int = 25

    def __post_init__(self) -> None:
        missing = [severity.value for severity in Severity if severity not in self.severity_penalties]
        if missing:
            raise ConfigurationError(f"Missing severity penalties for: {', '.join(missing)}")
        negative = [sev.value for sev, value in self.severity_penalties.items() if value < 0]
        if negative:
            raise ConfigurationError(f"Severity penalties must be non-negative: {', '.join(negative)}")
        for name in ("category_threshold", "compliance_threshold", "review_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ConfigurationError(f"{name} must lie in [0, 100], got {value}")

    def penalty_for(self, severity: Severity) -> int:
        return int(self.severity_penalties[severity])

    @classmethod
    def from_env(cls, prefix: str = "CONTENT_COMPLIANCE_") -> "EngineConfig":
        """Build a config from environment variables, falling back to defaults."""
        penalties = {
            severity: _env_int(f"{prefix}PENALTY_{severity.name}", default)
            for severity, default in DEFAULT_SEVERITY_PENALTIES.items()
        }
        return cls(
            severity_penalties=penalties,
            category_threshold=_env_int(f"{prefix}CATEGORY_THRESHOLD", 70),
            compliance_threshold=_env_int(f"{prefix}COMPLIANCE_THRESHOLD", 70),
            review_threshold=_env_int(f"{prefix}REVIEW_THRESHOLD", 85),
            long_sentence_words=_env_int(f"{prefix}LONG_SENTENCE_WORDS", 25),
        )


@dataclass(frozen=True, slots=True)
class SupabaseSettings:
    """Connection details for the hosted rule store and audit table."""

    url: str
    api_key: str
    rules_table: str = "compliance_rules"
    audit_table: str = "compliance_validation_audit"
    timeout: int = 10

    @classmethod
    def from_env(cls) -> Optional["SupabaseSettings"]:
        url = os.getenv("SUPABASE_URL")
        api_key = os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY")
        if not url or not api_key:
            return None
        return cls(
            url=url.rstrip("/"),
            api_key=api_key,
            rules_table=os.getenv("CONTENT_COMPLIANCE_RULES_TABLE", "compliance_rules"),
            audit_table=os.getenv("CONTENT_COMPLIANCE_AUDIT_TABLE", "compliance_validation_audit"),
            timeout=_env_int("CONTENT_COMPLIANCE_HTTP_TIMEOUT", 10),
        )


__all__ = [
    "ConfigurationError",
    "DEFAULT_SEVERITY_PENALTIES",
    "EngineConfig",
    "SupabaseSettings",
]
