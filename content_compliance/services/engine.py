"""
High-level compliance engine coordinating scan, scoring and audit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Type

from content_compliance.compliance.aggregator import Aggregator
from content_compliance.compliance.catalog import RuleCatalog, SupabaseRuleSource
from content_compliance.compliance.matcher import PatternMatcher
from content_compliance.compliance.recommendations import CATEGORY_GUIDANCE, RecommendationEngine
from content_compliance.compliance.rules import RuleSet
from content_compliance.compliance.scorer import CategoryScorer
from content_compliance.config.domains import DomainProfile, get_domain
from content_compliance.config.settings import EngineConfig, SupabaseSettings
from content_compliance.storage.audit import (
    AuditDispatcher,
    AuditSink,
    JsonlAuditSink,
    SupabaseAuditSink,
    build_audit_record,
)
from content_compliance.storage.supabase import SupabaseRestClient

from .types import (
    Category,
    CategoryResult,
    ContentType,
    Platform,
    Severity,
    Specialty,
    TargetAudience,
    ValidationRequest,
    ValidationResult,
    Violation,
)

logger = logging.getLogger("content_compliance.engine")

MISSING_CONTENT = "Content is missing or empty"
MISSING_CONTENT_FIX = CATEGORY_GUIDANCE[Category.CONTENT_VALIDITY].recommendation

_ENUM_FIELDS: Tuple[Tuple[str, Type[Enum]], ...] = (
    ("content_type", ContentType),
    ("specialty", Specialty),
    ("target_audience", TargetAudience),
    ("platform", Platform),
)


class InvalidRequestField(ValueError):
    """A request field holds a value outside its enum."""

    def __init__(self, field_name: str, value: object, choices: Tuple[str, ...]):
        super().__init__(f"Unsupported {field_name} value: {value!r}")
        self.field_name = field_name
        self.value = value
        self.choices = choices


def normalize_content(content: object) -> Optional[str]:
    """Return usable UTF-8 text, or None when the request must be rejected."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(content, str) or not content.strip():
        return None
    try:
        # Lone surrogates survive in str but are not encodable UTF-8.
        content.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return content


def normalize_request(request: ValidationRequest) -> ValidationRequest:
    """Coerce loosely-typed enum fields; raise `InvalidRequestField` on unknown values."""
    coerced = {}
    for name, enum_cls in _ENUM_FIELDS:
        value = getattr(request, name)
        try:
            coerced[name] = enum_cls(value)
        except ValueError:
            choices = tuple(member.value for member in enum_cls)
            raise InvalidRequestField(name, value, choices) from None
    return replace(request, **coerced)


@dataclass
class ComplianceEngine:
    """Facade running one domain's validation pipeline end-to-end."""

    domain: str
    catalog: RuleCatalog = field(default_factory=RuleCatalog)
    config: EngineConfig = field(default_factory=EngineConfig)
    audit: Optional[AuditDispatcher] = None
    profile: Optional[DomainProfile] = None
    matcher: PatternMatcher = field(init=False)
    scorer: CategoryScorer = field(init=False)
    aggregator: Aggregator = field(init=False)
    recommender: RecommendationEngine = field(init=False)

    def __post_init__(self) -> None:
        if self.profile is None:
            self.profile = get_domain(self.domain)
        # Weight validation happens here so misconfiguration fails at startup.
        self.aggregator = Aggregator(self.profile.weights, self.config)
        self.matcher = PatternMatcher()
        self.scorer = CategoryScorer(self.profile.categories, self.config)
        self.recommender = RecommendationEngine(self.config)

    @property
    def rule_set(self) -> RuleSet:
        return self.catalog.active(self.domain)

    def validate(self, request: ValidationRequest) -> ValidationResult:
        rule_set = self.rule_set
        content = normalize_content(request.content)

        if content is None:
            result = self._rejected_result(rule_set, MISSING_CONTENT, MISSING_CONTENT_FIX, "INPUT-001")
            logger.info("Rejected request with missing content", extra={"domain": self.domain})
            self._dispatch_audit(request, result)
            return result

        try:
            request = replace(normalize_request(request), content=content)
        except InvalidRequestField as exc:
            result = self._rejected_result(
                rule_set,
                str(exc),
                f"Use one of the supported {exc.field_name} values: {', '.join(exc.choices)}",
                "INPUT-002",
                found_text=str(exc.value),
            )
            logger.info(
                "Rejected request with unsupported field value",
                extra={"domain": self.domain, "field": exc.field_name},
            )
            self._dispatch_audit(request, result)
            return result

        matches = self.matcher.scan(content, rule_set)
        scorecard = self.scorer.score(matches, request, rule_set)
        result = self.aggregator.aggregate(scorecard)
        result.domain = self.domain
        result.rule_set_version = rule_set.version
        result.recommendations = self.recommender.recommend(result, specialty=request.specialty)
        logger.info(
            "Validation completed",
            extra={
                "domain": self.domain,
                "rule_set_version": rule_set.version,
                "overall_score": result.overall_score,
                "is_compliant": result.is_compliant,
                "violations": len(result.violations),
                "warnings": len(result.warnings),
            },
        )
        self._dispatch_audit(request, result)
        return result

    def validate_many(self, requests: Iterable[ValidationRequest]) -> List[ValidationResult]:
        return [self.validate(request) for request in requests]

    def _rejected_result(
        self,
        rule_set: RuleSet,
        description: str,
        suggested_fix: str,
        reference: str,
        *,
        found_text: str = "",
    ) -> ValidationResult:
        violation = Violation(
            severity=Severity.CRITICAL,
            category=Category.CONTENT_VALIDITY,
            description=description,
            found_text=found_text,
            rule_reference=reference,
            penalty=self.config.penalty_for(Severity.CRITICAL),
            suggested_fix=suggested_fix,
        )
        categories = {
            category: CategoryResult(category=category, score=0, compliant=False)
            for category in self.profile.categories
        }
        return ValidationResult(
            is_compliant=False,
            overall_score=0,
            violations=[violation],
            recommendations=[suggested_fix],
            requires_review=True,
            categories=categories,
            domain=self.domain,
            rule_set_version=rule_set.version,
        )

    def _dispatch_audit(self, request: ValidationRequest, result: ValidationResult) -> None:
        if self.audit is None:
            return
        try:
            record = build_audit_record(request, result, domain=self.domain)
        except Exception:
            logger.exception("Failed to build audit record", extra={"domain": self.domain})
            return
        self.audit.submit(record)

    @classmethod
    def from_env(
        cls,
        domain: str,
        *,
        audit_log_path: Optional[Path] = None,
        catalog: Optional[RuleCatalog] = None,
    ) -> "ComplianceEngine":
        """Wire Supabase rules/audit when configured, JSONL audit otherwise.

        When the catalog has a remote source its rules are fetched before the
        engine is returned; a failed fetch leaves the built-in rules active.
        """
        settings = SupabaseSettings.from_env()
        sink: Optional[AuditSink] = None
        if settings is not None:
            client = SupabaseRestClient(settings)
            catalog = catalog or RuleCatalog(source=SupabaseRuleSource(client))
            sink = SupabaseAuditSink(client)
        if sink is None and audit_log_path is not None:
            sink = JsonlAuditSink(audit_log_path)
        catalog = catalog or RuleCatalog()
        if catalog.source is not None:
            catalog.refresh(domain)
        return cls(
            domain=domain,
            catalog=catalog,
            config=EngineConfig.from_env(),
            audit=AuditDispatcher(sink) if sink is not None else None,
        )


__all__ = [
    "ComplianceEngine",
    "InvalidRequestField",
    "normalize_content",
    "normalize_request",
    "MISSING_CONTENT",
]
