"""
Per-category scoring of trigger matches.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from content_compliance.config.settings import EngineConfig
from content_compliance.services.types import (
    Category,
    CategoryResult,
    ContentWarning,
    Match,
    ValidationRequest,
    Violation,
)

from .matcher import contains_any
from .rules import CompanionRule, RequirementRule, Rule, RuleSet

logger = logging.getLogger("content_compliance.scorer")

MAX_SCORE = 100
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _append_unique(items: List[str], value: str) -> None:
    if value and value not in items:
        items.append(value)


@dataclass(slots=True)
class ScoreCard:
    """Category results plus the findings that produced them."""

    categories: Dict[Category, CategoryResult]
    violations: List[Violation] = field(default_factory=list)
    warnings: List[ContentWarning] = field(default_factory=list)


class CategoryScorer:
    """Turn matches into violations, warnings and 0-100 category scores."""

    def __init__(self, categories: Sequence[Category], config: Optional[EngineConfig] = None):
        self.categories = tuple(categories)
        self.config = config or EngineConfig()

    def score(self, matches: Iterable[Match], request: ValidationRequest, rule_set: RuleSet) -> ScoreCard:
        content = request.content if isinstance(request.content, str) else ""
        rules_by_id: Dict[str, Rule] = {rule.rule_id: rule for rule in rule_set.rules}

        deductions: Dict[Category, int] = {category: 0 for category in self.categories}
        issues: Dict[Category, List[str]] = {category: [] for category in self.categories}
        fixes: Dict[Category, List[str]] = {category: [] for category in self.categories}
        violations: List[Violation] = []
        matched: Dict[Category, Match] = {}

        for match in matches:
            if match.category not in deductions:
                logger.debug(
                    "Ignoring match outside scored categories",
                    extra={"rule_id": match.rule_id, "category": match.category.value},
                )
                continue
            rule = rules_by_id.get(match.rule_id)
            if rule is None:
                logger.warning("Match references unknown rule", extra={"rule_id": match.rule_id})
                continue
            matched.setdefault(match.category, match)
            violation = Violation(
                severity=match.severity,
                category=match.category,
                description=rule.description,
                found_text=match.found_text,
                rule_reference=rule.code,
                penalty=self.config.penalty_for(match.severity),
                suggested_fix=rule.suggested_fix(match.found_text),
            )
            self._record(violation, violations, deductions, issues, fixes)

        for requirement in rule_set.requirement_rules:
            violation = self._check_requirement(requirement, content, request, matched)
            if violation is not None:
                self._record(violation, violations, deductions, issues, fixes)

        warnings = self._companion_warnings(rule_set.companion_rules, content)
        if Category.READABILITY in deductions:
            warnings.extend(self._sentence_length_warnings(content))

        results: Dict[Category, CategoryResult] = {}
        for category in self.categories:
            score = max(0, MAX_SCORE - deductions[category])
            results[category] = CategoryResult(
                category=category,
                score=score,
                compliant=score >= self.config.category_threshold,
                issues=issues[category],
                recommendations=fixes[category],
            )
        return ScoreCard(categories=results, violations=violations, warnings=warnings)

    @staticmethod
    def _record(
        violation: Violation,
        violations: List[Violation],
        deductions: Dict[Category, int],
        issues: Dict[Category, List[str]],
        fixes: Dict[Category, List[str]],
    ) -> None:
        violations.append(violation)
        deductions[violation.category] += violation.penalty
        _append_unique(issues[violation.category], violation.description)
        _append_unique(fixes[violation.category], violation.suggested_fix)

    def _check_requirement(
        self,
        requirement: RequirementRule,
        content: str,
        request: ValidationRequest,
        matched: Dict[Category, Match],
    ) -> Optional[Violation]:
        if requirement.category not in self.categories:
            return None
        if requirement.content_types and request.content_type not in requirement.content_types:
            return None

        reason: Optional[str] = None
        for category in requirement.when_categories:
            if category in matched:
                reason = matched[category].found_text
                break
        if reason is None:
            for flag in requirement.when_flags:
                if request.flags.is_set(flag):
                    reason = flag
                    break
        if reason is None:
            return None
        if contains_any(content, requirement.required_patterns):
            return None

        return Violation(
            severity=requirement.severity,
            category=requirement.category,
            description=requirement.description,
            found_text=reason,
            rule_reference=requirement.code,
            penalty=self.config.penalty_for(requirement.severity),
            suggested_fix=requirement.recommendation,
        )

    def _companion_warnings(self, rules: Iterable[CompanionRule], content: str) -> List[ContentWarning]:
        warnings: List[ContentWarning] = []
        for rule in rules:
            if rule.category not in self.categories:
                continue
            if contains_any(content, rule.companion_patterns):
                continue
            for pattern in rule.keyword_patterns:
                found = pattern.search(content)
                if not found:
                    continue
                warnings.append(
                    ContentWarning(
                        category=rule.category,
                        description=f'{rule.description}: "{found.group(0)}"',
                        found_text=found.group(0),
                        recommendation=rule.recommendation,
                    )
                )
        return warnings

    def _sentence_length_warnings(self, content: str) -> List[ContentWarning]:
        limit = self.config.long_sentence_words
        sentences = [part for part in _SENTENCE_SPLIT.split(content) if part.strip()]
        long_sentences = [sentence for sentence in sentences if len(sentence.split()) > limit]
        if not long_sentences:
            return []
        return [
            ContentWarning(
                category=Category.READABILITY,
                description="Some sentences may be too long for easy reading",
                found_text=f"{len(long_sentences)} long sentences found",
                recommendation="Break long sentences into shorter, clearer statements",
            )
        ]


__all__ = ["CategoryScorer", "ScoreCard", "MAX_SCORE"]
