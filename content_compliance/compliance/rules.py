"""
Rule definitions and the immutable rule set they are grouped into.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Pattern, Tuple, Union

from content_compliance.services.types import Category, ContentType, Severity

Trigger = Union[str, Pattern[str]]

PATTERN_PREFIX = "re:"


def compile_trigger(trigger: Trigger) -> Pattern[str]:
    """Compile a trigger into a case-insensitive, word-bounded pattern.

    Precompiled patterns are used as supplied. Strings prefixed with ``re:``
    are compiled as regular expressions; all other strings are literal phrases.
    """
    if isinstance(trigger, re.Pattern):
        return trigger
    text = str(trigger)
    if text.startswith(PATTERN_PREFIX):
        return re.compile(text[len(PATTERN_PREFIX) :], re.IGNORECASE)
    phrase = text.strip()
    if not phrase:
        raise ValueError("Rule triggers must not be empty.")
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


def compile_triggers(triggers: Iterable[Trigger]) -> Tuple[Pattern[str], ...]:
    return tuple(compile_trigger(trigger) for trigger in triggers)


def trigger_label(trigger: Trigger) -> str:
    if isinstance(trigger, re.Pattern):
        return trigger.pattern
    return str(trigger)


@dataclass(frozen=True, slots=True)
class Rule:
    """Categorised, severity-tagged trigger list; any hit is a violation."""

    rule_id: str
    category: Category
    severity: Severity
    triggers: Tuple[Trigger, ...]
    code: str
    description: str
    recommendation: str
    alternatives: Tuple[str, ...] = ()
    patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.triggers:
            raise ValueError(f"Rule '{self.rule_id}' has no triggers.")
        object.__setattr__(self, "triggers", tuple(self.triggers))
        object.__setattr__(self, "alternatives", tuple(self.alternatives))
        object.__setattr__(self, "patterns", compile_triggers(self.triggers))

    def suggested_fix(self, found_text: str) -> str:
        if self.alternatives:
            return f'Replace "{found_text}" with: {" or ".join(self.alternatives)}'
        return self.recommendation


@dataclass(frozen=True, slots=True)
class CompanionRule:
    """Soft check: a keyword should be accompanied by at least one companion token."""

    rule_id: str
    category: Category
    keywords: Tuple[str, ...]
    companions: Tuple[str, ...]
    description: str
    recommendation: str
    keyword_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)
    companion_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "companions", tuple(self.companions))
        object.__setattr__(self, "keyword_patterns", compile_triggers(self.keywords))
        object.__setattr__(self, "companion_patterns", compile_triggers(self.companions))


@dataclass(frozen=True, slots=True)
class RequirementRule:
    """Conditional check: required wording must be present once the condition holds.

    The condition holds when any rule in ``when_categories`` matched or any
    request flag named in ``when_flags`` is set, restricted to
    ``content_types`` when that tuple is non-empty.
    """

    rule_id: str
    category: Category
    severity: Severity
    required: Tuple[str, ...]
    code: str
    description: str
    recommendation: str
    when_categories: Tuple[Category, ...] = ()
    when_flags: Tuple[str, ...] = ()
    content_types: Tuple[ContentType, ...] = ()
    required_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.when_categories and not self.when_flags:
            raise ValueError(f"Requirement '{self.rule_id}' needs a category or flag condition.")
        object.__setattr__(self, "required", tuple(self.required))
        object.__setattr__(self, "when_categories", tuple(self.when_categories))
        object.__setattr__(self, "when_flags", tuple(self.when_flags))
        object.__setattr__(self, "content_types", tuple(self.content_types))
        object.__setattr__(self, "required_patterns", compile_triggers(self.required))


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Immutable, versioned snapshot of every rule for one domain."""

    domain: str
    version: str
    rules: Tuple[Rule, ...]
    companion_rules: Tuple[CompanionRule, ...] = ()
    requirement_rules: Tuple[RequirementRule, ...] = ()
    source: str = "builtin"

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "companion_rules", tuple(self.companion_rules))
        object.__setattr__(self, "requirement_rules", tuple(self.requirement_rules))
        seen: set[str] = set()
        for rule_id in self.rule_ids():
            if rule_id in seen:
                raise ValueError(f"Duplicate rule id '{rule_id}' in rule set '{self.domain}'.")
            seen.add(rule_id)

    def rule_ids(self) -> Tuple[str, ...]:
        ids = [rule.rule_id for rule in self.rules]
        ids.extend(rule.rule_id for rule in self.companion_rules)
        ids.extend(rule.rule_id for rule in self.requirement_rules)
        return tuple(ids)

    def get(self, rule_id: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def categories(self) -> Tuple[Category, ...]:
        ordered: list[Category] = []
        for rule in self.rules:
            if rule.category not in ordered:
                ordered.append(rule.category)
        return tuple(ordered)


__all__ = [
    "Trigger",
    "PATTERN_PREFIX",
    "compile_trigger",
    "compile_triggers",
    "trigger_label",
    "Rule",
    "CompanionRule",
    "RequirementRule",
    "RuleSet",
]
