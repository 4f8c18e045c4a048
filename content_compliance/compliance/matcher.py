"""
Trigger scanning over submitted content.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Pattern

from content_compliance.services.types import Match

from .rules import RuleSet


def first_hit(content: str, patterns: Iterable[Pattern[str]]) -> Optional[str]:
    """Return the text of the first pattern that occurs in ``content``."""
    for pattern in patterns:
        found = pattern.search(content)
        if found:
            return found.group(0)
    return None


def contains_any(content: str, patterns: Iterable[Pattern[str]]) -> bool:
    return first_hit(content, patterns) is not None


class PatternMatcher:
    """Evaluate every trigger of every rule independently.

    A trigger contributes at most one `Match` (its first occurrence), so a
    rule with five triggers yields up to five matches. Matches are returned in
    rule order, then trigger order, and are never deduplicated here.
    """

    def scan(self, content: str, rule_set: RuleSet) -> List[Match]:
        matches: List[Match] = []
        for rule in rule_set.rules:
            for pattern in rule.patterns:
                found = pattern.search(content)
                if not found or not found.group(0):
                    continue
                matches.append(
                    Match(
                        rule_id=rule.rule_id,
                        found_text=found.group(0),
                        category=rule.category,
                        severity=rule.severity,
                        start=found.start(),
                        end=found.end(),
                    )
                )
        return matches


__all__ = ["PatternMatcher", "contains_any", "first_hit"]
