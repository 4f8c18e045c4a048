import re

from content_compliance.compliance.matcher import PatternMatcher, contains_any
from content_compliance.compliance.rules import Rule, RuleSet, compile_triggers
from content_compliance.services.types import Category, Severity


def make_rule(rule_id: str, *triggers, severity: Severity = Severity.HIGH) -> Rule:
    return Rule(
        rule_id=rule_id,
        category=Category.THERAPEUTIC_CLAIMS,
        severity=severity,
        triggers=triggers,
        code=f"CODE-{rule_id}",
        description=f"{rule_id} description",
        recommendation=f"{rule_id} recommendation",
    )


def make_rule_set(*rules: Rule) -> RuleSet:
    return RuleSet(domain="test", version="v1", rules=rules)


def test_scan_is_case_insensitive_and_word_bounded():
    rule_set = make_rule_set(make_rule("R1", "cure"))
    matches = PatternMatcher().scan("We CURE things. Secure parking available.", rule_set)

    assert len(matches) == 1
    match = matches[0]
    assert match.rule_id == "R1"
    assert match.found_text == "CURE"
    assert (match.start, match.end) == (3, 7)
    assert match.category is Category.THERAPEUTIC_CLAIMS


def test_each_trigger_of_a_rule_produces_its_own_match():
    rule_set = make_rule_set(make_rule("R1", "miracle", "instant relief", "absent phrase"))
    matches = PatternMatcher().scan("A miracle that gives instant relief.", rule_set)

    assert [m.found_text for m in matches] == ["miracle", "instant relief"]
    assert {m.rule_id for m in matches} == {"R1"}


def test_matches_are_not_deduplicated_across_rules():
    rule_set = make_rule_set(make_rule("R1", "botox"), make_rule("R2", "botox", severity=Severity.LOW))
    matches = PatternMatcher().scan("Ask about botox.", rule_set)

    assert [m.rule_id for m in matches] == ["R1", "R2"]
    assert [m.severity for m in matches] == [Severity.HIGH, Severity.LOW]


def test_repeated_trigger_counts_once():
    rule_set = make_rule_set(make_rule("R1", "heal"))
    matches = PatternMatcher().scan("Heal fast, heal well, heal now.", rule_set)

    assert len(matches) == 1
    assert matches[0].start == 0


def test_precompiled_and_prefixed_patterns():
    rule_set = make_rule_set(
        make_rule("R1", re.compile(r"\b\d{2,3}% effective", re.IGNORECASE)),
        make_rule("R2", r"re:results?\s+guaranteed"),
    )
    matches = PatternMatcher().scan("Now 100% Effective with results guaranteed!", rule_set)

    assert [m.found_text for m in matches] == ["100% Effective", "results guaranteed"]


def test_patterns_are_compiled_when_the_rule_is_built(monkeypatch):
    rule_set = make_rule_set(make_rule("R1", "cure"))

    def fail_compile(*args, **kwargs):
        raise AssertionError("patterns must not be compiled during a scan")

    monkeypatch.setattr(re, "compile", fail_compile)
    assert len(PatternMatcher().scan("cure", rule_set)) == 1


def test_no_matches_for_clean_content():
    rule_set = make_rule_set(make_rule("R1", "cure", "heal"))
    assert PatternMatcher().scan("Opening hours are 9am to 5pm.", rule_set) == []


def test_contains_any_helper():
    patterns = compile_triggers(("study", "journal"))
    assert contains_any("Published in a peer journal.", patterns)
    assert not contains_any("Students welcome.", patterns)
