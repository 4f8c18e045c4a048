"""
Compliance rule definitions and evaluators.

Modules under this package scan marketing content against regulatory rule
sets and turn the hits into category scores and a single verdict.
"""

from .aggregator import Aggregator
from .catalog import CatalogError, CatalogResult, CatalogState, RuleCatalog, SupabaseRuleSource
from .matcher import PatternMatcher
from .recommendations import RecommendationEngine
from .rules import CompanionRule, RequirementRule, Rule, RuleSet
from .scorer import CategoryScorer, ScoreCard

__all__ = [
    "Aggregator",
    "CatalogError",
    "CatalogResult",
    "CatalogState",
    "CategoryScorer",
    "CompanionRule",
    "PatternMatcher",
    "RecommendationEngine",
    "RequirementRule",
    "Rule",
    "RuleCatalog",
    "RuleSet",
    "ScoreCard",
    "SupabaseRuleSource",
]
