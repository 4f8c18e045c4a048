"""
Rule catalog: versioned rule-set snapshots with an explicit fallback policy.

Remote rule rows are fetched into a `CatalogResult`; callers choose what to do
on failure with `CatalogResult.or_else`, which is how the catalog falls back
to the built-in tables. Active snapshots are replaced wholesale so concurrent
scans always hold one complete `RuleSet`.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Union

from content_compliance.config.domains import get_domain
from content_compliance.config.settings import SupabaseSettings
from content_compliance.services.types import Category, Severity
from content_compliance.storage.supabase import SupabaseError, SupabaseRestClient
from content_compliance.utils.checksum import fingerprint_rows

from .defaults import default_rule_set
from .rules import Rule, RuleSet

logger = logging.getLogger("content_compliance.catalog")


class CatalogError(Exception):
    """Remote rule source unreachable, empty or malformed."""


@dataclass(frozen=True, slots=True)
class CatalogResult:
    """Either a loaded `RuleSet` or the `CatalogError` that prevented loading."""

    value: Optional[RuleSet] = None
    error: Optional[CatalogError] = None

    @classmethod
    def ok(cls, rule_set: RuleSet) -> "CatalogResult":
        return cls(value=rule_set)

    @classmethod
    def failed(cls, error: Union[CatalogError, str]) -> "CatalogResult":
        if not isinstance(error, CatalogError):
            error = CatalogError(error)
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.value is not None

    def unwrap(self) -> RuleSet:
        if self.value is None:
            raise self.error or CatalogError("empty catalog result")
        return self.value

    def or_else(self, default: Union[RuleSet, Callable[[], RuleSet]]) -> RuleSet:
        """Return the loaded rule set, or ``default`` (called lazily when callable)."""
        if self.value is not None:
            return self.value
        return default() if callable(default) else default


class CatalogState(str, Enum):
    UNLOADED = "unloaded"
    DEFAULT = "default"
    REMOTE = "remote"


class RuleSource(Protocol):
    """Anything that can list the active rule rows for a domain."""

    def fetch_rules(self, domain: str) -> List[Mapping[str, Any]]:
        ...


class SupabaseRuleSource:
    """Read active rules from the hosted `compliance_rules` table."""

    def __init__(self, client: SupabaseRestClient, table: Optional[str] = None):
        self.client = client
        self.table = table or client.settings.rules_table

    @classmethod
    def from_settings(cls, settings: SupabaseSettings) -> "SupabaseRuleSource":
        return cls(SupabaseRestClient(settings))

    def fetch_rules(self, domain: str) -> List[Mapping[str, Any]]:
        try:
            return self.client.select(self.table, {"active": "true", "domain": domain})
        except SupabaseError as exc:
            raise CatalogError(str(exc)) from exc


def _as_tuple(value: Any, field_name: str, rule_id: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise CatalogError(f"Rule '{rule_id}' has malformed {field_name}: {value!r}")


def parse_rule_rows(domain: str, rows: Iterable[Mapping[str, Any]]) -> List[Rule]:
    """Convert remote rows to rules; any malformed row rejects the whole batch."""
    allowed = set(get_domain(domain).categories)
    rules: List[Rule] = []
    for index, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise CatalogError(f"Rule row {index} is not an object")
        rule_id = str(row.get("id") or row.get("rule_id") or "").strip()
        if not rule_id:
            raise CatalogError(f"Rule row {index} has no id")
        try:
            category = Category(str(row.get("category", "")).strip().lower())
            severity = Severity.parse(row.get("severity", ""))
        except ValueError as exc:
            raise CatalogError(f"Rule '{rule_id}' has unknown category or severity: {exc}") from exc
        if category not in allowed:
            raise CatalogError(f"Rule '{rule_id}' category '{category.value}' is not scored in '{domain}'")
        triggers = _as_tuple(row.get("triggers"), "triggers", rule_id)
        if not triggers or not all(trigger.strip() for trigger in triggers):
            raise CatalogError(f"Rule '{rule_id}' has no usable triggers")
        try:
            rules.append(
                Rule(
                    rule_id=rule_id,
                    category=category,
                    severity=severity,
                    triggers=triggers,
                    code=str(row.get("code") or rule_id),
                    description=str(row.get("description") or ""),
                    recommendation=str(row.get("recommendation") or ""),
                    alternatives=_as_tuple(row.get("alternatives"), "alternatives", rule_id),
                )
            )
        except (re.error, ValueError) as exc:
            raise CatalogError(f"Rule '{rule_id}' could not be compiled: {exc}") from exc
    return rules


class RuleCatalog:
    """Per-domain holder of the active `RuleSet` snapshot."""

    def __init__(
        self,
        source: Optional[RuleSource] = None,
        defaults: Callable[[str], RuleSet] = default_rule_set,
    ):
        self.source = source
        self.defaults = defaults
        self._snapshots: Dict[str, RuleSet] = {}
        self._states: Dict[str, CatalogState] = {}
        self._lock = threading.Lock()

    def fetch(self, domain: str) -> CatalogResult:
        """Load the remote rule set for ``domain`` without raising."""
        get_domain(domain)
        if self.source is None:
            return CatalogResult.failed("no remote rule source configured")
        try:
            rows = list(self.source.fetch_rules(domain))
            if not rows:
                raise CatalogError(f"remote rule source returned no active rules for '{domain}'")
            rules = parse_rule_rows(domain, rows)
            builtin = self.defaults(domain)
            rule_set = RuleSet(
                domain=domain,
                version=f"remote-{fingerprint_rows(rows)}",
                rules=tuple(rules),
                companion_rules=builtin.companion_rules,
                requirement_rules=builtin.requirement_rules,
                source="remote",
            )
        except CatalogError as exc:
            return CatalogResult.failed(exc)
        except Exception as exc:
            return CatalogResult.failed(CatalogError(f"{type(exc).__name__}: {exc}"))
        return CatalogResult.ok(rule_set)

    def load(self, domain: str) -> RuleSet:
        """Remote rules if available, otherwise the built-in defaults."""
        result = self.fetch(domain)
        if not result.is_ok:
            logger.warning(
                "Rule catalog falling back to built-in rules",
                extra={"domain": domain, "reason": str(result.error)},
            )
        return result.or_else(lambda: self.defaults(domain))

    def active(self, domain: str) -> RuleSet:
        """Current snapshot; the first access installs the built-in rules."""
        snapshot = self._snapshots.get(domain)
        if snapshot is not None:
            return snapshot
        with self._lock:
            snapshot = self._snapshots.get(domain)
            if snapshot is None:
                snapshot = self.defaults(domain)
                self._swap(domain, snapshot, CatalogState.DEFAULT)
        return snapshot

    def refresh(self, domain: str) -> RuleSet:
        """Fetch remote rules and swap them in; on failure revert to the defaults."""
        result = self.fetch(domain)
        with self._lock:
            if result.is_ok:
                snapshot = result.unwrap()
                self._swap(domain, snapshot, CatalogState.REMOTE)
                logger.info(
                    "Rule catalog refreshed",
                    extra={"domain": domain, "version": snapshot.version, "rules": len(snapshot.rules)},
                )
            else:
                snapshot = result.or_else(lambda: self.defaults(domain))
                self._swap(domain, snapshot, CatalogState.DEFAULT)
                logger.warning(
                    "Rule catalog refresh failed; using built-in rules",
                    extra={"domain": domain, "reason": str(result.error)},
                )
        return snapshot

    def state(self, domain: str) -> CatalogState:
        return self._states.get(domain, CatalogState.UNLOADED)

    def _swap(self, domain: str, snapshot: RuleSet, state: CatalogState) -> None:
        # Replace the mappings instead of mutating them so lock-free readers
        # only ever see a complete snapshot.
        self._snapshots = {**self._snapshots, domain: snapshot}
        self._states = {**self._states, domain: state}


__all__ = [
    "CatalogError",
    "CatalogResult",
    "CatalogState",
    "RuleSource",
    "SupabaseRuleSource",
    "RuleCatalog",
    "parse_rule_rows",
]
