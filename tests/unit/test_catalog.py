from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

from content_compliance.compliance.catalog import (
    CatalogError,
    CatalogResult,
    CatalogState,
    RuleCatalog,
    SupabaseRuleSource,
    parse_rule_rows,
)
from content_compliance.compliance.defaults import BUILTIN_VERSION, tga_rule_set
from content_compliance.config.settings import SupabaseSettings
from content_compliance.services.types import Category, Severity
from content_compliance.storage.supabase import SupabaseRestClient

DOMAIN = "tga_therapeutic"


def make_row(rule_id="REMOTE-1", **overrides):
    row = {
        "id": rule_id,
        "category": "therapeutic_claims",
        "severity": "major",
        "triggers": ["miracle cure", "wonder drug"],
        "code": "TGA-REM-001",
        "description": "Remote rule",
        "recommendation": "Remove the claim",
    }
    row.update(overrides)
    return row


class StaticSource:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = 0

    def fetch_rules(self, domain):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.rows


def test_catalog_result_or_else():
    builtin = tga_rule_set()
    loaded = CatalogResult.ok(builtin)
    failed = CatalogResult.failed("offline")

    assert loaded.or_else(lambda: pytest.fail("default should not be built")) is builtin
    assert failed.or_else(builtin) is builtin
    assert failed.or_else(tga_rule_set).version == BUILTIN_VERSION
    assert isinstance(failed.error, CatalogError)
    with pytest.raises(CatalogError):
        failed.unwrap()


def test_active_without_source_uses_builtin_rules():
    catalog = RuleCatalog()

    assert catalog.state(DOMAIN) is CatalogState.UNLOADED
    rule_set = catalog.active(DOMAIN)
    assert rule_set.version == BUILTIN_VERSION
    assert rule_set.source == "builtin"
    assert catalog.state(DOMAIN) is CatalogState.DEFAULT
    assert catalog.active(DOMAIN) is rule_set


def test_refresh_installs_remote_rules():
    catalog = RuleCatalog(source=StaticSource([make_row()]))

    rule_set = catalog.refresh(DOMAIN)
    assert catalog.state(DOMAIN) is CatalogState.REMOTE
    assert rule_set.source == "remote"
    assert rule_set.version.startswith("remote-")
    assert rule_set.rule_ids()[0] == "REMOTE-1"
    rule = rule_set.get("REMOTE-1")
    assert rule.severity is Severity.HIGH
    assert rule.category is Category.THERAPEUTIC_CLAIMS
    assert rule_set.requirement_rules == tga_rule_set().requirement_rules
    assert catalog.active(DOMAIN) is rule_set


def test_remote_version_is_stable_for_same_rows():
    rows = [make_row("A"), make_row("B", triggers="snake oil")]
    first = RuleCatalog(source=StaticSource(rows)).refresh(DOMAIN)
    second = RuleCatalog(source=StaticSource(list(reversed(rows)))).refresh(DOMAIN)

    assert first.version == second.version


@pytest.mark.parametrize(
    "source",
    [
        StaticSource([]),
        StaticSource(error=RuntimeError("connection reset")),
        StaticSource([make_row(severity="catastrophic")]),
        StaticSource([make_row(category="confidentiality")]),
        StaticSource([make_row(triggers=[])]),
        StaticSource([make_row(triggers=["re:(unclosed"])]),
        StaticSource([make_row("DUP"), make_row("DUP")]),
    ],
)
def test_failed_refresh_reverts_to_defaults(source):
    catalog = RuleCatalog(source=source)

    rule_set = catalog.refresh(DOMAIN)
    assert rule_set.version == BUILTIN_VERSION
    assert catalog.state(DOMAIN) is CatalogState.DEFAULT
    assert not catalog.fetch(DOMAIN).is_ok


def test_refresh_failure_after_remote_success_returns_to_defaults():
    source = StaticSource([make_row()])
    catalog = RuleCatalog(source=source)
    catalog.refresh(DOMAIN)
    assert catalog.state(DOMAIN) is CatalogState.REMOTE

    source.error = CatalogError("timeout")
    rule_set = catalog.refresh(DOMAIN)
    assert catalog.state(DOMAIN) is CatalogState.DEFAULT
    assert rule_set.version == BUILTIN_VERSION


def test_load_logs_fallback(caplog):
    catalog = RuleCatalog(source=StaticSource(error=CatalogError("unreachable")))

    with caplog.at_level("WARNING", logger="content_compliance.catalog"):
        rule_set = catalog.load(DOMAIN)
    assert rule_set.version == BUILTIN_VERSION
    assert "falling back" in caplog.text


def test_parse_rule_rows_accepts_rule_id_key_and_string_triggers():
    rules = parse_rule_rows(DOMAIN, [{"rule_id": "X", "category": "DRUG_MENTIONS", "severity": "Critical", "triggers": "botox"}])

    assert rules[0].rule_id == "X"
    assert rules[0].category is Category.DRUG_MENTIONS
    assert rules[0].severity is Severity.CRITICAL
    assert rules[0].code == "X"


def test_parse_rule_rows_rejects_missing_id():
    with pytest.raises(CatalogError):
        parse_rule_rows(DOMAIN, [make_row(rule_id="")])


def test_concurrent_readers_see_complete_snapshots():
    source = StaticSource([make_row()])
    catalog = RuleCatalog(source=source)
    builtin_ids = tga_rule_set().rule_ids()
    remote_ids = catalog.fetch(DOMAIN).unwrap().rule_ids()

    def read(_):
        return catalog.active(DOMAIN).rule_ids()

    def toggle(index):
        source.error = None if index % 2 else CatalogError("flaky")
        catalog.refresh(DOMAIN)

    with ThreadPoolExecutor(max_workers=4) as pool:
        toggles = [pool.submit(toggle, index) for index in range(20)]
        observed = list(pool.map(read, range(200)))
        for future in toggles:
            future.result()

    assert all(ids in (builtin_ids, remote_ids) for ids in observed)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        return self.response


def make_settings():
    return SupabaseSettings(url="https://example.supabase.co", api_key="anon-key")


def test_supabase_source_filters_active_rules_for_domain():
    session = FakeSession(FakeResponse([make_row()]))
    source = SupabaseRuleSource(SupabaseRestClient(make_settings(), session=session))

    rows = source.fetch_rules(DOMAIN)
    assert rows == [make_row()]
    call = session.calls[0]
    assert call["url"] == "https://example.supabase.co/rest/v1/compliance_rules"
    assert call["params"] == {"select": "*", "active": "eq.true", "domain": f"eq.{DOMAIN}"}
    assert call["headers"]["apikey"] == "anon-key"


def test_supabase_source_http_error_becomes_catalog_error():
    session = FakeSession(FakeResponse({"message": "denied"}, status_code=401))
    source = SupabaseRuleSource(SupabaseRestClient(make_settings(), session=session))

    with pytest.raises(CatalogError) as excinfo:
        source.fetch_rules(DOMAIN)
    assert "HTTP 401" in str(excinfo.value)

    catalog = RuleCatalog(source=source)
    assert catalog.refresh(DOMAIN).version == BUILTIN_VERSION
