import pytest

from content_compliance.config.settings import ConfigurationError, EngineConfig, SupabaseSettings
from content_compliance.services.types import Severity


def test_default_penalties():
    config = EngineConfig()

    assert [config.penalty_for(severity) for severity in Severity] == [5, 10, 20, 30]
    assert config.category_threshold == 70
    assert config.review_threshold == 85


def test_engine_config_from_env(monkeypatch):
    monkeypatch.setenv("CONTENT_COMPLIANCE_PENALTY_CRITICAL", "40")
    monkeypatch.setenv("CONTENT_COMPLIANCE_REVIEW_THRESHOLD", "90")

    config = EngineConfig.from_env()
    assert config.penalty_for(Severity.CRITICAL) == 40
    assert config.penalty_for(Severity.HIGH) == 20
    assert config.review_threshold == 90


def test_engine_config_rejects_non_integer_env(monkeypatch):
    monkeypatch.setenv("CONTENT_COMPLIANCE_CATEGORY_THRESHOLD", "seventy")

    with pytest.raises(ConfigurationError):
        EngineConfig.from_env()


def test_engine_config_rejects_out_of_range_threshold():
    with pytest.raises(ConfigurationError):
        EngineConfig(compliance_threshold=120)


def test_supabase_settings_require_url_and_key(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_SERVICE_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    assert SupabaseSettings.from_env() is None

    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
    settings = SupabaseSettings.from_env()
    assert settings.url == "https://project.supabase.co"
    assert settings.api_key == "anon"
    assert settings.rules_table == "compliance_rules"
