"""Tests for settings and startup validation."""

import pytest

from genclient.core import config as config_module
from genclient.core.config import Settings, validate_settings_for_production


def test_defaults():
    s = Settings(_env_file=None)
    assert s.slot_cooldown_seconds == 10
    assert s.slot_poll_interval_seconds == 2.0
    assert s.generation_tag_list == ["GENERATE", "RECIPE"]
    assert s.slot_rpc_name == "request_generation_slot"


def test_generation_tags_parsing():
    s = Settings(_env_file=None, generation_tags=" GENERATE , ,STORYBOARD ")
    assert s.generation_tag_list == ["GENERATE", "STORYBOARD"]


def test_slot_rpc_url_strips_trailing_slash():
    s = Settings(_env_file=None, supabase_url="https://db.test/")
    assert s.slot_rpc_url == "https://db.test/rest/v1/rpc/request_generation_slot"


def test_validate_missing_supabase(monkeypatch):
    monkeypatch.setattr(config_module, "settings", Settings(_env_file=None, supabase_url="", supabase_anon_key=""))
    with pytest.raises(SystemExit) as exc_info:
        validate_settings_for_production()
    assert "SUPABASE_URL" in str(exc_info.value)
    assert "SUPABASE_ANON_KEY" in str(exc_info.value)


def test_validate_ok(monkeypatch):
    monkeypatch.setattr(
        config_module,
        "settings",
        Settings(_env_file=None, supabase_url="https://db.test", supabase_anon_key="k"),
    )
    validate_settings_for_production()


def test_json_formatter_includes_activity_fields():
    import json
    import logging

    from genclient.core.logging import JSONFormatter

    record = logging.LogRecord("genclient.activity", logging.WARNING, __file__, 1, "[%s] failed", ("GENERATE",), None)
    record.operation = "GENERATE"
    record.log_status = "Error"
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "[GENERATE] failed"
    assert data["operation"] == "GENERATE"
    assert data["log_status"] == "Error"


def test_init_sentry_skipped_without_dsn(monkeypatch):
    from genclient.core import sentry

    monkeypatch.setattr(sentry, "settings", Settings(_env_file=None, sentry_dsn=""))
    assert sentry.init_sentry() is False
