"""
Tests for journal_config: YAML loading, validation, environment overrides
and the bridges into the kernel.
"""

from dataclasses import FrozenInstanceError
from datetime import timezone
from zoneinfo import ZoneInfo

import pytest

from journal_config import DEFAULT_SETTINGS_PATH, get_settings
from journal_config.bridges import build_clock, build_ledger_selector
from journal_config.loader import (
    ENV_DATABASE_URL,
    ENV_LOG_LEVEL,
    ENV_TIMEZONE,
    load_settings,
    parse_settings,
)
from journal_config.schema import Settings
from journal_kernel.exceptions import ConfigurationError
from journal_kernel.selectors.criteria import LedgerCriteria


def _write(tmp_path, text: str):
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaultSettings:

    def test_shipped_defaults_load(self):
        settings = get_settings(environ={})

        assert settings.source == str(DEFAULT_SETTINGS_PATH)
        assert settings.database.url.startswith("postgresql://")
        assert settings.database.pool_size == 20
        assert settings.logging.level == "INFO"
        assert settings.clock.timezone == "America/Sao_Paulo"
        assert settings.reporting.all_accounts_label == "Todos os bancos"
        assert settings.reporting.property_meta_key == "property_label"

    def test_settings_are_frozen(self):
        settings = get_settings(environ={})
        with pytest.raises(FrozenInstanceError):
            settings.database.url = "sqlite://"

    def test_missing_sections_use_defaults(self, tmp_path):
        settings = load_settings(_write(tmp_path, "logging:\n  level: debug\n"))

        assert settings.logging.level == "DEBUG"
        assert settings.database == Settings().database
        assert settings.clock.timezone == "UTC"

    def test_empty_file(self, tmp_path):
        settings = load_settings(_write(tmp_path, ""))
        assert settings.reporting == Settings().reporting


class TestEnvironmentOverrides:

    def test_env_wins_over_file(self):
        settings = get_settings(
            environ={
                ENV_DATABASE_URL: "sqlite:///override.db",
                ENV_LOG_LEVEL: "warning",
                ENV_TIMEZONE: "Europe/Lisbon",
            }
        )

        assert settings.database.url == "sqlite:///override.db"
        assert settings.logging.level == "WARNING"
        assert settings.clock.timezone == "Europe/Lisbon"

    def test_empty_variables_ignored(self):
        settings = get_settings(environ={ENV_DATABASE_URL: ""})
        assert settings.database.url.startswith("postgresql://")

    def test_invalid_override_rejected(self):
        with pytest.raises(ConfigurationError, match="unknown timezone"):
            get_settings(environ={ENV_TIMEZONE: "Mars/Olympus_Mons"})


class TestInvalidSettings:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings(tmp_path / "absent.yaml", environ={})
        assert exc_info.value.code == "CONFIGURATION_ERROR"
        assert exc_info.value.source.endswith("absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="invalid YAML"):
            load_settings(_write(tmp_path, "database: [unclosed\n"))

    def test_top_level_must_be_mapping(self, tmp_path):
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(_write(tmp_path, "- just\n- a list\n"))

    def test_unknown_section(self):
        with pytest.raises(ConfigurationError, match="unknown section"):
            parse_settings({"metrics": {}})

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="pool_sise"):
            parse_settings({"database": {"pool_sise": 5}})

    @pytest.mark.parametrize(
        "section, values",
        [
            ("database", {"pool_size": "20"}),
            ("database", {"pool_size": True}),
            ("database", {"echo": 1}),
            ("logging", {"level": 10}),
        ],
    )
    def test_wrong_types(self, section, values):
        with pytest.raises(ConfigurationError, match="must be"):
            parse_settings({section: values})

    def test_unknown_log_level(self, tmp_path):
        with pytest.raises(ConfigurationError, match="log level"):
            load_settings(_write(tmp_path, "logging:\n  level: chatty\n"))

    def test_pool_size_must_be_positive(self, tmp_path):
        with pytest.raises(ConfigurationError, match="pool_size"):
            load_settings(_write(tmp_path, "database:\n  pool_size: 0\n"))


class TestBridges:

    def test_clock_uses_configured_zone(self):
        settings = get_settings(environ={})
        clock = build_clock(settings)
        assert clock.now().tzinfo == ZoneInfo("America/Sao_Paulo")

    def test_utc_clock(self, tmp_path):
        settings = load_settings(_write(tmp_path, "clock:\n  timezone: UTC\n"))
        assert build_clock(settings).now().utcoffset() == timezone.utc.utcoffset(None)

    def test_ledger_selector_gets_reporting_wording(self, tmp_path, session):
        settings = load_settings(
            _write(tmp_path, "reporting:\n  all_accounts_label: All banks\n")
        )

        selector = build_ledger_selector(session, settings)

        assert selector.report(LedgerCriteria()).account_name == "All banks"
