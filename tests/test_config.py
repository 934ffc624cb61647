"""
Tests for Config.

All tests use temp_config or an explicit tmp_path file so the user's real
~/.steam_market_manager/config.json is never read or written.
"""
import json
from pathlib import Path

import pytest

from core.config import Config
from core.constants import CACHE_TTL_MAX, WEB_API_PORT_DEFAULT, WEB_API_SEPARATOR_DEFAULT
from core.currencies import Currency


class TestDefaults:
    def test_defaults(self, temp_config):
        assert temp_config.app_id is None
        assert temp_config.currency is Currency.EUR
        assert temp_config.keep_currency_symbols is False
        assert temp_config.cache_enabled is False
        assert temp_config.cache_file == Path("cache.json")
        assert temp_config.refresh_interval_seconds == 300
        assert temp_config.timeouts == (10.0, 30.0)
        assert temp_config.web_api_port == WEB_API_PORT_DEFAULT
        assert temp_config.web_api_separator == WEB_API_SEPARATOR_DEFAULT

    def test_web_api_section_has_only_used_keys(self):
        """The server is started by run_api.py; there is no on/off switch."""
        assert set(Config.DEFAULT_CONFIG["web_api"]) == {"port", "separator"}
        assert not hasattr(Config, "web_api_enabled")

    def test_missing_file_is_not_created(self, tmp_path):
        config_file = tmp_path / "config.json"
        Config(config_file=config_file, use_env=False)
        assert not config_file.exists()


class TestFileLoading:
    def test_file_values_merge_with_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"market": {"app_id": 730}}))

        config = Config(config_file=config_file, use_env=False)

        assert config.app_id == 730
        assert config.currency is Currency.EUR

    def test_corrupt_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        config = Config(config_file=config_file, use_env=False)

        assert config.app_id is None


class TestOverrides:
    def test_explicit_overrides_win(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"market": {"app_id": 730}}))

        config = Config(
            config_file=config_file,
            overrides={"market": {"app_id": 440, "currency": "USD"}},
            use_env=False,
        )

        assert config.app_id == 440
        assert config.currency is Currency.USD

    def test_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("STEAM_MARKET_APP_ID", "570")
        monkeypatch.setenv("STEAM_MARKET_CACHE_TTL", "600")
        monkeypatch.setenv("BACKPACK_TF_API_KEY", "secret")

        config = Config(config_file=tmp_path / "config.json")

        assert config.app_id == 570
        assert config.cache_ttl_seconds == 600
        assert config.cache_enabled is True
        assert config.backpack_tf_api_key == "secret"

    def test_overrides_are_not_saved(self, tmp_path):
        config_file = tmp_path / "config.json"
        config = Config(
            config_file=config_file,
            overrides={"backpack_tf": {"api_key": "secret"}},
            use_env=False,
        )

        config.keep_currency_symbols = True

        saved = json.loads(config_file.read_text())
        assert saved["backpack_tf"]["api_key"] == ""
        assert saved["market"]["keep_currency_symbols"] is True


class TestGuardrails:
    @pytest.mark.parametrize("raw, expected", [
        (-5, 0),
        ("abc", 0),
        (False, 0),
        (CACHE_TTL_MAX * 10, CACHE_TTL_MAX),
        ("120", 120),
    ])
    def test_cache_ttl(self, temp_config, raw, expected):
        temp_config.data["cache"]["ttl_seconds"] = raw
        assert temp_config.cache_ttl_seconds == expected

    def test_unknown_currency_falls_back(self, temp_config):
        temp_config.data["market"]["currency"] = "DOUBLOONS"
        assert temp_config.currency is Currency.EUR

    def test_invalid_app_id(self, temp_config):
        temp_config.data["market"]["app_id"] = "not-a-number"
        assert temp_config.app_id is None

    def test_out_of_range_port(self, temp_config):
        temp_config.data["web_api"]["port"] = 70000
        assert temp_config.web_api_port == WEB_API_PORT_DEFAULT

    def test_timeouts_have_floor(self, temp_config):
        temp_config.data["api"]["timeouts"] = {"connect": 0, "read": 0.2}
        assert temp_config.timeouts == (1.0, 1.0)


class TestPersistence:
    def test_setters_round_trip(self, tmp_path):
        config_file = tmp_path / "config.json"
        config = Config(config_file=config_file, use_env=False)

        config.app_id = 440
        config.currency = Currency.GBP
        config.cache_ttl_seconds = 900

        reloaded = Config(config_file=config_file, use_env=False)
        assert reloaded.app_id == 440
        assert reloaded.currency is Currency.GBP
        assert reloaded.cache_ttl_seconds == 900
