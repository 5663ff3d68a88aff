"""Unit tests for routerscope.config."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from routerscope.config import CoordinatorSettings
from routerscope.models.coordinator import FetchPolicy


class TestDefaults:
    def test_defaults(self):
        settings = CoordinatorSettings()

        assert settings.log_entry_count == 100
        assert settings.fetch_policy == FetchPolicy.ABORT_ON_ERROR
        assert settings.new_target.address == "192.168.1.1"
        assert settings.new_target.port == 8728


class TestFromEnv:
    def test_empty_env(self):
        assert CoordinatorSettings.from_env({}) == CoordinatorSettings()

    def test_overrides(self):
        settings = CoordinatorSettings.from_env({
            "ROUTERSCOPE_LOG_ENTRY_COUNT": "250",
            "ROUTERSCOPE_FETCH_POLICY": "continue",
            "ROUTERSCOPE_NEW_TARGET_ADDRESS": "172.16.0.1",
            "ROUTERSCOPE_NEW_TARGET_USE_POLLING": "true",
            "UNRELATED": "x",
        })

        assert settings.log_entry_count == 250
        assert settings.fetch_policy == FetchPolicy.CONTINUE_ON_ERROR
        assert settings.new_target.address == "172.16.0.1"
        assert settings.new_target.use_polling is True
        assert settings.new_target.name == "New Router"

    def test_reads_process_env(self, monkeypatch):
        monkeypatch.setenv("ROUTERSCOPE_LOG_ENTRY_COUNT", "10")

        assert CoordinatorSettings.from_env().log_entry_count == 10

    @pytest.mark.parametrize("key,value", [
        ("ROUTERSCOPE_LOG_ENTRY_COUNT", "0"),
        ("ROUTERSCOPE_FETCH_POLICY", "retry"),
        ("ROUTERSCOPE_NEW_TARGET_PORT", "99999"),
        ("ROUTERSCOPE_NEW_TARGET_ADRESS", "10.0.0.1"),
    ])
    def test_invalid_values(self, key, value):
        with pytest.raises(ValidationError):
            CoordinatorSettings.from_env({key: value})
