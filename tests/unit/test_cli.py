"""Unit tests for the routerscope CLI."""

from __future__ import annotations

import json
import sys
import types
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from routerscope.cli.main import cli, load_backend
from routerscope.exceptions import BackendLoadError


@pytest.fixture()
def backend_module(monkeypatch):
    """Register an importable fake backend module."""
    module = types.ModuleType("fake_router_backend")
    module.collaborators = (MagicMock(), MagicMock(), MagicMock())
    module.build = lambda: module.collaborators
    module.broken = lambda: "not a tuple"
    module.not_callable = 42
    monkeypatch.setitem(sys.modules, "fake_router_backend", module)
    return module


class TestLoadBackend:
    def test_loads_factory(self, backend_module):
        assert load_backend("fake_router_backend:build") == backend_module.collaborators

    @pytest.mark.parametrize("spec", ["fake_router_backend", ":build", "fake_router_backend:"])
    def test_malformed(self, spec):
        with pytest.raises(BackendLoadError, match="package.module:factory"):
            load_backend(spec)

    def test_missing_module(self):
        with pytest.raises(BackendLoadError, match="Cannot import"):
            load_backend("no_such_backend_mod:build")

    def test_not_callable(self, backend_module):
        with pytest.raises(BackendLoadError, match="no callable"):
            load_backend("fake_router_backend:not_callable")

    def test_factory_raises(self, backend_module):
        def _explode():
            raise OSError("no route to host")
        backend_module.explode = _explode

        with pytest.raises(BackendLoadError, match="failed: no route to host"):
            load_backend("fake_router_backend:explode")

    def test_wrong_return_shape(self, backend_module):
        with pytest.raises(BackendLoadError, match="must return"):
            load_backend("fake_router_backend:broken")


class TestSettingsCommand:
    def test_text(self):
        result = CliRunner().invoke(cli, ["settings"], env={"ROUTERSCOPE_LOG_ENTRY_COUNT": "20"})

        assert result.exit_code == 0
        assert "Log entries per refresh: 20" in result.output
        assert "192.168.1.1:8728" in result.output

    def test_json(self):
        result = CliRunner().invoke(
            cli, ["--json-output", "settings"], env={"ROUTERSCOPE_NEW_TARGET_PASSWORD": "pw"},
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["fetch_policy"] == "abort"
        assert "password" not in data["new_target"]

    def test_invalid_env(self):
        result = CliRunner().invoke(cli, ["settings"], env={"ROUTERSCOPE_FETCH_POLICY": "sometimes"})

        assert result.exit_code != 0
        assert "Invalid ROUTERSCOPE_* setting" in result.output


class TestServeCommand:
    @patch("uvicorn.run")
    def test_serve_builds_app(self, mock_run, backend_module):
        result = CliRunner().invoke(
            cli, ["serve", "--backend", "fake_router_backend:build", "--port", "9001"],
        )

        assert result.exit_code == 0, result.output
        app = mock_run.call_args.args[0]
        coordinator = app.state.coordinator
        assert coordinator.device_api is backend_module.collaborators[0]
        assert coordinator.targets == ()
        assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9001}

    @patch("uvicorn.run")
    def test_serve_bad_backend(self, mock_run):
        result = CliRunner().invoke(cli, ["serve", "--backend", "nowhere"])

        assert result.exit_code != 0
        assert "package.module:factory" in result.output
        mock_run.assert_not_called()
