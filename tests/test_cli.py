"""Tests for the command line interface."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest
from click.testing import CliRunner

from pubsub_webhook.app import CONFIG_ENV, HANDLER_ENV, create_app_from_env
from pubsub_webhook.cli import main

HANDLER_REF = "test_cli:sample_handler"


def sample_handler(request):
    return None


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let commands mutate the webhook environment variables safely."""
    for name in (HANDLER_ENV, CONFIG_ENV):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)


class TestServeCommand:
    """Tests for `serve`."""

    def test_runs_uvicorn_with_factory(self, runner: CliRunner, isolated_env: None) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(main, ["serve", "--handler", HANDLER_REF, "--port", "7071"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args == ("pubsub_webhook.app:create_app_from_env",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 7071
        assert os.environ[HANDLER_ENV] == HANDLER_REF

    def test_bad_handler_reference(self, runner: CliRunner, isolated_env: None) -> None:
        with patch("uvicorn.run") as mock_run:
            result = runner.invoke(main, ["serve", "--handler", "not-a-reference"])

        assert result.exit_code != 0
        assert "module:function" in result.output
        mock_run.assert_not_called()


class TestHealthCommand:
    """Tests for `health`."""

    def test_healthy(self, runner: CliRunner) -> None:
        response = httpx.Response(200, json={"status": "ok"}, request=httpx.Request("GET", "http://x/health"))

        with patch("pubsub_webhook.cli.httpx.get", return_value=response) as mock_get:
            result = runner.invoke(main, ["health", "--url", "http://localhost:9000/"])

        assert result.exit_code == 0
        assert "Healthy: ok" in result.output
        mock_get.assert_called_once_with("http://localhost:9000/health", timeout=5.0)

    def test_unreachable(self, runner: CliRunner) -> None:
        with patch("pubsub_webhook.cli.httpx.get", side_effect=httpx.ConnectError("refused")):
            result = runner.invoke(main, ["health"])

        assert result.exit_code == 1


class TestConfigCommand:
    """Tests for `config`."""

    def test_shows_settings_without_keys(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "webhook.yaml"
        path.write_text("hub: chat\naccess_keys:\n  - secret\n")

        result = runner.invoke(main, ["config", "--config", str(path)], env={"PUBSUB_WEBHOOK_HUB": None})

        assert result.exit_code == 0, result.output
        shown = json.loads(result.output)
        assert shown["hub"] == "chat"
        assert shown["access_keys"] == "1 configured"
        assert "secret" not in result.output


class TestAppFactory:
    """Tests for the uvicorn app factory."""

    def test_requires_handler(self, isolated_env: None) -> None:
        with pytest.raises(RuntimeError):
            create_app_from_env()

    def test_builds_app(self, monkeypatch: pytest.MonkeyPatch, isolated_env: None) -> None:
        monkeypatch.setenv(HANDLER_ENV, HANDLER_REF)
        monkeypatch.setenv("PUBSUB_WEBHOOK_PATH", "/hooks")

        app = create_app_from_env()

        assert app.state.settings.path == "/hooks"
        assert any(getattr(route, "path", None) == "/hooks" for route in app.routes)
