from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from etherpad_cli import config, main
from etherpad_client import ClientConfig, InvalidApiKeyError

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for env_var in [*config.ENV_OVERRIDES, config.ENV_CONFIG_PATH]:
        monkeypatch.delenv(env_var, raising=False)


def _settings(**kwargs) -> ClientConfig:
    values = {"apikey": "secret", "base_url": "https://pad.example.test", "ignore_security": True}
    values.update(kwargs)
    return ClientConfig(**values)


class _FakeClient:
    base_url = "https://pad.example.test"
    api_version = "1.2"

    def __init__(self) -> None:
        self.closed = False

    def get_version(self) -> str:
        return "1.3.0"

    def close(self) -> None:
        self.closed = True


def test_help_lists_commands() -> None:
    result = runner.invoke(main.app, ["--help"])
    assert result.exit_code == 0
    for name in ("check", "url-check", "show-config"):
        assert name in result.output


def test_check_reports_server_version(monkeypatch) -> None:
    client = _FakeClient()
    captured = {}

    class _FakeFactory:
        def __init__(self, settings, *, testing=None):
            captured["testing"] = testing

        def get_instance(self):
            return client

    monkeypatch.setattr(main, "load_settings", lambda: _settings())
    monkeypatch.setattr(main, "ClientFactory", _FakeFactory)

    result = runner.invoke(main.app, ["check", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data == {
        "ok": True,
        "base_url": "https://pad.example.test",
        "api_version": "1.2",
        "server_version": "1.3.0",
    }
    assert captured["testing"] is False
    assert client.closed is True


def test_check_fails_on_bootstrap_error(monkeypatch) -> None:
    class _FailingFactory:
        def __init__(self, settings, *, testing=None):
            pass

        def get_instance(self):
            raise InvalidApiKeyError("The server rejected the API key.")

    monkeypatch.setattr(main, "load_settings", lambda: _settings())
    monkeypatch.setattr(main, "ClientFactory", _FailingFactory)

    result = runner.invoke(main.app, ["check", "--json"])

    assert result.exit_code == 1
    assert json.loads(result.output)["error"] == "error_invalid_api_key"


def test_check_without_url(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_settings", lambda: _settings(base_url=""))
    result = runner.invoke(main.app, ["check"])
    assert result.exit_code == 2
    assert "No server url configured" in result.output


def test_url_check_blocked(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_settings", lambda: _settings(ignore_security=False))
    result = runner.invoke(main.app, ["url-check", "http://127.0.0.1:9001", "--json"])
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert data["blocked"] is True
    assert "127.0.0.1" in data["detail"]


def test_url_check_allowed(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_settings", lambda: _settings())
    monkeypatch.setattr(main, "is_url_blocked", lambda url, policy: None)
    result = runner.invoke(main.app, ["url-check", "pad.example.com"])
    assert result.exit_code == 0
    assert "Not blocked" in result.output


def test_show_config_redacts_key(monkeypatch) -> None:
    monkeypatch.setattr(main, "load_settings", lambda: _settings())
    result = runner.invoke(main.app, ["show-config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["apikey"] == "(set)"
    assert data["url"] == "https://pad.example.test"
