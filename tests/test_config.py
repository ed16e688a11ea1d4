from __future__ import annotations

import pytest
from pydantic import ValidationError

from autosign.config import DEFAULT_STRUCTURED_TOOLS, Settings, get_settings
from autosign.errors import ConfigurationError


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AUTOSIGN_HOST_NAME", "AUTOSIGN_SHELL_TOOL", "AUTOSIGN_STRUCTURED_TOOLS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.host_name == "OpenCode"
    assert settings.host_url == "https://opencode.ai"
    assert settings.shell_tool == "bash"
    assert settings.structured_tools == list(DEFAULT_STRUCTURED_TOOLS)


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOSIGN_SHELL_TOOL", "sh")
    monkeypatch.setenv("AUTOSIGN_STRUCTURED_TOOLS", '["create_ticket"]')
    settings = get_settings()
    assert settings.shell_tool == "sh"
    assert settings.structured_tools == ["create_ticket"]


def test_keyword_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTOSIGN_HOST_NAME", "FromEnv")
    assert get_settings(host_name="FromArgs").host_name == "FromArgs"


def test_blank_host_name_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(host_name="  ")


def test_get_settings_wraps_validation_errors() -> None:
    with pytest.raises(ConfigurationError):
        get_settings(host_name="")
