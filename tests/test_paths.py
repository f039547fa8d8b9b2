from pathlib import Path

import pytest

from claudius.models import Agent
from claudius.paths import (
    CODEX_REQUIREMENTS_SOURCES,
    claude_code_managed_mcp_path,
    claude_code_managed_settings_path,
    codex_managed_config_path,
    codex_requirements_path,
    config_dir,
    detect_available_agents,
    first_existing,
    gemini_system_settings_path,
    settings_source_path,
    uses_legacy_settings,
)


def test_config_dir_from_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    assert config_dir(tmp_path) == tmp_path / "xdg" / "claudius"


@pytest.mark.parametrize("xdg", [None, "", "   "])
def test_config_dir_falls_back_to_home(monkeypatch, tmp_path, xdg):
    if xdg is None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    else:
        monkeypatch.setenv("XDG_CONFIG_HOME", xdg)
    assert config_dir(tmp_path) == tmp_path / ".config" / "claudius"


def test_settings_source_per_agent(tmp_path):
    assert settings_source_path(tmp_path, Agent.CODEX) == tmp_path / "codex.settings.toml"
    assert settings_source_path(tmp_path, Agent.GEMINI) == tmp_path / "gemini.settings.json"
    assert settings_source_path(tmp_path, Agent.CLAUDE) == tmp_path / "claude.settings.json"


def test_claude_falls_back_to_legacy_settings(tmp_path):
    (tmp_path / "settings.json").write_text("{}")
    path = settings_source_path(tmp_path, Agent.CLAUDE_CODE)
    assert path == tmp_path / "settings.json"
    assert uses_legacy_settings(path)

    (tmp_path / "claude.settings.json").write_text("{}")
    assert settings_source_path(tmp_path, Agent.CLAUDE) == tmp_path / "claude.settings.json"


def test_detect_available_agents_order(tmp_path):
    assert detect_available_agents(tmp_path) == []
    (tmp_path / "gemini.settings.json").write_text("{}")
    (tmp_path / "codex.settings.toml").write_text("")
    (tmp_path / "settings.json").write_text("{}")
    assert detect_available_agents(tmp_path) == [Agent.CLAUDE, Agent.CODEX, Agent.GEMINI]


def test_first_existing_prefers_first_candidate(tmp_path):
    assert first_existing(tmp_path, CODEX_REQUIREMENTS_SOURCES) is None
    (tmp_path / "requirements.toml").write_text("")
    assert first_existing(tmp_path, CODEX_REQUIREMENTS_SOURCES) == tmp_path / "requirements.toml"
    (tmp_path / "codex.requirements.toml").write_text("")
    assert first_existing(tmp_path, CODEX_REQUIREMENTS_SOURCES) == tmp_path / "codex.requirements.toml"


def test_system_paths_defaults(monkeypatch):
    for name in (
        "CLAUDIUS_CLAUDE_CODE_MANAGED_DIR",
        "CLAUDIUS_CODEX_REQUIREMENTS_PATH",
        "CLAUDIUS_CODEX_MANAGED_CONFIG_PATH",
        "GEMINI_CLI_SYSTEM_SETTINGS_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    assert claude_code_managed_settings_path() == Path("/etc/claude-code/managed-settings.json")
    assert claude_code_managed_mcp_path() == Path("/etc/claude-code/managed-mcp.json")
    assert codex_requirements_path() == Path("/etc/codex/requirements.toml")
    assert codex_managed_config_path() == Path("/etc/codex/managed_config.toml")
    assert gemini_system_settings_path() == Path("/etc/gemini-cli/settings.json")


def test_system_paths_env_overrides_are_trimmed(monkeypatch, tmp_path):
    monkeypatch.setenv("CLAUDIUS_CLAUDE_CODE_MANAGED_DIR", f"  {tmp_path}  ")
    monkeypatch.setenv("CLAUDIUS_CODEX_REQUIREMENTS_PATH", str(tmp_path / "req.toml"))
    monkeypatch.setenv("GEMINI_CLI_SYSTEM_SETTINGS_PATH", " ")
    assert claude_code_managed_settings_path() == tmp_path / "managed-settings.json"
    assert claude_code_managed_mcp_path() == tmp_path / "managed-mcp.json"
    assert codex_requirements_path() == tmp_path / "req.toml"
    assert gemini_system_settings_path() == Path("/etc/gemini-cli/settings.json")
