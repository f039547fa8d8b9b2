"""Where claudius' own sources live, and the system-wide agent paths."""

from __future__ import annotations

import os
from pathlib import Path

from .models.app_config import Agent

APP_NAME = "claudius"

SERVERS_SOURCE = "mcpServers.json"
APP_CONFIG_FILE = "config.toml"
CLAUDE_SETTINGS_SOURCE = "claude.settings.json"
LEGACY_CLAUDE_SETTINGS_SOURCE = "settings.json"

_SETTINGS_SOURCES = {
    Agent.CLAUDE: CLAUDE_SETTINGS_SOURCE,
    Agent.CLAUDE_CODE: CLAUDE_SETTINGS_SOURCE,
    Agent.CODEX: "codex.settings.toml",
    Agent.GEMINI: "gemini.settings.json",
}

CODEX_REQUIREMENTS_SOURCES = ("codex.requirements.toml", "requirements.toml")
CODEX_MANAGED_CONFIG_SOURCES = ("codex.managed_config.toml", "managed_config.toml")

# (environment variable, default) for system-wide files
_CLAUDE_CODE_MANAGED_DIR = ("CLAUDIUS_CLAUDE_CODE_MANAGED_DIR", "/etc/claude-code")
_CODEX_REQUIREMENTS = ("CLAUDIUS_CODEX_REQUIREMENTS_PATH", "/etc/codex/requirements.toml")
_CODEX_MANAGED_CONFIG = ("CLAUDIUS_CODEX_MANAGED_CONFIG_PATH", "/etc/codex/managed_config.toml")
_GEMINI_SYSTEM_SETTINGS = ("GEMINI_CLI_SYSTEM_SETTINGS_PATH", "/etc/gemini-cli/settings.json")


def config_dir(home: Path | None = None) -> Path:
    """``$XDG_CONFIG_HOME/claudius``, falling back to ``~/.config/claudius``."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    if xdg:
        return Path(xdg) / APP_NAME
    return (home or Path.home()) / ".config" / APP_NAME


def app_config_path(directory: Path) -> Path:
    return directory / APP_CONFIG_FILE


def servers_source_path(directory: Path) -> Path:
    return directory / SERVERS_SOURCE


def settings_source_path(directory: Path, agent: Agent) -> Path:
    """Settings source for ``agent``. Claude falls back to a legacy settings.json."""
    preferred = directory / _SETTINGS_SOURCES[agent]
    if agent in (Agent.CLAUDE, Agent.CLAUDE_CODE) and not preferred.exists():
        legacy = directory / LEGACY_CLAUDE_SETTINGS_SOURCE
        if legacy.exists():
            return legacy
    return preferred


def uses_legacy_settings(path: Path) -> bool:
    return path.name == LEGACY_CLAUDE_SETTINGS_SOURCE


def first_existing(directory: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


def detect_available_agents(directory: Path) -> list[Agent]:
    """Agents with a settings source in ``directory``, in a fixed order."""
    agents = []
    if (directory / CLAUDE_SETTINGS_SOURCE).exists() or (
        directory / LEGACY_CLAUDE_SETTINGS_SOURCE
    ).exists():
        agents.append(Agent.CLAUDE)
    if (directory / _SETTINGS_SOURCES[Agent.CODEX]).exists():
        agents.append(Agent.CODEX)
    if (directory / _SETTINGS_SOURCES[Agent.GEMINI]).exists():
        agents.append(Agent.GEMINI)
    return agents


def claude_code_managed_settings_path() -> Path:
    return _env_path(_CLAUDE_CODE_MANAGED_DIR) / "managed-settings.json"


def claude_code_managed_mcp_path() -> Path:
    return _env_path(_CLAUDE_CODE_MANAGED_DIR) / "managed-mcp.json"


def codex_requirements_path() -> Path:
    return _env_path(_CODEX_REQUIREMENTS)


def codex_managed_config_path() -> Path:
    return _env_path(_CODEX_MANAGED_CONFIG)


def gemini_system_settings_path() -> Path:
    return _env_path(_GEMINI_SYSTEM_SETTINGS)


def _env_path(override: tuple[str, str]) -> Path:
    name, default = override
    value = os.environ.get(name, "").strip()
    return Path(value or default)
