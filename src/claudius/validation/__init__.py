"""Field-name validation for settings sources.

Validators only ever produce warnings about unrecognized keys; a file that
cannot be parsed at all raises ParseError from the loaders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..loaders.reader import load_json_object, load_toml_table
from ..models.app_config import Agent
from ..paths import (
    detect_available_agents,
    servers_source_path,
    settings_source_path,
    uses_legacy_settings,
)
from ._claude import validate_claude_settings
from ._codex import validate_codex_settings
from ._gemini import validate_gemini_settings
from ._result import ValidationIssue, ValidationResult, warning

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

_VALIDATORS: dict[Agent, Callable[[dict[str, Any]], ValidationResult]] = {
    Agent.CLAUDE: validate_claude_settings,
    Agent.CLAUDE_CODE: validate_claude_settings,
    Agent.CODEX: validate_codex_settings,
    Agent.GEMINI: validate_gemini_settings,
}


def validate_settings(data: dict[str, Any], agent: Agent) -> ValidationResult:
    """Check the keys of an already-parsed settings document for ``agent``."""
    return _VALIDATORS[agent](data)


def pre_validate_settings(path: Path, agent: Agent) -> ValidationResult:
    """Parse ``path`` and validate its keys before it is read into a model.

    A missing file yields an empty result.
    """
    load = load_toml_table if agent is Agent.CODEX else load_json_object
    data = load(path)
    if data is None:
        return ValidationResult()
    return validate_settings(data, agent)


def validate_sources(
    config_dir: Path,
    agents: Iterable[Agent] | None = None,
    strict: bool = False,
) -> ValidationResult:
    """Validate mcpServers.json and each agent's settings source in ``config_dir``.

    ``agents`` defaults to every agent with a source file. With ``strict``,
    warnings are reported as errors.
    """
    result = ValidationResult()

    servers_path = servers_source_path(config_dir)
    servers = (load_json_object(servers_path) or {}).get("mcpServers")
    # a malformed container is reported by the reader as a ParseError
    if not isinstance(servers, dict):
        servers = {}
    for name, server in servers.items():
        if isinstance(server, dict) and "command" not in server and "url" not in server:
            result.issues.append(warning(
                f"mcpServers.{name}",
                f"{servers_path}: mcpServers.{name} must define either command or url",
            ))

    for agent in agents if agents is not None else detect_available_agents(config_dir):
        path = settings_source_path(config_dir, agent)
        if uses_legacy_settings(path):
            result.issues.append(warning(
                path.name,
                f"{path}: legacy settings.json is in use; rename it to claude.settings.json",
            ))
        for issue in pre_validate_settings(path, agent).issues:
            result.issues.append(ValidationIssue(issue.level, issue.path, f"{path}: {issue.message}"))

    return result.strict() if strict else result


__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "pre_validate_settings",
    "validate_claude_settings",
    "validate_codex_settings",
    "validate_gemini_settings",
    "validate_settings",
    "validate_sources",
]
