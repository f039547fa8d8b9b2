"""Read source and target documents from disk.

A missing file is never an error here: optional documents come back as ``None``
and container documents come back empty. A file that exists but cannot be read
raises ConfigIOError; one that is not valid JSON/TOML, or does not fit its model,
raises ParseError.
"""

from __future__ import annotations

import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError

from ..errors import ConfigIOError, ParseError
from ..models.app_config import AppConfig
from ..models.codex import CodexSettings
from ..models.gemini import GeminiSettings
from ..models.mcp import MCPServersConfig, TargetDocument
from ..models.settings import Settings

if TYPE_CHECKING:
    from pathlib import Path

    from pydantic import BaseModel

_T = TypeVar("_T", bound="BaseModel")

logger = logging.getLogger(__name__)


def read_mcp_servers_config(path: Path) -> MCPServersConfig:
    """Read mcpServers.json. A missing file gives an empty servers document."""
    data = load_json_object(path)
    if data is None:
        logger.debug("No servers file at %s", path)
        return MCPServersConfig()
    return _shape(MCPServersConfig, data, path)


def read_target_document(path: Path) -> TargetDocument:
    """Read an agent-owned JSON file, or an empty document if it does not exist."""
    data = load_json_object(path)
    if data is None:
        return TargetDocument()
    return _shape(TargetDocument, data, path)


def read_project_entry(document: TargetDocument, key: str, path: Path) -> TargetDocument:
    """The per-project object stored under ``key`` in ~/.claude.json.

    A missing entry, or one that is not an object, gives an empty document.
    """
    entry = document.extras.get(key)
    if not isinstance(entry, dict):
        return TargetDocument()
    return _shape(TargetDocument, entry, path)


def read_settings(path: Path) -> Settings | None:
    data = load_json_object(path)
    return None if data is None else _shape(Settings, data, path)


def read_gemini_settings(path: Path) -> GeminiSettings | None:
    data = load_json_object(path)
    return None if data is None else _shape(GeminiSettings, data, path)


def read_codex_settings(path: Path) -> CodexSettings | None:
    data = load_toml_table(path)
    return None if data is None else _shape(CodexSettings, data, path)


def read_app_config(path: Path) -> AppConfig | None:
    """Read claudius' own config.toml."""
    data = load_toml_table(path)
    return None if data is None else _shape(AppConfig, data, path)


def load_json_object(path: Path) -> dict[str, Any] | None:
    """Parse a JSON file whose top level must be an object."""
    text = _read_text(path)
    if text is None:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {path}: {e}", path=path) from e
    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object at the top of {path}", path=path)
    return data


def load_toml_table(path: Path) -> dict[str, Any] | None:
    text = _read_text(path)
    if text is None:
        return None
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"Invalid TOML in {path}: {e}", path=path) from e


# --- internal helpers ---


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}", path=path) from e
    except OSError as e:
        raise ConfigIOError(f"Failed to read {path}: {e}", path=path) from e


def _shape(model_class: type[_T], data: dict[str, Any], path: Path) -> _T:
    # by_name=False: a snake_case spelling of an aliased key stays an extra
    # instead of being renamed on the way back out.
    try:
        return model_class.model_validate(data, by_name=False)
    except ValidationError as e:
        raise ParseError(f"Invalid contents in {path}: {e}", path=path) from e
