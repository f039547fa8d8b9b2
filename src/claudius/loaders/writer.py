"""Write documents to disk and copy targets aside before they are overwritten."""

from __future__ import annotations

import json
import logging
import shutil
from datetime import datetime
from typing import TYPE_CHECKING, Any

import tomli_w

from ..errors import ConfigIOError
from ..models._base import Document

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.codex import CodexSettings
    from ..models.mcp import MCPServersConfig, TargetDocument
    from ..models.settings import Settings

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def render_json(document: Document | dict[str, Any]) -> str:
    """Two-space indented UTF-8 JSON with a trailing newline."""
    data = document.to_data() if isinstance(document, Document) else document
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def render_toml(document: Document | dict[str, Any]) -> str:
    data = document.to_data(json_compatible=False) if isinstance(document, Document) else document
    try:
        return tomli_w.dumps(data)
    except TypeError as e:
        # tomli_w has no null; anything else unrepresentable lands here too
        raise ConfigIOError(f"Cannot represent document as TOML: {e}") from e


def write_json_document(path: Path, document: Document | dict[str, Any]) -> None:
    _atomic_write(path, render_json(document))


def write_toml_document(path: Path, document: Document | dict[str, Any]) -> None:
    try:
        text = render_toml(document)
    except ConfigIOError as e:
        raise ConfigIOError(f"Failed to write {path}: {e}", path=path) from e
    _atomic_write(path, text)


def write_mcp_servers_config(path: Path, document: MCPServersConfig) -> None:
    write_json_document(path, document)


def write_target_document(path: Path, document: TargetDocument) -> None:
    write_json_document(path, document)


def write_settings(path: Path, document: Settings) -> None:
    write_json_document(path, document)


def write_codex_settings(path: Path, document: CodexSettings) -> None:
    write_toml_document(path, document)


def backup_path_for(path: Path, now: datetime | None = None) -> Path:
    """``settings.json`` -> ``settings.json.backup.20250101_120000`` (local time)."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.name}.backup.{stamp}")


def backup_file(path: Path, now: datetime | None = None) -> Path | None:
    """Copy ``path`` aside. Returns the backup path, or None if there was nothing to copy."""
    if not path.exists():
        return None
    dest = backup_path_for(path, now)
    try:
        shutil.copy2(path, dest)
    except OSError as e:
        raise ConfigIOError(f"Failed to back up {path} to {dest}: {e}", path=path) from e
    logger.debug("Backup created: %s", dest)
    return dest


def _atomic_write(path: Path, data: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(data, encoding="utf-8", newline="\n")
        tmp.replace(path)
    except OSError as e:
        raise ConfigIOError(f"Failed to write {path}: {e}", path=path) from e
