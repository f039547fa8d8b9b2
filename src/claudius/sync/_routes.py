"""Which files each (agent, scope) pair reads and writes, and what goes in them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any, Literal

from ..errors import ConfigIOError
from ..loaders.reader import (
    load_toml_table,
    read_codex_settings,
    read_gemini_settings,
    read_mcp_servers_config,
    read_project_entry,
    read_settings,
    read_target_document,
)
from ..loaders.writer import (
    render_json,
    render_toml,
    write_json_document,
    write_toml_document,
)
from ..merge import (
    build_codex_target,
    merge_claude_code_settings,
    merge_configs,
    merge_gemini_settings,
    merge_settings,
)
from ..models.app_config import Agent, ClaudeCodeScope
from ..models.settings import Settings
from ..paths import (
    CODEX_MANAGED_CONFIG_SOURCES,
    CODEX_REQUIREMENTS_SOURCES,
    claude_code_managed_mcp_path,
    claude_code_managed_settings_path,
    codex_managed_config_path,
    codex_requirements_path,
    first_existing,
    servers_source_path,
    settings_source_path,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ..merge import MergeStrategy
    from ..models._base import Document
    from ..models.mcp import MCPServersConfig
    from ..prompt import Prompt

logger = logging.getLogger(__name__)

Scope = Literal["project", "global"]
Format = Literal["json", "toml"]


@dataclass
class PlannedWrite:
    """One target file and the full contents it will be given."""

    path: Path
    document: Document | dict[str, Any]
    format: Format = "json"
    label: str | None = None

    @property
    def header(self) -> str:
        if self.label is None:
            return f"--- Result (dry run): {self.path} ---"
        return f"--- {self.label} ({self.path}) ---"

    def render(self) -> str:
        return render_toml(self.document) if self.format == "toml" else render_json(self.document)

    def write(self) -> None:
        if self.format == "toml":
            write_toml_document(self.path, self.document)
        else:
            write_json_document(self.path, self.document)


@dataclass
class SyncContext:
    """Everything a plan function needs for one agent."""

    agent: Agent
    scope: Scope
    home: Path
    cwd: Path
    config_dir: Path
    strategy: MergeStrategy
    prompt: Prompt | None = None
    servers_source: Path | None = None
    claude_code_scope: ClaudeCodeScope | None = None
    codex_requirements: bool = False
    codex_managed_config: bool = False

    @property
    def base(self) -> Path:
        """Directory the agent's default targets are relative to."""
        return self.cwd if self.scope == "project" else self.home

    @property
    def settings_source(self) -> Path:
        return settings_source_path(self.config_dir, self.agent)

    @cached_property
    def servers(self) -> MCPServersConfig:
        return read_mcp_servers_config(self.servers_source or servers_source_path(self.config_dir))


@dataclass(frozen=True)
class Route:
    """``target`` is the primary target, relative to SyncContext.base.

    ``locate``, when set, gives a primary target that does not follow the
    scope's base directory.
    """

    target: tuple[str, ...]
    plan: Callable[[SyncContext, Path], list[PlannedWrite]]
    locate: Callable[[SyncContext], Path] | None = None

    def target_path(self, ctx: SyncContext) -> Path:
        if self.locate is not None:
            return self.locate(ctx)
        return ctx.base.joinpath(*self.target)


def plan_claude_project(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers into .mcp.json; settings (if any) into .claude/settings.json.

    .mcp.json is left alone when there is nothing to put in it and it does not
    exist yet.
    """
    merged = merge_configs(read_target_document(target), ctx.servers, ctx.strategy, ctx.prompt)
    writes = []
    if merged.mcp_servers or target.exists():
        writes.append(PlannedWrite(target, merged, label="MCP servers"))
    writes.extend(_claude_settings(ctx, ctx.base / ".claude" / "settings.json"))
    return writes


def plan_claude_code_local(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers into this project's entry in ~/.claude.json, settings into .claude/settings.local.json."""
    document = read_target_document(target)
    key = str(ctx.cwd)
    entry = merge_configs(read_project_entry(document, key, target), ctx.servers, ctx.strategy, ctx.prompt)
    document.extras[key] = entry.to_data()
    logger.debug("Merged local MCP servers for %s", key)

    writes = [PlannedWrite(target, document, label="MCP servers")]
    writes.extend(_claude_settings(ctx, ctx.cwd / ".claude" / "settings.local.json"))
    return writes


def plan_claude_global(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers and settings both merged into ~/.claude.json."""
    merged = merge_configs(read_target_document(target), ctx.servers, ctx.strategy, ctx.prompt)
    source = read_settings(ctx.settings_source)
    if source is not None:
        merged = merge_settings(merged, source, ctx.strategy, ctx.prompt)
    return [PlannedWrite(target, merged)]


def plan_claude_code_global(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers into ~/.claude.json (or managed-mcp.json), settings into the user or managed settings file."""
    merged = merge_configs(read_target_document(target), ctx.servers, ctx.strategy, ctx.prompt)
    writes = [PlannedWrite(target, merged, label="MCP servers")]

    if ctx.claude_code_scope is ClaudeCodeScope.MANAGED:
        path = claude_code_managed_settings_path()
    else:
        path = ctx.home / ".claude" / "settings.json"
    writes.extend(_claude_settings(ctx, path))
    return writes


def plan_codex(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Settings and servers together in one config.toml."""
    document = build_codex_target(
        read_codex_settings(target),
        read_codex_settings(ctx.settings_source),
        ctx.servers.mcp_servers,
    )
    writes = [PlannedWrite(target, document, "toml", "Settings with MCP servers")]

    if ctx.scope == "global":
        if ctx.codex_requirements:
            writes.append(_copy_codex_system_file(
                ctx.config_dir, CODEX_REQUIREMENTS_SOURCES, codex_requirements_path(), "requirements"
            ))
        if ctx.codex_managed_config:
            writes.append(_copy_codex_system_file(
                ctx.config_dir, CODEX_MANAGED_CONFIG_SOURCES, codex_managed_config_path(), "managed_config"
            ))
    return writes


def plan_gemini_project(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers into .mcp.json; Gemini settings into .gemini/settings.json."""
    merged = merge_configs(read_target_document(target), ctx.servers, ctx.strategy, ctx.prompt)
    writes = [PlannedWrite(target, merged, label="MCP servers")]

    source = read_gemini_settings(ctx.settings_source)
    if source is not None:
        path = ctx.base / ".gemini" / "settings.json"
        settings = merge_gemini_settings(read_target_document(path), source, ctx.strategy, ctx.prompt)
        writes.append(PlannedWrite(path, settings, label="Settings"))
    return writes


def plan_gemini_global(ctx: SyncContext, target: Path) -> list[PlannedWrite]:
    """Servers and Gemini settings merged into one settings.json."""
    merged = merge_configs(read_target_document(target), ctx.servers, ctx.strategy, ctx.prompt)
    source = read_gemini_settings(ctx.settings_source)
    if source is not None:
        merged = merge_gemini_settings(merged, source, ctx.strategy, ctx.prompt)
    return [PlannedWrite(target, merged)]


ROUTES: dict[tuple[Agent, Scope], Route] = {
    (Agent.CLAUDE, "project"): Route((".mcp.json",), plan_claude_project),
    (Agent.CLAUDE, "global"): Route((".claude.json",), plan_claude_global),
    (Agent.CLAUDE_CODE, "project"): Route((".mcp.json",), plan_claude_project),
    (Agent.CLAUDE_CODE, "global"): Route((".claude.json",), plan_claude_code_global),
    (Agent.CODEX, "project"): Route((".codex", "config.toml"), plan_codex),
    (Agent.CODEX, "global"): Route((".codex", "config.toml"), plan_codex),
    (Agent.GEMINI, "project"): Route((".mcp.json",), plan_gemini_project),
    (Agent.GEMINI, "global"): Route((".gemini", "settings.json"), plan_gemini_global),
}

# an explicit Claude Code scope picks its route directly
CLAUDE_CODE_ROUTES: dict[ClaudeCodeScope, Route] = {
    ClaudeCodeScope.USER: ROUTES[(Agent.CLAUDE_CODE, "global")],
    ClaudeCodeScope.MANAGED: Route(
        ("managed-mcp.json",), plan_claude_code_global, lambda ctx: claude_code_managed_mcp_path()
    ),
    ClaudeCodeScope.PROJECT: ROUTES[(Agent.CLAUDE_CODE, "project")],
    ClaudeCodeScope.LOCAL: Route(
        (".claude.json",), plan_claude_code_local, lambda ctx: ctx.home / ".claude.json"
    ),
}


def route_for(ctx: SyncContext) -> Route:
    if ctx.agent is Agent.CLAUDE_CODE and ctx.claude_code_scope is not None:
        return CLAUDE_CODE_ROUTES[ctx.claude_code_scope]
    return ROUTES[(ctx.agent, ctx.scope)]


def _claude_settings(ctx: SyncContext, path: Path) -> list[PlannedWrite]:
    """The Claude settings source, minus servers, merged over ``path``; nothing if it has no fields."""
    source = read_settings(ctx.settings_source)
    if source is None or not source.has_settings():
        return []
    existing = read_settings(path) or Settings()
    return [PlannedWrite(path, merge_claude_code_settings(existing, source.without_servers()), label="Settings")]


def _copy_codex_system_file(
    config_dir: Path, candidates: tuple[str, ...], destination: Path, kind: str
) -> PlannedWrite:
    source = first_existing(config_dir, candidates)
    if source is None:
        preferred, legacy = (config_dir / name for name in candidates)
        raise ConfigIOError(
            f"Codex {kind} file not found. Create {preferred} (preferred) or {legacy}",
            path=preferred,
        )
    logger.info("Copying Codex %s from %s to %s", kind, source, destination)
    return PlannedWrite(destination, load_toml_table(source) or {}, "toml", destination.name)
