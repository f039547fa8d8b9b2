"""Combine server maps under the four merge strategies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..prompt import TerminalPrompt
from ._conflict import MergeConflict, resolve
from ._strategy import DEFAULT_STRATEGY, MergeStrategy

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..models.mcp import MCPServerConfig, MCPServersConfig, TargetDocument
    from ..prompt import Prompt

    ServerMap = dict[str, MCPServerConfig]

logger = logging.getLogger(__name__)


def merge_servers(
    existing: ServerMap,
    incoming: ServerMap,
    strategy: MergeStrategy = DEFAULT_STRATEGY,
    prompt: Prompt | None = None,
) -> ServerMap:
    """Return a new server map; neither input is modified.

    The interactive strategy asks ``prompt`` about every conflicting server,
    falling back to the terminal when no prompt is given.
    """
    if strategy is MergeStrategy.INTERACTIVE_MERGE and prompt is None:
        prompt = TerminalPrompt()
    return _STRATEGIES[strategy](existing, incoming, prompt)


def merge_configs(
    target: TargetDocument,
    source: MCPServersConfig,
    strategy: MergeStrategy = DEFAULT_STRATEGY,
    prompt: Prompt | None = None,
) -> TargetDocument:
    """Merge ``source``'s servers into ``target``; every other target key is kept."""
    merged = merge_servers(target.servers(), source.mcp_servers, strategy, prompt)
    logger.debug(
        "Merged servers: %d -> %d", len(target.mcp_servers or {}), len(merged)
    )
    return target.model_copy(update={"mcp_servers": merged}, deep=True)


def detect_server_conflicts(existing: ServerMap, incoming: ServerMap) -> list[MergeConflict]:
    """Servers present on both sides whose contents differ, in incoming order."""
    conflicts = []
    for name, server in incoming.items():
        current = existing.get(name)
        if current is not None and _as_data(current) != _as_data(server):
            conflicts.append(MergeConflict(f"mcpServers.{name}", _as_data(current), _as_data(server)))
    return conflicts


def _replace(existing: ServerMap, incoming: ServerMap, prompt: Prompt | None) -> ServerMap:
    return _copy(incoming)


def _merge(existing: ServerMap, incoming: ServerMap, prompt: Prompt | None) -> ServerMap:
    merged = _copy(existing)
    merged.update(_copy(incoming))
    return merged


def _merge_preserve_existing(
    existing: ServerMap, incoming: ServerMap, prompt: Prompt | None
) -> ServerMap:
    merged = _copy(existing)
    for name, server in incoming.items():
        if name not in merged:
            merged[name] = server.model_copy(deep=True)
    return merged


def _interactive_merge(existing: ServerMap, incoming: ServerMap, prompt: Prompt | None) -> ServerMap:
    assert prompt is not None
    merged = _copy(existing)
    declined = {
        c.field.removeprefix("mcpServers.")
        for c in detect_server_conflicts(existing, incoming)
        if not resolve(c, prompt)
    }
    for name, server in incoming.items():
        if name in declined:
            logger.info("Keeping existing mcpServers.%s", name)
            continue
        merged[name] = server.model_copy(deep=True)
    return merged


_STRATEGIES: dict[MergeStrategy, Callable[[ServerMap, ServerMap, Prompt | None], ServerMap]] = {
    MergeStrategy.REPLACE: _replace,
    MergeStrategy.MERGE: _merge,
    MergeStrategy.MERGE_PRESERVE_EXISTING: _merge_preserve_existing,
    MergeStrategy.INTERACTIVE_MERGE: _interactive_merge,
}


def _copy(servers: ServerMap) -> ServerMap:
    return {name: server.model_copy(deep=True) for name, server in servers.items()}


def _as_data(server: MCPServerConfig) -> dict[str, Any]:
    return server.model_dump(mode="json", by_alias=True)
