"""Merging for Codex's TOML config."""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from ..models.codex import CodexSettings, ModelProvider
from ._deep import deep_merge

if TYPE_CHECKING:
    from ..models.mcp import MCPServerConfig

logger = logging.getLogger(__name__)

_OVERRIDE_FIELDS = (
    "model",
    "review_model",
    "model_provider",
    "model_context_window",
    "approval_policy",
    "disable_response_storage",
    "notify",
    "shell_environment_policy",
    "sandbox_mode",
    "sandbox_workspace_write",
    "sandbox",
    "history",
)

_PROVIDER_OVERRIDE_FIELDS = ("name", "base_url", "env_key", "wire_api", "requires_openai_auth")
_PROVIDER_MAP_FIELDS = ("http_headers", "env_http_headers", "query_params")

# Keys that only make sense for the other transport.
_STDIO_ONLY_KEYS = frozenset({"command", "args", "env", "cwd"})
_HTTP_ONLY_KEYS = frozenset({"url", "bearer_token_env_var", "http_headers", "env_http_headers"})


def convert_servers_to_toml(servers: dict[str, MCPServerConfig]) -> dict[str, dict[str, Any]]:
    """Turn JSON server entries into Codex ``[mcp_servers.<name>]`` tables.

    URL servers keep ``url`` and ``headers`` (as ``http_headers``); command
    servers keep ``command``, ``args`` and ``env``. Extras follow, minus the keys
    belonging to the other transport. TOML has no null, so nulls are dropped.
    """
    tables: dict[str, dict[str, Any]] = {}
    for name, server in servers.items():
        if server.url is not None:
            table: dict[str, Any] = {"url": server.url}
            if server.headers:
                table["http_headers"] = dict(server.headers)
            excluded = _STDIO_ONLY_KEYS
        elif server.command is not None:
            table = {"command": server.command}
            if server.args:
                table["args"] = list(server.args)
            if server.env:
                table["env"] = dict(server.env)
            excluded = _HTTP_ONLY_KEYS
        else:
            logger.warning("Skipping server '%s': it defines neither command nor url", name)
            continue
        for key, value in server.extras.items():
            if key in excluded or key in table or value is None:
                continue
            table[key] = _without_nulls(value)
        tables[name] = table
    return tables


def merge_codex_settings(target: CodexSettings, source: CodexSettings) -> CodexSettings:
    """Overlay ``source`` onto ``target``: fields the source sets win.

    Providers merge per name, extras deep-merge. ``mcp_servers`` is left to
    build_codex_target.
    """
    update = {
        field: copy.deepcopy(getattr(source, field))
        for field in _OVERRIDE_FIELDS
        if getattr(source, field) is not None
    }
    if source.model_providers is not None:
        providers = {k: v.model_copy(deep=True) for k, v in (target.model_providers or {}).items()}
        for name, provider in source.model_providers.items():
            current = providers.get(name)
            providers[name] = (
                merge_model_provider(current, provider)
                if current is not None
                else provider.model_copy(deep=True)
            )
        update["model_providers"] = providers

    merged = target.model_copy(update=update, deep=True)
    merged.replace_extras(deep_merge(merged.extras, source.extras))
    return merged


def merge_model_provider(target: ModelProvider, source: ModelProvider) -> ModelProvider:
    update: dict[str, Any] = {
        field: getattr(source, field)
        for field in _PROVIDER_OVERRIDE_FIELDS
        if getattr(source, field) is not None
    }
    for field in _PROVIDER_MAP_FIELDS:
        incoming = getattr(source, field)
        if incoming is not None:
            update[field] = {**(getattr(target, field) or {}), **incoming}
    merged = target.model_copy(update=update, deep=True)
    merged.replace_extras(deep_merge(merged.extras, source.extras))
    return merged


def build_codex_target(
    existing: CodexSettings | None,
    source: CodexSettings | None,
    servers: dict[str, MCPServerConfig],
) -> CodexSettings:
    """The document to write to a Codex config.toml.

    Starts from the existing target, overlays the source settings, then sets
    ``mcp_servers`` to the existing tables plus the source's tables plus the
    converted ``servers``; later entries win on a name clash.
    """
    if existing is not None and source is not None:
        result = merge_codex_settings(existing, source)
    elif existing is not None:
        result = existing.model_copy(deep=True)
    elif source is not None:
        result = source.model_copy(deep=True)
    else:
        result = CodexSettings()

    tables: dict[str, dict[str, Any]] = {}
    for layer in (
        existing.mcp_servers if existing else None,
        source.mcp_servers if source else None,
        convert_servers_to_toml(servers),
    ):
        tables.update(copy.deepcopy(layer or {}))
    result.mcp_servers = tables or None
    return result


def _without_nulls(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _without_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_without_nulls(v) for v in value if v is not None]
    return value

