from __future__ import annotations

from typing import Any

from pydantic import Field, StrictBool, StrictStr

from ._base import Document
from .mcp import MCPServerConfig


class GeminiSettings(Document):
    """gemini.settings.json source, using Gemini CLI's category-based layout.

    Categories are kept as plain JSON objects; legacy flat keys (``theme``,
    ``coreTools``, ...) arrive as extras and are migrated at merge time.
    """

    schema_url: StrictStr | None = Field(default=None, alias="$schema")
    mcp_servers: dict[str, MCPServerConfig] | None = Field(default=None, alias="mcpServers")
    general: dict[str, Any] | None = None
    ui: dict[str, Any] | None = None
    tools: dict[str, Any] | None = None
    context: dict[str, Any] | None = None
    privacy: dict[str, Any] | None = None
    security: dict[str, Any] | None = None
    telemetry: dict[str, Any] | None = None
    model: dict[str, Any] | StrictStr | None = None
    model_configs: dict[str, Any] | None = Field(default=None, alias="modelConfigs")
    output: dict[str, Any] | None = None
    advanced: dict[str, Any] | None = None
    admin: dict[str, Any] | None = None
    experimental: dict[str, Any] | None = None
    extensions: dict[str, Any] | None = None
    hooks: dict[str, Any] | None = None
    ide: dict[str, Any] | None = None
    mcp: dict[str, Any] | None = None
    skills: dict[str, Any] | None = None
    use_write_todos: StrictBool | None = Field(default=None, alias="useWriteTodos")
