from __future__ import annotations

from typing import ClassVar

from pydantic import Field, StrictStr

from ._base import Document


class MCPServerConfig(Document):
    """One MCP server entry: a stdio command or a remote URL, plus any extra keys."""

    omit_when_empty: ClassVar[frozenset[str]] = frozenset({"args", "env", "headers"})

    command: StrictStr | None = None
    args: list[StrictStr] = []
    env: dict[str, StrictStr] = {}
    server_type: StrictStr | None = Field(default=None, alias="type")
    url: StrictStr | None = None
    headers: dict[str, StrictStr] = {}


class MCPServersConfig(Document):
    """Contents of mcpServers.json / .mcp.json: server name -> MCPServerConfig."""

    mcp_servers: dict[str, MCPServerConfig] = Field(default_factory=dict, alias="mcpServers")


class TargetDocument(Document):
    """An agent-owned JSON file (~/.claude.json, .mcp.json, Gemini settings.json).

    Only ``mcpServers`` is typed; every other top-level key is carried in extras.
    """

    mcp_servers: dict[str, MCPServerConfig] | None = Field(default=None, alias="mcpServers")

    def servers(self) -> dict[str, MCPServerConfig]:
        return dict(self.mcp_servers or {})
