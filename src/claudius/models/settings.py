from __future__ import annotations

from typing import ClassVar

from pydantic import Field, StrictBool, StrictInt, StrictStr

from ._base import Document
from .mcp import MCPServerConfig

# (attribute, JSON key) for the settings fields merged into agent targets.
SETTINGS_FIELDS: tuple[tuple[str, str], ...] = (
    ("api_key_helper", "apiKeyHelper"),
    ("cleanup_period_days", "cleanupPeriodDays"),
    ("env", "env"),
    ("include_co_authored_by", "includeCoAuthoredBy"),
    ("permissions", "permissions"),
    ("preferred_notif_channel", "preferredNotifChannel"),
)


class Permissions(Document):
    omit_when_empty: ClassVar[frozenset[str]] = frozenset({"allow", "deny"})

    allow: list[StrictStr] = []
    deny: list[StrictStr] = []
    default_mode: StrictStr | None = Field(default=None, alias="defaultMode")


class Settings(Document):
    """Claude settings (claude.settings.json source, .claude/settings.json target)."""

    api_key_helper: StrictStr | None = Field(default=None, alias="apiKeyHelper")
    cleanup_period_days: StrictInt | None = Field(default=None, alias="cleanupPeriodDays")
    env: dict[str, StrictStr] | None = None
    include_co_authored_by: StrictBool | None = Field(default=None, alias="includeCoAuthoredBy")
    permissions: Permissions | None = None
    preferred_notif_channel: StrictStr | None = Field(default=None, alias="preferredNotifChannel")
    mcp_servers: dict[str, MCPServerConfig] | None = Field(default=None, alias="mcpServers")

    def without_servers(self) -> Settings:
        return self.model_copy(update={"mcp_servers": None}, deep=True)

    def has_settings(self) -> bool:
        """True if any field other than mcpServers is present."""
        return bool(self.extras) or any(
            getattr(self, attr) is not None for attr, _ in SETTINGS_FIELDS
        )
