"""The user's own claudius config.toml."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Agent(str, Enum):
    CLAUDE = "claude"
    CLAUDE_CODE = "claude-code"
    CODEX = "codex"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    Agent.CLAUDE: "Claude",
    Agent.CLAUDE_CODE: "Claude Code",
    Agent.CODEX: "Codex",
    Agent.GEMINI: "Gemini",
}


class ClaudeCodeScope(str, Enum):
    """Which Claude Code files a sync targets. USER and MANAGED are global."""

    USER = "user"
    MANAGED = "managed"
    PROJECT = "project"
    LOCAL = "local"

    @property
    def is_global(self) -> bool:
        return self in (ClaudeCodeScope.USER, ClaudeCodeScope.MANAGED)


class SecretManagerType(str, Enum):
    VAULT = "vault"
    ONE_PASSWORD = "1password"


class SecretManagerConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    manager_type: SecretManagerType = Field(alias="type")


class DefaultConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    agent: Agent
    context_file: str | None = Field(default=None, alias="context-file")


class AppConfig(BaseModel):
    """Contents of ``<config dir>/config.toml``."""

    model_config = ConfigDict(populate_by_name=True)
    secret_manager: SecretManagerConfig | None = Field(default=None, alias="secret-manager")
    default: DefaultConfig | None = None

    @property
    def default_agent(self) -> Agent | None:
        return self.default.agent if self.default else None
