from .app_config import (
    Agent,
    AppConfig,
    ClaudeCodeScope,
    DefaultConfig,
    SecretManagerConfig,
    SecretManagerType,
)
from .codex import (
    CodexSettings,
    HistoryConfig,
    ModelProvider,
    SandboxConfig,
    SandboxWorkspaceWrite,
    ShellEnvironmentPolicy,
)
from .gemini import GeminiSettings
from .mcp import MCPServerConfig, MCPServersConfig, TargetDocument
from .settings import SETTINGS_FIELDS, Permissions, Settings

__all__ = [
    "SETTINGS_FIELDS",
    "Agent",
    "AppConfig",
    "ClaudeCodeScope",
    "CodexSettings",
    "DefaultConfig",
    "GeminiSettings",
    "HistoryConfig",
    "MCPServerConfig",
    "MCPServersConfig",
    "ModelProvider",
    "Permissions",
    "SandboxConfig",
    "SandboxWorkspaceWrite",
    "SecretManagerConfig",
    "SecretManagerType",
    "Settings",
    "ShellEnvironmentPolicy",
    "TargetDocument",
]
