"""Codex config.toml documents."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, StrictBool, StrictInt, StrictStr

from ._base import Document


class ModelProvider(Document):
    """A ``[model_providers.<name>]`` table. Arbitrary extra keys are expected here."""

    name: StrictStr | None = None
    base_url: StrictStr | None = None
    env_key: StrictStr | None = Field(
        default=None, validation_alias=AliasChoices("env_key", "api_key_env")
    )
    http_headers: dict[str, StrictStr] | None = Field(
        default=None, validation_alias=AliasChoices("http_headers", "headers")
    )
    env_http_headers: dict[str, StrictStr] | None = None
    query_params: dict[str, StrictStr] | None = None
    wire_api: StrictStr | None = None
    requires_openai_auth: StrictBool | None = None


class ShellEnvironmentPolicy(Document):
    inherit: StrictStr | None = None
    ignore_default_excludes: StrictBool | None = None
    exclude: list[StrictStr] | None = None
    set_vars: dict[str, StrictStr] | None = Field(default=None, alias="set")
    include_only: list[StrictStr] | None = None


class SandboxConfig(Document):
    mode: StrictStr | None = None
    writable_roots: list[StrictStr] | None = None
    network_access: StrictBool | None = None


class SandboxWorkspaceWrite(Document):
    writable_roots: list[StrictStr] | None = None
    network_access: StrictBool | None = None
    exclude_tmpdir_env_var: StrictBool | None = None
    exclude_slash_tmp: StrictBool | None = None


class HistoryConfig(Document):
    persistence: StrictStr | None = None
    max_bytes: StrictInt | None = None


class CodexSettings(Document):
    """codex.settings.toml source and ~/.codex/config.toml target.

    ``mcp_servers`` holds raw TOML tables; they are produced from MCPServerConfig
    entries by the merge layer.
    """

    model: StrictStr | None = None
    review_model: StrictStr | None = None
    model_provider: StrictStr | None = None
    model_context_window: StrictInt | None = None
    approval_policy: StrictStr | None = None
    disable_response_storage: StrictBool | None = None
    notify: list[StrictStr] | None = None
    model_providers: dict[str, ModelProvider] | None = None
    shell_environment_policy: ShellEnvironmentPolicy | None = None
    sandbox_mode: StrictStr | None = None
    sandbox_workspace_write: SandboxWorkspaceWrite | None = None
    sandbox: SandboxConfig | None = None
    history: HistoryConfig | None = None
    mcp_servers: dict[str, dict[str, Any]] | None = None
