from __future__ import annotations

from typing import Any

from ._result import ValidationIssue, ValidationResult, warning

KNOWN_CODEX_FIELDS = frozenset({
    "model",
    "review_model",
    "model_provider",
    "model_context_window",
    "approval_policy",
    "notify",
    "model_providers",
    "shell_environment_policy",
    "sandbox_mode",
    "sandbox_workspace_write",
    "sandbox",
    "history",
    "mcp_servers",
    # newer Codex releases
    "check_for_update_on_startup",
    "instructions",
    "developer_instructions",
    "features",
    "profile",
    "profiles",
    "projects",
    "project_root_markers",
    "project_doc_max_bytes",
    "project_doc_fallback_filenames",
    "tool_output_token_limit",
    "tui",
    "hide_agent_reasoning",
    "show_raw_agent_reasoning",
    "file_opener",
    "cli_auth_credentials_store",
    "forced_chatgpt_workspace_id",
    "forced_login_method",
    "chatgpt_base_url",
    "otel",
    "oss_provider",
    # legacy
    "disable_response_storage",
})

# model_providers entries are deliberately absent: providers take arbitrary keys.
KNOWN_NESTED_FIELDS: dict[str, frozenset[str]] = {
    "shell_environment_policy": frozenset({
        "inherit",
        "ignore_default_excludes",
        "exclude",
        "set",
        "include_only",
        "experimental_use_profile",
    }),
    "sandbox": frozenset({"mode", "writable_roots", "network_access"}),
    "sandbox_workspace_write": frozenset({
        "writable_roots",
        "network_access",
        "exclude_tmpdir_env_var",
        "exclude_slash_tmp",
    }),
    "history": frozenset({"persistence", "max_bytes"}),
}


def validate_codex_settings(data: dict[str, Any]) -> ValidationResult:
    issues: list[ValidationIssue] = []
    for key, value in data.items():
        if key not in KNOWN_CODEX_FIELDS:
            issues.append(warning(key, f"Unknown setting '{key}' found in Codex configuration"))
            continue
        known = KNOWN_NESTED_FIELDS.get(key)
        if known is None or not isinstance(value, dict):
            continue
        for field in value:
            if field not in known:
                issues.append(warning(f"{key}.{field}", f"Unknown field '{field}' in {key}"))
    return ValidationResult(issues)
