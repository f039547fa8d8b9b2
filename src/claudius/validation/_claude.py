from __future__ import annotations

from typing import Any

from ._result import ValidationIssue, ValidationResult, warning

KNOWN_CLAUDE_FIELDS = frozenset({
    "apiKeyHelper",
    "cleanupPeriodDays",
    "env",
    "includeCoAuthoredBy",
    "permissions",
    "preferredNotifChannel",
    "mcpServers",
    "mcp_servers",
})

KNOWN_PERMISSION_FIELDS = frozenset({"allow", "deny", "defaultMode"})


def validate_claude_settings(data: dict[str, Any]) -> ValidationResult:
    issues: list[ValidationIssue] = []
    for key, value in data.items():
        if key not in KNOWN_CLAUDE_FIELDS:
            issues.append(warning(key, f"Unknown setting '{key}' found in Claude configuration"))
        if key == "permissions" and isinstance(value, dict):
            for perm_key in value:
                if perm_key not in KNOWN_PERMISSION_FIELDS:
                    issues.append(warning(
                        f"permissions.{perm_key}",
                        f"Unknown field '{perm_key}' in permissions",
                    ))
    return ValidationResult(issues)
