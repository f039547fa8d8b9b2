from __future__ import annotations

from typing import Any

from ._result import ValidationIssue, ValidationResult, warning

KNOWN_GEMINI_FIELDS = frozenset({
    "$schema",
    "mcpServers",
    "general",
    "ui",
    "tools",
    "context",
    "privacy",
    "security",
    "telemetry",
    "model",
    "modelConfigs",
    "output",
    "advanced",
    "admin",
    "experimental",
    "extensions",
    "hooks",
    "ide",
    "mcp",
    "skills",
    "useWriteTodos",
})

KNOWN_GEMINI_SERVER_FIELDS = frozenset({
    "command",
    "args",
    "env",
    "cwd",
    "url",
    "httpUrl",
    "headers",
    "tcp",
    "type",
    "timeout",
    "trust",
    "description",
    "includeTools",
    "excludeTools",
    "extension",
    "oauth",
    "authProviderType",
    "targetAudience",
    "targetServiceAccount",
})

KNOWN_GEMINI_SERVER_TYPES = ("stdio", "sse", "http")

KNOWN_TELEMETRY_FIELDS = frozenset({
    "enabled",
    "target",
    "otlpEndpoint",
    "otlpProtocol",
    "logPrompts",
    "outfile",
    "useCollector",
    "useCliAuth",
})


def validate_gemini_settings(data: dict[str, Any]) -> ValidationResult:
    issues: list[ValidationIssue] = []
    for key, value in data.items():
        if key not in KNOWN_GEMINI_FIELDS:
            issues.append(warning(key, f"Unknown setting '{key}' found in Gemini configuration"))
        elif key == "mcpServers" and isinstance(value, dict):
            issues.extend(_validate_servers(value))
        elif key == "telemetry" and isinstance(value, dict):
            for field in value:
                if field not in KNOWN_TELEMETRY_FIELDS:
                    issues.append(warning(
                        f"telemetry.{field}", f"Unknown field '{field}' in telemetry"
                    ))
    return ValidationResult(issues)


def _validate_servers(servers: dict[str, Any]) -> list[ValidationIssue]:
    issues = []
    for name, server in servers.items():
        if not isinstance(server, dict):
            continue
        parent = f"mcpServers.{name}"
        for field in server:
            if field not in KNOWN_GEMINI_SERVER_FIELDS:
                issues.append(warning(f"{parent}.{field}", f"Unknown field '{field}' in {parent}"))
        kind = server.get("type")
        if isinstance(kind, str) and kind not in KNOWN_GEMINI_SERVER_TYPES:
            issues.append(warning(
                f"{parent}.type",
                f"Unknown {parent}.type value '{kind}' (expected: stdio|sse|http)",
            ))
    return issues
