"""Pure functions that combine a source document with an existing target."""

from ._codex import (
    build_codex_target,
    convert_servers_to_toml,
    merge_codex_settings,
    merge_model_provider,
)
from ._conflict import MergeConflict, describe, format_value
from ._deep import deep_merge
from ._gemini import merge_gemini_settings, migrate_legacy_gemini_settings
from ._servers import detect_server_conflicts, merge_configs, merge_servers
from ._settings import merge_claude_code_settings, merge_settings, settings_values
from ._strategy import DEFAULT_STRATEGY, MergeStrategy

__all__ = [
    "DEFAULT_STRATEGY",
    "MergeConflict",
    "MergeStrategy",
    "build_codex_target",
    "convert_servers_to_toml",
    "deep_merge",
    "describe",
    "detect_server_conflicts",
    "format_value",
    "merge_claude_code_settings",
    "merge_codex_settings",
    "merge_configs",
    "merge_gemini_settings",
    "merge_model_provider",
    "merge_servers",
    "merge_settings",
    "migrate_legacy_gemini_settings",
    "settings_values",
]
