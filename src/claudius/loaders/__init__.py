from .reader import (
    load_json_object,
    load_toml_table,
    read_app_config,
    read_codex_settings,
    read_gemini_settings,
    read_mcp_servers_config,
    read_project_entry,
    read_settings,
    read_target_document,
)
from .writer import (
    backup_file,
    backup_path_for,
    render_json,
    render_toml,
    write_codex_settings,
    write_json_document,
    write_mcp_servers_config,
    write_settings,
    write_target_document,
    write_toml_document,
)

__all__ = [
    "backup_file",
    "backup_path_for",
    "load_json_object",
    "load_toml_table",
    "read_app_config",
    "read_codex_settings",
    "read_gemini_settings",
    "read_mcp_servers_config",
    "read_project_entry",
    "read_settings",
    "read_target_document",
    "render_json",
    "render_toml",
    "write_codex_settings",
    "write_json_document",
    "write_mcp_servers_config",
    "write_settings",
    "write_target_document",
    "write_toml_document",
]
