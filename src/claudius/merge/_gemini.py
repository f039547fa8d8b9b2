from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from ._deep import deep_merge
from ._servers import merge_servers
from ._strategy import DEFAULT_STRATEGY, MergeStrategy

if TYPE_CHECKING:
    from ..models.gemini import GeminiSettings
    from ..models.mcp import TargetDocument
    from ..prompt import Prompt

# legacy flat key -> (category, key inside the category)
LEGACY_GEMINI_KEYS: dict[str, tuple[str, str]] = {
    "contextFileName": ("context", "fileName"),
    "bugCommand": ("advanced", "bugCommand"),
    "fileFiltering": ("context", "fileFiltering"),
    "coreTools": ("tools", "core"),
    "excludeTools": ("tools", "exclude"),
    "autoAccept": ("tools", "autoAccept"),
    "theme": ("ui", "theme"),
    "hideTips": ("ui", "hideTips"),
    "sandbox": ("tools", "sandbox"),
    "toolDiscoveryCommand": ("tools", "discoveryCommand"),
    "toolCallCommand": ("tools", "callCommand"),
    "checkpointing": ("general", "checkpointing"),
    "preferredEditor": ("general", "preferredEditor"),
    "usageStatisticsEnabled": ("privacy", "usageStatisticsEnabled"),
}


def migrate_legacy_gemini_settings(data: dict[str, Any]) -> dict[str, Any]:
    """Move legacy flat Gemini CLI keys into their categories.

    A key is only moved when its category is absent or an object, and an
    entry already present in the category wins over the legacy value.
    """
    migrated = copy.deepcopy(data)
    for legacy_key, (category, key) in LEGACY_GEMINI_KEYS.items():
        if legacy_key not in migrated:
            continue
        section = migrated.get(category)
        if section is None:
            section = migrated[category] = {}
        elif not isinstance(section, dict):
            continue
        value = migrated.pop(legacy_key)
        section.setdefault(key, value)
    return migrated


def merge_gemini_settings(
    target: TargetDocument,
    settings: GeminiSettings,
    strategy: MergeStrategy = DEFAULT_STRATEGY,
    prompt: Prompt | None = None,
) -> TargetDocument:
    """Fold a Gemini settings source into a Gemini settings.json target.

    The source's ``mcpServers`` merge with the target's servers under
    ``strategy``; everything else is migrated and deep-merged into the target.
    """
    merged = target.model_copy(deep=True)
    if settings.mcp_servers:
        merged.mcp_servers = merge_servers(merged.servers(), settings.mcp_servers, strategy, prompt)

    overlay = settings.to_data()
    overlay.pop("mcpServers", None)
    merged.replace_extras(deep_merge(merged.extras, migrate_legacy_gemini_settings(overlay)))
    return merged
