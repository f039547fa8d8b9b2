from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from ..models.settings import SETTINGS_FIELDS
from ..prompt import TerminalPrompt
from ._conflict import MergeConflict, resolve
from ._deep import deep_merge
from ._strategy import DEFAULT_STRATEGY, MergeStrategy

if TYPE_CHECKING:
    from ..models.mcp import TargetDocument
    from ..models.settings import Settings
    from ..prompt import Prompt

logger = logging.getLogger(__name__)


def settings_values(settings: Settings) -> dict[str, Any]:
    """The named settings fields ``settings`` supplies, under their JSON names."""
    values = {}
    for attr, key in SETTINGS_FIELDS:
        value = getattr(settings, attr)
        if value is None:
            continue
        values[key] = value.to_data() if hasattr(value, "to_data") else value
    return values


def merge_settings(
    target: TargetDocument,
    settings: Settings,
    strategy: MergeStrategy = DEFAULT_STRATEGY,
    prompt: Prompt | None = None,
) -> TargetDocument:
    """Write the named settings fields into the target's top-level keys.

    Keys the source does not supply are left alone. Under the interactive
    strategy, a field whose current value differs is only overwritten if the
    user agrees. Every other strategy writes each supplied field.
    """
    merged = target.model_copy(deep=True)
    extras = merged.extras
    if strategy is MergeStrategy.INTERACTIVE_MERGE and prompt is None:
        prompt = TerminalPrompt()

    for key, value in settings_values(settings).items():
        if key in extras and extras[key] != value:
            if strategy is MergeStrategy.INTERACTIVE_MERGE and not resolve(
                MergeConflict(key, extras[key], value), prompt
            ):
                logger.info("Keeping existing %s", key)
                continue
        extras[key] = value
    return merged


def merge_claude_code_settings(target: Settings, source: Settings) -> Settings:
    """Overlay ``source`` onto an existing settings file.

    Each named field the source supplies replaces the target's value; extras
    are deep-merged. ``mcpServers`` is not touched.
    """
    update = {
        attr: copy.deepcopy(getattr(source, attr))
        for attr, _ in SETTINGS_FIELDS
        if getattr(source, attr) is not None
    }
    merged = target.model_copy(update=update, deep=True)
    merged.replace_extras(deep_merge(merged.extras, source.extras))
    return merged
