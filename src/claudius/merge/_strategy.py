from __future__ import annotations

from enum import Enum


class MergeStrategy(str, Enum):
    """How incoming servers combine with the servers already in a target."""

    REPLACE = "replace"
    MERGE = "merge"
    MERGE_PRESERVE_EXISTING = "merge-preserve-existing"
    INTERACTIVE_MERGE = "interactive-merge"


DEFAULT_STRATEGY = MergeStrategy.INTERACTIVE_MERGE
