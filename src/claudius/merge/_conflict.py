from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..prompt import Prompt


@dataclass(frozen=True)
class MergeConflict:
    """An incoming value that differs from the one already in the target."""

    field: str
    existing: Any
    proposed: Any


def format_value(value: Any) -> str:
    """Scalars on one line, objects and arrays pretty-printed."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, ensure_ascii=False)


def describe(conflict: MergeConflict) -> str:
    return (
        "\n=== Configuration conflict detected ===\n"
        f"  Field: {conflict.field}\n"
        f"  Current value: {format_value(conflict.existing)}\n"
        f"  New value: {format_value(conflict.proposed)}\n"
        "Overwrite with new value? [y/N] "
    )


def resolve(conflict: MergeConflict, prompt: Prompt) -> bool:
    """True if the user chose the proposed value."""
    return prompt.confirm(describe(conflict))
