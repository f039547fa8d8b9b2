"""Finding ``op://`` references inside a string value."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

OP_SCHEME = "op://"
OPEN_DELIMITER = "{{"
CLOSE_DELIMITER = "}}"

# "op:", "", vault, item, field
_REFERENCE_SEGMENTS = 5
_URL_PATH_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz-_")


def extract_op_reference(text: str) -> str:
    """Return the bare reference at the start of ``text`` (which begins with op://).

    The reference runs to the first space when at least five segments precede
    it, stops before a second ``op://`` glued on with ``/``, and stops after the
    field when the next segment looks like a lowercase URL path component.
    Otherwise the whole text is the reference.
    """
    if not text.startswith(OP_SCHEME):
        return ""

    space = text.find(" ")
    if space != -1 and text[:space].count("/") >= _REFERENCE_SEGMENTS - 1:
        return text[:space]

    parts = text.split("/")
    if len(parts) <= _REFERENCE_SEGMENTS:
        return text

    for i in range(_REFERENCE_SEGMENTS, len(parts) - 1):
        if parts[i] == "op:" and parts[i + 1] == "":
            return "/".join(parts[:i])

    if _looks_like_url_path(parts[_REFERENCE_SEGMENTS]):
        return "/".join(parts[:_REFERENCE_SEGMENTS])
    return text


def substitute_references(value: str, lookup: Callable[[str], str | None]) -> str:
    """Replace every ``{{op://...}}`` and bare ``op://...`` reference in ``value``.

    ``lookup`` returns the secret, or None to leave the reference text as it was.
    An unclosed ``{{`` is reported and its reference is treated as bare.
    """
    out: list[str] = []
    pos = 0
    while (start := value.find(OP_SCHEME, pos)) != -1:
        opener = start - len(OPEN_DELIMITER)
        if opener >= pos and value.startswith(OPEN_DELIMITER, opener):
            end = value.find(CLOSE_DELIMITER, start)
            if end != -1:
                reference = value[start:end]
                resolved = lookup(reference)
                out.append(value[pos:opener])
                out.append(value[opener:end + 2] if resolved is None else resolved)
                pos = end + len(CLOSE_DELIMITER)
                continue
            logger.warning("Unclosed delimiter at position %d", opener)

        reference = extract_op_reference(value[start:])
        if start > 0 and value[start - 1] in "/=" and " " in reference:
            logger.warning(
                "Ambiguous op:// reference in URL context: '%s'. "
                "Consider using {{op://...}} syntax for clarity.",
                reference,
            )
        resolved = lookup(reference)
        out.append(value[pos:start])
        out.append(reference if resolved is None else resolved)
        pos = start + len(reference)

    out.append(value[pos:])
    return "".join(out)


def _looks_like_url_path(segment: str) -> bool:
    return bool(segment) and all(c in _URL_PATH_CHARS for c in segment)
