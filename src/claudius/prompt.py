"""Yes/no questions asked during a sync (merge conflicts, failed backups)."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from collections.abc import Iterable


class Prompt(Protocol):
    """Asks the user a yes/no question. ``message`` ends with the question itself."""

    def confirm(self, message: str) -> bool: ...


def is_yes(answer: str) -> bool:
    return answer.strip().lower() == "y"


class TerminalPrompt:
    """Writes the question to stderr and reads one line from stdin. Defaults to no."""

    def __init__(self, stdin: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stderr = stderr

    def confirm(self, message: str) -> bool:
        out = self._stderr or sys.stderr
        out.write(message)
        out.flush()
        return is_yes((self._stdin or sys.stdin).readline())


class ScriptedPrompt:
    """Answers from a fixed script and records every question asked.

    Once the script runs out, every further question gets ``default``.
    """

    def __init__(self, answers: Iterable[bool | str] = (), default: bool = False) -> None:
        self._answers = iter(answers)
        self._default = default
        self.asked: list[str] = []

    def confirm(self, message: str) -> bool:
        self.asked.append(message)
        answer = next(self._answers, self._default)
        return is_yes(answer) if isinstance(answer, str) else answer
