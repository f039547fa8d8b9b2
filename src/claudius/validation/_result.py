from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass
class ValidationIssue:
    """A single validation finding (error or warning)."""

    level: Literal["error", "warning"]
    path: str  # dotted field path, prefixed with the file name when known
    message: str


@dataclass
class ValidationResult:
    """Result of validating one or more settings sources.

    Attributes:
        issues: All errors and warnings. Use .errors and .warnings for filtered views.
        valid: True if there are no errors (warnings are allowed).
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(i.level == "error" for i in self.issues)

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == "warning"]

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == "error"]

    def strict(self) -> ValidationResult:
        """Copy of this result with every warning promoted to an error."""
        return ValidationResult(
            [ValidationIssue("error", i.path, i.message) for i in self.issues]
        )


def warning(path: str, message: str) -> ValidationIssue:
    return ValidationIssue("warning", path, message)
