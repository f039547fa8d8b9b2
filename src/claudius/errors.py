from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path


class ClaudiusError(Exception):
    """Base class for every error raised by claudius."""


class ParseError(ClaudiusError):
    """Raised when a file exists but is not valid JSON/TOML or has the wrong shape.

    Attributes:
        path: The file that could not be parsed, if applicable.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ConfigIOError(ClaudiusError):
    """Raised when reading, writing, or copying a configuration file fails.

    Attributes:
        path: The file that could not be read or written, if applicable.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class SecretResolutionError(ClaudiusError):
    """Raised by a secret store when a reference cannot be resolved."""

    def __init__(self, message: str, reference: str | None = None) -> None:
        self.reference = reference
        super().__init__(message)


class CircularDependencyError(ClaudiusError):
    """Raised when secret variables reference each other in a cycle."""

    def __init__(self, variables: Iterable[str]) -> None:
        self.variables = sorted(variables)
        super().__init__(
            f"Circular dependency detected involving variables: {self.variables}"
        )


class OperationCancelledError(ClaudiusError):
    """Raised when the user declines to continue after a recoverable failure."""

    def __init__(self, message: str = "Operation cancelled by user") -> None:
        super().__init__(message)
