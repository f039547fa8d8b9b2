"""Keep AI coding agents' configuration in sync with one set of source files."""

from .errors import (
    CircularDependencyError,
    ClaudiusError,
    ConfigIOError,
    OperationCancelledError,
    ParseError,
    SecretResolutionError,
)
from .log import configure_logging
from .merge import MergeStrategy
from .models import Agent, AppConfig, ClaudeCodeScope
from .secrets import SecretResolver, inject_env_vars
from .sync import SyncOptions, Synchronizer
from .sync import sync as run_sync
from .validation import ValidationResult, validate_sources

__all__ = [
    "Agent",
    "AppConfig",
    "CircularDependencyError",
    "ClaudeCodeScope",
    "ClaudiusError",
    "ConfigIOError",
    "MergeStrategy",
    "OperationCancelledError",
    "ParseError",
    "SecretResolutionError",
    "SecretResolver",
    "SyncOptions",
    "Synchronizer",
    "ValidationResult",
    "configure_logging",
    "inject_env_vars",
    "run_sync",
    "validate_sources",
]
