"""Routing of claudius sources onto each agent's files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._pipeline import BACKUP_FAILED_PROMPT, Synchronizer, SyncOptions, determine_agent
from ._routes import CLAUDE_CODE_ROUTES, ROUTES, PlannedWrite, Route, Scope, SyncContext, route_for

if TYPE_CHECKING:
    from ..merge import MergeStrategy
    from ..models.app_config import Agent


def sync(options: SyncOptions | None = None, **kwargs) -> list[PlannedWrite]:
    """Run one sync. Accepts a SyncOptions or its fields as keyword arguments."""
    if options is None:
        options = SyncOptions(**kwargs)
    elif kwargs:
        raise TypeError("Pass either a SyncOptions or keyword arguments, not both")
    return Synchronizer(options).run()


def make_synchronizer(
    agent: Agent | None = None,
    global_: bool = False,
    strategy: MergeStrategy | None = None,
) -> Synchronizer:
    """Build a Synchronizer over the user's real home and configuration directory."""
    options = SyncOptions(global_=global_, agent=agent)
    if strategy is not None:
        options.strategy = strategy
    return Synchronizer(options)


__all__ = [
    "BACKUP_FAILED_PROMPT",
    "CLAUDE_CODE_ROUTES",
    "ROUTES",
    "PlannedWrite",
    "Route",
    "Scope",
    "SyncContext",
    "SyncOptions",
    "Synchronizer",
    "determine_agent",
    "make_synchronizer",
    "route_for",
    "sync",
]
