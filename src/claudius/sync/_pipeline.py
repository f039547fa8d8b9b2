"""The read -> merge -> back up -> write pipeline, for one agent or all of them."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from ..errors import ConfigIOError, OperationCancelledError
from ..loaders.reader import read_app_config
from ..loaders.writer import backup_file
from ..merge import DEFAULT_STRATEGY, MergeStrategy
from ..models.app_config import Agent, ClaudeCodeScope
from ..paths import app_config_path, config_dir, detect_available_agents, gemini_system_settings_path
from ..prompt import TerminalPrompt
from ..validation import validate_sources
from ._routes import SyncContext, route_for

if TYPE_CHECKING:
    from ..models.app_config import AppConfig
    from ..prompt import Prompt
    from ._routes import PlannedWrite, Scope

logger = logging.getLogger(__name__)

BACKUP_FAILED_PROMPT = "Continue anyway? [y/N] "


@dataclass
class SyncOptions:
    """What to sync and how.

    config_path: servers source, instead of ``<config dir>/mcpServers.json``
    target_path: primary target, instead of the agent's default
    home / cwd / config_dir: default to the user's home, the working
        directory and the claudius configuration directory
    """

    global_: bool = False
    agent: Agent | None = None
    config_path: Path | None = None
    target_path: Path | None = None
    dry_run: bool = False
    backup: bool = False
    strategy: MergeStrategy = DEFAULT_STRATEGY
    claude_code_scope: ClaudeCodeScope | None = None
    codex_requirements: bool = False
    codex_managed_config: bool = False
    gemini_system: bool = False
    prompt: Prompt | None = None
    output: TextIO | None = None
    home: Path | None = None
    cwd: Path | None = None
    config_dir: Path | None = None

    @property
    def scope(self) -> Scope:
        # an explicit Claude Code scope overrides the global flag
        if self.claude_code_scope is not None:
            return "global" if self.claude_code_scope.is_global else "project"
        return "global" if self.global_ else "project"

    def check(self, agent: Agent) -> None:
        """Reject agent-specific options that do not apply to ``agent`` or scope."""
        if self.claude_code_scope is not None and agent is not Agent.CLAUDE_CODE:
            raise ValueError("A Claude Code scope is only supported with agent claude-code")
        for enabled, name, owner in (
            (self.codex_requirements, "Codex requirements", Agent.CODEX),
            (self.codex_managed_config, "Codex managed_config", Agent.CODEX),
            (self.gemini_system, "Gemini system settings", Agent.GEMINI),
        ):
            if not enabled:
                continue
            if agent is not owner:
                raise ValueError(f"{name} are only supported with agent {owner.value}")
            if self.scope != "global":
                raise ValueError(f"{name} require global scope (they are system-wide)")


class Synchronizer:
    """Projects the claudius sources onto agent targets."""

    def __init__(self, options: SyncOptions) -> None:
        self.options = options
        self.home = options.home or Path.home()
        self.cwd = options.cwd or Path.cwd()
        self.config_dir = options.config_dir or config_dir(self.home)
        self.app_config = read_app_config(app_config_path(self.config_dir))

    @property
    def out(self) -> TextIO:
        return self.options.output or sys.stdout

    def should_sweep(self) -> bool:
        o = self.options
        return (
            o.scope == "global"
            and o.agent is None
            and o.config_path is None
            and o.target_path is None
            and o.claude_code_scope is None
            and not (o.codex_requirements or o.codex_managed_config or o.gemini_system)
            and (self.app_config is None or self.app_config.default_agent is None)
        )

    def run(self) -> list[PlannedWrite]:
        """Sync the selected agent, or every detected agent in a global sweep.

        Returns the writes that were made (or printed, for a dry run).
        """
        if not self.should_sweep():
            return self.sync_agent(determine_agent(self.options.agent, self.app_config))

        agents = detect_available_agents(self.config_dir)
        if not agents:
            logger.warning("No agent configurations found in %s; nothing to sync", self.config_dir)
            return []
        names = ", ".join(a.display_name for a in agents)
        print(f"Found configurations for {len(agents)} agent(s): {names}", file=self.out)

        writes = []
        for agent in agents:
            print(f"\nSyncing agent: {agent.display_name}", file=self.out)
            writes.extend(self.sync_agent(agent))
        return writes

    def sync_agent(self, agent: Agent) -> list[PlannedWrite]:
        self.options.check(agent)
        ctx = self.context_for(agent)
        route = route_for(ctx)
        target = self.primary_target(ctx)

        self.preflight(ctx)
        writes = route.plan(ctx, target)

        if self.options.dry_run:
            logger.info("Dry run mode - not writing changes")
            for write in writes:
                print(f"\n{write.header}", file=self.out)
                self.out.write(write.render())
            return writes

        if self.options.backup:
            self.back_up(writes)
        for write in writes:
            write.write()
            logger.info("Wrote %s", write.path)
        return writes

    def context_for(self, agent: Agent) -> SyncContext:
        o = self.options
        return SyncContext(
            agent=agent,
            scope=o.scope,
            home=self.home,
            cwd=self.cwd,
            config_dir=self.config_dir,
            strategy=o.strategy,
            prompt=o.prompt,
            servers_source=o.config_path,
            claude_code_scope=o.claude_code_scope,
            codex_requirements=o.codex_requirements,
            codex_managed_config=o.codex_managed_config,
        )

    def primary_target(self, ctx: SyncContext) -> Path:
        if self.options.target_path is not None:
            return self.options.target_path
        if self.options.gemini_system:
            return gemini_system_settings_path()
        return route_for(ctx).target_path(ctx)

    def preflight(self, ctx: SyncContext) -> None:
        """Log source warnings before anything is read into a model."""
        for issue in validate_sources(ctx.config_dir, [ctx.agent]).issues:
            logger.warning("%s", issue.message)

    def back_up(self, writes: list[PlannedWrite]) -> None:
        """Copy every existing target aside; ask before going on if a copy fails."""
        for write in writes:
            try:
                backup = backup_file(write.path)
            except ConfigIOError as e:
                logger.warning("Failed to create backup of %s: %s", write.path, e)
                prompt = self.options.prompt or TerminalPrompt()
                if not prompt.confirm(BACKUP_FAILED_PROMPT):
                    raise OperationCancelledError() from e
                continue
            if backup is not None:
                logger.info("Backed up %s to %s", write.path, backup)


def determine_agent(override: Agent | None, app_config: AppConfig | None) -> Agent:
    """The explicit override, else the configured default, else Claude."""
    if override is not None:
        return override
    if app_config is not None and app_config.default_agent is not None:
        return app_config.default_agent
    return Agent.CLAUDE
