"""End-to-end sync tests with tmp_path standing in for home, project and config dir."""

import io
import json
import logging
import tomllib
from types import ModuleType, SimpleNamespace

import pytest

import claudius
from claudius.errors import ConfigIOError, OperationCancelledError, ParseError
from claudius.merge import MergeStrategy
from claudius.models import Agent, AppConfig, ClaudeCodeScope
from claudius.prompt import ScriptedPrompt
from claudius.sync import (
    BACKUP_FAILED_PROMPT,
    CLAUDE_CODE_ROUTES,
    ROUTES,
    SyncOptions,
    Synchronizer,
    determine_agent,
    make_synchronizer,
    sync,
)

SERVERS = {"mcpServers": {"s": {"command": "npx", "args": ["-y", "server"]}}}


@pytest.fixture
def env(tmp_path, monkeypatch):
    dirs = SimpleNamespace(
        root=tmp_path,
        home=tmp_path / "home",
        cwd=tmp_path / "project",
        config=tmp_path / "config",
        system=tmp_path / "system",
    )
    for d in (dirs.home, dirs.cwd, dirs.config):
        d.mkdir()
    monkeypatch.setenv("CLAUDIUS_CLAUDE_CODE_MANAGED_DIR", str(dirs.system / "claude-code"))
    monkeypatch.setenv("CLAUDIUS_CODEX_REQUIREMENTS_PATH", str(dirs.system / "codex" / "requirements.toml"))
    monkeypatch.setenv("CLAUDIUS_CODEX_MANAGED_CONFIG_PATH", str(dirs.system / "codex" / "managed_config.toml"))
    monkeypatch.setenv("GEMINI_CLI_SYSTEM_SETTINGS_PATH", str(dirs.system / "gemini-cli" / "settings.json"))
    _json(dirs.config / "mcpServers.json", SERVERS)
    return dirs


def _json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


def _load(path):
    return json.loads(path.read_text())


def _options(env, **kwargs):
    kwargs.setdefault("strategy", MergeStrategy.MERGE)
    return SyncOptions(home=env.home, cwd=env.cwd, config_dir=env.config, **kwargs)


def test_every_agent_and_scope_has_a_route():
    assert set(ROUTES) == {(agent, scope) for agent in Agent for scope in ("project", "global")}


# --- Claude, project ---

def test_claude_project_writes_servers_and_settings(env):
    _json(env.cwd / ".mcp.json", {"mcpServers": {"old": {"command": "o"}}, "custom": True})
    _json(env.config / "claude.settings.json", {
        "mcpServers": {"ignored": {"command": "x"}},
        "env": {"A": "1"},
        "permissions": {"allow": ["Read"]},
    })
    _json(env.cwd / ".claude" / "settings.json", {"model": "opus", "env": {"OLD": "x"}})

    writes = sync(_options(env))

    assert [w.path for w in writes] == [env.cwd / ".mcp.json", env.cwd / ".claude" / "settings.json"]
    assert _load(env.cwd / ".mcp.json") == {
        "mcpServers": {"old": {"command": "o"}, "s": {"command": "npx", "args": ["-y", "server"]}},
        "custom": True,
    }
    assert _load(env.cwd / ".claude" / "settings.json") == {
        "model": "opus",
        "env": {"A": "1"},
        "permissions": {"allow": ["Read"]},
    }


def test_claude_project_skips_settings_without_fields(env):
    _json(env.config / "claude.settings.json", {"mcpServers": {}})
    writes = sync(_options(env))
    assert len(writes) == 1
    assert not (env.cwd / ".claude").exists()


def test_claude_project_without_servers_creates_no_mcp_json(env):
    _json(env.config / "mcpServers.json", {"mcpServers": {}})
    _json(env.config / "claude.settings.json", {"env": {"A": "1"}})

    writes = sync(_options(env))

    assert [w.path for w in writes] == [env.cwd / ".claude" / "settings.json"]
    assert not (env.cwd / ".mcp.json").exists()


def test_claude_project_without_servers_keeps_existing_mcp_json(env):
    _json(env.config / "mcpServers.json", {"mcpServers": {}})
    _json(env.cwd / ".mcp.json", {"custom": 1})

    writes = sync(_options(env))

    assert [w.path for w in writes] == [env.cwd / ".mcp.json"]
    assert _load(env.cwd / ".mcp.json")["custom"] == 1


def test_claude_project_interactive_decline_keeps_existing(env):
    _json(env.cwd / ".mcp.json", {"mcpServers": {"s": {"command": "old"}}})
    prompt = ScriptedPrompt(["n"])
    sync(_options(env, strategy=MergeStrategy.INTERACTIVE_MERGE, prompt=prompt))
    assert _load(env.cwd / ".mcp.json") == {"mcpServers": {"s": {"command": "old"}}}
    assert "Field: mcpServers.s" in prompt.asked[0]


def test_custom_source_and_target(env):
    custom_source = _json(env.root / "other.json", {"mcpServers": {"x": {"url": "https://x"}}})
    custom_target = env.root / "out" / "mcp.json"
    sync(_options(env, config_path=custom_source, target_path=custom_target))
    assert _load(custom_target) == {"mcpServers": {"x": {"url": "https://x"}}}
    assert not (env.cwd / ".mcp.json").exists()


# --- Claude, global ---

def test_claude_global_merges_into_claude_json(env):
    _json(env.home / ".claude.json", {"numStartups": 3, "mcpServers": {"old": {"command": "o"}}})
    _json(env.config / "claude.settings.json", {"cleanupPeriodDays": 7, "statusLine": {}})

    sync(_options(env, global_=True, agent=Agent.CLAUDE))

    assert _load(env.home / ".claude.json") == {
        "numStartups": 3,
        "mcpServers": {"old": {"command": "o"}, "s": {"command": "npx", "args": ["-y", "server"]}},
        "cleanupPeriodDays": 7,
    }


def test_claude_code_global_user_scope(env):
    _json(env.config / "claude.settings.json", {"includeCoAuthoredBy": False})
    _json(env.home / ".claude" / "settings.json", {"theme": "dark"})

    sync(_options(env, global_=True, agent=Agent.CLAUDE_CODE))

    assert _load(env.home / ".claude.json") == {
        "mcpServers": {"s": {"command": "npx", "args": ["-y", "server"]}},
    }
    assert _load(env.home / ".claude" / "settings.json") == {
        "theme": "dark",
        "includeCoAuthoredBy": False,
    }


def test_claude_code_managed_scope_implies_global(env):
    _json(env.config / "claude.settings.json", {"permissions": {"deny": ["Bash(rm:*)"]}})

    sync(_options(env, agent=Agent.CLAUDE_CODE, claude_code_scope=ClaudeCodeScope.MANAGED))

    managed = env.system / "claude-code"
    assert _load(managed / "managed-settings.json") == {"permissions": {"deny": ["Bash(rm:*)"]}}
    assert _load(managed / "managed-mcp.json") == SERVERS
    assert not (env.home / ".claude.json").exists()
    assert not (env.home / ".claude" / "settings.json").exists()


def test_claude_code_local_scope_writes_project_entry(env):
    key = str(env.cwd)
    _json(env.home / ".claude.json", {
        "numStartups": 1,
        key: {"allowedTools": [], "mcpServers": {"old": {"command": "o"}}},
    })
    _json(env.config / "claude.settings.json", {"env": {"A": "1"}})

    writes = sync(_options(
        env, global_=True, agent=Agent.CLAUDE_CODE, claude_code_scope=ClaudeCodeScope.LOCAL
    ))

    assert [w.path for w in writes] == [
        env.home / ".claude.json",
        env.cwd / ".claude" / "settings.local.json",
    ]
    assert _load(env.home / ".claude.json") == {
        "numStartups": 1,
        key: {
            "allowedTools": [],
            "mcpServers": {"old": {"command": "o"}, "s": {"command": "npx", "args": ["-y", "server"]}},
        },
    }
    assert _load(env.cwd / ".claude" / "settings.local.json") == {"env": {"A": "1"}}
    assert not (env.cwd / ".mcp.json").exists()


def test_claude_code_local_scope_without_settings(env):
    writes = sync(_options(env, agent=Agent.CLAUDE_CODE, claude_code_scope=ClaudeCodeScope.LOCAL))
    assert [w.path for w in writes] == [env.home / ".claude.json"]
    assert _load(env.home / ".claude.json") == {str(env.cwd): SERVERS}


def test_claude_code_project_scope_overrides_global_flag(env):
    writes = sync(_options(
        env, global_=True, agent=Agent.CLAUDE_CODE, claude_code_scope=ClaudeCodeScope.PROJECT
    ))
    assert [w.path for w in writes] == [env.cwd / ".mcp.json"]
    assert not (env.home / ".claude.json").exists()


def test_every_claude_code_scope_has_a_route():
    assert set(CLAUDE_CODE_ROUTES) == set(ClaudeCodeScope)
    assert {s for s in ClaudeCodeScope if s.is_global} == {ClaudeCodeScope.USER, ClaudeCodeScope.MANAGED}


# --- Codex ---

def test_codex_project_combines_settings_and_servers(env):
    (env.config / "codex.settings.toml").write_text(
        'model = "o3"\n\n[model_providers.azure]\nbase_url = "https://x"\n'
    )
    _json(env.config / "mcpServers.json", {"mcpServers": {
        "docs": {"url": "https://docs", "headers": {"A": "b"}},
        "local": {"command": "npx", "args": ["-y"]},
    }})
    target = env.cwd / ".codex" / "config.toml"
    target.parent.mkdir()
    target.write_text('approval_policy = "never"\n\n[mcp_servers.old]\ncommand = "o"\n')

    sync(_options(env, agent=Agent.CODEX))

    assert tomllib.loads(target.read_text()) == {
        "model": "o3",
        "approval_policy": "never",
        "model_providers": {"azure": {"base_url": "https://x"}},
        "mcp_servers": {
            "old": {"command": "o"},
            "docs": {"url": "https://docs", "http_headers": {"A": "b"}},
            "local": {"command": "npx", "args": ["-y"]},
        },
    }


def test_codex_global_copies_requirements(env):
    (env.config / "codex.settings.toml").write_text('model = "o3"\n')
    (env.config / "requirements.toml").write_text('allowed_approval_policies = ["never"]\n')

    sync(_options(env, global_=True, agent=Agent.CODEX, codex_requirements=True))

    assert tomllib.loads((env.home / ".codex" / "config.toml").read_text())["model"] == "o3"
    copied = env.system / "codex" / "requirements.toml"
    assert tomllib.loads(copied.read_text()) == {"allowed_approval_policies": ["never"]}


def test_codex_global_missing_managed_config(env):
    with pytest.raises(ConfigIOError, match="codex.managed_config.toml"):
        sync(_options(env, global_=True, agent=Agent.CODEX, codex_managed_config=True))
    assert not (env.home / ".codex").exists()


# --- Gemini ---

def test_gemini_project(env):
    _json(env.config / "gemini.settings.json", {
        "theme": "Dracula",
        "mcpServers": {"g": {"command": "g"}},
    })

    sync(_options(env, agent=Agent.GEMINI))

    assert _load(env.cwd / ".mcp.json") == SERVERS
    assert _load(env.cwd / ".gemini" / "settings.json") == {
        "mcpServers": {"g": {"command": "g"}},
        "ui": {"theme": "Dracula"},
    }


def test_gemini_global(env):
    _json(env.config / "gemini.settings.json", {"ui": {"theme": "Dracula"}})
    _json(env.home / ".gemini" / "settings.json", {"security": {"auth": {"selectedType": "oauth"}}})

    sync(_options(env, global_=True, agent=Agent.GEMINI))

    assert _load(env.home / ".gemini" / "settings.json") == {
        "security": {"auth": {"selectedType": "oauth"}},
        "mcpServers": {"s": {"command": "npx", "args": ["-y", "server"]}},
        "ui": {"theme": "Dracula"},
    }


def test_gemini_system_settings(env):
    sync(_options(env, global_=True, agent=Agent.GEMINI, gemini_system=True))
    assert _load(env.system / "gemini-cli" / "settings.json") == SERVERS
    assert not (env.home / ".gemini").exists()


# --- option checks ---

@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"agent": Agent.CLAUDE, "global_": True, "codex_requirements": True}, "only supported with agent codex"),
        ({"agent": Agent.CODEX, "codex_managed_config": True}, "require global scope"),
        ({"agent": Agent.GEMINI, "gemini_system": True}, "require global scope"),
        ({"agent": Agent.CLAUDE, "claude_code_scope": ClaudeCodeScope.USER}, "claude-code"),
    ],
)
def test_invalid_option_combinations(env, kwargs, message):
    with pytest.raises(ValueError, match=message):
        sync(_options(env, **kwargs))


def test_sync_rejects_options_and_kwargs(env):
    with pytest.raises(TypeError):
        sync(_options(env), dry_run=True)


def test_sync_accepts_keyword_options(env):
    writes = sync(home=env.home, cwd=env.cwd, config_dir=env.config, strategy=MergeStrategy.MERGE)
    assert [w.path for w in writes] == [env.cwd / ".mcp.json"]


# --- dry run ---

def test_dry_run_prints_and_writes_nothing(env):
    out = io.StringIO()
    _json(env.config / "claude.settings.json", {"env": {"A": "1"}})

    sync(_options(env, dry_run=True, output=out))

    text = out.getvalue()
    assert f"--- MCP servers ({env.cwd / '.mcp.json'}) ---" in text
    assert f"--- Settings ({env.cwd / '.claude' / 'settings.json'}) ---" in text
    assert '"command": "npx"' in text
    assert not (env.cwd / ".mcp.json").exists()


def test_dry_run_single_file_label(env):
    out = io.StringIO()
    sync(_options(env, global_=True, agent=Agent.CLAUDE, dry_run=True, output=out))
    assert f"--- Result (dry run): {env.home / '.claude.json'} ---" in out.getvalue()


def test_dry_run_codex_label(env, capsys):
    sync(_options(env, agent=Agent.CODEX, dry_run=True))
    captured = capsys.readouterr().out
    assert f"--- Settings with MCP servers ({env.cwd / '.codex' / 'config.toml'}) ---" in captured
    assert "[mcp_servers.s]" in captured


def test_dry_run_makes_no_backup(env):
    _json(env.cwd / ".mcp.json", {})
    sync(_options(env, dry_run=True, backup=True, output=io.StringIO()))
    assert list(env.cwd.glob(".mcp.json.backup.*")) == []


# --- backups ---

def test_backup_before_write(env):
    _json(env.home / ".claude.json", {"theme": "dark"})
    sync(_options(env, global_=True, agent=Agent.CLAUDE, backup=True))
    backups = list(env.home.glob(".claude.json.backup.*"))
    assert len(backups) == 1
    assert _load(backups[0]) == {"theme": "dark"}
    assert "mcpServers" in _load(env.home / ".claude.json")


def test_backup_skips_missing_targets(env):
    sync(_options(env, backup=True))
    assert list(env.cwd.glob("*.backup.*")) == []


def _failing_backup(path, now=None):
    raise ConfigIOError("disk full", path=path)


def test_backup_failure_declined_cancels(env, monkeypatch):
    monkeypatch.setattr("claudius.sync._pipeline.backup_file", _failing_backup)
    _json(env.cwd / ".mcp.json", {"keep": 1})
    prompt = ScriptedPrompt(["n"])
    with pytest.raises(OperationCancelledError, match="cancelled by user"):
        sync(_options(env, backup=True, prompt=prompt))
    assert prompt.asked == [BACKUP_FAILED_PROMPT]
    assert _load(env.cwd / ".mcp.json") == {"keep": 1}


def test_backup_failure_accepted_continues(env, monkeypatch):
    monkeypatch.setattr("claudius.sync._pipeline.backup_file", _failing_backup)
    sync(_options(env, backup=True, prompt=ScriptedPrompt(["y"])))
    assert _load(env.cwd / ".mcp.json") == SERVERS


# --- multi-agent sweep ---

def test_global_sweep_syncs_each_detected_agent(env):
    _json(env.config / "claude.settings.json", {"cleanupPeriodDays": 5})
    (env.config / "codex.settings.toml").write_text('model = "o3"\n')
    out = io.StringIO()

    writes = sync(_options(env, global_=True, output=out))

    lines = out.getvalue().splitlines()
    assert lines[0] == "Found configurations for 2 agent(s): Claude, Codex"
    assert "Syncing agent: Claude" in lines
    assert "Syncing agent: Codex" in lines
    assert {w.path for w in writes} == {env.home / ".claude.json", env.home / ".codex" / "config.toml"}
    assert _load(env.home / ".claude.json")["cleanupPeriodDays"] == 5
    assert tomllib.loads((env.home / ".codex" / "config.toml").read_text())["mcp_servers"]["s"] == {
        "command": "npx",
        "args": ["-y", "server"],
    }


def test_global_sweep_with_no_agents(env, caplog):
    with caplog.at_level(logging.WARNING, logger="claudius"):
        writes = sync(_options(env, global_=True, output=io.StringIO()))
    assert writes == []
    assert "No agent configurations found" in caplog.text
    assert not (env.home / ".claude.json").exists()


def test_default_agent_disables_sweep(env):
    (env.config / "config.toml").write_text('[default]\nagent = "codex"\n')
    _json(env.config / "claude.settings.json", {"cleanupPeriodDays": 5})
    (env.config / "codex.settings.toml").write_text('model = "o3"\n')

    writes = sync(_options(env, global_=True))

    assert [w.path for w in writes] == [env.home / ".codex" / "config.toml"]
    assert not (env.home / ".claude.json").exists()


def test_agent_override_disables_sweep(env):
    _json(env.config / "claude.settings.json", {})
    (env.config / "codex.settings.toml").write_text("")
    assert not Synchronizer(_options(env, global_=True, agent=Agent.GEMINI)).should_sweep()
    assert Synchronizer(_options(env, global_=True)).should_sweep()
    assert not Synchronizer(_options(env)).should_sweep()


# --- pre-flight and agent choice ---

def test_preflight_warnings_are_logged(env, caplog):
    _json(env.config / "claude.settings.json", {"bogus": 1})
    with caplog.at_level(logging.WARNING, logger="claudius"):
        sync(_options(env))
    assert "Unknown setting 'bogus' found in Claude configuration" in caplog.text


def test_determine_agent():
    config = AppConfig.model_validate({"default": {"agent": "gemini"}})
    assert determine_agent(None, None) is Agent.CLAUDE
    assert determine_agent(None, AppConfig()) is Agent.CLAUDE
    assert determine_agent(None, config) is Agent.GEMINI
    assert determine_agent(Agent.CODEX, config) is Agent.CODEX


def test_make_synchronizer_uses_real_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    synchronizer = make_synchronizer(agent=Agent.CODEX, strategy=MergeStrategy.REPLACE)
    assert synchronizer.home == tmp_path
    assert synchronizer.config_dir == tmp_path / ".config" / "claudius"
    assert synchronizer.options.strategy is MergeStrategy.REPLACE
    assert synchronizer.app_config is None


def test_malformed_servers_container_is_a_parse_error(env):
    _json(env.config / "mcpServers.json", {"mcpServers": [1]})
    with pytest.raises(ParseError, match="mcpServers.json"):
        sync(_options(env))
    assert not (env.cwd / ".mcp.json").exists()


def test_package_keeps_sync_submodule():
    assert isinstance(claudius.sync, ModuleType)
    assert claudius.sync.sync is sync
    assert claudius.run_sync is sync
