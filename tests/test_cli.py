"""Tests for the context-bridge CLI commands."""

import json
import sys

import pytest

from conftest import CLAUDE_MD
from context_bridge import cli, tui
from context_bridge.builders.claude_code import ClaudeCodeBuilderStrategy
from context_bridge.core import config as config_module
from context_bridge.core.config import BridgeConfig, save_config
from context_bridge.core.types import AIPlatform
from context_bridge.services.storage_service import save_context


@pytest.fixture(autouse=True)
def _isolate_user_files(tmp_path, monkeypatch):
    """Patch HOME and CONFIG_FILE so the CLI never reads the real user config."""
    home = tmp_path / "cli-home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config" / "config.json")
    return home


def _run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["context-bridge", *args])
    cli._main()


@pytest.fixture
def claude_context_file(claude_project, empty_home, tmp_path):
    context = ClaudeCodeBuilderStrategy(home=empty_home).build(claude_project)
    return save_context(context, tmp_path / "claude-context.json")


# =============================================================================
# DETECT / BUILD / LIST
# =============================================================================


def test_cli_detect_json(kiro_project, monkeypatch, capsys):
    _run(monkeypatch, "detect", "--path", str(kiro_project), "--json")

    data = json.loads(capsys.readouterr().out)
    assert data["primary"] == "kiro"
    assert data["detected"][0]["confidence"] == 100


def test_cli_detect_nothing(tmp_path, monkeypatch, capsys):
    _run(monkeypatch, "detect", "--path", str(tmp_path / "cli-home"))

    assert "No AI IDE configuration found" in capsys.readouterr().out


def test_cli_build_writes_context(claude_project, tmp_path, monkeypatch, capsys):
    output = tmp_path / "ctx.json"

    _run(monkeypatch, "build", "claude-code", "--path", str(claude_project), "--output", str(output))

    context = json.loads(output.read_text())
    assert context["metadata"]["platforms"] == ["claude-code"]
    assert "claude_code" in context["ide"]["data"]
    assert "Context written to" in capsys.readouterr().out


def test_cli_build_rejects_wrong_project(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "build", "kiro", "--path", str(tmp_path / "cli-home"))

    assert exc_info.value.code == 1
    assert "Not a Kiro project" in capsys.readouterr().out


def test_cli_list(monkeypatch, capsys):
    _run(monkeypatch, "list")

    out = capsys.readouterr().out
    assert "Claude Code" in out
    assert "claude-code-to-kiro" in out
    assert "cursor-to-kiro" in out


# =============================================================================
# CONVERT
# =============================================================================


def test_cli_convert_and_deploy(claude_project, tmp_path, monkeypatch, capsys):
    target = tmp_path / "deployed"

    _run(
        monkeypatch,
        "convert", "--from", "claude-code", "--to", "kiro",
        "--path", str(claude_project), "--deploy", "--target-path", str(target),
    )

    assert (target / ".kiro" / "steering" / "style.md").exists()
    assert (target / ".kiro" / "specs" / "auth-service" / "design.md").read_text() == "Use JWT"
    assert "Deployed 8 file(s) for Kiro" in capsys.readouterr().out


def test_cli_convert_detects_source(claude_project, tmp_path, monkeypatch):
    output = tmp_path / "kiro-context.json"

    _run(monkeypatch, "convert", "--to", "kiro", "--path", str(claude_project), "--output", str(output))

    context = json.loads(output.read_text())
    assert context["metadata"]["conversion"]["source"] == "claude-code"


def test_cli_convert_from_input_file(claude_context_file, tmp_path, monkeypatch):
    output = tmp_path / "converted.json"

    _run(monkeypatch, "convert", "--input", str(claude_context_file), "--to", "kiro", "--output", str(output))

    context = json.loads(output.read_text())
    assert context["metadata"]["conversion"]["target"] == "kiro"
    assert "kiro" in context["ide"]["data"]


def test_cli_convert_prints_context_without_output(claude_context_file, monkeypatch, capsys):
    _run(monkeypatch, "convert", "--input", str(claude_context_file), "--to", "kiro")

    out = capsys.readouterr().out
    payload = json.loads(out[out.index("{"):])
    assert payload["metadata"]["conversion"]["target"] == "kiro"


def test_cli_convert_needs_target_without_tui(claude_context_file, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "convert", "--input", str(claude_context_file), "--no-interactive")

    assert exc_info.value.code == 1
    assert "pass --to" in capsys.readouterr().out


def test_cli_convert_uses_configured_default_target(claude_context_file, tmp_path, monkeypatch):
    save_config(BridgeConfig(default_target="kiro"))
    output = tmp_path / "converted.json"

    _run(monkeypatch, "convert", "--input", str(claude_context_file), "--no-interactive", "--output", str(output))

    assert json.loads(output.read_text())["metadata"]["conversion"]["target"] == "kiro"


def test_cli_convert_asks_for_target(claude_context_file, tmp_path, monkeypatch):
    asked = []

    def fake_select(source):
        asked.append(source)
        return AIPlatform.KIRO

    monkeypatch.setattr(tui, "select_target_platform", fake_select)
    output = tmp_path / "converted.json"

    _run(monkeypatch, "convert", "--input", str(claude_context_file), "--output", str(output))

    assert asked == [AIPlatform.CLAUDE_CODE]
    assert output.exists()


def test_cli_convert_refuses_incompatible(kiro_project, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, "convert", "--from", "kiro", "--to", "cursor", "--path", str(kiro_project))

    assert exc_info.value.code == 1
    assert "not compatible with Cursor" in capsys.readouterr().out


def test_cli_convert_force(kiro_project, tmp_path, monkeypatch):
    output = tmp_path / "cursor-context.json"

    _run(
        monkeypatch,
        "convert", "--from", "kiro", "--to", "cursor", "--path", str(kiro_project),
        "--force", "--output", str(output),
    )

    assert "cursor" in json.loads(output.read_text())["ide"]["data"]


def test_cli_convert_missing_input(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit):
        _run(monkeypatch, "convert", "--input", str(tmp_path / "nope.json"), "--to", "kiro")

    assert "Context file not found" in capsys.readouterr().out


# =============================================================================
# DEPLOY
# =============================================================================


def test_cli_deploy_converted_context(claude_context_file, tmp_path, monkeypatch):
    converted = tmp_path / "converted.json"
    _run(monkeypatch, "convert", "--input", str(claude_context_file), "--to", "kiro", "--output", str(converted))
    target = tmp_path / "deployed"

    _run(monkeypatch, "deploy", "--input", str(converted), "--target-path", str(target), "--force")

    assert (target / ".kiro" / "hooks" / "hooks.json").exists()


def test_cli_deploy_cancelled(claude_context_file, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(tui, "confirm_deploy", lambda platform, path: False)
    target = tmp_path / "deployed"

    _run(
        monkeypatch,
        "deploy", "--input", str(claude_context_file), "--platform", "claude-code", "--target-path", str(target),
    )

    assert "Cancelled." in capsys.readouterr().out
    assert not target.exists()


def test_cli_deploy_missing_platform_config(claude_context_file, tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit):
        _run(
            monkeypatch,
            "deploy", "--input", str(claude_context_file), "--platform", "cursor",
            "--target-path", str(tmp_path / "out"), "--force",
        )

    assert "No Cursor configuration found in context" in capsys.readouterr().out


@pytest.fixture
def target_with_claude_md(tmp_path):
    target = tmp_path / "deployed"
    target.mkdir()
    (target / "CLAUDE.md").write_text("mine")
    return target


def test_cli_deploy_keeps_existing_files(claude_context_file, target_with_claude_md, monkeypatch, capsys):
    monkeypatch.setattr(tui, "confirm_deploy", lambda platform, path: True)

    _run(
        monkeypatch,
        "deploy", "--input", str(claude_context_file), "--platform", "claude-code",
        "--target-path", str(target_with_claude_md),
    )

    out = capsys.readouterr().out
    assert "Skipped existing file: CLAUDE.md" in out
    assert "use --force to overwrite" in out
    assert (target_with_claude_md / "CLAUDE.md").read_text() == "mine"
    assert (target_with_claude_md / "CLAUDE.local.md").exists()


def test_cli_deploy_force_overwrites_with_backup(claude_context_file, target_with_claude_md, monkeypatch):
    _run(
        monkeypatch,
        "deploy", "--input", str(claude_context_file), "--platform", "claude-code",
        "--target-path", str(target_with_claude_md), "--force", "--backup",
    )

    assert (target_with_claude_md / "CLAUDE.md").read_text() == CLAUDE_MD
    assert (target_with_claude_md / "CLAUDE.md.bak").read_text() == "mine"


def test_cli_deploy_dry_run(claude_context_file, tmp_path, monkeypatch, capsys):
    target = tmp_path / "deployed"

    _run(
        monkeypatch,
        "deploy", "--input", str(claude_context_file), "--platform", "claude-code",
        "--target-path", str(target), "--dry-run",
    )

    out = capsys.readouterr().out
    assert "CLAUDE.md" in out
    assert "file(s) would be written" in out
    assert not target.exists()


def test_cli_convert_deploy_keeps_existing_without_force(claude_project, tmp_path, monkeypatch, capsys):
    target = tmp_path / "deployed"
    existing = target / ".kiro" / "steering" / "style.md"
    existing.parent.mkdir(parents=True)
    existing.write_text("mine")

    _run(
        monkeypatch,
        "convert", "--from", "claude-code", "--to", "kiro",
        "--path", str(claude_project), "--deploy", "--target-path", str(target),
    )

    assert existing.read_text() == "mine"
    assert "Skipped existing file: .kiro/steering/style.md" in capsys.readouterr().out


# =============================================================================
# ENTRY POINT
# =============================================================================


def test_main_exits_130_on_ctrl_c(monkeypatch):
    def interrupted():
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "_main", interrupted)

    with pytest.raises(SystemExit) as exc_info:
        cli.main()

    assert exc_info.value.code == 130
