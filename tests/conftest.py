"""Shared fixtures: small Kiro, Claude Code and Cursor projects on disk."""

import json
from pathlib import Path

import pytest


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_json(path: Path, data) -> Path:
    return write(path, json.dumps(data, indent=2))


CLAUDE_MD = (
    "# Project Instructions\n\n"
    "## Auth Service\n\n"
    "### Design\nUse JWT\n\n"
    "### Tasks\n- add login\n"
)

CLAUDE_LOCAL_MD = (
    "# Custom Instructions\n\n"
    "## Style\nUse type hints.\n\n"
    "## Testing\nWrite pytest tests.\n"
)


@pytest.fixture
def home(tmp_path):
    """Isolated home directory; has a ~/.claude with user settings."""
    home_dir = tmp_path / "home"
    write_json(home_dir / ".claude" / "settings.json", {"cleanupPeriodDays": 30, "includeCoAuthoredBy": False})
    return home_dir


@pytest.fixture
def empty_home(tmp_path):
    home_dir = tmp_path / "empty-home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def kiro_project(tmp_path):
    root = tmp_path / "kiro-project"
    kiro = root / ".kiro"

    write(kiro / "specs" / "user-auth" / "design.md", "# Design\n\nUse JWT tokens.\n\n{{file:resources/api.md}}\n")
    write(kiro / "specs" / "user-auth" / "requirements.md", "Users can log in.")
    write(kiro / "specs" / "user-auth" / "resources" / "api.md", "POST /login\n")
    # Folder without any spec document is skipped
    write(kiro / "specs" / "scratch" / "notes.txt", "nothing here")

    write(
        kiro / "steering" / "principles.md",
        "---\ninclusion: always\n---\n# Principles\n\nKeep it simple.\n\n- Small functions\n- Clear names\n",
    )
    write(kiro / "steering" / "git-workflow.md", "# Git\n\nUse conventional commits.\n")

    write_json(
        kiro / "hooks" / "lint.json",
        {
            "name": "lint",
            "version": "1.0.0",
            "enabled": False,
            "when": {"type": "fileEdited", "patterns": ["**/*.py"]},
            "then": {"type": "command", "command": "ruff check"},
        },
    )
    write_json(
        kiro / "hooks" / "format.kiro.hook",
        {
            "name": "format",
            "version": "1.0.0",
            "enabled": True,
            "description": "Format code",
            "when": {"type": "fileEdited"},
            "then": {"type": "command", "command": "{{file:scripts/format.sh}}"},
        },
    )
    write(kiro / "scripts" / "format.sh", "black .\n")

    write_json(
        kiro / "settings" / "mcp.json",
        {
            "mcpServers": {
                "zeta": {"command": "npx", "args": ["zeta"]},
                "alpha": {"command": "uvx", "args": ["alpha"], "disabled": True},
                "beta": {"url": "http://localhost:9000"},
            }
        },
    )
    write_json(kiro / "settings" / "project.json", {"specification_driven": True, "auto_test": False})
    write_json(kiro / "templates" / "feature.json", {"name": "feature", "tasks": ["design", "build"]})
    return root


@pytest.fixture
def claude_project(tmp_path):
    root = tmp_path / "claude-project"
    write(root / "CLAUDE.md", CLAUDE_MD)
    write(root / "CLAUDE.local.md", CLAUDE_LOCAL_MD)
    write_json(root / ".claude" / "settings.json", {"includeCoAuthoredBy": True, "permissions": {"allow": ["Bash(npm test)"]}})
    write_json(root / ".claude" / "mcp.json", {"mcpServers": {"github": {"command": "npx", "args": ["gh-mcp"]}}})
    write_json(root / ".mcp.json", {"mcpServers": {"github": {"command": "other"}, "docs": {"url": "http://docs"}}})
    write_json(
        root / ".claude" / "commands.json",
        {"commands": [{"name": "pre-commit", "command": "npm run lint", "trigger": "pre-commit", "description": "Lint"}]},
    )
    write(root / ".claude" / "commands" / "review.md", "---\ndescription: Review code\n---\nReview the diff.\n")
    return root


@pytest.fixture
def cursor_project(tmp_path):
    root = tmp_path / "cursor-project"
    write(root / ".cursorrules", "Always use TypeScript.\nPrefer functional components.\n")
    write(
        root / ".cursor" / "rules" / "style.mdc",
        '---\ndescription: Style guide\nglobs: "*.ts"\nalwaysApply: true\n---\n## Naming\nUse camelCase.\n',
    )
    write_json(root / ".cursor" / "mcp.json", {"mcpServers": {"fs": {"command": "npx", "args": ["fs-mcp"]}}})
    return root
