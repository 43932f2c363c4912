"""Claude Code target implementation: default settings and deployment layout."""

import copy
from typing import Any, Dict, List

from context_bridge.builders.claude_code import normalize_mcp_server
from context_bridge.core.strategy import DeployWriter, sort_enabled_first
from context_bridge.core.types import Context

DEFAULT_CLAUDE_SETTINGS = {
    "version": "1.0.0",
    "permissions": {"defaultMode": "acceptEdits", "allow": [], "deny": []},
    "env": {},
    "includeCoAuthoredBy": False,
    "cleanupPeriodDays": 14,
}


def to_claude_settings(mapped: Any) -> Dict[str, Any]:
    settings = copy.deepcopy(DEFAULT_CLAUDE_SETTINGS)
    if isinstance(mapped, dict):
        settings["version"] = mapped.get("version", settings["version"])
        if "auto_attribution" in mapped:
            settings["includeCoAuthoredBy"] = bool(mapped["auto_attribution"])
    return settings


def to_claude_servers(servers: Any) -> List[Dict[str, Any]]:
    records = [
        normalize_mcp_server(s["name"], s)
        for s in servers or []
        if isinstance(s, dict) and s.get("name")
    ]
    return sort_enabled_first(records)


def deploy_claude_code(writer: DeployWriter, context: Context, config: Dict[str, Any]) -> None:
    """Write CLAUDE.md, CLAUDE.local.md and .claude/*.json from ide.data.claude_code."""
    writer.ensure_directory(".claude")

    if config.get("claude_md"):
        writer.write_file("CLAUDE.md", config["claude_md"])
    if config.get("claude_local_md"):
        writer.write_file("CLAUDE.local.md", config["claude_local_md"])
    if config.get("settings"):
        writer.write_json(".claude/settings.json", config["settings"])
    if config.get("mcp_servers"):
        writer.write_json(".claude/mcp.json", {"servers": config["mcp_servers"]})
    if config.get("commands"):
        writer.write_json(".claude/commands.json", {"commands": config["commands"]})
