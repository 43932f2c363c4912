"""Cursor target implementation: deployment layout."""

from typing import Any, Dict, List

from context_bridge.core.strategy import DeployWriter
from context_bridge.core.types import Context
from context_bridge.mapping.parsers import render_frontmatter
from context_bridge.utils import slugify

_SERVER_KEYS = ("command", "args", "env", "url")


def to_cursor_mcp(servers: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Server list -> Cursor's {"mcpServers": {name: {...}}} document."""
    mcp_servers = {}
    for server in servers:
        entry = {k: server[k] for k in _SERVER_KEYS if server.get(k)}
        if not server.get("enabled", True):
            entry["disabled"] = True
        mcp_servers[server["name"]] = entry
    return {"mcpServers": mcp_servers}


def render_mdc(rule: Dict[str, Any]) -> str:
    meta = {
        "description": rule.get("description", ""),
        "globs": rule.get("globs", ""),
        "alwaysApply": bool(rule.get("always_apply", False)),
    }
    return render_frontmatter(meta) + rule.get("content", "") + "\n"


def deploy_cursor(writer: DeployWriter, context: Context, config: Dict[str, Any]) -> None:
    """Write .cursorrules and .cursor/ from ide.data.cursor."""
    writer.ensure_directory(".cursor")

    if config.get("rules"):
        writer.write_file(".cursorrules", config["rules"])
    for rule in config.get("mdc_rules") or []:
        writer.write_file(f".cursor/rules/{slugify(rule.get('name', ''))}.mdc", render_mdc(rule))
    servers = [s for s in config.get("mcp_servers") or [] if s.get("name")]
    if servers:
        writer.write_json(".cursor/mcp.json", to_cursor_mcp(servers))
    if config.get("settings"):
        writer.write_json(".cursor/settings.json", config["settings"])
