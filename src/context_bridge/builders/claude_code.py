"""
Claude Code builder - doc CLAUDE.md, CLAUDE.local.md, .claude/ (settings, MCP,
commands) cung voi ~/.claude.
"""

import re
from pathlib import Path
from typing import Any, Dict, List

from context_bridge.core.context import create_context, get_platform_config, set_category
from context_bridge.core.strategy import BaseBuilderStrategy, builder_registry, sort_enabled_first
from context_bridge.core.types import AIPlatform, Context, ConversionResult, ValidationResult
from context_bridge.mapping.parsers import split_frontmatter

_SENSITIVE_KEY = re.compile(r"(api[_-]?key|token|secret|password|credential)", re.IGNORECASE)


def normalize_mcp_server(name: str, config: Dict[str, Any]) -> Dict[str, Any]:
    server = {
        "name": name,
        "version": config.get("version", "1.0.0"),
        "command": config.get("command"),
        "args": config.get("args") or [],
        "url": config.get("url"),
        "env": config.get("env") or {},
        "config": config.get("config") or {},
    }
    if "enabled" in config:
        server["enabled"] = bool(config["enabled"])
    else:
        server["enabled"] = not config.get("disabled", False)
    return {k: v for k, v in server.items() if v is not None}


def _server_entries(data: Any) -> List[Dict[str, Any]]:
    """Both {"mcpServers": {name: {...}}} and {"servers": [...]} files."""
    if not isinstance(data, dict):
        return []
    if isinstance(data.get("mcpServers"), dict):
        return [normalize_mcp_server(name, cfg or {}) for name, cfg in data["mcpServers"].items()]
    if isinstance(data.get("servers"), list):
        return [
            normalize_mcp_server(s.get("name", ""), s)
            for s in data["servers"]
            if isinstance(s, dict)
        ]
    return []


def _find_secrets(settings: Any, prefix: str = "") -> List[str]:
    found = []
    if isinstance(settings, dict):
        for key, value in settings.items():
            path = f"{prefix}{key}"
            if _SENSITIVE_KEY.search(str(key)) and isinstance(value, str) and value:
                found.append(path)
            found += _find_secrets(value, f"{path}.")
    return found


class ClaudeCodeBuilderStrategy(BaseBuilderStrategy):
    platform = AIPlatform.CLAUDE_CODE

    def __init__(self, file_system=None, verbose: bool = False, home: Path = None):
        super().__init__(file_system, verbose)
        self.home = home

    @property
    def user_dir(self) -> Path:
        return (self.home or Path.home()) / ".claude"

    def detect(self, path) -> bool:
        root = self.fs.resolve_path(path)
        return (
            self.fs.is_directory(root / ".claude")
            or self.fs.exists(root / "CLAUDE.md")
            or self.fs.exists(root / "CLAUDE.local.md")
        )

    def extract(self, path) -> Dict[str, Any]:
        root = self.fs.resolve_path(path)
        self._require_detected(root)
        warnings: List[str] = []
        return {
            "settings": self._extract_settings(root, warnings),
            "mcp_servers": self._extract_mcp(root, warnings),
            "claude_md": self._read_text(root / "CLAUDE.md", warnings),
            "claude_local_md": self._read_text(root / "CLAUDE.local.md", warnings),
            "commands": self._extract_commands(root, warnings),
            "warnings": warnings,
        }

    def _extract_settings(self, root: Path, warnings: List[str]) -> Dict[str, Any]:
        # Project settings override user settings
        settings: Dict[str, Any] = {}
        for settings_file in (self.user_dir / "settings.json", root / ".claude" / "settings.json"):
            data = self._read_json(settings_file, warnings)
            if isinstance(data, dict):
                settings.update(data)
        return settings

    def _extract_mcp(self, root: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        servers: Dict[str, Dict[str, Any]] = {}
        for mcp_file in (root / ".claude" / "mcp.json", root / ".mcp.json", self.user_dir / "mcp.json"):
            for server in _server_entries(self._read_json(mcp_file, warnings)):
                # First definition of a name wins
                servers.setdefault(server["name"], server)
        return sort_enabled_first(list(servers.values()))

    def _extract_commands(self, root: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        commands: List[Dict[str, Any]] = []
        data = self._read_json(root / ".claude" / "commands.json", warnings)
        if isinstance(data, dict) and isinstance(data.get("commands"), list):
            commands += [c for c in data["commands"] if isinstance(c, dict)]
        elif isinstance(data, list):
            commands += [c for c in data if isinstance(c, dict)]
        elif isinstance(data, dict):
            commands += [{"name": k, "command": v} for k, v in data.items() if isinstance(v, str)]

        commands_dir = root / ".claude" / "commands"
        for entry in self.fs.read_directory(commands_dir):
            if not entry.endswith(".md"):
                continue
            text = self._read_text(commands_dir / entry, warnings)
            if text is None:
                continue
            meta, body = split_frontmatter(text)
            command = {"name": entry[: -len(".md")], "command": body.strip()}
            if meta.get("description"):
                command["description"] = str(meta["description"])
            commands.append(command)
        return commands

    def normalize(self, data: Dict[str, Any]) -> Context:
        context = create_context(self.platform)
        config = {
            "settings": data.get("settings") or {},
            "claude_md": data.get("claude_md"),
            "claude_local_md": data.get("claude_local_md"),
            "mcp_servers": data.get("mcp_servers") or [],
            "commands": data.get("commands") or [],
        }
        set_category(context, "ide", {"claude_code": config})
        if data.get("claude_md"):
            set_category(context, "project", {"claude_instructions": data["claude_md"]})
        if data.get("claude_local_md"):
            set_category(context, "prompts", {"custom_instructions": data["claude_local_md"]})
        if data.get("mcp_servers"):
            set_category(context, "tools", {"mcp_servers": data["mcp_servers"]})
        return context

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(warnings=list(data.get("warnings") or []))
        if not any(data.get(k) for k in ("settings", "mcp_servers", "claude_md", "claude_local_md", "commands")):
            result.warnings.append("No Claude Code configuration found")
        for i, server in enumerate(data.get("mcp_servers") or []):
            if not server.get("name"):
                result.errors.append(f"MCP server #{i} is missing a name")
            elif not server.get("command") and not server.get("url"):
                result.errors.append(f"MCP server {server['name']} needs a command or a url")
        for key in _find_secrets(data.get("settings")):
            result.warnings.append(f"Settings key '{key}' may contain sensitive data")
        return result

    def convert(self, context: Context) -> ConversionResult:
        config = get_platform_config(context, self.platform)
        if not config:
            return self._missing_config()
        data = {
            "settings": config.get("settings") or {},
            "mcp_servers": config.get("mcp_servers") or [],
            "claude_md": config.get("claude_md"),
            "claude_local_md": config.get("claude_local_md"),
            "commands": config.get("commands") or [],
        }
        return ConversionResult(success=True, data=data)


builder_registry.register(ClaudeCodeBuilderStrategy)
