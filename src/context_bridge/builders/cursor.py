"""
Cursor builder - doc .cursorrules, .cursor/rules/*.mdc, .cursor/mcp.json va
.cursor/settings.json.
"""

from pathlib import Path
from typing import Any, Dict, List

from context_bridge.core.context import create_context, get_platform_config, set_category
from context_bridge.core.strategy import BaseBuilderStrategy, builder_registry, sort_enabled_first
from context_bridge.core.types import AIPlatform, Context, ConversionResult, ValidationResult
from context_bridge.mapping.parsers import split_frontmatter
from .claude_code import normalize_mcp_server


class CursorBuilderStrategy(BaseBuilderStrategy):
    platform = AIPlatform.CURSOR

    def detect(self, path) -> bool:
        root = self.fs.resolve_path(path)
        return self.fs.is_directory(root / ".cursor") or self.fs.exists(root / ".cursorrules")

    def extract(self, path) -> Dict[str, Any]:
        root = self.fs.resolve_path(path)
        self._require_detected(root)
        warnings: List[str] = []
        cursor = root / ".cursor"

        mcp = self._read_json(cursor / "mcp.json", warnings)
        servers = []
        if isinstance(mcp, dict) and isinstance(mcp.get("mcpServers"), dict):
            servers = [normalize_mcp_server(name, cfg or {}) for name, cfg in mcp["mcpServers"].items()]

        settings = self._read_json(cursor / "settings.json", warnings)
        return {
            "rules": self._read_text(root / ".cursorrules", warnings),
            "mdc_rules": self._extract_mdc_rules(cursor / "rules", warnings),
            "mcp_servers": sort_enabled_first(servers),
            "settings": settings if isinstance(settings, dict) else {},
            "warnings": warnings,
        }

    def _extract_mdc_rules(self, rules_dir: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        rules = []
        for entry in self.fs.read_directory(rules_dir):
            if not entry.endswith((".mdc", ".md")):
                continue
            text = self._read_text(rules_dir / entry, warnings)
            if text is None:
                continue
            meta, body = split_frontmatter(text)
            rule = {
                "name": entry.rsplit(".", 1)[0],
                "content": body.strip(),
                "always_apply": bool(meta.get("alwaysApply", False)),
            }
            if meta.get("description"):
                rule["description"] = str(meta["description"])
            if meta.get("globs"):
                rule["globs"] = meta["globs"]
            rules.append(rule)
        return rules

    def normalize(self, data: Dict[str, Any]) -> Context:
        context = create_context(self.platform)
        config = {
            "rules": data.get("rules"),
            "mdc_rules": data.get("mdc_rules") or [],
            "mcp_servers": data.get("mcp_servers") or [],
            "settings": data.get("settings") or {},
        }
        set_category(context, "ide", {"cursor": config})
        instructions = [data["rules"]] if data.get("rules") else []
        instructions += [r["content"] for r in data.get("mdc_rules") or [] if r.get("content")]
        if instructions:
            set_category(context, "prompts", {"custom_instructions": instructions})
        if data.get("mcp_servers"):
            set_category(context, "tools", {"mcp_servers": data["mcp_servers"]})
        return context

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(warnings=list(data.get("warnings") or []))
        if not data.get("rules") and not data.get("mdc_rules"):
            result.warnings.append("No Cursor rules found")
        for server in data.get("mcp_servers") or []:
            if not server.get("command") and not server.get("url"):
                result.errors.append(f"MCP server {server.get('name')} needs a command or a url")
        return result

    def convert(self, context: Context) -> ConversionResult:
        config = get_platform_config(context, self.platform)
        if not config:
            return self._missing_config()
        data = {
            "rules": config.get("rules"),
            "mdc_rules": config.get("mdc_rules") or [],
            "mcp_servers": config.get("mcp_servers") or [],
            "settings": config.get("settings") or {},
        }
        return ConversionResult(success=True, data=data)


builder_registry.register(CursorBuilderStrategy)
