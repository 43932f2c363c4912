"""
Kiro builder - doc .kiro/ (specs, steering, hooks, MCP, templates, settings)
va chuyen sang neutral context.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from context_bridge.core.context import create_context, get_category_data, get_platform_config, set_category
from context_bridge.core.strategy import BaseBuilderStrategy, builder_registry, sort_enabled_first
from context_bridge.core.types import (
    AIPlatform,
    Context,
    ConversionResult,
    McpServer,
    Spec,
    SteeringRule,
    TaskTemplate,
    ValidationResult,
)
from context_bridge.mapping.parsers import extract_bullets, first_text_line, split_frontmatter

SPEC_FILES = ("design", "requirements", "tasks")

DEFAULT_PROJECT_SETTINGS = {
    "specification_driven": True,
    "auto_test": True,
    "incremental_progress": True,
    "task_confirmation": True,
}

# First keyword found in the lowercased file stem wins
STEERING_PRIORITIES = (
    ("principle", 100),
    ("persona", 90),
    ("architecture", 80),
    ("nestjs-standards", 70),
    ("tdd", 60),
    ("test", 60),
    ("git", 50),
    ("prd", 40),
    ("project-context", 30),
    ("flags", 20),
    ("mcp", 10),
)
DEFAULT_STEERING_PRIORITY = 50

_FILE_REFERENCE = re.compile(r"\{\{file:([^}]+)\}\}")


def steering_priority(name: str) -> int:
    lowered = name.lower()
    for keyword, priority in STEERING_PRIORITIES:
        if keyword in lowered:
            return priority
    return DEFAULT_STEERING_PRIORITY


class KiroBuilderStrategy(BaseBuilderStrategy):
    platform = AIPlatform.KIRO

    def detect(self, path) -> bool:
        kiro = self.fs.resolve_path(path) / ".kiro"
        if not self.fs.is_directory(kiro):
            return False
        return self.fs.exists(kiro / "specs") or self.fs.exists(kiro / "steering")

    # =========================================================================
    # EXTRACT
    # =========================================================================

    def extract(self, path) -> Dict[str, Any]:
        root = self.fs.resolve_path(path)
        self._require_detected(root)
        kiro = root / ".kiro"
        warnings: List[str] = []
        return {
            "specs_path": str(kiro / "specs"),
            "specs": self._extract_specs(kiro / "specs", warnings),
            "steering_rules": self._extract_steering(kiro / "steering", warnings),
            "hooks": self._extract_hooks(kiro, warnings),
            "mcp_settings": self._extract_mcp(kiro, warnings),
            "task_templates": self._extract_templates(kiro / "templates", warnings),
            "project_settings": self._extract_project_settings(kiro, warnings),
            "warnings": warnings,
        }

    def resolve_file_references(
        self, content: str, base: Path, warnings: List[str], _active: Optional[Set[Path]] = None
    ) -> str:
        """
        Replace {{file:relative/path}} with the trimmed contents of that file.

        Nested references resolve recursively. A reference to a file already
        being resolved is left verbatim and reported.
        """
        active = _active or set()

        def _substitute(match):
            ref = match.group(1).strip()
            target = (base / ref).resolve()
            if target in active:
                warnings.append(f"Circular file reference: {ref}")
                return match.group(0)
            text = self._read_text(target, warnings)
            if text is None:
                warnings.append(f"Referenced file not found: {ref}")
                return match.group(0)
            return self.resolve_file_references(text.strip(), target.parent, warnings, active | {target})

        return _FILE_REFERENCE.sub(_substitute, content)

    def _extract_specs(self, specs_dir: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        specs = []
        for entry in self.fs.read_directory(specs_dir):
            spec_dir = specs_dir / entry
            if not self.fs.is_directory(spec_dir):
                continue
            spec = Spec(name=entry)
            found = False
            for key in SPEC_FILES:
                text = self._read_text(spec_dir / f"{key}.md", warnings)
                if text is not None:
                    setattr(spec, key, self.resolve_file_references(text, spec_dir, warnings))
                    found = True
            if not found:
                continue
            resources = self.fs.read_directory(spec_dir / "resources")
            if resources:
                spec.resources = resources
            specs.append(spec.to_dict())
        return specs

    def _extract_steering(self, steering_dir: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        rules = []
        for entry in self.fs.read_directory(steering_dir):
            if not entry.endswith(".md"):
                continue
            text = self._read_text(steering_dir / entry, warnings)
            if text is None:
                continue
            meta, body = split_frontmatter(text)
            name = entry[: -len(".md")]
            rule = SteeringRule(
                name=name,
                description=first_text_line(body),
                rules=extract_bullets(body),
                priority=steering_priority(name),
                content=body.strip(),
                inclusion=meta.get("inclusion"),
            )
            rules.append(rule.to_dict())
        return rules

    def _extract_hooks(self, kiro: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        hooks_dir = kiro / "hooks"
        hooks = []
        for entry in self.fs.read_directory(hooks_dir):
            if not entry.endswith((".json", ".kiro.hook")):
                continue
            data = self._read_json(hooks_dir / entry, warnings)
            if data is None:
                continue
            records = data.get("hooks") if isinstance(data, dict) and "hooks" in data else [data]
            for hook in records or []:
                if not isinstance(hook, dict) or not isinstance(hook.get("when"), dict) or not isinstance(hook.get("then"), dict):
                    warnings.append(f"Skipping hook with invalid structure in {entry}")
                    continue
                hook = dict(hook)
                hook.setdefault("description", f"Hook from {entry}")
                hook["enabled"] = bool(hook.get("enabled", True))
                command = hook["then"].get("command")
                if isinstance(command, str):
                    hook["then"] = {**hook["then"], "command": self.resolve_file_references(command, kiro, warnings)}
                hooks.append(hook)
        return sort_enabled_first(hooks)

    def _extract_mcp(self, kiro: Path, warnings: List[str]) -> Dict[str, Any]:
        mcp_file = kiro / "settings" / "mcp.json"
        if not self.fs.exists(mcp_file):
            mcp_file = kiro / "mcp.json"
        data = self._read_json(mcp_file, warnings)
        if not isinstance(data, dict):
            return {"servers": []}

        raw = data.get("servers")
        if raw is None and isinstance(data.get("mcpServers"), dict):
            raw = [{"name": name, **config} for name, config in data["mcpServers"].items()]
        servers = []
        for server in raw or []:
            if not isinstance(server, dict) or not server.get("name"):
                continue
            servers.append(McpServer.from_dict(server).to_dict())
        settings = {k: v for k, v in data.items() if k not in ("servers", "mcpServers")}
        settings["servers"] = sort_enabled_first(servers)
        return settings

    def _extract_templates(self, templates_dir: Path, warnings: List[str]) -> List[Dict[str, Any]]:
        templates = []
        for entry in self.fs.read_directory(templates_dir):
            if not entry.endswith(".json"):
                continue
            data = self._read_json(templates_dir / entry, warnings)
            if isinstance(data, dict) and data.get("name") and isinstance(data.get("tasks"), list):
                template = TaskTemplate(name=str(data["name"]), tasks=data["tasks"], description=data.get("description"))
                templates.append(template.to_dict())
            elif data is not None:
                warnings.append(f"Skipping invalid task template {entry}")
        return templates

    def _extract_project_settings(self, kiro: Path, warnings: List[str]) -> Dict[str, Any]:
        data = self._read_json(kiro / "settings" / "project.json", warnings)
        if isinstance(data, dict):
            return data
        return dict(DEFAULT_PROJECT_SETTINGS)

    # =========================================================================
    # NORMALIZE / VALIDATE / CONVERT
    # =========================================================================

    def normalize(self, data: Dict[str, Any]) -> Context:
        context = create_context(self.platform)
        config = {k: v for k, v in data.items() if k != "warnings"}
        set_category(context, "ide", {"kiro": config})
        if data.get("specs"):
            set_category(context, "project", {"kiro_specs": data["specs"]})
        servers = (data.get("mcp_settings") or {}).get("servers")
        if servers:
            set_category(context, "tools", {"mcp_servers": servers})
        return context

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult(warnings=list(data.get("warnings") or []))
        if not data.get("specs"):
            result.warnings.append("No specs found in .kiro/specs")
        if not data.get("steering_rules"):
            result.warnings.append("No steering rules found in .kiro/steering")
        for i, hook in enumerate(data.get("hooks") or []):
            label = hook.get("name") or f"#{i}"
            if not hook.get("name"):
                result.errors.append(f"Hook {label} is missing a name")
            if not hook.get("version"):
                result.errors.append(f"Hook {label} is missing a version")
        return result

    def convert(self, context: Context) -> ConversionResult:
        config = get_platform_config(context, self.platform)
        if not config:
            return self._missing_config()
        data = {
            "specs_path": config.get("specs_path", ".kiro/specs"),
            "specs": config.get("specs") or get_category_data(context, "project").get("kiro_specs") or [],
            "steering_rules": config.get("steering_rules") or [],
            "hooks": config.get("hooks") or [],
            "mcp_settings": config.get("mcp_settings") or {"servers": []},
            "task_templates": config.get("task_templates") or [],
            "project_settings": config.get("project_settings") or dict(DEFAULT_PROJECT_SETTINGS),
        }
        return ConversionResult(success=True, data=data)


builder_registry.register(KiroBuilderStrategy)
