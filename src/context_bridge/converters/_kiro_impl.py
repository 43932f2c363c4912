"""
Kiro target implementation: shape rules for reversed features and the .kiro/
deployment layout.
"""

from typing import Any, Dict, List, Set

from context_bridge.builders.kiro import DEFAULT_PROJECT_SETTINGS, SPEC_FILES
from context_bridge.core.context import get_category_data
from context_bridge.core.strategy import DeployWriter, sort_enabled_first
from context_bridge.core.types import Context, Hook, HookAction, HookTrigger, McpServer, SteeringRule
from context_bridge.mapping.parsers import render_frontmatter
from context_bridge.utils import slugify


# =============================================================================
# SHAPE RULES
# =============================================================================


def _unique_name(name: str, taken: Set[str]) -> str:
    candidate, n = name, 2
    while candidate in taken:
        candidate = f"{name}-{n}"
        n += 1
    taken.add(candidate)
    return candidate


def to_steering_rules(parsed: Any) -> List[Dict[str, Any]]:
    """
    Parsed {name, content} sections -> SteeringRule dicts.

    Names are slugs and unique (notes, notes-2, ...) since each rule
    deploys to .kiro/steering/<name>.md.
    """
    rules = []
    taken: Set[str] = set()
    for section in parsed or []:
        if not isinstance(section, dict):
            continue
        name = section.get("name") or "imported-rules"
        content = section.get("content", "")
        rule = SteeringRule(
            name=_unique_name(slugify(name), taken),
            description=name,
            rules=[content] if content else [],
            priority=0,
            content=content,
        )
        rules.append(rule.to_dict())
    return rules


def to_hooks(parsed: Any) -> List[Dict[str, Any]]:
    """Parsed command hooks -> Kiro Hook dicts, triggered manually."""
    hooks = []
    for record in parsed or []:
        if not isinstance(record, dict):
            continue
        hook = Hook(
            name=record.get("name") or "command",
            when=HookTrigger(type="manual"),
            then=HookAction(type="command", command=record.get("command", "")),
            enabled=True,
            version="1.0.0",
            description=record.get("description"),
        )
        hooks.append(hook.to_dict())
    return sort_enabled_first(hooks)


def to_mcp_settings(servers: Any) -> Dict[str, Any]:
    records = [
        McpServer.from_dict(s).to_dict()
        for s in servers or []
        if isinstance(s, dict) and s.get("name")
    ]
    return {"servers": sort_enabled_first(records)}


def to_project_settings(claude_settings: Dict[str, Any], mapped: Any = None) -> Dict[str, Any]:
    settings = dict(DEFAULT_PROJECT_SETTINGS)
    settings["auto_attribution"] = bool(claude_settings.get("includeCoAuthoredBy", False))
    if isinstance(mapped, dict) and mapped:
        settings["imported_settings"] = mapped
    return settings


# =============================================================================
# DEPLOY
# =============================================================================


def render_steering_file(data: Dict[str, Any]) -> str:
    rule = SteeringRule.from_dict(data)
    body = "\n\n".join(rule.rules) or rule.content or ""
    text = f"# {rule.description or rule.name}\n\n{body}"
    if rule.inclusion:
        text = render_frontmatter({"inclusion": rule.inclusion}) + text
    return text


def deploy_kiro(writer: DeployWriter, context: Context, config: Dict[str, Any]) -> None:
    """Write .kiro/{specs,steering,hooks,settings} from ide.data.kiro."""
    for sub in ("specs", "steering", "hooks", "settings"):
        writer.ensure_directory(f".kiro/{sub}")

    instructions = get_category_data(context, "project").get("claude_instructions")
    if instructions:
        writer.write_file(".kiro/specs/requirements.md", f"# Requirements\n\n{instructions}")

    for spec in config.get("specs") or []:
        spec_dir = f".kiro/specs/{slugify(spec.get('name', ''))}"
        for key in SPEC_FILES:
            if spec.get(key) is not None:
                writer.write_file(f"{spec_dir}/{key}.md", spec[key])

    for rule in config.get("steering_rules") or []:
        writer.write_file(f".kiro/steering/{slugify(rule.get('name', ''))}.md", render_steering_file(rule))

    if config.get("hooks"):
        writer.write_json(".kiro/hooks/hooks.json", {"hooks": config["hooks"]})

    mcp_settings = config.get("mcp_settings") or {}
    if mcp_settings.get("servers"):
        writer.write_json(".kiro/settings/mcp.json", mcp_settings)

    if config.get("project_settings"):
        writer.write_json(".kiro/settings/project.json", config["project_settings"])
