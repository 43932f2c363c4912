"""
Named transform registry.

Mapping tables reference transforms by name so the table itself stays plain
data. Adding a transform = write the function + register it below.
"""

import re
from typing import Any, Callable, Dict, List

from .parsers import parse_hooks_from_commands, parse_specs_markdown, parse_steering_markdown

Transform = Callable[[Any], Any]


class TransformRegistry:
    def __init__(self):
        self._transforms: Dict[str, Transform] = {}

    def register(self, name: str, fn: Transform) -> None:
        self._transforms[name] = fn

    def resolve(self, name: str) -> Transform:
        if name not in self._transforms:
            raise KeyError(f"Unknown transform: {name}")
        return self._transforms[name]

    def copy(self) -> "TransformRegistry":
        clone = TransformRegistry()
        clone._transforms = dict(self._transforms)
        return clone

    def __contains__(self, name: str) -> bool:
        return name in self._transforms


# =============================================================================
# KIRO -> CLAUDE CODE
# =============================================================================


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


def kiro_specs_to_claude_instructions(specs: Any) -> str:
    sections = ["# Project Instructions\n"]
    for spec in _as_list(specs):
        sections.append(f"## {spec.get('name', 'Untitled')}\n")
        if "content" in spec and not any(k in spec for k in ("design", "requirements", "tasks")):
            sections[-1] += f"{spec['content']}\n"
            continue
        if spec.get("design"):
            sections.append(f"### Design\n{spec['design']}\n")
        if spec.get("requirements"):
            sections.append(f"### Requirements\n{spec['requirements']}\n")
        if spec.get("tasks"):
            sections.append(f"### Tasks\n{spec['tasks']}\n")
    return "\n".join(sections)


def kiro_steering_to_claude_custom_instructions(steering: Any) -> str:
    sections = ["# Custom Instructions\n"]
    for rule in _as_list(steering):
        if isinstance(rule, str):
            sections.append(rule)
        elif rule.get("name"):
            sections.append(f"## {rule['name']}\n{rule.get('content', '')}\n")
        else:
            sections.append(rule.get("content", ""))
    return "\n".join(sections)


def kiro_hooks_to_claude_commands(hooks: Any) -> Dict[str, Any]:
    commands = []
    for hook in _as_list(hooks):
        when = hook.get("when") or {}
        then = hook.get("then") or {}
        event = hook.get("event") or when.get("type")
        command = {
            "name": hook.get("name") or event,
            "command": hook.get("command") or hook.get("script") or then.get("command", ""),
            "trigger": event,
        }
        if hook.get("description"):
            command["description"] = hook["description"]
        commands.append(command)
    return {"commands": commands}


def kiro_settings_to_claude_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    return {"version": "1.0.0", **settings, "features": dict(settings.get("features") or {})}


# =============================================================================
# CLAUDE CODE -> KIRO
# =============================================================================


def claude_settings_to_kiro_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    return {**settings, "version": settings.get("version", "1.0.0")}


# =============================================================================
# KIRO <-> CURSOR
# =============================================================================


def kiro_steering_to_cursor_rules(steering: Any) -> str:
    contents = []
    for rule in _as_list(steering):
        contents.append(rule if isinstance(rule, str) else rule.get("content", ""))
    return "\n\n".join(contents)


def cursor_rules_to_kiro_steering_import(rules: str) -> List[Dict[str, str]]:
    """Whole rules file as one imported steering rule."""
    return [{"name": "cursor-rules", "content": rules, "type": "imported", "source": "cursor"}]


# =============================================================================
# GENERIC
# =============================================================================


def identity(value: Any) -> Any:
    return value


def _snake_to_camel(key: str) -> str:
    return re.sub(r"_([a-z])", lambda m: m.group(1).upper(), key)


def _camel_to_snake(key: str) -> str:
    return re.sub(r"[A-Z]", lambda m: "_" + m.group(0).lower(), key)


def swap_key_case(value: Any) -> Any:
    """Recursively flip snake_case keys to camelCase and camelCase keys to snake_case."""
    if isinstance(value, list):
        return [swap_key_case(item) for item in value]
    if not isinstance(value, dict):
        return value
    swapped = {}
    for key, item in value.items():
        if "_" in key:
            new_key = _snake_to_camel(key)
        elif re.search(r"[A-Z]", key):
            new_key = _camel_to_snake(key)
        else:
            new_key = key
        swapped[new_key] = swap_key_case(item)
    return swapped


def _build_default_registry() -> TransformRegistry:
    registry = TransformRegistry()
    registry.register("identity", identity)
    registry.register("swap_key_case", swap_key_case)
    registry.register("kiro_specs_to_claude_instructions", kiro_specs_to_claude_instructions)
    registry.register("kiro_steering_to_claude_custom_instructions", kiro_steering_to_claude_custom_instructions)
    registry.register("kiro_hooks_to_claude_commands", kiro_hooks_to_claude_commands)
    registry.register("kiro_settings_to_claude_settings", kiro_settings_to_claude_settings)
    registry.register("claude_settings_to_kiro_settings", claude_settings_to_kiro_settings)
    # Structural parsers double as the claude -> kiro transforms
    registry.register("claude_instructions_to_kiro_specs", parse_specs_markdown)
    registry.register("claude_custom_instructions_to_kiro_steering", parse_steering_markdown)
    registry.register("claude_commands_to_kiro_hooks", parse_hooks_from_commands)
    registry.register("kiro_steering_to_cursor_rules", kiro_steering_to_cursor_rules)
    registry.register("cursor_rules_to_kiro_steering", parse_steering_markdown)
    registry.register("cursor_rules_to_kiro_steering_import", cursor_rules_to_kiro_steering_import)
    return registry


transform_registry = _build_default_registry()
