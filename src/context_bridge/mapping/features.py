"""
Feature views: platform-native ide.data config -> the feature-keyed dict the
mapper reads (specs, steering, instructions, rules, ...).
"""

from typing import Any, Dict, List

from context_bridge.core.types import AIPlatform, Hook


def _bullets(rules: List[str]) -> str:
    return "\n".join(f"- {rule}" for rule in rules)


def command_records(commands: Any) -> List[Dict[str, Any]]:
    """Claude commands as a list of records, whatever shape they were stored in."""
    if isinstance(commands, dict) and "commands" in commands:
        commands = commands["commands"]
    if isinstance(commands, dict):
        return [{"name": name, "command": command} for name, command in commands.items()]
    if isinstance(commands, list):
        return [c for c in commands if isinstance(c, dict)]
    return []


def kiro_features(config: Dict[str, Any]) -> Dict[str, Any]:
    features: Dict[str, Any] = {}

    specs = [
        {k: spec[k] for k in ("name", "design", "requirements", "tasks") if spec.get(k) is not None}
        for spec in config.get("specs") or []
    ]
    if specs:
        features["specs"] = specs

    steering = [
        {"name": rule.get("name", ""), "content": rule.get("content") or _bullets(rule.get("rules") or [])}
        for rule in config.get("steering_rules") or []
    ]
    if steering:
        features["steering"] = steering

    hooks = []
    for raw in config.get("hooks") or []:
        hook = Hook.from_dict(raw)
        record = {
            "name": hook.name,
            "event": hook.when.type,
            "command": hook.then.command,
            "enabled": hook.enabled,
        }
        if hook.description:
            record["description"] = hook.description
        hooks.append(record)
    if hooks:
        features["hooks"] = hooks

    servers = (config.get("mcp_settings") or {}).get("servers") or config.get("mcp_servers")
    if servers:
        features["mcp_servers"] = servers
    if config.get("project_settings"):
        features["settings"] = config["project_settings"]
    return features


def claude_code_features(config: Dict[str, Any]) -> Dict[str, Any]:
    features: Dict[str, Any] = {}
    if config.get("claude_md"):
        features["instructions"] = config["claude_md"]
    if config.get("claude_local_md"):
        features["custom_instructions"] = config["claude_local_md"]
    commands = command_records(config.get("commands"))
    if commands:
        features["commands"] = {"commands": commands}
    if config.get("mcp_servers"):
        features["mcp_servers"] = config["mcp_servers"]
    if config.get("settings"):
        features["settings"] = config["settings"]
    return features


def cursor_features(config: Dict[str, Any]) -> Dict[str, Any]:
    features: Dict[str, Any] = {}
    parts = [config.get("rules") or ""]
    parts += [rule.get("content") or "" for rule in config.get("mdc_rules") or []]
    rules = "\n\n".join(p.strip() for p in parts if p.strip())
    if rules:
        features["rules"] = rules
    if config.get("mcp_servers"):
        features["mcp_servers"] = config["mcp_servers"]
    if config.get("settings"):
        features["settings"] = config["settings"]
    return features


_VIEWS = {
    AIPlatform.KIRO: kiro_features,
    AIPlatform.CLAUDE_CODE: claude_code_features,
    AIPlatform.CURSOR: cursor_features,
}


def extract_features(platform: AIPlatform, config: Dict[str, Any]) -> Dict[str, Any]:
    return _VIEWS[platform](config or {})
