"""
Static feature mapping table, keyed by (source platform, target platform).

Pure data: transforms are referenced by their registry name.
"""

from typing import Dict, List, Tuple

from context_bridge.core.types import AIPlatform, FeatureEndpoint, FeatureMapping

KIRO = AIPlatform.KIRO
CLAUDE = AIPlatform.CLAUDE_CODE
CURSOR = AIPlatform.CURSOR


def _m(source, source_feature, source_path, target, target_feature, target_path,
       transform=None, bidirectional=False, priority=None, description=""):
    return FeatureMapping(
        source=FeatureEndpoint(source, source_feature, source_path),
        target=FeatureEndpoint(target, target_feature, target_path, transform),
        bidirectional=bidirectional,
        priority=priority,
        description=description,
    )


FEATURE_MAPPINGS: Dict[Tuple[AIPlatform, AIPlatform], Tuple[FeatureMapping, ...]] = {
    (KIRO, CLAUDE): (
        _m(KIRO, "specs", ".kiro/specs", CLAUDE, "instructions", "CLAUDE.md",
           "kiro_specs_to_claude_instructions", True, 1,
           "Kiro specs become project instructions in CLAUDE.md"),
        _m(KIRO, "steering", ".kiro/steering", CLAUDE, "custom_instructions", "CLAUDE.local.md",
           "kiro_steering_to_claude_custom_instructions", True, 2,
           "Kiro steering rules become custom instructions in CLAUDE.local.md"),
        _m(KIRO, "hooks", ".kiro/hooks", CLAUDE, "commands", ".claude/commands.json",
           "kiro_hooks_to_claude_commands", True, 3,
           "Kiro hooks become Claude Code commands"),
        _m(KIRO, "mcp_servers", ".kiro/settings/mcp.json", CLAUDE, "mcp_servers", ".claude/mcp.json",
           None, True, 4, "MCP server definitions share one shape"),
        _m(KIRO, "settings", ".kiro/settings/project.json", CLAUDE, "settings", ".claude/settings.json",
           "kiro_settings_to_claude_settings", False, 5,
           "Kiro project settings become Claude Code settings"),
    ),
    (CLAUDE, KIRO): (
        _m(CLAUDE, "instructions", "CLAUDE.md", KIRO, "specs", ".kiro/specs",
           "claude_instructions_to_kiro_specs", False, 1,
           "CLAUDE.md sections become Kiro specs"),
        _m(CLAUDE, "custom_instructions", "CLAUDE.local.md", KIRO, "steering", ".kiro/steering",
           "claude_custom_instructions_to_kiro_steering", False, 2,
           "CLAUDE.local.md sections become Kiro steering rules"),
        _m(CLAUDE, "commands", ".claude/commands.json", KIRO, "hooks", ".kiro/hooks",
           "claude_commands_to_kiro_hooks", False, 3,
           "Claude Code commands become Kiro hooks"),
        _m(CLAUDE, "settings", ".claude/settings.json", KIRO, "settings", ".kiro/settings/project.json",
           "claude_settings_to_kiro_settings", False, 5,
           "Claude Code settings become Kiro project settings"),
    ),
    (KIRO, CURSOR): (
        _m(KIRO, "steering", ".kiro/steering", CURSOR, "rules", ".cursorrules",
           "kiro_steering_to_cursor_rules", True, 1,
           "Kiro steering rules become the Cursor rules file"),
        _m(KIRO, "mcp_servers", ".kiro/settings/mcp.json", CURSOR, "mcp_servers", ".cursor/mcp.json",
           None, True, 2, "MCP server definitions share one shape"),
    ),
    # Converters resolve cursor -> kiro through the sectioned reverse of the
    # kiro -> cursor steering entry; this one-rule import serves direct
    # FeatureMapper.map_features calls.
    (CURSOR, KIRO): (
        _m(CURSOR, "rules", ".cursorrules", KIRO, "steering", ".kiro/steering",
           "cursor_rules_to_kiro_steering_import", False, 1,
           "The Cursor rules file becomes one imported steering rule"),
    ),
}


def get_mappings(source: AIPlatform, target: AIPlatform) -> List[FeatureMapping]:
    """Mappings for a platform pair; a fresh list on every call."""
    return list(FEATURE_MAPPINGS.get((source, target), ()))


def get_supported_pairs() -> List[Tuple[AIPlatform, AIPlatform]]:
    return [pair for pair, mappings in FEATURE_MAPPINGS.items() if mappings]
