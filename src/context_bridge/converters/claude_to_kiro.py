"""
Claude Code -> Kiro converter.

CLAUDE.md sections become specs, CLAUDE.local.md sections become steering
rules, commands become manual hooks.
"""

from typing import Any, Dict

from context_bridge.core.context import get_platform_config
from context_bridge.core.strategy import BaseConverterStrategy, converter_registry
from context_bridge.core.types import (
    AIPlatform,
    CompatibilityReport,
    Context,
    FeatureApproximation,
    FeatureMappingReport,
    PartialSupport,
    ReverseMappingResult,
    Spec,
)
from context_bridge.mapping.features import command_records
from ._kiro_impl import deploy_kiro, to_hooks, to_mcp_settings, to_project_settings, to_steering_rules

UNSUPPORTED_SETTINGS = ("permissions", "env", "statusLine")


class ClaudeToKiroConverter(BaseConverterStrategy):
    source = AIPlatform.CLAUDE_CODE
    target = AIPlatform.KIRO
    deployer = deploy_kiro

    def build_target_config(
        self, context: Context, source_config: Dict[str, Any], mapping: ReverseMappingResult
    ) -> Dict[str, Any]:
        features = mapping.reversed_features
        return {
            "specs_path": ".kiro/specs",
            "specs": [Spec.from_dict(s).to_dict() for s in features.get("specs") or [] if isinstance(s, dict)],
            "steering_rules": to_steering_rules(features.get("steering")),
            "hooks": to_hooks(features.get("hooks")),
            "mcp_settings": to_mcp_settings(features.get("mcp_servers")),
            "task_templates": [],
            "project_settings": to_project_settings(source_config.get("settings") or {}, features.get("settings")),
        }

    def extra_categories(self, context: Context, target_config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        categories = {}
        if target_config["specs"]:
            categories["project"] = {"kiro_specs": target_config["specs"]}
        if target_config["mcp_settings"]["servers"]:
            categories["tools"] = {"mcp_servers": target_config["mcp_settings"]["servers"]}
        return categories

    def assess_compatibility(self, source_config: Dict[str, Any], report: CompatibilityReport) -> None:
        if source_config.get("claude_md"):
            report.supported_features.append("instructions")
            report.partial_support.append(
                PartialSupport("instructions", 85, "Only ## sections with Design/Requirements/Tasks map cleanly to specs")
            )
        if source_config.get("claude_local_md"):
            report.supported_features.append("custom_instructions")
            report.partial_support.append(
                PartialSupport("custom_instructions", 90, "Each ## section becomes one steering rule")
            )
        if command_records(source_config.get("commands")):
            report.partial_support.append(PartialSupport("commands", 75, "Commands become manually triggered hooks"))
        if source_config.get("mcp_servers"):
            report.supported_features.append("mcp_servers")
        if source_config.get("settings"):
            report.partial_support.append(PartialSupport("settings", 60, "Only attribution maps to Kiro project settings"))
            for key in UNSUPPORTED_SETTINGS:
                if key in source_config["settings"]:
                    report.warnings.append(f"Setting '{key}' has no Kiro equivalent")

    def get_feature_mapping(self, context: Context) -> FeatureMappingReport:
        report = FeatureMappingReport()
        config = get_platform_config(context, self.source) or {}
        if config.get("claude_md"):
            report.direct_mappings["CLAUDE.md"] = ".kiro/specs"
        if config.get("claude_local_md"):
            report.direct_mappings["CLAUDE.local.md"] = ".kiro/steering"
        if config.get("mcp_servers"):
            report.direct_mappings["mcp_servers"] = ".kiro/settings/mcp.json"
        if command_records(config.get("commands")):
            report.approximations.append(
                FeatureApproximation("commands", "hooks", "medium", "Triggers are not preserved; hooks run manually")
            )
        settings = config.get("settings") or {}
        if settings:
            report.approximations.append(
                FeatureApproximation("settings", "project_settings", "low", "Claude Code settings are kept as imported_settings")
            )
        report.unsupported = [key for key in UNSUPPORTED_SETTINGS if key in settings]
        return report


converter_registry.register(ClaudeToKiroConverter)
