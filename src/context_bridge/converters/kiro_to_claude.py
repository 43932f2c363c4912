"""Kiro -> Claude Code converter."""

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
)
from context_bridge.mapping.features import command_records
from ._claude_impl import deploy_claude_code, to_claude_servers, to_claude_settings


def _servers(config: Dict[str, Any]):
    return (config.get("mcp_settings") or {}).get("servers") or config.get("mcp_servers")


class KiroToClaudeConverter(BaseConverterStrategy):
    source = AIPlatform.KIRO
    target = AIPlatform.CLAUDE_CODE
    deployer = deploy_claude_code

    def build_target_config(
        self, context: Context, source_config: Dict[str, Any], mapping: ReverseMappingResult
    ) -> Dict[str, Any]:
        features = mapping.reversed_features
        return {
            "settings": to_claude_settings(features.get("settings")),
            "claude_md": features.get("instructions"),
            "claude_local_md": features.get("custom_instructions"),
            "mcp_servers": to_claude_servers(features.get("mcp_servers")),
            "commands": command_records(features.get("commands")),
        }

    def extra_categories(self, context: Context, target_config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        categories = {}
        if target_config["claude_md"]:
            categories["project"] = {"claude_instructions": target_config["claude_md"]}
        if target_config["claude_local_md"]:
            categories["prompts"] = {"custom_instructions": target_config["claude_local_md"]}
        if target_config["mcp_servers"]:
            categories["tools"] = {"mcp_servers": target_config["mcp_servers"]}
        return categories

    def assess_compatibility(self, source_config: Dict[str, Any], report: CompatibilityReport) -> None:
        if source_config.get("specs"):
            report.supported_features.append("specs")
            report.partial_support.append(PartialSupport("specs", 80, "Specs are flattened into CLAUDE.md sections"))
        if source_config.get("steering_rules"):
            report.supported_features.append("steering")
            report.partial_support.append(PartialSupport("steering", 90, "Priorities and inclusion modes are dropped"))
        if source_config.get("hooks"):
            report.partial_support.append(PartialSupport("hooks", 70, "File-pattern triggers are recorded but not enforced"))
        if _servers(source_config):
            report.supported_features.append("mcp_servers")
        if source_config.get("task_templates"):
            report.unsupported_features.append("task_templates")

    def get_feature_mapping(self, context: Context) -> FeatureMappingReport:
        report = FeatureMappingReport()
        config = get_platform_config(context, self.source) or {}
        if config.get("specs"):
            report.direct_mappings["specs"] = "CLAUDE.md"
        if config.get("steering_rules"):
            report.direct_mappings["steering"] = "CLAUDE.local.md"
        if _servers(config):
            report.direct_mappings["mcp_servers"] = ".claude/mcp.json"
        if config.get("hooks"):
            report.approximations.append(
                FeatureApproximation("hooks", "commands", "medium", "Hook triggers become command trigger labels")
            )
        if config.get("project_settings"):
            report.approximations.append(
                FeatureApproximation("project_settings", "settings", "low", "Only version and attribution carry over")
            )
        if config.get("task_templates"):
            report.unsupported.append("task_templates")
        return report


converter_registry.register(KiroToClaudeConverter)
