"""Kiro -> Cursor converter: steering rules collapse into .cursorrules."""

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
from context_bridge.mapping.features import kiro_features
from context_bridge.mapping.transforms import kiro_specs_to_claude_instructions
from ._claude_impl import to_claude_servers
from ._cursor_impl import deploy_cursor


class KiroToCursorConverter(BaseConverterStrategy):
    source = AIPlatform.KIRO
    target = AIPlatform.CURSOR
    deployer = deploy_cursor

    def build_target_config(
        self, context: Context, source_config: Dict[str, Any], mapping: ReverseMappingResult
    ) -> Dict[str, Any]:
        features = mapping.reversed_features
        parts = [features.get("rules") or ""]
        specs = kiro_features(source_config).get("specs")
        if specs:
            # Cursor has no spec concept; specs ride along as rule text
            parts.append(kiro_specs_to_claude_instructions(specs))
        return {
            "rules": "\n\n".join(p for p in parts if p) or None,
            "mdc_rules": [],
            "mcp_servers": to_claude_servers(features.get("mcp_servers")),
            "settings": {},
        }

    def extra_categories(self, context: Context, target_config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        if target_config["mcp_servers"]:
            return {"tools": {"mcp_servers": target_config["mcp_servers"]}}
        return {}

    def assess_compatibility(self, source_config: Dict[str, Any], report: CompatibilityReport) -> None:
        if source_config.get("steering_rules"):
            report.supported_features.append("steering")
        if (source_config.get("mcp_settings") or {}).get("servers"):
            report.supported_features.append("mcp_servers")
        if source_config.get("specs"):
            report.partial_support.append(PartialSupport("specs", 50, "Specs are appended to the rules file"))
        if source_config.get("hooks"):
            report.unsupported_features.append("hooks")
        if source_config.get("task_templates"):
            report.unsupported_features.append("task_templates")

    def get_feature_mapping(self, context: Context) -> FeatureMappingReport:
        report = FeatureMappingReport()
        config = get_platform_config(context, self.source) or {}
        if config.get("steering_rules"):
            report.direct_mappings["steering"] = ".cursorrules"
        if (config.get("mcp_settings") or {}).get("servers"):
            report.direct_mappings["mcp_servers"] = ".cursor/mcp.json"
        if config.get("specs"):
            report.approximations.append(
                FeatureApproximation("specs", "rules", "low", "Specs become plain text in .cursorrules")
            )
        report.unsupported = [k for k in ("hooks", "task_templates") if config.get(k)]
        return report


converter_registry.register(KiroToCursorConverter)
