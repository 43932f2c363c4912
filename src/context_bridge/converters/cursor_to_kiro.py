"""Cursor -> Kiro converter: rule text is split into steering rules."""

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
from ._kiro_impl import deploy_kiro, to_mcp_settings, to_project_settings, to_steering_rules


class CursorToKiroConverter(BaseConverterStrategy):
    source = AIPlatform.CURSOR
    target = AIPlatform.KIRO
    deployer = deploy_kiro

    def build_target_config(
        self, context: Context, source_config: Dict[str, Any], mapping: ReverseMappingResult
    ) -> Dict[str, Any]:
        features = mapping.reversed_features
        return {
            "specs_path": ".kiro/specs",
            "specs": [],
            "steering_rules": to_steering_rules(features.get("steering")),
            "hooks": [],
            "mcp_settings": to_mcp_settings(features.get("mcp_servers")),
            "task_templates": [],
            "project_settings": to_project_settings({}),
        }

    def extra_categories(self, context: Context, target_config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        if target_config["mcp_settings"]["servers"]:
            return {"tools": {"mcp_servers": target_config["mcp_settings"]["servers"]}}
        return {}

    def assess_compatibility(self, source_config: Dict[str, Any], report: CompatibilityReport) -> None:
        if source_config.get("rules"):
            report.supported_features.append("rules")
            report.partial_support.append(PartialSupport("rules", 80, "Only ## sections become separate steering rules"))
        if source_config.get("mdc_rules"):
            report.partial_support.append(PartialSupport("mdc_rules", 70, "Globs and alwaysApply are dropped"))
        if source_config.get("mcp_servers"):
            report.supported_features.append("mcp_servers")
        if source_config.get("settings"):
            report.unsupported_features.append("settings")

    def get_feature_mapping(self, context: Context) -> FeatureMappingReport:
        report = FeatureMappingReport()
        config = get_platform_config(context, self.source) or {}
        if config.get("rules"):
            report.direct_mappings[".cursorrules"] = ".kiro/steering"
        if config.get("mcp_servers"):
            report.direct_mappings["mcp_servers"] = ".kiro/settings/mcp.json"
        if config.get("mdc_rules"):
            report.approximations.append(
                FeatureApproximation("mdc_rules", "steering", "medium", "Rule bodies are kept, activation metadata is not")
            )
        if config.get("settings"):
            report.unsupported.append("settings")
        return report


converter_registry.register(CursorToKiroConverter)
