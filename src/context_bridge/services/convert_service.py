"""
Context conversion orchestration.

Pick the converter for (source, target), gate on compatibility, run it.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from context_bridge.core.context import get_source_platform
from context_bridge.core.errors import UnsupportedConversionError
from context_bridge.core.strategy import ConverterRegistry, converter_registry
from context_bridge.core.types import AIPlatform, Context, ConversionResult, ReverseMappingOptions
from context_bridge.utils import Colors


@dataclass
class ConversionOptions:
    validate_compatibility: bool = True
    force: bool = False
    mapping_options: Optional[ReverseMappingOptions] = None


class ContextConverterService:
    def __init__(self, registry: ConverterRegistry = None, verbose: bool = False):
        self.registry = registry or converter_registry
        self.verbose = verbose

    def is_conversion_available(self, source: AIPlatform, target: AIPlatform) -> bool:
        converter = self.registry.get(source, target)
        return converter is not None and converter.can_convert()

    def get_available_conversions(self) -> List[Tuple[AIPlatform, AIPlatform]]:
        return [pair for pair in self.registry.pairs() if self.registry.get(*pair).can_convert()]

    def convert(self, context: Context, target: AIPlatform, options: ConversionOptions = None) -> ConversionResult:
        options = options or ConversionOptions()
        source = get_source_platform(context)
        if source is None:
            return ConversionResult(success=False, error="Cannot determine source platform of context")
        if source == target:
            return ConversionResult(
                success=True,
                context=context,
                warnings=[f"Context is already in {target.display_name} format"],
            )

        try:
            converter = self.registry.require(source, target)
        except UnsupportedConversionError as e:
            return ConversionResult(success=False, error=str(e))

        report_warnings: List[str] = []
        if options.validate_compatibility:
            report = converter.validate_compatibility(context)
            report_warnings = list(report.warnings)
            if self.verbose:
                print(f"{Colors.BLUE}Compatibility score: {report.score}%{Colors.ENDC}")
            if not report.compatible and not options.force:
                return ConversionResult(
                    success=False,
                    error=f"Context is not compatible with {target.display_name} (score {report.score}%). "
                    "Use force to convert anyway.",
                    warnings=report_warnings,
                    unsupported_features=report.unsupported_features,
                )
            if not report.compatible:
                report_warnings.append(f"Forced conversion despite low compatibility score ({report.score}%)")

        result = converter.convert(context, options.mapping_options)
        result.warnings = report_warnings + result.warnings
        if self.verbose:
            for warning in result.warnings:
                print(f"  {Colors.YELLOW}Warning: {warning}{Colors.ENDC}")
        return result

    def convert_chain(
        self, context: Context, targets: List[AIPlatform], options: ConversionOptions = None
    ) -> ConversionResult:
        """Convert through each target in turn; stops at the first failure."""
        result: Optional[ConversionResult] = None
        current = context
        warnings: List[str] = []
        for target in targets:
            result = self.convert(current, target, options)
            warnings += result.warnings
            if not result.success:
                result.warnings = warnings
                return result
            current = result.context
        if result is None:
            return ConversionResult(success=False, error="No conversion targets given")
        result.warnings = warnings
        return result
