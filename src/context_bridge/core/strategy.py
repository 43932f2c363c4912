"""
Builder and converter strategy bases plus their registries.

Adding a platform = implement BaseBuilderStrategy + register.
Adding a conversion path = implement BaseConverterStrategy + register.
"""

import math
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from context_bridge.mapping.features import extract_features
from context_bridge.mapping.reverse import get_reverse_mapping_service
from context_bridge.utils import warn
from .config import COMPATIBILITY_THRESHOLD
from .context import clone_context, get_platform_config, set_category, stamp_conversion
from .errors import ContextValidationError, NotAPlatformProjectError, UnsupportedConversionError
from .filesystem import FileSystemUtility
from .types import (
    AIPlatform,
    CompatibilityReport,
    Context,
    ConversionResult,
    DeployOptions,
    DeployResult,
    FeatureMappingReport,
    PartialSupport,
    ReverseMappingOptions,
    ReverseMappingResult,
    ValidationResult,
)


def sort_enabled_first(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Enabled entries before disabled ones, then by name (case-sensitive)."""
    return sorted(items, key=lambda item: (not item.get("enabled", True), str(item.get("name", ""))))


# =============================================================================
# BUILDERS
# =============================================================================


class BaseBuilderStrategy(ABC):
    platform: AIPlatform

    def __init__(self, file_system: FileSystemUtility = None, verbose: bool = False):
        self.fs = file_system or FileSystemUtility()
        self.verbose = verbose

    @abstractmethod
    def detect(self, path) -> bool: ...

    @abstractmethod
    def extract(self, path) -> Dict[str, Any]: ...

    @abstractmethod
    def normalize(self, data: Dict[str, Any]) -> Context: ...

    @abstractmethod
    def validate(self, data: Dict[str, Any]) -> ValidationResult: ...

    @abstractmethod
    def convert(self, context: Context) -> ConversionResult: ...

    @property
    def name(self) -> str:
        return self.platform.value

    def build(self, path) -> Context:
        """extract -> validate -> normalize. Raises on an unrecognized or invalid project."""
        root = self.fs.resolve_path(path)
        if not self.detect(root):
            raise NotAPlatformProjectError(self.platform.display_name, root)
        data = self.extract(root)
        validation = self.validate(data)
        for message in validation.warnings:
            warn(message, self.verbose)
        if not validation.valid:
            raise ContextValidationError(validation)
        return self.normalize(data)

    def _require_detected(self, root: Path) -> None:
        if not self.detect(root):
            raise NotAPlatformProjectError(self.platform.display_name, root)

    def _read_json(self, path: Path, warnings: List[str]) -> Optional[Any]:
        """JSON file contents, or None with a warning when it cannot be read."""
        if not self.fs.exists(path):
            return None
        try:
            return self.fs.read_json(path)
        except (OSError, ValueError) as e:
            warnings.append(f"Could not read {path.name}: {e}")
            return None

    def _read_text(self, path: Path, warnings: List[str]) -> Optional[str]:
        if not self.fs.exists(path):
            return None
        try:
            return self.fs.read_file(path)
        except (OSError, UnicodeDecodeError) as e:
            warnings.append(f"Could not read {path.name}: {e}")
            return None

    def _missing_config(self) -> ConversionResult:
        return ConversionResult(
            success=False,
            error=f"No {self.platform.display_name} configuration found in context",
        )


class BuilderRegistry:
    def __init__(self):
        self._builders: Dict[AIPlatform, BaseBuilderStrategy] = {}

    def register(self, builder_class: Type[BaseBuilderStrategy]) -> None:
        instance = builder_class()
        self._builders[instance.platform] = instance

    def get(self, platform) -> Optional[BaseBuilderStrategy]:
        return self._builders.get(AIPlatform.parse(platform))

    def platforms(self) -> List[AIPlatform]:
        return list(self._builders.keys())


builder_registry = BuilderRegistry()


# =============================================================================
# CONVERTERS
# =============================================================================


def calculate_compatibility_score(
    supported: List[str], unsupported: List[str], partial: List[PartialSupport]
) -> int:
    """(supported x 100 + sum of partial levels) / entry count, rounded half up."""
    total = len(supported) + len(unsupported) + len(partial)
    if total == 0:
        return 0
    points = len(supported) * 100
    points += sum(p.support_level if p.support_level is not None else 50 for p in partial)
    return int(math.floor(points / total + 0.5))


class DeployWriter:
    """
    Writes deploy output under one root and records each relative path.

    Existing files are skipped unless options.overwrite is set. A path is
    written at most once per deploy.
    """

    def __init__(self, fs: FileSystemUtility, root: Path, options: DeployOptions = None):
        self.fs = fs
        self.root = root
        self.options = options or DeployOptions()
        self.deployed: List[str] = []
        self.skipped: List[str] = []
        self.backups: List[str] = []
        self.warnings: List[str] = []

    def ensure_directory(self, rel: str) -> None:
        if not self.options.dry_run:
            self.fs.ensure_directory(self.root / rel)

    def write_file(self, rel: str, content: str) -> None:
        if self._should_write(rel):
            if not self.options.dry_run:
                self.fs.write_file(self.root / rel, content)
            self.deployed.append(rel)

    def write_json(self, rel: str, data: Any) -> None:
        if self._should_write(rel):
            if not self.options.dry_run:
                self.fs.write_json(self.root / rel, data)
            self.deployed.append(rel)

    def _should_write(self, rel: str) -> bool:
        if rel in self.deployed:
            self.warnings.append(f"Skipped duplicate output path: {rel}")
            return False
        path = self.root / rel
        if self.fs.exists(path):
            if not self.options.overwrite:
                self.skipped.append(rel)
                self.warnings.append(f"Skipped existing file: {rel}")
                return False
            if self.options.backup and not self.options.dry_run:
                self.fs.write_file(self.root / f"{rel}.bak", self.fs.read_file(path))
                self.backups.append(f"{rel}.bak")
        return True

    def result(self, success: bool = True, errors: List[str] = None) -> DeployResult:
        return DeployResult(
            success=success,
            deployed_files=self.deployed,
            errors=errors or [],
            skipped_files=self.skipped,
            backup_files=self.backups,
            warnings=self.warnings,
        )


Deployer = Callable[[DeployWriter, Context, Dict[str, Any]], None]


class BaseConverterStrategy(ABC):
    source: AIPlatform
    target: AIPlatform
    # Writes the target platform layout; set by subclasses
    deployer: Deployer = None

    def __init__(self, file_system: FileSystemUtility = None, reverse_service=None, verbose: bool = False):
        self.fs = file_system or FileSystemUtility()
        self._reverse_service = reverse_service
        self.verbose = verbose

    @property
    def name(self) -> str:
        return f"{self.source.value}->{self.target.value}"

    @property
    def reverse_service(self):
        if self._reverse_service is None:
            self._reverse_service = get_reverse_mapping_service()
        return self._reverse_service

    def can_convert(self) -> bool:
        return True

    def mapping_options(self) -> ReverseMappingOptions:
        return ReverseMappingOptions(validate_integrity=True)

    @abstractmethod
    def build_target_config(
        self, context: Context, source_config: Dict[str, Any], mapping: ReverseMappingResult
    ) -> Dict[str, Any]:
        """Assemble ide.data.<target> from the reversed features."""

    def extra_categories(self, context: Context, target_config: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Cross-cutting category data to add next to ide.data.<target>."""
        return {}

    @abstractmethod
    def assess_compatibility(self, source_config: Dict[str, Any], report: CompatibilityReport) -> None: ...

    @abstractmethod
    def get_feature_mapping(self, context: Context) -> FeatureMappingReport: ...

    def convert(self, context: Context, options: ReverseMappingOptions = None) -> ConversionResult:
        source_config = get_platform_config(context, self.source)
        if not source_config:
            return ConversionResult(
                success=False,
                error=f"No {self.source.display_name} configuration found in context",
            )
        try:
            features = extract_features(self.source, source_config)
            mapping = self.reverse_service.reverse_map(
                features, self.source, self.target, options or self.mapping_options()
            )
            target_config = self.build_target_config(context, source_config, mapping)

            converted = clone_context(context)
            set_category(converted, "ide", {self.target.data_key: target_config})
            for category, data in self.extra_categories(context, target_config).items():
                set_category(converted, category, data)
            stamp_conversion(converted, self.source, self.target)

            warnings = list(mapping.warnings)
            warnings += [f"{feature}: {message}" for feature, message in mapping.conflicts.items()]
            if mapping.metadata and not mapping.metadata.reversible:
                warnings.append("Conversion is not fully reversible")
            report = self.validate_compatibility(context)
            return ConversionResult(
                success=True,
                context=converted,
                data=target_config,
                warnings=warnings,
                unsupported_features=report.unsupported_features,
                approximations=self.get_feature_mapping(context).approximations,
            )
        except Exception as e:
            return ConversionResult(success=False, error=f"Conversion failed: {e}")

    def validate_compatibility(self, context: Context) -> CompatibilityReport:
        source_config = get_platform_config(context, self.source)
        if not source_config:
            return CompatibilityReport(
                compatible=False,
                score=0,
                unsupported_features=[f"No {self.source.display_name} configuration found"],
            )
        report = CompatibilityReport()
        self.assess_compatibility(source_config, report)
        report.score = calculate_compatibility_score(
            report.supported_features, report.unsupported_features, report.partial_support
        )
        report.compatible = report.score >= COMPATIBILITY_THRESHOLD
        return report

    def deploy(self, context: Context, target_path=None, options: DeployOptions = None) -> DeployResult:
        """
        Write the target layout under target_path (default: cwd).

        Existing files are kept unless options.overwrite is set. Not
        transactional: on failure the files already written stay on disk and
        are listed in deployed_files.
        """
        target_config = get_platform_config(context, self.target)
        if not target_config:
            return DeployResult(
                success=False,
                errors=[f"No {self.target.display_name} configuration found in context"],
            )
        writer = DeployWriter(self.fs, self.fs.resolve_path(target_path or Path.cwd()), options)
        try:
            type(self).deployer(writer, context, target_config)
        except Exception as e:
            return writer.result(success=False, errors=[str(e)])
        if self.verbose:
            for warning in writer.warnings:
                warn(warning)
        return writer.result()


class ConverterRegistry:
    def __init__(self):
        self._converters: Dict[Tuple[AIPlatform, AIPlatform], BaseConverterStrategy] = {}

    def register(self, converter_class: Type[BaseConverterStrategy]) -> None:
        instance = converter_class()
        self._converters[(instance.source, instance.target)] = instance

    def get(self, source, target) -> Optional[BaseConverterStrategy]:
        return self._converters.get((AIPlatform.parse(source), AIPlatform.parse(target)))

    def require(self, source, target) -> BaseConverterStrategy:
        converter = self.get(source, target)
        if converter is None or not converter.can_convert():
            raise UnsupportedConversionError(AIPlatform.parse(source).value, AIPlatform.parse(target).value)
        return converter

    def for_target(self, target) -> Optional[BaseConverterStrategy]:
        """Any converter able to deploy the given platform."""
        target = AIPlatform.parse(target)
        for (_, converter_target), converter in self._converters.items():
            if converter_target == target:
                return converter
        return None

    def pairs(self) -> List[Tuple[AIPlatform, AIPlatform]]:
        return list(self._converters.keys())


converter_registry = ConverterRegistry()
