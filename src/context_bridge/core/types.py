"""Shared types and data structures for Context Bridge."""

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

# Neutral context documents stay plain JSON-compatible dicts
Context = Dict[str, Any]


class AIPlatform(Enum):
    KIRO = "kiro"
    CLAUDE_CODE = "claude-code"
    CURSOR = "cursor"

    @property
    def data_key(self) -> str:
        """Key used under ide.data for this platform."""
        return self.value.replace("-", "_")

    @property
    def display_name(self) -> str:
        return {"kiro": "Kiro", "claude-code": "Claude Code", "cursor": "Cursor"}[self.value]

    @classmethod
    def parse(cls, value) -> "AIPlatform":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for platform in cls:
            if text in (platform.value, platform.data_key, platform.name.lower()):
                return platform
        raise ValueError(f"Unknown platform: {value}")


class MergeStrategy(Enum):
    REPLACE = "replace"
    MERGE = "merge"
    APPEND = "append"


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


# =============================================================================
# CONFIGURATION RECORDS
# =============================================================================


@dataclass
class SteeringRule:
    name: str
    rules: List[str] = field(default_factory=list)
    priority: int = 50
    description: Optional[str] = None
    content: Optional[str] = None  # raw markdown body, when read from disk
    inclusion: Optional[str] = None  # Kiro frontmatter, e.g. "always"

    def to_dict(self) -> Dict[str, Any]:
        return _compact(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SteeringRule":
        return cls(
            name=str(data.get("name", "")),
            rules=list(data.get("rules") or []),
            priority=data.get("priority", 50),
            description=data.get("description"),
            content=data.get("content"),
            inclusion=data.get("inclusion"),
        )


@dataclass
class HookTrigger:
    type: str = "manual"
    patterns: Optional[List[str]] = None


@dataclass
class HookAction:
    type: str = "command"
    command: str = ""


@dataclass
class Hook:
    name: str
    when: HookTrigger = field(default_factory=HookTrigger)
    then: HookAction = field(default_factory=HookAction)
    enabled: bool = True
    version: str = "1.0.0"
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "enabled": self.enabled,
            "description": self.description,
            "version": self.version,
            "when": _compact(asdict(self.when)),
            "then": asdict(self.then),
        }
        return _compact(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hook":
        when = data.get("when") or {}
        then = data.get("then") or {}
        return cls(
            name=str(data.get("name", "")),
            when=HookTrigger(type=when.get("type", "manual"), patterns=when.get("patterns")),
            then=HookAction(type=then.get("type", "command"), command=then.get("command", "")),
            enabled=bool(data.get("enabled", True)),
            version=str(data.get("version", "1.0.0")),
            description=data.get("description"),
        )


@dataclass
class Spec:
    name: str
    design: Optional[str] = None
    requirements: Optional[str] = None
    tasks: Optional[str] = None
    resources: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Spec":
        return cls(
            name=str(data.get("name", "")),
            design=data.get("design"),
            requirements=data.get("requirements"),
            tasks=data.get("tasks"),
            resources=data.get("resources"),
        )


@dataclass
class McpServer:
    name: str
    version: str = "1.0.0"
    command: Optional[str] = None
    args: Optional[List[str]] = None
    url: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    config: Dict[str, Any] = field(default_factory=dict)
    protocol: Optional[str] = None
    enabled: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return _compact(asdict(self))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "McpServer":
        enabled = data.get("enabled")
        if enabled is None:
            enabled = not data.get("disabled", False)
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version") or "1.0.0"),
            command=data.get("command"),
            args=data.get("args"),
            url=data.get("url"),
            env=data.get("env"),
            config=dict(data.get("config") or {}),
            protocol=data.get("protocol"),
            enabled=bool(enabled),
        )


@dataclass
class TaskTemplate:
    name: str
    tasks: List[Any] = field(default_factory=list)
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact(asdict(self))


# =============================================================================
# FEATURE MAPPING
# =============================================================================


@dataclass(frozen=True)
class FeatureEndpoint:
    platform: AIPlatform
    feature: str
    path: str
    transform: Optional[str] = None  # name in the transform registry


@dataclass(frozen=True)
class FeatureMapping:
    """One field-level correspondence between two platforms."""
    source: FeatureEndpoint
    target: FeatureEndpoint
    bidirectional: bool = False
    priority: Optional[int] = None
    description: str = ""

    def reversed(self, transform: Optional[str]) -> "FeatureMapping":
        """Swap source and target, installing the given reverse transform."""
        return replace(
            self,
            source=replace(self.target, transform=None),
            target=replace(self.source, transform=transform),
            description=f"Reverse of: {self.description}",
        )


@dataclass
class MappingResult:
    mapped_features: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    unmapped_features: List[str] = field(default_factory=list)
    success: bool = False


@dataclass
class ReverseMetadata:
    original_platform: AIPlatform
    target_platform: AIPlatform
    timestamp: str
    reversible: bool = False


@dataclass
class ReverseMappingResult(MappingResult):
    reversed_features: Dict[str, Any] = field(default_factory=dict)
    conflicts: Dict[str, str] = field(default_factory=dict)
    metadata: Optional[ReverseMetadata] = None


@dataclass
class ReverseMappingOptions:
    merge_strategy: MergeStrategy = MergeStrategy.REPLACE
    validate_integrity: bool = False
    custom_transforms: Dict[str, Callable[[Any], Any]] = field(default_factory=dict)
    # Target-side features the reversed values are accumulated onto
    base_features: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DeployOptions:
    """How deploy treats files already present under the target path."""

    overwrite: bool = False
    # Copy an existing file to <name>.bak before overwriting it
    backup: bool = False
    dry_run: bool = False


# =============================================================================
# RESULTS AND REPORTS
# =============================================================================


@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return len(self.errors) == 0


@dataclass
class FeatureApproximation:
    source_feature: str
    target_feature: str
    confidence: str  # "high" | "medium" | "low"
    notes: str = ""


@dataclass
class ConversionResult:
    success: bool = False
    context: Optional[Context] = None
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    unsupported_features: List[str] = field(default_factory=list)
    approximations: List[FeatureApproximation] = field(default_factory=list)


@dataclass
class PartialSupport:
    feature: str
    support_level: Optional[int] = None  # 0-100
    notes: str = ""


@dataclass
class CompatibilityReport:
    compatible: bool = False
    score: int = 0
    supported_features: List[str] = field(default_factory=list)
    unsupported_features: List[str] = field(default_factory=list)
    partial_support: List[PartialSupport] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class FeatureMappingReport:
    direct_mappings: Dict[str, str] = field(default_factory=dict)
    approximations: List[FeatureApproximation] = field(default_factory=list)
    unsupported: List[str] = field(default_factory=list)


@dataclass
class DeployResult:
    success: bool = False
    deployed_files: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    backup_files: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
