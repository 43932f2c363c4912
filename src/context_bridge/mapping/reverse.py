"""
Reverse mapping service.

Derives reverse mappings from the bidirectional forward mappings, runs them
with merge policies and integrity checks, then estimates reversibility by
pushing the result back through the forward mapper and diffing the
critical features. The reversibility flag is advisory, not a proof.
"""

import copy
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from context_bridge.core.types import (
    AIPlatform,
    FeatureMapping,
    MergeStrategy,
    ReverseMappingOptions,
    ReverseMappingResult,
    ReverseMetadata,
)
from context_bridge.utils import utc_timestamp
from .equality import Comparator, compare_features
from .mapper import FeatureMapper, extract_feature_value

KIRO = AIPlatform.KIRO
CLAUDE = AIPlatform.CLAUDE_CODE
CURSOR = AIPlatform.CURSOR

# (restored feature, mapped feature) -> transform that undoes the forward mapping
REVERSE_TRANSFORMS = {
    ("specs", "instructions"): "claude_instructions_to_kiro_specs",
    ("steering", "custom_instructions"): "claude_custom_instructions_to_kiro_steering",
    ("hooks", "commands"): "claude_commands_to_kiro_hooks",
    ("steering", "rules"): "cursor_rules_to_kiro_steering",
    ("mcp_servers", "mcp_servers"): "identity",
}

CRITICAL_FEATURES = {
    KIRO: ("specs", "steering"),
    CLAUDE: ("instructions",),
    CURSOR: ("rules",),
}


def cache_key(source: AIPlatform, target: AIPlatform) -> str:
    return f"{source.value}-to-{target.value}"


def _reverse_transform_for(mapping: FeatureMapping) -> Optional[str]:
    key = (mapping.source.feature, mapping.target.feature)
    if key in REVERSE_TRANSFORMS:
        return REVERSE_TRANSFORMS[key]
    if mapping.target.transform:
        return "swap_key_case"
    return None


# =============================================================================
# MERGE POLICIES
# =============================================================================


def merge_values(existing: Any, new: Any, strategy: MergeStrategy) -> Any:
    if strategy == MergeStrategy.MERGE:
        if isinstance(existing, list) and isinstance(new, list):
            return existing + new
        if isinstance(existing, dict) and isinstance(new, dict):
            return {**existing, **new}
        return new
    if strategy == MergeStrategy.APPEND:
        if isinstance(existing, list):
            return existing + (new if isinstance(new, list) else [new])
        if isinstance(existing, str) and isinstance(new, str):
            return f"{existing}\n\n{new}"
        return [existing, new]
    return new


# =============================================================================
# INTEGRITY CHECKS
# =============================================================================


def _all_records(value: Any, check: Callable[[Dict[str, Any]], bool]) -> bool:
    return isinstance(value, list) and all(isinstance(item, dict) and check(item) for item in value)


def _kiro_specs_valid(value: Any) -> bool:
    return _all_records(
        value, lambda s: bool(s.get("name")) and any(k in s for k in ("design", "requirements", "tasks"))
    )


def _kiro_steering_valid(value: Any) -> bool:
    return _all_records(value, lambda r: bool(r.get("name")) and bool(r.get("content")))


def _kiro_hooks_valid(value: Any) -> bool:
    return _all_records(
        value, lambda h: bool(h.get("name")) and bool(h.get("command") or (h.get("then") or {}).get("command"))
    )


INTEGRITY_VALIDATORS: Dict[AIPlatform, Dict[str, Callable[[Any], bool]]] = {
    KIRO: {
        "specs": _kiro_specs_valid,
        "steering": _kiro_steering_valid,
        "hooks": _kiro_hooks_valid,
    },
    CLAUDE: {
        "instructions": lambda v: isinstance(v, str) and re.search(r"^#\s", v, re.MULTILINE) is not None,
        "custom_instructions": lambda v: isinstance(v, str),
        "commands": lambda v: isinstance(v, dict) and isinstance(v.get("commands"), list),
    },
    CURSOR: {
        "rules": lambda v: isinstance(v, str) and bool(v.strip()),
    },
}


# =============================================================================
# SERVICE
# =============================================================================


class ReverseMappingService:
    def __init__(
        self,
        mapper: FeatureMapper = None,
        comparator: Comparator = None,
        platforms: Iterable[AIPlatform] = None,
    ):
        self.mapper = mapper or FeatureMapper()
        self.comparator = comparator or compare_features
        self.platforms = list(platforms or AIPlatform)
        self._cache: Dict[str, List[FeatureMapping]] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Build the reverse mapping cache from every ordered platform pair."""
        cache: Dict[str, List[FeatureMapping]] = {}
        for source in self.platforms:
            for target in self.platforms:
                if source == target:
                    continue
                reverse = [
                    m.reversed(_reverse_transform_for(m))
                    for m in self.mapper.get_mappings(source, target)
                    if m.bidirectional
                ]
                if reverse:
                    cache[cache_key(target, source)] = reverse
        self._cache = cache
        self._initialized = True

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def clear_cache(self) -> None:
        self._cache = {}
        self._initialized = False
        self.initialize()

    def get_reverse_mappings(self, source: AIPlatform, target: AIPlatform) -> List[FeatureMapping]:
        self._ensure_initialized()
        return list(self._cache.get(cache_key(source, target), []))

    def get_available_reverse_mappings(self) -> Dict[str, int]:
        self._ensure_initialized()
        return {key: len(mappings) for key, mappings in self._cache.items()}

    def is_reversible(self, source_feature: str, target_feature: str) -> bool:
        """True when source_feature -> target_feature has a derived reverse mapping."""
        self._ensure_initialized()
        for mappings in self._cache.values():
            for m in mappings:
                if m.source.feature == target_feature and m.target.feature == source_feature:
                    return True
        return False

    def resolve_mappings(self, source: AIPlatform, target: AIPlatform) -> List[FeatureMapping]:
        """
        Reverse mappings for the pair when any exist, topped up with forward
        mappings for target features they do not cover; else forward mappings.
        """
        reverse = self.get_reverse_mappings(source, target)
        forward = self.mapper.get_mappings(source, target)
        if not reverse:
            return forward
        covered = {m.target.feature for m in reverse}
        return reverse + [m for m in forward if m.target.feature not in covered]

    def validate_feature_integrity(self, feature: str, value: Any, platform: AIPlatform) -> bool:
        validator = INTEGRITY_VALIDATORS.get(platform, {}).get(feature)
        if validator is None:
            return True
        return validator(value)

    def reverse_map(
        self,
        data: Dict[str, Any],
        source: AIPlatform,
        target: AIPlatform,
        options: ReverseMappingOptions = None,
    ) -> ReverseMappingResult:
        options = options or ReverseMappingOptions()
        base = self.mapper.map_features(data, source, target, self.resolve_mappings(source, target))

        result = ReverseMappingResult(
            mapped_features=base.mapped_features,
            warnings=list(base.warnings),
            unmapped_features=list(base.unmapped_features),
            success=base.success,
            metadata=ReverseMetadata(
                original_platform=source,
                target_platform=target,
                timestamp=utc_timestamp(),
            ),
        )

        reversed_features = copy.deepcopy(options.base_features)
        for feature, value in base.mapped_features.items():
            try:
                custom = options.custom_transforms.get(feature)
                if custom is not None:
                    value = custom(value)
                if feature in reversed_features:
                    value = merge_values(reversed_features[feature], value, options.merge_strategy)
                reversed_features[feature] = value
            except Exception as e:  # custom transforms are caller code
                result.conflicts[feature] = str(e)

        if options.validate_integrity:
            for feature, value in reversed_features.items():
                if not self.validate_feature_integrity(feature, value, target):
                    result.conflicts[feature] = "Failed integrity validation"

        result.reversed_features = reversed_features
        result.metadata.reversible = self.check_reversibility(data, reversed_features, source, target)
        return result

    def check_reversibility(
        self,
        original: Dict[str, Any],
        reversed_features: Dict[str, Any],
        source: AIPlatform,
        target: AIPlatform,
    ) -> bool:
        try:
            round_trip = self.mapper.map_features(
                reversed_features, target, source, self.resolve_mappings(target, source)
            )
            for feature in CRITICAL_FEATURES.get(source, ()):
                before = extract_feature_value(original, feature)
                after = round_trip.mapped_features.get(feature)
                if not self.comparator(before, after):
                    return False
            return True
        except Exception:
            return False


_default_service: Optional[ReverseMappingService] = None


def get_reverse_mapping_service() -> ReverseMappingService:
    """Process-wide service, initialized on first use."""
    global _default_service
    if _default_service is None:
        _default_service = ReverseMappingService()
        _default_service.initialize()
    return _default_service
