"""Forward feature mapper: applies the mapping table to a feature dict."""

from typing import Any, Callable, Dict, List, Optional

from context_bridge.core.types import AIPlatform, FeatureMapping, MappingResult
from .table import get_mappings
from .transforms import TransformRegistry, transform_registry

DEFAULT_PRIORITY = 999


def extract_feature_value(data: Dict[str, Any], feature: str) -> Any:
    """Read a dotted key ("a.b.c"); None when any segment is missing."""
    value: Any = data
    for part in feature.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
        if value is None:
            return None
    return value


def _priority(mapping: FeatureMapping) -> int:
    return mapping.priority if mapping.priority is not None else DEFAULT_PRIORITY


class FeatureMapper:
    def __init__(
        self,
        transforms: TransformRegistry = None,
        mapping_lookup: Callable[[AIPlatform, AIPlatform], List[FeatureMapping]] = get_mappings,
    ):
        self.transforms = transforms or transform_registry
        self.mapping_lookup = mapping_lookup

    def get_mappings(self, source: AIPlatform, target: AIPlatform) -> List[FeatureMapping]:
        return self.mapping_lookup(source, target)

    def map_features(
        self,
        data: Dict[str, Any],
        source: AIPlatform,
        target: AIPlatform,
        mappings: Optional[List[FeatureMapping]] = None,
    ) -> MappingResult:
        """
        Apply every mapping for source -> target to data.

        A failing transform costs only its own feature: the error lands in
        warnings and the remaining mappings still run.
        """
        result = MappingResult()
        if mappings is None:
            mappings = self.get_mappings(source, target)

        for mapping in sorted(mappings, key=_priority):
            feature = mapping.source.feature
            value = extract_feature_value(data, feature)
            if value is None:
                result.unmapped_features.append(feature)
                continue
            try:
                if mapping.target.transform:
                    value = self.transforms.resolve(mapping.target.transform)(value)
            except Exception as e:  # transforms are arbitrary callables
                result.warnings.append(f"Failed to map {feature}: {e}")
                continue
            if value is not None:
                result.mapped_features[mapping.target.feature] = value

        result.success = len(result.mapped_features) > 0
        return result
