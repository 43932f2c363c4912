"""Feature mapping: table, transforms, parsers, forward mapper and reverse service."""

from .mapper import FeatureMapper
from .reverse import ReverseMappingService, get_reverse_mapping_service
from .table import get_mappings

__all__ = ["FeatureMapper", "ReverseMappingService", "get_mappings", "get_reverse_mapping_service"]
