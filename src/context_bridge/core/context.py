"""
Helpers for the neutral context document.

A context is a JSON-compatible dict:

    {
        "version": "1.0.0",
        "metadata": {"name", "created_at", "updated_at", "platforms", "conversion"?},
        "personal" | "project" | "prompts" | "tools" | "ide": {
            "category": ..., "spec_version": "1.0.0", "data": {...}
        }
    }

Platform-native config lives under ide.data.<platform data key>.
"""

import copy
from typing import Any, Dict, Optional

from .config import CONTEXT_VERSION, SPEC_VERSION
from .types import AIPlatform, Context, ValidationResult
from context_bridge.utils import utc_timestamp

CATEGORIES = ("personal", "project", "prompts", "tools", "ide")

_KNOWN_DATA_KEYS = {p.data_key for p in AIPlatform}
_KNOWN_PLATFORM_VALUES = {p.value for p in AIPlatform}


def create_context(platform: AIPlatform, name: Optional[str] = None) -> Context:
    now = utc_timestamp()
    return {
        "version": CONTEXT_VERSION,
        "metadata": {
            "name": name or f"{platform.display_name} Context",
            "created_at": now,
            "updated_at": now,
            "platforms": [platform.value],
        },
    }


def set_category(context: Context, category: str, data: Dict[str, Any]) -> Context:
    if category not in CATEGORIES:
        raise ValueError(f"Unknown context category: {category}")
    section = context.setdefault(category, {"category": category, "spec_version": SPEC_VERSION, "data": {}})
    section["data"].update(data)
    return context


def get_category_data(context: Context, category: str) -> Dict[str, Any]:
    section = context.get(category) or {}
    return section.get("data") or {}


def get_platform_config(context: Context, platform: AIPlatform) -> Optional[Dict[str, Any]]:
    """ide.data.<platform>, or None when the context carries no config for it."""
    config = get_category_data(context, "ide").get(platform.data_key)
    return config if config else None


def get_source_platform(context: Context) -> Optional[AIPlatform]:
    """Target of the last conversion, else metadata.platforms[0], else the first ide.data key."""
    metadata = context.get("metadata") or {}
    candidates = [(metadata.get("conversion") or {}).get("target")]
    candidates += (metadata.get("platforms") or [])[:1]
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return AIPlatform.parse(candidate)
        except ValueError:
            continue
    ide_data = get_category_data(context, "ide")
    for platform in AIPlatform:
        if platform.data_key in ide_data:
            return platform
    return None


def has_populated_category(context: Context) -> bool:
    return any(get_category_data(context, c) for c in CATEGORIES)


def validate_context(context: Any) -> ValidationResult:
    """Structural check of a context document; unknown platform keys are warnings."""
    result = ValidationResult()
    if not isinstance(context, dict):
        result.errors.append("Context must be an object")
        return result
    if not context.get("version"):
        result.errors.append("Context is missing 'version'")
    metadata = context.get("metadata")
    if not isinstance(metadata, dict):
        result.errors.append("Context is missing 'metadata'")
        metadata = {}
    if not has_populated_category(context):
        result.errors.append("Context has no populated category")

    for platform in metadata.get("platforms") or []:
        if platform not in _KNOWN_PLATFORM_VALUES:
            result.warnings.append(f"Unknown platform in metadata: {platform}")
    for key in get_category_data(context, "ide"):
        if key not in _KNOWN_DATA_KEYS:
            result.warnings.append(f"Unknown platform config in ide.data: {key}")
    return result


def stamp_conversion(context: Context, source: AIPlatform, target: AIPlatform) -> Context:
    now = utc_timestamp()
    metadata = context.setdefault("metadata", {})
    metadata["conversion"] = {"source": source.value, "target": target.value, "timestamp": now}
    metadata["updated_at"] = now
    platforms = metadata.setdefault("platforms", [])
    if target.value not in platforms:
        platforms.append(target.value)
    return context


def clone_context(context: Context) -> Context:
    return copy.deepcopy(context)
