"""
Structural equality used by the reversibility check.

Lists compare as unordered multisets of JSON-equal elements, dicts by sorted
keys and recursive comparison, strings after collapsing whitespace.
"""

import json
import re
from typing import Any, Callable

Comparator = Callable[[Any, Any], bool]


def _json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, ensure_ascii=False, default=str)


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def compare_features(original: Any, candidate: Any) -> bool:
    if original == candidate:
        return True
    if isinstance(original, list) and isinstance(candidate, list):
        if len(original) != len(candidate):
            return False
        remaining = [_json(item) for item in candidate]
        for item in original:
            encoded = _json(item)
            if encoded not in remaining:
                return False
            remaining.remove(encoded)
        return True
    if isinstance(original, dict) and isinstance(candidate, dict):
        if sorted(original) != sorted(candidate):
            return False
        return all(compare_features(original[k], candidate[k]) for k in original)
    if isinstance(original, str) and isinstance(candidate, str):
        return _collapse(original) == _collapse(candidate)
    return False
