"""Dictionary merge helpers.

"""

from __future__ import annotations

from typing import Any, Dict


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge.

    Args:
        base (Dict[str, Any]): Mapping providing the default values.
        override (Dict[str, Any]): Mapping whose values win on conflicts.

    Returns:
        Dict[str, Any]: A new mapping; nested dictionaries are merged recursively
        and every other value from ``override`` replaces the one in ``base``.

    Examples:
        >>> from cpas.utils.merge import deep_merge
        >>> deep_merge({"dispatch": {"max_workers": 5}}, {"dispatch": {"fetch_timeout": 2}})
        {'dispatch': {'max_workers': 5, 'fetch_timeout': 2}}

    """
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
