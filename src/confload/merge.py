"""
Deterministic deep merge of configuration mappings.

Merge policy:
- mapping + mapping: merged recursively, key by key
- list: replaced wholesale by the override
- scalar: replaced by the override
- anything else with mismatched types: `MergeConflictError`

`None` on either side never conflicts, so a key can be cleared or filled in.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

from confload.errors import InvalidConfigError, MergeConflictError


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new mapping with `override` merged over `base`. Inputs are not mutated."""
    result: dict[str, Any] = deepcopy(dict(base))
    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
            continue
        if isinstance(override_value, list) or base_value is None or override_value is None:
            result[key] = deepcopy(override_value)
            continue
        if type(base_value) is not type(override_value) and not _both_numbers(
            base_value, override_value
        ):
            raise MergeConflictError(
                f"Type conflict for key '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )
        result[key] = deepcopy(override_value)
    return result


def _both_numbers(a: Any, b: Any) -> bool:
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (a, b))


def merge_results(result: Any) -> dict[str, Any]:
    """
    Flatten the value returned by an import (`None`, one mapping, or a list of
    them in load order) into a single mapping.
    """
    if result is None:
        return {}
    if isinstance(result, Mapping):
        return dict(result)
    if isinstance(result, list):
        merged: dict[str, Any] = {}
        for item in result:
            merged = deep_merge(merged, merge_results(item))
        return merged
    raise InvalidConfigError(f"Expected a mapping of settings, got {type(result).__name__}")
