"""Helpers for ordered mappings."""

from typing import List, Mapping, TypeVar

K = TypeVar("K")


def extract_keys(mapping: Mapping[K, object]) -> List[K]:
    """Return the keys of `mapping` in ascending order."""
    return sorted(mapping.keys())
