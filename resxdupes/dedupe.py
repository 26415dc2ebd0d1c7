"""Grouping of resource entries that share a value."""

from __future__ import annotations

from typing import Dict, Iterable, List

from .models import DuplicateGroup, ResourceEntry


def build_resource_table(entries: Iterable[ResourceEntry]) -> Dict[str, str]:
    """Map each qualified name to its value, keeping the first occurrence.

    Multi-targeted projects compile the same accessor once per target
    framework, so repeated names are expected and later ones are dropped.
    """
    table: Dict[str, str] = {}
    for entry in entries:
        if not entry.qualified_name.strip() or not entry.value.strip():
            continue
        table.setdefault(entry.qualified_name, entry.value)
    return table


def find_duplicates(table: Dict[str, str]) -> List[DuplicateGroup]:
    """Return values shared by more than one name, in first-seen order."""
    by_value: Dict[str, List[str]] = {}
    for name, value in table.items():
        by_value.setdefault(value, []).append(name)
    return [
        DuplicateGroup(value=value, names=tuple(names))
        for value, names in by_value.items()
        if len(names) > 1
    ]


__all__ = ["build_resource_table", "find_duplicates"]
