"""Compiled-unit providers, the resource type scanner and the documentation extractor."""

from __future__ import annotations

from .base import CompiledUnitProvider, TypeDeclaration
from .documentation import SCAFFOLDING_MEMBERS, extract_all, extract_entries, parse_documentation
from .symbols import RESOURCE_MANAGER_MEMBER, iter_resource_symbols, scan_compilations

__all__ = [
    "CompiledUnitProvider",
    "RESOURCE_MANAGER_MEMBER",
    "SCAFFOLDING_MEMBERS",
    "TypeDeclaration",
    "extract_all",
    "extract_entries",
    "iter_resource_symbols",
    "parse_documentation",
    "scan_compilations",
]
