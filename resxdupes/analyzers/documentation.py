"""Extraction of resource keys and values from member documentation."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Iterable, Iterator, Optional, Tuple

from ..logging import get_logger
from ..models import DeclaredType, MemberSymbol, ResourceEntry

SCAFFOLDING_MEMBERS = frozenset({"s_resourceManager", "ResourceManager", "Culture", "GetResourceString"})


def is_resource_member(member: MemberSymbol) -> bool:
    """Return True for static members that are not accessor scaffolding."""
    return member.is_static and member.name not in SCAFFOLDING_MEMBERS


def parse_documentation(xml: str) -> Tuple[str, str]:
    """Return `(member name, summary text)` from a member's documentation XML.

    The first `<member>` and the first `<summary>` in document order win.
    Markup nested inside the summary contributes its text only. Missing
    tags or malformed XML give empty strings.
    """
    if not xml or not xml.strip():
        return "", ""
    try:
        root = ET.fromstring(f"<doc>{xml}</doc>")
    except ET.ParseError:
        return "", ""

    member = root.find(".//member")
    name = member.get("name", "") if member is not None else ""
    summary = next(root.iter("summary"), None)
    text = "".join(summary.itertext()) if summary is not None else ""
    # Line breaks and their indentation fold to one space; spacing within a line is kept.
    value = " ".join(line.strip() for line in text.splitlines() if line.strip())
    return name, value


def extract_entry(member: MemberSymbol) -> Optional[ResourceEntry]:
    name, value = parse_documentation(member.documentation_xml)
    if not name.strip() or not value.strip():
        if member.documentation_xml:
            get_logger("extractor").debug("No resource text documented on %s", member.name)
        return None
    return ResourceEntry(qualified_name=name, value=value)


def extract_entries(symbol: DeclaredType) -> Iterator[ResourceEntry]:
    """Yield one entry per documented resource member of an accessor type."""
    for member in symbol.members:
        if not is_resource_member(member):
            continue
        entry = extract_entry(member)
        if entry is not None:
            yield entry


def extract_all(symbols: Iterable[DeclaredType]) -> Iterator[ResourceEntry]:
    for symbol in symbols:
        yield from extract_entries(symbol)


__all__ = [
    "SCAFFOLDING_MEMBERS",
    "extract_all",
    "extract_entries",
    "extract_entry",
    "is_resource_member",
    "parse_documentation",
]
