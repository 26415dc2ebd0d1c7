"""Selection of generated resource accessor types."""

from __future__ import annotations

import asyncio
from typing import Iterator, List, Sequence

from .base import CompiledUnitProvider
from ..logging import get_logger
from ..models import DeclaredType

RESOURCE_MANAGER_MEMBER = "ResourceManager"

_SCANNED_KINDS = {"class", "record", "struct"}


def iter_resource_symbols(unit: CompiledUnitProvider) -> Iterator[DeclaredType]:
    """Yield the declared symbol of every class, record or struct exposing `ResourceManager`.

    Partial types are yielded once per declaration, mirroring how the
    compiler resolves each declaration to the same merged symbol.
    """
    logger = get_logger("scanner")
    for declaration in unit.iter_type_declarations():
        if declaration.kind not in _SCANNED_KINDS:
            continue
        symbol = unit.get_declared_symbol(declaration)
        if symbol is None:
            continue
        if RESOURCE_MANAGER_MEMBER in symbol.member_names:
            logger.debug("Resource type %s in %s (%s)", symbol.metadata_name, unit.name, declaration.file_path)
            yield symbol


async def scan_compilations(units: Sequence[CompiledUnitProvider]) -> List[DeclaredType]:
    """Scan every unit concurrently and concatenate the results in unit order."""
    loop = asyncio.get_running_loop()
    results = await asyncio.gather(
        *(loop.run_in_executor(None, lambda unit=unit: list(iter_resource_symbols(unit))) for unit in units)
    )
    return [symbol for symbols in results for symbol in symbols]


__all__ = ["RESOURCE_MANAGER_MEMBER", "iter_resource_symbols", "scan_compilations"]
