"""In-memory compiled units for exercising the scanner without a parser."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from resxdupes.analyzers.base import CompiledUnitProvider, TypeDeclaration
from resxdupes.models import DeclaredType, MemberSymbol


def doc(name: str, summary: str) -> str:
    return f'<member name="{name}">\n    <summary>{summary}</summary>\n</member>\n'


def accessor_type(metadata_name: str, strings: Mapping[str, str], *, kind: str = "class") -> DeclaredType:
    """Build a resource accessor symbol with scaffolding plus one property per string."""
    members: List[MemberSymbol] = [
        MemberSymbol("s_resourceManager", "field", True),
        MemberSymbol("ResourceManager", "property", True),
        MemberSymbol("Culture", "property", True),
        MemberSymbol("GetResourceString", "method", True),
    ]
    for key, value in strings.items():
        members.append(MemberSymbol(key, "property", True, doc(f"P:{metadata_name}.{key}", value)))
    return DeclaredType(metadata_name=metadata_name, kind=kind, members=members)


class FakeUnit(CompiledUnitProvider):
    """Compiled unit backed by prebuilt symbols."""

    def __init__(self, name: str, symbols: Iterable[DeclaredType], *, file_path: str = "Strings.cs") -> None:
        self.name = name
        self._symbols: Dict[str, DeclaredType] = {}
        self._declarations: List[TypeDeclaration] = []
        for symbol in symbols:
            self._symbols[symbol.metadata_name] = symbol
            self._declarations.append(TypeDeclaration(symbol.kind, symbol.metadata_name, file_path))

    def iter_type_declarations(self) -> Iterable[TypeDeclaration]:
        return list(self._declarations)

    def get_declared_symbol(self, declaration: TypeDeclaration) -> Optional[DeclaredType]:
        return self._symbols.get(declaration.metadata_name)


__all__ = ["FakeUnit", "accessor_type", "doc"]
