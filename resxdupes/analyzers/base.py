"""Base classes for compiled-unit providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from ..models import DeclaredType


@dataclass(frozen=True)
class TypeDeclaration:
    """One syntactic declaration of a type; partial types have several."""

    kind: str
    metadata_name: str
    file_path: str


class CompiledUnitProvider(ABC):
    """Contract for a compiled project that exposes declared types and their documentation."""

    name: str

    @abstractmethod
    def iter_type_declarations(self) -> Iterable[TypeDeclaration]:
        """Yield every type declaration, syntax tree by syntax tree, in document order."""

    @abstractmethod
    def get_declared_symbol(self, declaration: TypeDeclaration) -> Optional[DeclaredType]:
        """Return the merged symbol a declaration contributes to."""
