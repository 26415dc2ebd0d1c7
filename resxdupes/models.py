"""Core data models shared across resxdupes components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set, Tuple


@dataclass
class MemberSymbol:
    """A member declared directly inside a type."""

    name: str
    kind: str
    is_static: bool
    documentation_xml: str = ""


@dataclass
class DeclaredType:
    """Semantic view of a type, merged across its partial declarations."""

    metadata_name: str
    kind: str
    members: List[MemberSymbol] = field(default_factory=list)

    @property
    def member_names(self) -> Set[str]:
        return {member.name for member in self.members}


@dataclass(frozen=True)
class ResourceEntry:
    """A resource key and the human-readable text documented on it."""

    qualified_name: str
    value: str


@dataclass(frozen=True)
class DuplicateGroup:
    """Resource keys that share one value."""

    value: str
    names: Tuple[str, ...]


@dataclass(frozen=True)
class ToolchainInstance:
    """A build toolchain installation discovered on the host."""

    name: str
    version: str
    msbuild_path: str


@dataclass
class Project:
    """A C# project, one per target framework for multi-targeted builds."""

    name: str
    path: Path
    target_framework: Optional[str] = None
    compile_include: List[str] = field(default_factory=list)
    compile_remove: List[str] = field(default_factory=list)
    default_items: bool = True
    load_error: Optional[str] = None

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass
class Solution:
    """Projects grouped by a solution descriptor."""

    path: Path
    projects: List[Project] = field(default_factory=list)
