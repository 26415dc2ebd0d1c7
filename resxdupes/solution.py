"""Solution and project loading."""

from __future__ import annotations

import asyncio
import re
import xml.etree.ElementTree as ET
from pathlib import Path, PureWindowsPath
from typing import Dict, List, Optional, Sequence

from .analyzers.tree_sitter import CSharpCompilation
from .logging import get_logger
from .models import Project, Solution
from .sources import collect_sources

_SLN_PROJECT = re.compile(
    r'^Project\("(?P<type>\{[^}]+\})"\)\s*=\s*"(?P<name>[^"]*)"\s*,\s*"(?P<path>[^"]*)"\s*,\s*"(?P<guid>\{[^}]+\})"',
    re.MULTILINE,
)

_PROJECT_SUFFIX = ".csproj"

_SOLUTION_SUFFIXES = {".sln", ".slnx"}


class SolutionLoadError(RuntimeError):
    """Raised when a solution cannot be opened."""


def _normalise_relative(raw: str) -> Path:
    return Path(*PureWindowsPath(raw.strip()).parts)


def parse_sln(text: str) -> List[tuple[str, Path]]:
    """Return `(name, relative path)` for each project entry of a `.sln` file."""
    return [(match.group("name"), _normalise_relative(match.group("path"))) for match in _SLN_PROJECT.finditer(text)]


def parse_slnx(text: str | bytes) -> List[tuple[str, Path]]:
    """Return `(name, relative path)` for each `<Project Path=...>` of a `.slnx` file."""
    root = ET.fromstring(text)
    entries: List[tuple[str, Path]] = []
    for element in root.iter("Project"):
        raw = element.get("Path")
        if not raw:
            continue
        relative = _normalise_relative(raw)
        entries.append((relative.stem, relative))
    return entries


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def read_project(path: Path, name: str | None = None) -> List[Project]:
    """Evaluate the parts of a `.csproj` that shape its compilations.

    Multi-targeted projects expand into one project per target framework.
    """
    root = ET.fromstring(path.read_bytes())

    properties: Dict[str, str] = {}
    compile_include: List[str] = []
    compile_remove: List[str] = []
    for element in root.iter():
        tag = _local_name(element.tag)
        if tag == "Compile":
            if element.get("Include"):
                compile_include.append(element.get("Include", ""))
            if element.get("Remove"):
                compile_remove.append(element.get("Remove", ""))
            continue
        if tag == "PropertyGroup":
            for prop in element:
                prop_name = _local_name(prop.tag)
                # First definition wins; conditions are not evaluated.
                if prop.text and prop_name not in properties:
                    properties[prop_name] = prop.text.strip()

    sdk_style = bool(root.get("Sdk")) or any(_local_name(el.tag) == "Sdk" for el in root)
    default_items = sdk_style and properties.get("EnableDefaultCompileItems", "true").lower() != "false"

    project_name = name or path.stem
    frameworks = [
        framework.strip()
        for framework in properties.get("TargetFrameworks", "").split(";")
        if framework.strip()
    ]
    if not frameworks:
        single = properties.get("TargetFramework") or properties.get("TargetFrameworkVersion")
        frameworks = [single] if single else [None]  # type: ignore[list-item]

    projects: List[Project] = []
    for framework in frameworks:
        display = f"{project_name}({framework})" if len(frameworks) > 1 else project_name
        projects.append(
            Project(
                name=display,
                path=path,
                target_framework=framework,
                compile_include=list(compile_include),
                compile_remove=list(compile_remove),
                default_items=default_items,
            )
        )
    return projects


def open_solution(path: Path) -> Solution:
    """Parse a solution descriptor and the projects it lists."""
    logger = get_logger("solution")
    solution_path = path.expanduser().resolve()
    if not solution_path.is_file():
        raise SolutionLoadError(f"Solution file not found: {path}")
    suffix = solution_path.suffix.lower()
    if suffix not in _SOLUTION_SUFFIXES:
        raise SolutionLoadError(f"Unsupported solution file '{path}'; expected .sln or .slnx")

    try:
        if suffix == ".slnx":
            entries = parse_slnx(solution_path.read_bytes())
        else:
            entries = parse_sln(solution_path.read_text(encoding="utf-8-sig"))
    except (OSError, UnicodeDecodeError, ET.ParseError) as exc:
        raise SolutionLoadError(f"Failed to read solution '{path}': {exc}") from exc

    solution = Solution(path=solution_path)
    for name, relative in entries:
        project_path = solution_path.parent / relative
        if project_path.suffix.lower() != _PROJECT_SUFFIX:
            logger.debug("Skipping solution entry '%s' (%s)", name, relative)
            continue
        if not project_path.is_file():
            logger.warning("Project file '%s' listed in the solution does not exist", project_path)
            continue
        try:
            solution.projects.extend(read_project(project_path, name))
        except (OSError, UnicodeDecodeError, ET.ParseError) as exc:
            # The project stays in the solution; it just has no compilation.
            logger.warning("Failed to evaluate project '%s': %s", project_path, exc)
            solution.projects.append(Project(name=name, path=project_path, load_error=str(exc)))
    return solution


async def load_solution(path: Path) -> Solution:
    """Open a solution without blocking the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, open_solution, path)


def build_compilation(project: Project, exclude_paths: Sequence[str] = ()) -> Optional[CSharpCompilation]:
    """Parse a project's sources, or return None when the project is unusable."""
    if project.load_error is not None:
        return None
    compilation = CSharpCompilation.from_sources(project.name, collect_sources(project, exclude_paths))
    get_logger("solution").debug("Compiled %s from %d syntax trees", project.name, len(compilation.syntax_trees))
    return compilation


async def get_compilations(
    solution: Solution, exclude_paths: Sequence[str] = ()
) -> List[Optional[CSharpCompilation]]:
    """Build every project's compilation concurrently, preserving project order."""
    loop = asyncio.get_running_loop()
    tasks = [
        loop.run_in_executor(None, build_compilation, project, tuple(exclude_paths))
        for project in solution.projects
    ]
    return list(await asyncio.gather(*tasks))


__all__ = [
    "SolutionLoadError",
    "build_compilation",
    "get_compilations",
    "load_solution",
    "open_solution",
    "parse_sln",
    "parse_slnx",
    "read_project",
]
