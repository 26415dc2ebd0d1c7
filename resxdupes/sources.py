"""C# source collection for a loaded project."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .models import Project

_EXCLUDED_DIRS = {
    "bin",
    "obj",
    ".git",
    ".vs",
    ".idea",
    "node_modules",
}

_SOURCE_SUFFIX = ".cs"


def _glob_variants(pattern: str) -> List[str]:
    """Expand `**/` (zero or more directories) and `dir/**` (the directory itself)."""
    variants = [pattern]
    while pattern.startswith("**/"):
        pattern = pattern[3:]
        variants.append(pattern)
    for variant in list(variants):
        if variant.endswith("/**") and len(variant) > 3:
            variants.append(variant[:-3])
    return variants


@dataclass
class IgnoreRule:
    """Represents a gitignore-style exclusion from .resxdupes.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            for pattern in _glob_variants(self.pattern):
                if fnmatchcase(target, pattern):
                    return True
                if self.directory_only and target.startswith(f"{pattern}/"):
                    return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip().replace("\\", "/")
    if not pattern:
        return None

    if pattern.startswith("!"):
        negate = not negate
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    has_slash = "/" in pattern
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash=has_slash,
    )


def build_ignore_rules(patterns: Sequence[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for pattern in patterns:
        rule = build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_sources(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        # os.walk honours in-place pruning; sorting keeps file order stable across runs.
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name.lower() not in _EXCLUDED_DIRS
            and not name.startswith(".")
            and not _should_ignore(f"{rel_dir}/{name}" if rel_dir else name, True, rules)
        )

        for filename in sorted(filenames):
            if not filename.lower().endswith(_SOURCE_SUFFIX):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


def _msbuild_pattern(pattern: str) -> str:
    return pattern.strip().replace("\\", "/")


def _matches_msbuild_glob(rel_path: str, pattern: str) -> bool:
    return any(fnmatchcase(rel_path, variant) for variant in _glob_variants(pattern))


def _expand_include(root: Path, pattern: str) -> List[Path]:
    if not any(ch in pattern for ch in "*?["):
        candidate = (root / pattern).resolve()
        return [candidate] if candidate.is_file() else []
    return sorted(path for path in root.glob(pattern) if path.is_file())


def collect_sources(project: Project, exclude_paths: Sequence[str] = ()) -> List[Path]:
    """Return the C# files that make up a project's compilation, in a stable order."""
    root = project.directory
    rules = build_ignore_rules(exclude_paths)

    sources: List[Path] = []
    seen: set[Path] = set()

    def _add(path: Path) -> None:
        resolved = path.resolve()
        if resolved in seen:
            return
        seen.add(resolved)
        sources.append(resolved)

    if project.default_items:
        for path in _iter_sources(root, rules):
            _add(path)

    for raw in project.compile_include:
        for pattern in raw.split(";"):
            pattern = _msbuild_pattern(pattern)
            if not pattern:
                continue
            for path in _expand_include(root, pattern):
                if path.suffix.lower() == _SOURCE_SUFFIX:
                    _add(path)

    removes = [
        _msbuild_pattern(pattern)
        for raw in project.compile_remove
        for pattern in raw.split(";")
        if pattern.strip()
    ]
    if not removes:
        return sources

    kept: List[Path] = []
    for path in sources:
        try:
            rel_path = path.relative_to(root.resolve()).as_posix()
        except ValueError:
            rel_path = path.as_posix()
        if any(_matches_msbuild_glob(rel_path, pattern) for pattern in removes):
            continue
        kept.append(path)
    return kept


__all__ = ["IgnoreRule", "build_ignore_rule", "build_ignore_rules", "collect_sources"]
