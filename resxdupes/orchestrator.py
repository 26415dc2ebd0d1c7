"""Pipeline orchestration for a duplicate-resource scan."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .analyzers import extract_all, scan_compilations
from .config import ResxDupesConfig, load_config
from .dedupe import build_resource_table, find_duplicates
from .logging import get_logger
from .models import DuplicateGroup, ToolchainInstance
from .report import render_report
from .solution import get_compilations, load_solution
from .toolchain import locate_toolchain

Writer = Callable[[str], None]


@dataclass
class ScanOutcome:
    """Result of a scan; `compiled` is False when compilations were unavailable."""

    compiled: bool
    table: dict[str, str] = field(default_factory=dict)
    duplicates: List[DuplicateGroup] = field(default_factory=list)


class Orchestrator:
    """Coordinates loading, scanning, extraction and deduplication."""

    def __init__(
        self,
        *,
        writer: Writer | None = None,
        toolchain_instances: Optional[Iterable[ToolchainInstance]] = None,
    ) -> None:
        self._write = writer or print
        self._toolchain_instances = list(toolchain_instances) if toolchain_instances is not None else None
        self.logger = get_logger("orchestrator")

    async def run(
        self,
        solution_path: str | Path,
        *,
        config: ResxDupesConfig | None = None,
        msbuild_path: str | None = None,
    ) -> ScanOutcome:
        """Load the solution, scan every compilation and report duplicate values."""
        solution_path = Path(solution_path)
        if config is None:
            config = load_config(solution_path)

        instance = locate_toolchain(
            msbuild_path or config.toolchain.msbuild_path,
            instances=self._toolchain_instances,
        )
        self._write(f"Using MSBuild at '{instance.msbuild_path}' to load projects.")

        self._write(f"Loading solution '{solution_path}'")
        solution = await load_solution(solution_path)
        self._write(f"Finished loading solution '{solution_path}'")
        self.logger.debug("Solution lists %d project builds", len(solution.projects))

        compilations = await get_compilations(solution, config.exclude_paths)
        if not compilations or any(compilation is None for compilation in compilations):
            self._write("Unable to get compilations")
            return ScanOutcome(compiled=False)

        symbols = await scan_compilations([c for c in compilations if c is not None])
        self.logger.debug("Found %d resource accessor declarations", len(symbols))

        table = build_resource_table(extract_all(symbols))
        duplicates = find_duplicates(table)
        self.logger.debug("%d resource strings, %d duplicated values", len(table), len(duplicates))

        report = render_report(duplicates)
        if report:
            self._write(report.rstrip("\n"))
        return ScanOutcome(compiled=True, table=table, duplicates=duplicates)


__all__ = ["Orchestrator", "ScanOutcome"]
