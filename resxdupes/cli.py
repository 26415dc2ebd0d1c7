"""CLI entrypoint for resxdupes."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .solution import SolutionLoadError
from .toolchain import ToolchainNotFoundError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resxdupes",
        description="Report resx resource strings that share a value across resource files.",
    )
    parser.add_argument(
        "solution",
        help="Path to the .sln or .slnx file to scan.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .resxdupes.yml file (defaults to the one next to the solution).",
    )
    parser.add_argument(
        "--msbuild-path",
        default=None,
        help="Use this MSBuild/SDK directory instead of the first one discovered.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for resxdupes."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    solution_path = Path(args.solution)
    try:
        config = load_config(args.config if args.config is not None else solution_path)
        asyncio.run(
            Orchestrator().run(solution_path, config=config, msbuild_path=args.msbuild_path)
        )
    except (ConfigError, ToolchainNotFoundError, SolutionLoadError) as exc:
        parser.exit(1, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
