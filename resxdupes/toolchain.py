"""Discovery of .NET SDK / MSBuild installations."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from .logging import get_logger
from .models import ToolchainInstance

_SDK_LINE = re.compile(r"^\s*(?P<version>\d+\.\d+\.\d+\S*)\s+\[(?P<base>[^\]]+)\]\s*$")

CommandRunner = Callable[[Sequence[str]], str]


class ToolchainNotFoundError(RuntimeError):
    """Raised when no build toolchain installation can be found."""


def _default_runner(args: Sequence[str]) -> str:
    completed = subprocess.run(
        list(args),
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


def find_dotnet(env: Mapping[str, str] | None = None) -> Optional[str]:
    """Return the dotnet host executable, honoring DOTNET_ROOT before PATH."""
    env = os.environ if env is None else env
    dotnet_root = env.get("DOTNET_ROOT")
    if dotnet_root:
        for name in ("dotnet", "dotnet.exe"):
            candidate = Path(dotnet_root) / name
            if candidate.is_file():
                return str(candidate)
    return shutil.which("dotnet", path=env.get("PATH"))


def parse_sdk_listing(output: str) -> List[ToolchainInstance]:
    """Parse `dotnet --list-sdks` output, newest version first."""
    instances: List[ToolchainInstance] = []
    for line in output.splitlines():
        match = _SDK_LINE.match(line)
        if not match:
            continue
        version = match.group("version")
        base = match.group("base").strip()
        instances.append(
            ToolchainInstance(
                name=".NET Core SDK",
                version=version,
                msbuild_path=str(Path(base) / version),
            )
        )
    instances.sort(key=lambda instance: _version_key(instance.version), reverse=True)
    return instances


def _version_key(version: str) -> tuple:
    release, _, prerelease = version.partition("-")
    numbers = tuple(int(part) for part in release.split(".") if part.isdigit())
    # A release sorts above its previews.
    return numbers + ((1,) if not prerelease else (0, prerelease))


def query_instances(
    *,
    env: Mapping[str, str] | None = None,
    runner: CommandRunner | None = None,
) -> List[ToolchainInstance]:
    """Return every toolchain instance visible on this host."""
    env = os.environ if env is None else env
    logger = get_logger("toolchain")
    instances: List[ToolchainInstance] = []

    explicit = env.get("MSBUILD_EXE_PATH")
    if explicit:
        instances.append(
            ToolchainInstance(
                name="MSBUILD_EXE_PATH",
                version="",
                msbuild_path=str(Path(explicit).parent),
            )
        )

    dotnet = find_dotnet(env)
    if dotnet is None:
        logger.debug("dotnet host not found on DOTNET_ROOT or PATH")
        return instances

    run = runner or _default_runner
    try:
        output = run([dotnet, "--list-sdks"])
    except (OSError, subprocess.CalledProcessError) as exc:
        logger.debug("Failed to list SDKs with %s: %s", dotnet, exc)
        return instances

    instances.extend(parse_sdk_listing(output))
    return instances


def locate_toolchain(
    msbuild_path: str | None = None,
    *,
    instances: Iterable[ToolchainInstance] | None = None,
) -> ToolchainInstance:
    """Pick the toolchain used to load projects.

    An explicitly configured path wins. Otherwise the first discovered
    instance is used.
    """
    if msbuild_path:
        return ToolchainInstance(name="configured", version="", msbuild_path=msbuild_path)

    candidates = list(query_instances() if instances is None else instances)
    if not candidates:
        raise ToolchainNotFoundError(
            "No MSBuild instance found. Install the .NET SDK or set toolchain.msbuild_path."
        )
    return candidates[0]


__all__ = [
    "ToolchainNotFoundError",
    "find_dotnet",
    "locate_toolchain",
    "parse_sdk_listing",
    "query_instances",
]
