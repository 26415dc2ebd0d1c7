"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from resxdupes import cli
from resxdupes.cli import _build_parser


def test_cli_requires_solution_argument() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args([])


def test_cli_accepts_solution_and_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["App.sln", "--verbose", "--msbuild-path", "/sdk", "--config", "conf.yml"])
    assert args.solution == "App.sln"
    assert args.verbose is True
    assert args.msbuild_path == "/sdk"
    assert args.config == Path("conf.yml")


def test_cli_exits_non_zero_when_solution_missing(tmp_path: Path, capsys) -> None:
    missing = tmp_path / "Missing.sln"

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(missing), "--msbuild-path", "/sdk"])

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Using MSBuild at '/sdk' to load projects." in captured.out
    assert "Solution file not found" in captured.err


def test_cli_exits_non_zero_without_toolchain(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setattr("resxdupes.toolchain.query_instances", lambda: [])

    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "App.sln")])

    assert excinfo.value.code == 1
    assert "No MSBuild instance found" in capsys.readouterr().err
