from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.solution_builder import SolutionBuilder


@pytest.fixture
def solution_builder(tmp_path: Path) -> SolutionBuilder:
    """Provide a reusable solution builder rooted at the pytest tmp_path."""
    return SolutionBuilder(tmp_path)
