"""Console rendering of duplicate groups."""

from __future__ import annotations

from typing import Sequence

from jinja2 import Environment, PackageLoader

from .models import DuplicateGroup

_TEMPLATE_NAME = "duplicates.txt.j2"

_environment = Environment(
    loader=PackageLoader("resxdupes", "templates"),
    autoescape=False,
    keep_trailing_newline=True,
)


def render_report(groups: Sequence[DuplicateGroup]) -> str:
    """Render one block per group; empty when there are no duplicates."""
    if not groups:
        return ""
    template = _environment.get_template(_TEMPLATE_NAME)
    return template.render(groups=groups)


__all__ = ["render_report"]
