"""Render a coverage result as a markdown table from a Jinja2 template."""

from pathlib import Path

import jinja2

from .coverage import CoverageResult, CoverageStatus
from .shape import Unified

TEMPLATE_DIR = Path(__file__).parent / "templates"

_env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(TEMPLATE_DIR),
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_coverage_table(result: CoverageResult) -> str:
    """One row per declared member and one row per case, with notes.

    Cases flagged by a warning carry the warning's check name in the notes
    column.
    """
    notes: dict[int, list[str]] = {}
    for d in result.warnings:
        if d.case is not None:
            notes.setdefault(d.case, []).append(d.check)

    return _env.get_template("coverage.md.j2").render(
        result=result,
        covered=CoverageStatus.COVERED,
        unified=isinstance(result.shape, Unified),
        notes=notes,
    )
