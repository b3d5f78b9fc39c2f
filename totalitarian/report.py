from __future__ import annotations

from typing import Any

from .coverage import CoverageResult, CoverageStatus, Severity
from .shape import ResultShape, Unified


def _shape_str(shape: ResultShape | None) -> str:
    if shape is None:
        return "none (no cases)"
    if isinstance(shape, Unified):
        return f"unified '{shape.type}'"
    return f"wrapped over '{shape.declared}'"


def format_report(result: CoverageResult) -> str:
    """Human-readable report for terminal output."""
    lines = []
    lines.append(f"{result.declared}: {len(result.clauses)} cases")

    if result.is_complete:
        lines.append("  ✓ Complete (0 uncovered members)")
    else:
        lines.append(f"  × Incomplete ({len(result.uncovered)} uncovered members)")

    for mc in result.coverage:
        if mc.status == CoverageStatus.COVERED:
            lines.append(f"    - {mc.member}: cases {', '.join(str(i) for i in mc.cases)}")
        else:
            lines.append(f"    - {mc.member}: UNCOVERED")

    if result.warnings:
        n = len(result.warnings)
        lines.append(f"  ⚠ {n} warning{'s' if n > 1 else ''}")
        for diag in result.diagnostics:
            if diag.severity == Severity.WARNING:
                lines.append(f"    - [{diag.check}] {diag.message}")

    lines.append(f"  Result: {_shape_str(result.shape)}")

    return "\n".join(lines)


def report_json(result: CoverageResult) -> dict[str, Any]:
    """Machine-readable report for tooling."""
    return {
        "declared": str(result.declared),
        "complete": result.is_complete,
        "cases": [
            {"name": c.name, "accepts": str(c.accepts), "returns": str(c.returns)}
            for c in result.clauses
        ],
        "coverage": [
            {
                "member": str(mc.member),
                "status": mc.status.value,
                "cases": list(mc.cases),
            }
            for mc in result.coverage
        ],
        "result": _shape_str(result.shape),
        "diagnostics": [
            {
                "check": d.check,
                "severity": d.severity.value,
                "case": d.case,
                "message": d.message,
            }
            for d in result.diagnostics
        ],
    }
