"""Coverage proofs for a set of cases against a declared disjunction.

A set of cases covers a declared type when every member of the declared type
is a subtype of at least one case's accepted type. The proof uses descriptor
relationships only; no case is ever executed.

Alongside the proof, the check reports cases that can never be selected and
result shapes widened by such cases. Those are warnings; only an uncovered
member is an error.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .cases import WhenClause
from .descriptors import ClassType, GenericType, TypeDescriptor, descriptor_of, union_of
from .errors import IncompleteCoverage
from .shape import ResultShape, Unified, Wrapped, result_shape

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    case: int | None  # index into the cases, when the finding is about one case
    message: str


class CoverageStatus(Enum):
    COVERED = "covered"
    UNCOVERED = "uncovered"


@dataclass(frozen=True)
class MemberCoverage:
    """Which cases accept one member of the declared type."""

    member: ClassType | GenericType
    cases: tuple[int, ...]
    status: CoverageStatus


@dataclass(frozen=True)
class CoverageResult:
    declared: TypeDescriptor
    clauses: tuple[WhenClause[Any, Any], ...]
    coverage: tuple[MemberCoverage, ...]
    diagnostics: tuple[Diagnostic, ...]
    shape: ResultShape | None  # None when there are no cases at all

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def uncovered(self) -> tuple[ClassType | GenericType, ...]:
        return tuple(mc.member for mc in self.coverage if mc.status == CoverageStatus.UNCOVERED)

    @property
    def unreachable(self) -> tuple[int, ...]:
        return tuple(
            d.case for d in self.diagnostics
            if d.check in ("case_reachable", "case_relevant") and d.case is not None
        )

    @property
    def is_complete(self) -> bool:
        return len(self.errors) == 0


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _overlaps(a: TypeDescriptor, b: TypeDescriptor) -> bool:
    return any(
        x.is_subtype_of(y) or y.is_subtype_of(x)
        for x in a.members
        for y in b.members
    )


def _member_coverage(
    declared: TypeDescriptor, clauses: Sequence[WhenClause[Any, Any]]
) -> tuple[MemberCoverage, ...]:
    result = []
    for member in declared.members:
        accepting = tuple(i for i, c in enumerate(clauses) if c.handles(member))
        status = CoverageStatus.COVERED if accepting else CoverageStatus.UNCOVERED
        result.append(MemberCoverage(member, accepting, status))
    return tuple(result)


def check_coverage(declared: Any, clauses: Sequence[WhenClause[Any, Any]]) -> CoverageResult:
    """Check ``clauses`` against ``declared`` and report every finding."""
    declared_d = descriptor_of(declared)
    clauses = tuple(clauses)
    diagnostics: list[Diagnostic] = []

    coverage = _member_coverage(declared_d, clauses)
    for mc in coverage:
        if mc.status == CoverageStatus.UNCOVERED:
            diagnostics.append(
                Diagnostic(
                    "member_covered",
                    Severity.ERROR,
                    None,
                    f"No case accepts declared member '{mc.member}'",
                )
            )
        else:
            logger.debug("Member '%s' covered by cases %s", mc.member, list(mc.cases))

    dead: list[int] = []
    for i, clause in enumerate(clauses):
        if i > 0 and clause.accepts.is_subtype_of(union_of(c.accepts for c in clauses[:i])):
            dead.append(i)
            diagnostics.append(
                Diagnostic(
                    "case_reachable",
                    Severity.WARNING,
                    i,
                    f"Case {i} ({clause.name}) accepts '{clause.accepts}', "
                    f"which earlier cases already accept",
                )
            )
        elif not _overlaps(clause.accepts, declared_d):
            dead.append(i)
            diagnostics.append(
                Diagnostic(
                    "case_relevant",
                    Severity.WARNING,
                    i,
                    f"Case {i} ({clause.name}) accepts '{clause.accepts}', "
                    f"which is unrelated to every member of '{declared_d}'",
                )
            )

    shape = result_shape(clauses) if clauses else None
    live = [c for i, c in enumerate(clauses) if i not in dead]
    if isinstance(shape, Wrapped) and live and isinstance(result_shape(live), Unified):
        diagnostics.append(
            Diagnostic(
                "result_widened",
                Severity.WARNING,
                None,
                f"Results are wrapped over '{shape.declared}' only because of "
                f"cases that can never be selected: {dead}",
            )
        )

    if dead:
        logger.warning("%d UNREACHABLE cases for '%s': %s", len(dead), declared_d, dead)

    return CoverageResult(
        declared=declared_d,
        clauses=clauses,
        coverage=coverage,
        diagnostics=tuple(diagnostics),
        shape=shape,
    )


def prove_coverage(declared: Any, clauses: Sequence[WhenClause[Any, Any]]) -> CoverageResult:
    """Like :func:`check_coverage`, but raise IncompleteCoverage unless complete."""
    result = check_coverage(declared, clauses)
    if not result.is_complete:
        raise IncompleteCoverage(result)
    return result
