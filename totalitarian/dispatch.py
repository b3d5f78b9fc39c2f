"""Exhaustive dispatch over a disjunction.

Dispatch runs in two phases:

1. Build: prove the cases cover the declared type and compute the result
   shape from the cases' declared return types. Both are decided from the
   declarations alone, before any case runs.
2. Apply: pick the first case (in declaration order) whose accepted type is a
   supertype of the disjunct's actual type, run it, and shape the result.

A DispatchTable holds the outcome of phase 1 and can be applied many times.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .cases import WhenClause
from .coverage import CoverageResult, prove_coverage
from .descriptors import TypeDescriptor
from .disjunct import Disjunct
from .errors import NoMatchingHandler
from .shape import ResultShape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchTable:
    """Cases proven to cover ``declared``, with their result shape."""

    declared: TypeDescriptor
    clauses: tuple[WhenClause[Any, Any], ...]
    coverage: CoverageResult
    shape: ResultShape

    @classmethod
    def build(cls, declared: Any, *clauses: WhenClause[Any, Any]) -> DispatchTable:
        """Prove coverage and unify return types.

        Raises IncompleteCoverage when some declared member has no case.
        """
        coverage = prove_coverage(declared, clauses)
        # A complete proof implies at least one case, so the shape exists.
        assert coverage.shape is not None
        logger.debug(
            "Built dispatch table for '%s' with %d cases, result shape %s",
            coverage.declared,
            len(clauses),
            coverage.shape,
        )
        return cls(coverage.declared, coverage.clauses, coverage, coverage.shape)

    def select(self, actual: TypeDescriptor) -> tuple[int, WhenClause[Any, Any]]:
        """First case accepting ``actual``; declaration order breaks ties."""
        for i, clause in enumerate(self.clauses):
            if clause.handles(actual):
                return i, clause
        raise NoMatchingHandler(actual, self.clauses)

    def __call__(self, disjunct: Disjunct[Any]) -> Any:
        if not disjunct.declared.is_subtype_of(self.declared):
            prove_coverage(disjunct.declared, self.clauses)
        i, clause = self.select(disjunct.actual)
        logger.debug(
            "Case %d (%s) selected for actual type '%s'", i, clause.name, disjunct.actual
        )
        return self.shape.wrap(clause.action(disjunct.value), clause)


def dispatch(disjunct: Disjunct[Any], *clauses: WhenClause[Any, Any]) -> Any:
    """Build a table for the disjunct's declared type and apply it once."""
    return DispatchTable.build(disjunct.declared, *clauses)(disjunct)
