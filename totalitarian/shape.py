"""Result shapes for dispatch.

The shape of a dispatch result depends only on the declared return types of
the cases, never on which case fires:

- Unified: every case declares the same return type; the raw value is returned
- Wrapped: return types differ; the value is wrapped in a new Disjunct over
  the distinct return types, tagged with the return type of the case that ran
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from .cases import WhenClause
from .descriptors import TypeDescriptor, union_of
from .disjunct import Disjunct


@dataclass(frozen=True)
class Unified:
    """All cases return ``type``."""

    type: TypeDescriptor

    def wrap(self, value: Any, clause: WhenClause[Any, Any]) -> Any:
        return value


@dataclass(frozen=True)
class Wrapped:
    """Cases return one of ``types``; results are Disjuncts over ``declared``."""

    types: tuple[TypeDescriptor, ...]
    declared: TypeDescriptor

    def wrap(self, value: Any, clause: WhenClause[Any, Any]) -> Disjunct[Any]:
        return Disjunct(value, clause.returns, self.declared)


ResultShape = Unified | Wrapped


def result_shape(clauses: Sequence[WhenClause[Any, Any]]) -> ResultShape:
    """Unify the declared return types of ``clauses``.

    Every case counts, including ones that can never be selected.
    """
    if not clauses:
        raise ValueError("A result shape needs at least one case")

    distinct: list[TypeDescriptor] = []
    for c in clauses:
        if not any(c.returns.equals(seen) for seen in distinct):
            distinct.append(c.returns)

    if len(distinct) == 1:
        return Unified(distinct[0])
    return Wrapped(tuple(distinct), union_of(distinct))
