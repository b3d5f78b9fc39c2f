"""Errors raised when a disjunction is built or dispatched.

All three are fatal to the call that raises them and are never retried.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .descriptors import TypeDescriptor

if TYPE_CHECKING:
    from .cases import WhenClause
    from .coverage import CoverageResult


class DisjunctError(Exception):
    """Base class for every error raised by this package."""


class TypeMismatch(DisjunctError, TypeError):
    """A value's type is not a member of the declared disjunction."""

    def __init__(
        self,
        value: Any,
        actual: TypeDescriptor,
        declared: TypeDescriptor,
        candidates: tuple[TypeDescriptor, ...] = (),
    ) -> None:
        self.value = value
        self.actual = actual
        self.declared = declared
        self.candidates = candidates
        message = f"Value {value!r} of type '{actual}' is not a member of '{declared}'"
        if len(candidates) > 1:
            # Type arguments are erased, so the value fits several alternatives.
            names = ", ".join(f"'{c}'" for c in candidates)
            message += f"; it could be any of {names}, pass actual= to choose one"
        super().__init__(message)


class IncompleteCoverage(DisjunctError):
    """The cases do not cover every member of the declared type.

    Raised before any case runs. ``result`` holds the full coverage report.
    """

    def __init__(self, result: CoverageResult) -> None:
        self.result = result
        missing = ", ".join(f"'{m}'" for m in result.uncovered)
        super().__init__(
            f"Not all cases have been specified for '{result.declared}': missing {missing}"
        )


class NoMatchingHandler(DisjunctError):
    """Coverage was proven but no case accepts the value's actual type.

    This points at an inconsistency between the coverage proof and the
    stored descriptor, not at a mistake in the caller's cases.
    """

    def __init__(self, actual: TypeDescriptor, clauses: tuple[WhenClause[Any, Any], ...]) -> None:
        self.actual = actual
        self.clauses = clauses
        accepted = ", ".join(f"'{c.accepts}'" for c in clauses)
        super().__init__(f"No case accepts actual type '{actual}' (cases accept {accepted})")
