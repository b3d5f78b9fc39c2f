"""The Disjunct container: one value of several possible types.

A disjunct stores a value together with two descriptors:

- ``declared``: the set of types the disjunction may hold (usually a union)
- ``actual``: the most specific type supplied for the stored value

The invariant ``actual.is_subtype_of(declared)`` is checked whenever a
disjunct is created, so a disjunct that exists is always well-typed.

    Disjunct.of(int | str)(5)        # staged: declare, then supply
    Disjunct.apply(5, int | str)     # direct
    Disjunct.apply(5)                # degenerate: declared type is int
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .descriptors import (
    TypeDescriptor,
    descriptor_of,
    descriptor_of_value,
    erased_members,
    is_instance,
)
from .errors import TypeMismatch
from .result import Err, Ok, Result

if TYPE_CHECKING:
    from .cases import WhenClause
    from .coverage import CoverageResult

D = TypeVar("D")

_INFER: Any = object()


@dataclass(frozen=True)
class Disjunct(Generic[D]):
    """A disjunction, as a single value of several possible types.

    Prefer :meth:`of` or :meth:`apply` over calling the constructor, which
    takes descriptors and only enforces the subtype invariant.
    """

    value: Any
    actual: TypeDescriptor
    declared: TypeDescriptor

    def __post_init__(self) -> None:
        if not self.actual.is_subtype_of(self.declared):
            raise TypeMismatch(self.value, self.actual, self.declared)

    @staticmethod
    def of(declared: Any) -> OfType:
        """Fix the declared type; the returned builder accepts the value."""
        return OfType(descriptor_of(declared))

    @classmethod
    def apply(cls, value: Any, declared: Any = _INFER, *, actual: Any = None) -> Disjunct[Any]:
        """Create a disjunct of ``value``.

        Without ``declared`` the disjunction is over the value's own type.
        ``actual`` names a more specific type than the runtime class can
        express (``list[int]`` rather than ``list``); the value must still be
        an instance of it.
        """
        declared_d = None if declared is _INFER else descriptor_of(declared)
        if actual is None:
            actual_d = descriptor_of_value(value, declared_d)
            if declared_d is not None and not actual_d.is_subtype_of(declared_d):
                raise TypeMismatch(
                    value, actual_d, declared_d, erased_members(value, declared_d)
                )
        else:
            actual_d = descriptor_of(actual)
            if not is_instance(value, actual_d):
                raise TypeMismatch(value, descriptor_of_value(value), actual_d)
        return cls(value, actual_d, actual_d if declared_d is None else declared_d)

    def when(self, *cases: WhenClause[Any, Any]) -> Any:
        """Total function handling every possibility of the disjunction.

        Each case handles one branch. Every declared member must be accepted
        by some case, otherwise IncompleteCoverage is raised before anything
        runs. The first case accepting the actual type is invoked. The result
        is the raw return value when all cases declare the same return type,
        and a new Disjunct over the distinct return types otherwise.
        """
        from .dispatch import dispatch

        return dispatch(self, *cases)

    def check(self, *cases: WhenClause[Any, Any]) -> CoverageResult:
        """Coverage report for ``cases`` against the declared type, without dispatching."""
        from .coverage import check_coverage

        return check_coverage(self.declared, cases)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OfType:
    """Intermediate builder for disjuncts of a fixed declared type."""

    declared: TypeDescriptor

    def apply(self, value: Any, *, actual: Any = None) -> Disjunct[Any]:
        """Create a disjunct of ``value``; raises TypeMismatch for non-members."""
        return Disjunct.apply(value, self.declared, actual=actual)

    __call__ = apply

    def attempt(self, value: Any, *, actual: Any = None) -> Result[Disjunct[Any], TypeMismatch]:
        try:
            return Ok(self.apply(value, actual=actual))
        except TypeMismatch as e:
            return Err(e)

    def accepts(self, value: Any) -> bool:
        return isinstance(self.attempt(value), Ok)
