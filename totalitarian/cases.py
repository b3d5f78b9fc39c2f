"""Case handlers for dispatching on a disjunction.

A case pairs the type it accepts with an action and the type the action is
declared to return. Cases are inert: nothing is checked until they are handed
to dispatch, and overlapping cases are allowed (the first one listed wins).

    on(int)(lambda n: n + 1, returns=int)

    @on(str)
    def length(s: str) -> int:
        return len(s)

    @case
    def describe(n: float) -> str:
        return f"{n:.2f}"
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .descriptors import OBJECT, TypeDescriptor, descriptor_of

T = TypeVar("T")
R = TypeVar("R")

_ANNOTATED: Any = object()


@dataclass(frozen=True)
class WhenClause(Generic[T, R]):
    """A handler for a single case of a disjunction."""

    accepts: TypeDescriptor
    returns: TypeDescriptor
    action: Callable[[T], R]

    @property
    def name(self) -> str:
        return getattr(self.action, "__name__", type(self.action).__name__)

    def handles(self, actual: TypeDescriptor) -> bool:
        return actual.is_subtype_of(self.accepts)

    def __call__(self, value: T) -> R:
        return self.action(value)


def _annotation(action: Callable[..., Any], name: str) -> Any:
    """Resolved annotation of parameter ``name`` (or ``"return"``).

    Returns ``inspect.Signature.empty`` when there is none.
    """
    try:
        hints = typing.get_type_hints(action)
    except (TypeError, NameError):
        pass
    else:
        return hints.get(name, inspect.Signature.empty)

    # Some other annotation failed to resolve; resolve this one on its own.
    try:
        sig = inspect.signature(action)
    except (TypeError, ValueError):
        return inspect.Signature.empty
    if name == "return":
        annotation = sig.return_annotation
    else:
        annotation = sig.parameters[name].annotation
    if isinstance(annotation, str):
        # NameError propagates: this annotation itself is unresolvable.
        annotation = eval(annotation, getattr(inspect.unwrap(action), "__globals__", {}))
    if annotation is None:
        return type(None)
    return annotation


def _declared_return(action: Callable[..., Any]) -> TypeDescriptor:
    annotation = _annotation(action, "return")
    if annotation is inspect.Signature.empty:
        return OBJECT
    return descriptor_of(annotation)


@dataclass(frozen=True)
class OnType:
    """Intermediate builder fixing the accepted type of a case."""

    accepts: TypeDescriptor

    def __call__(
        self, action: Callable[[Any], Any], returns: Any = _ANNOTATED
    ) -> WhenClause[Any, Any]:
        """Build the case.

        ``returns`` defaults to the action's return annotation, or ``object``
        when it has none.
        """
        if returns is _ANNOTATED:
            returns_d = _declared_return(action)
        else:
            returns_d = descriptor_of(returns)
        return WhenClause(self.accepts, returns_d, action)


def on(tp: Any) -> OnType:
    """Start a case accepting ``tp`` (any type form :func:`descriptor_of` takes)."""
    return OnType(descriptor_of(tp))


def case(action: Callable[[Any], Any]) -> WhenClause[Any, Any]:
    """Build a case whose accepted and returned types come from annotations.

    Raises TypeError when the first parameter is missing or unannotated.
    """
    params = list(inspect.signature(action).parameters.values())
    if not params:
        raise TypeError(f"case() needs a callable taking one argument, got {action!r}")
    first = params[0].name
    accepted = _annotation(action, first)
    if accepted is inspect.Signature.empty:
        raise TypeError(f"case() needs an annotation on parameter '{first}' of {action!r}")
    return WhenClause(descriptor_of(accepted), _declared_return(action), action)
