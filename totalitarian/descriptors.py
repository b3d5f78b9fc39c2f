"""Type descriptors for disjunctions.

A descriptor is a reified, comparable stand-in for a Python type. Descriptors
come in three kinds:

- Class: a runtime class (e.g., int, str, numbers.Number, a user class)
- Generic: a parameterised generic (e.g., list[int], dict[str, float])
- Union: two or more alternatives (e.g., int | str)

Subtyping follows Python's own relationship: ``issubclass`` for classes
(including ABC registration and runtime-checkable protocols), origin classes
for generics, and member-wise rules for unions. Two descriptors are equal
exactly when each is a subtype of the other; unions are normalised so that
structural equality agrees with that rule.
"""

from __future__ import annotations

import functools
import types
import typing
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Descriptor kinds
# ---------------------------------------------------------------------------


class TypeKind(Enum):
    CLASS = "class"
    GENERIC = "generic"
    UNION = "union"


class _Relations:
    """Subtype and equality queries shared by every descriptor kind."""

    @property
    def members(self) -> tuple[ClassType | GenericType, ...]:
        return (self,)  # type: ignore[return-value]

    def is_subtype_of(self, other: TypeDescriptor) -> bool:
        return is_subtype(self, other)  # type: ignore[arg-type]

    def equals(self, other: TypeDescriptor) -> bool:
        return is_subtype(self, other) and is_subtype(other, self)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return self.name  # type: ignore[attr-defined]


@dataclass(frozen=True, eq=True)
class ClassType(_Relations):
    """A plain runtime class.

    Examples: int, str, NoneType, numbers.Number, Animal
    """

    cls: type

    @property
    def kind(self) -> TypeKind:
        return TypeKind.CLASS

    @property
    def name(self) -> str:
        if self.cls is type(None):
            return "None"
        return self.cls.__qualname__


# A generic argument is a descriptor, a parameter list (Callable[[int], str])
# or a literal Ellipsis (tuple[int, ...]).
GenericArg = typing.Union["TypeDescriptor", tuple["GenericArg", ...], types.EllipsisType]


@dataclass(frozen=True, eq=True)
class GenericType(_Relations):
    """A parameterised generic.

    Arguments are compared invariantly. At runtime only ``origin`` can be
    tested, so a value is an instance of ``list[int]`` whenever it is a list.

    Example:
        GenericType(dict, (ClassType(str), ClassType(int)))   # dict[str, int]
    """

    origin: type
    args: tuple[GenericArg, ...]

    @property
    def kind(self) -> TypeKind:
        return TypeKind.GENERIC

    @property
    def name(self) -> str:
        return f"{self.origin.__qualname__}[{', '.join(_arg_name(a) for a in self.args)}]"


@dataclass(frozen=True, eq=True)
class UnionType(_Relations):
    """Two or more alternatives, exactly one of which a value belongs to.

    ``alts`` keeps the order the alternatives were written in, for display;
    equality and hashing ignore that order.

    Build these with :func:`union_of`, which normalises the alternatives.
    """

    alts: tuple[ClassType | GenericType, ...] = field(compare=False)
    _key: frozenset[ClassType | GenericType] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_key", frozenset(self.alts))

    @property
    def kind(self) -> TypeKind:
        return TypeKind.UNION

    @property
    def members(self) -> tuple[ClassType | GenericType, ...]:
        return self.alts

    @property
    def name(self) -> str:
        return " | ".join(a.name for a in self.alts)


# Union type for any descriptor
TypeDescriptor = ClassType | GenericType | UnionType

OBJECT = ClassType(object)
NONE = ClassType(type(None))


def _arg_name(arg: GenericArg) -> str:
    if arg is Ellipsis:
        return "..."
    if isinstance(arg, tuple):
        return f"[{', '.join(_arg_name(a) for a in arg)}]"
    return arg.name


# ---------------------------------------------------------------------------
# Subtyping
# ---------------------------------------------------------------------------


def _issubclass(cls: type, parent: type) -> bool:
    # Protocols that are not runtime-checkable refuse issubclass().
    try:
        return issubclass(cls, parent)
    except TypeError:
        return False


def _args_equal(a: GenericArg, b: GenericArg) -> bool:
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(_args_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, _Relations) and isinstance(b, _Relations):
        return a.equals(b)  # type: ignore[arg-type]
    return a is b


def is_subtype(sub: TypeDescriptor, sup: TypeDescriptor) -> bool:
    """Whether every value of ``sub`` is also a value of ``sup``."""
    match sub, sup:
        case UnionType(), _:
            return all(is_subtype(m, sup) for m in sub.alts)
        case _, UnionType():
            return any(is_subtype(sub, m) for m in sup.alts)
        case ClassType(), ClassType():
            return _issubclass(sub.cls, sup.cls)
        case GenericType(), ClassType():
            return _issubclass(sub.origin, sup.cls)
        case GenericType(), GenericType():
            return (
                _issubclass(sub.origin, sup.origin)
                and len(sub.args) == len(sup.args)
                and all(_args_equal(a, b) for a, b in zip(sub.args, sup.args))
            )
        case ClassType(), GenericType():
            # Type arguments are erased at runtime; a bare class proves nothing
            # about them.
            return False
    raise TypeError(f"Not a type descriptor: {sub!r}, {sup!r}")


def is_instance(value: Any, descriptor: TypeDescriptor) -> bool:
    """Runtime membership test, as far as erasure allows."""
    match descriptor:
        case ClassType(cls=cls):
            try:
                return isinstance(value, cls)
            except TypeError:
                return False
        case GenericType(origin=origin):
            try:
                return isinstance(value, origin)
            except TypeError:
                return False
        case UnionType(alts=alts):
            return any(is_instance(value, a) for a in alts)
    raise TypeError(f"Not a type descriptor: {descriptor!r}")


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def union_of(descriptors: Iterable[TypeDescriptor]) -> TypeDescriptor:
    """Normalised union of the given descriptors.

    Nested unions are flattened, duplicates dropped and any alternative that
    is a subtype of another alternative is absorbed by it. A single surviving
    alternative is returned as-is.
    """
    flat: list[ClassType | GenericType] = []
    for d in descriptors:
        for m in d.members:
            if not any(m.equals(seen) for seen in flat):
                flat.append(m)
    if not flat:
        raise ValueError("A union needs at least one alternative")

    kept = [
        m for m in flat
        if not any(other is not m and m.is_subtype_of(other) for other in flat)
    ]
    if len(kept) == 1:
        return kept[0]
    return UnionType(tuple(kept))


def _convert_arg(arg: Any) -> GenericArg:
    if arg is Ellipsis:
        return Ellipsis
    if isinstance(arg, (list, tuple)):
        return tuple(_convert_arg(a) for a in arg)
    return descriptor_of(arg)


def _convert(tp: Any) -> TypeDescriptor:
    if tp is None or tp is type(None):
        return NONE
    if tp is typing.Any:
        return OBJECT
    if isinstance(tp, typing.TypeVar):
        if tp.__bound__ is not None:
            return descriptor_of(tp.__bound__)
        if tp.__constraints__:
            return union_of(descriptor_of(c) for c in tp.__constraints__)
        return OBJECT
    if isinstance(tp, typing.NewType):
        return descriptor_of(tp.__supertype__)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)
    if origin is typing.Union or origin is types.UnionType:
        return union_of(descriptor_of(a) for a in args)
    if origin is typing.Annotated:
        return descriptor_of(args[0])
    if origin is typing.Literal:
        # A Literal constrains values, not classes; no descriptor can hold it.
        raise TypeError(f"{tp!r} restricts values and cannot be described by a type")
    if isinstance(origin, type):
        if not args:
            return ClassType(origin)
        return GenericType(origin, tuple(_convert_arg(a) for a in args))
    if isinstance(tp, type):
        return ClassType(tp)
    raise TypeError(f"{tp!r} is not a type")


_CACHE_SIZE = 1024


@functools.lru_cache(maxsize=_CACHE_SIZE)
def _cached(tp: Any, spelling: str) -> TypeDescriptor:
    # Unions compare equal regardless of order; the spelling keeps the
    # written order for display.
    return _convert(tp)


def descriptor_of(tp: Any) -> TypeDescriptor:
    """Canonical descriptor for a type form.

    Accepts classes, None, typing.Any, unions (``int | str``, ``Optional``),
    parameterised generics, Annotated, NewType and TypeVar. Passing an
    existing descriptor returns it unchanged. Raises TypeError for anything
    that is not a type, including Literal.
    """
    if isinstance(tp, (ClassType, GenericType, UnionType)):
        return tp
    try:
        hash(tp)
    except TypeError:
        return _convert(tp)
    return _cached(tp, repr(tp))


def descriptor_of_value(value: Any, declared: TypeDescriptor | None = None) -> TypeDescriptor:
    """The most specific descriptor available for a runtime value.

    This is the value's class. When that class fails to prove membership of
    ``declared`` only because ``declared`` names a parameterised generic
    (``list[int]`` for a list), the matching generic alternative is used.
    When several generic alternatives match (``list[int] | list[str]``) the
    runtime class is returned, which is not a member; the caller has to name
    the alternative.
    """
    actual = ClassType(type(value))
    if declared is None or actual.is_subtype_of(declared):
        return actual
    candidates = erased_members(value, declared)
    if len(candidates) == 1:
        return candidates[0]
    return actual


def erased_members(value: Any, declared: TypeDescriptor) -> tuple[GenericType, ...]:
    """Generic alternatives of ``declared`` whose origin ``value`` is an instance of."""
    return tuple(
        m for m in declared.members
        if isinstance(m, GenericType) and is_instance(value, m)
    )
