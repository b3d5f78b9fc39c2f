"""Result type for construction that reports failure instead of raising."""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from .errors import DisjunctError

T = TypeVar("T")
E = TypeVar("E", bound=DisjunctError)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def unwrap(self) -> NoReturn:
        raise self.error


type Result[T, E] = Ok[T] | Err[E]
