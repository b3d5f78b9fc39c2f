import logging

import pytest

from totalitarian import (
    ClassType,
    Disjunct,
    DispatchTable,
    IncompleteCoverage,
    NoMatchingHandler,
    Unified,
    Wrapped,
    descriptor_of,
    dispatch,
    on,
)


class A:
    pass


class B:
    pass


class C:
    pass


class Animal:
    pass


class Dog(Animal):
    pass


IntOrStr = Disjunct.of(int | str)


def test_equal_return_types_unwrap() -> None:
    cases = (
        on(int)(lambda x: x + 1, returns=int),
        on(str)(lambda s: len(s), returns=int),
    )
    six = IntOrStr(5).when(*cases)
    assert six == 6
    assert type(six) is int
    two = IntOrStr("ab").when(*cases)
    assert two == 2
    assert type(two) is int


def test_distinct_return_types_wrap() -> None:
    cases = (
        on(int)(lambda x: str(x), returns=str),
        on(str)(lambda s: len(s), returns=int),
    )
    result = IntOrStr("ab").when(*cases)
    assert isinstance(result, Disjunct)
    assert result.value == 2
    assert result.actual == ClassType(int)
    assert result.declared == descriptor_of(str | int)

    other = IntOrStr(5).when(*cases)
    assert isinstance(other, Disjunct)
    assert other.value == "5"
    assert other.actual == ClassType(str)
    assert other.declared == result.declared


def test_wrapped_result_dispatches_again() -> None:
    first = IntOrStr(41).when(
        on(int)(lambda x: x + 1, returns=int),
        on(str)(lambda s: s.encode(), returns=bytes),
    )
    second = first.when(
        on(int)(lambda x: f"int {x}", returns=str),
        on(bytes)(lambda b: f"bytes {b!r}", returns=str),
    )
    assert second == "int 42"


def test_incomplete_coverage_fails_for_every_value() -> None:
    ran: list[str] = []
    cases = (
        on(A)(lambda v: ran.append("A"), returns=None),
        on(B)(lambda v: ran.append("B"), returns=None),
    )
    for value in (A(), B(), C()):
        d = Disjunct.of(A | B | C)(value)
        with pytest.raises(IncompleteCoverage) as exc_info:
            d.when(*cases)
        assert exc_info.value.result.uncovered == (ClassType(C),)
        assert "'C'" in str(exc_info.value)
    assert ran == []


def test_no_cases_is_incomplete() -> None:
    with pytest.raises(IncompleteCoverage):
        IntOrStr(5).when()


def test_first_match_wins() -> None:
    broad_first = (
        on(Animal)(lambda a: "animal", returns=str),
        on(Dog)(lambda d: "dog", returns=str),
    )
    assert Disjunct.of(Animal)(Dog()).when(*broad_first) == "animal"

    narrow_first = (
        on(Dog)(lambda d: "dog", returns=str),
        on(Animal)(lambda a: "animal", returns=str),
    )
    assert Disjunct.of(Animal)(Dog()).when(*narrow_first) == "dog"
    assert Disjunct.of(Animal)(Animal()).when(*narrow_first) == "animal"


def test_selection_is_idempotent() -> None:
    d = Disjunct.of(Animal | int)(Dog())
    cases = (
        on(int)(lambda n: f"int {n}", returns=str),
        on(Dog)(lambda d: "dog", returns=str),
        on(Animal)(lambda a: "animal", returns=str),
    )
    results = [d.when(*cases) for _ in range(5)]
    assert results == ["dog"] * 5


def test_unreachable_case_still_widens_result() -> None:
    cases = (
        on(int)(lambda x: x, returns=int),
        on(str)(lambda s: len(s), returns=int),
        on(bool)(lambda b: "never", returns=str),
    )
    result = IntOrStr(True).when(*cases)
    assert isinstance(result, Disjunct)
    assert result.value is True
    assert result.actual == ClassType(int)


def test_union_case() -> None:
    d = Disjunct.of(int | str | bytes)(b"xy")
    result = d.when(
        on(int | str)(lambda v: "text", returns=str),
        on(bytes)(lambda b: b.decode(), returns=str),
    )
    assert result == "xy"


def test_generic_members() -> None:
    cases = (
        on(list[int])(lambda xs: sum(xs), returns=int),
        on(str)(lambda s: len(s), returns=int),
    )
    assert Disjunct.of(list[int] | str)([1, 2, 3]).when(*cases) == 6

    by_origin = (
        on(list)(lambda xs: len(xs), returns=int),
        on(str)(lambda s: len(s), returns=int),
    )
    assert Disjunct.of(list[int] | str)([1, 2, 3]).when(*by_origin) == 3



def test_generic_members_sharing_an_origin() -> None:
    cases = (
        on(list[int])(lambda xs: "ints", returns=str),
        on(list[str])(lambda xs: "strs", returns=str),
    )
    d = Disjunct.of(list[int] | list[str])(["a", "b"], actual=list[str])
    assert d.when(*cases) == "strs"

def test_handler_errors_propagate() -> None:
    with pytest.raises(ZeroDivisionError):
        IntOrStr(5).when(
            on(int)(lambda x: x // 0, returns=int),
            on(str)(len, returns=int),
        )


def test_dispatch_function() -> None:
    assert dispatch(IntOrStr("abc"), on(object)(lambda v: "any", returns=str)) == "any"


def test_table_build() -> None:
    table = DispatchTable.build(
        int | str,
        on(int)(lambda x: x, returns=int),
        on(str)(lambda s: s, returns=str),
    )
    assert table.declared == descriptor_of(int | str)
    assert isinstance(table.shape, Wrapped)
    assert table.coverage.is_complete
    assert table(IntOrStr("s")).value == "s"
    # A narrower declared type is already covered.
    assert table(Disjunct.apply(3)).value == 3


def test_table_build_rejects_incomplete() -> None:
    with pytest.raises(IncompleteCoverage):
        DispatchTable.build(int | str, on(int)(lambda x: x, returns=int))


def test_table_reproves_wider_declared_type() -> None:
    table = DispatchTable.build(int, on(object)(lambda v: type(v).__name__, returns=str))
    assert isinstance(table.shape, Unified)
    assert table(Disjunct.apply("x")) == "str"

    strict = DispatchTable.build(int, on(int)(lambda v: v, returns=int))
    with pytest.raises(IncompleteCoverage):
        strict(Disjunct.apply("x"))


def test_select() -> None:
    table = DispatchTable.build(int, on(int)(lambda v: v, returns=int))
    index, clause = table.select(ClassType(bool))
    assert index == 0
    assert clause is table.clauses[0]
    with pytest.raises(NoMatchingHandler) as exc_info:
        table.select(ClassType(str))
    assert exc_info.value.actual == ClassType(str)


def test_selection_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    def length(s: str) -> int:
        return len(s)

    with caplog.at_level(logging.DEBUG, logger="totalitarian.dispatch"):
        IntOrStr("ab").when(on(int)(lambda x: x, returns=int), on(str)(length))

    assert any("Case 1 (length) selected" in r.getMessage() for r in caplog.records)
