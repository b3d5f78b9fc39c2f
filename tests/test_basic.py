from totalitarian import ClassType, Disjunct, on


def test_disjunct_when() -> None:
    d = Disjunct.of(int | str)("ab")
    assert d.actual == ClassType(str)
    assert d.when(on(int)(lambda n: n, returns=int), on(str)(len, returns=int)) == 2


if __name__ == "__main__":
    test_disjunct_when()
    print("Basic test passed!")
