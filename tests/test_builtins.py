## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

from tinyforth.runtime import Runtime
from tinyforth.errors import ForthDivisionByZero, ForthStackUnderflow


def run(source: str) -> list:
    rt = Runtime()
    rt.evaluate(source)
    return rt.current_stack()


@pytest.mark.parametrize("source, expected", [
    ("1 2 3 4 5", [1, 2, 3, 4, 5]),
    ("1 2 +", [3]),
    ("3 4 -", [-1]),
    ("2 4 *", [8]),
    ("12 3 /", [4]),
    ("8 3 /", [2]),
    ("-7 2 /", [-3]),
    ("7 -2 /", [-3]),
    ("1 2 + 4 -", [-1]),
    ("2 4 * 3 /", [2]),
    ("1 dup", [1, 1]),
    ("1 2 dup", [1, 2, 2]),
    ("1 drop", []),
    ("1 2 drop", [1]),
    ("1 2 swap", [2, 1]),
    ("1 2 3 swap", [1, 3, 2]),
    ("1 2 over", [1, 2, 1]),
    ("1 2 3 over", [1, 2, 3, 2]),
])
def test_builtin_words(source, expected):
    assert run(source) == expected


@pytest.mark.parametrize("source, expected", [
    ("1 DUP Dup dup", [1, 1, 1, 1]),
    ("1 2 3 4 DROP Drop drop", [1]),
    ("1 2 SWAP 3 Swap 4 swap", [2, 3, 4, 1]),
    ("1 2 OVER Over over", [1, 2, 1, 2, 1]),
])
def test_builtins_are_case_insensitive(source, expected):
    assert run(source) == expected


@pytest.mark.parametrize("source", ["1 +", "+", "1 -", "-", "1 *", "*", "1 /", "/",
                                    "dup", "drop", "1 swap", "swap", "1 over", "over"])
def test_builtins_underflow(source):
    with pytest.raises(ForthStackUnderflow):
        run(source)


def test_division_by_zero_consumes_operands():
    rt = Runtime()
    with pytest.raises(ForthDivisionByZero) as info:
        rt.evaluate("7 4 0 /")
    assert info.value.kind == "DivisionByZero"
    assert rt.current_stack() == [7]


def test_arithmetic_wraps_to_32_bits():
    assert run("2147483647 1 +") == [-2147483648]
    assert run("-2147483648 1 -") == [2147483647]
    assert run("65536 65536 *") == [0]
    assert run("-2147483648 -1 /") == [-2147483648]
