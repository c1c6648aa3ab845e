## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .errors import ForthDivisionByZero


def wrap_i32(x: int) -> int:
    """Reduce an integer to signed 32-bit two's complement, as native machine arithmetic would."""
    return (x + 2**31) % 2**32 - 2**31


## ARITHMETIC
# Parameters are ordered bottom to top: `a` was deeper in the stack, `b` was on top.
def op_add(a: int, b: int) -> int: return wrap_i32(a + b)
def op_sub(a: int, b: int) -> int: return wrap_i32(a - b)
def op_mul(a: int, b: int) -> int: return wrap_i32(a * b)
def op_div(a: int, b: int) -> int:
    if b == 0:
        raise ForthDivisionByZero("`/` cannot divide by zero.", forth_token='/')
    # Truncate toward zero, unlike Python's floor division.
    q = abs(a) // abs(b)
    return wrap_i32(q if (a < 0) == (b < 0) else -q)
## STACK OPERATIONS
def op_dup(a: int) -> tuple[int, int]: return (a, a)
def op_drop(_: int) -> None: return None
def op_swap(a: int, b: int) -> tuple[int, int]: return (b, a)
def op_over(a: int, b: int) -> tuple[int, int, int]: return (a, b, a)
