## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import stack_list, Stack, nil


def stack_to_list(stk: Stack) -> stack_list:
    """Items from the top of the stack downward."""
    result = []
    while stk is not nil:
        stk, head = stk
        result.append(head)
    return stack_list(result)

def list_to_stack(values: list, base=None) -> Stack:
    """Inverse of `stack_to_list`, the first value ends up on top."""
    stack = nil if base is None else base
    for value in reversed(values):
        stack = Stack(stack, value)
    return stack


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def format_item(it) -> str:
    if isinstance(it, (list, tuple)):
        return '[' + ' '.join(format_item(i) for i in it) + ']'
    return str(it)

def format_stack(stack: Stack) -> str:
    if stack is nil: return '∅'
    return ' '.join(format_item(s) for s in reversed(stack_to_list(stack)))

def show_stack(stack, width=72, end='\n', file=None):
    stack_str = format_stack(stack)
    if width is not None and len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    print(f"{stack_str:>{width}}" if width else stack_str, end=end, file=file)

def show_program_and_stack(program, stack, width=72):
    prog_str = ' '.join(format_item(p) for p in program) if program else '∅'
    if len(prog_str) > width:
        prog_str = prog_str[:+width-2] + ' …'
    show_stack(stack, end='')
    print(f" \033[36m <=> \033[0m {prog_str:<{width}}")
