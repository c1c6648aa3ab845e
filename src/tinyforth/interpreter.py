## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import enum
import collections

from .types import Operation, Stack, nil
from .errors import ForthError, ForthInvalidWord, ForthUnknownWord
from .library import Library
from .formatting import show_program_and_stack


DEFINE_OPEN, DEFINE_CLOSE = ':', ';'


class State(enum.Enum):
    IDLE = 'idle'
    AWAITING_NAME = 'awaiting-name'
    CAPTURING = 'capturing'


def interpret_step(program: collections.deque, stack: Stack) -> tuple[Stack, collections.deque]:
    op = program.popleft()

    match op.type:
        case Operation.LITERAL:
            stack = Stack(stack, op.ptr)
        case Operation.FUNCTION:
            stack = op.ptr(stack)
        case Operation.REFERENCE:
            # Expanded lazily; the shared body itself is never copied or flattened.
            program.extendleft(reversed(op.ptr))
        case _:
            raise NotImplementedError(f"Unknown operation type {op.type!r}.")

    return stack, program


def interpret(program, stack: Stack = None, lib: Library = None, verbosity=0, stats=None) -> Stack:
    stack = nil if stack is None else stack
    program = collections.deque(program)

    step = 0
    while program:
        if verbosity == 2 or (verbosity == 1 and (program[0].type == Operation.REFERENCE or step == 0)):
            print(f"\033[90m{step:>3} :\033[0m  ", end='')
            show_program_and_stack(program, stack)

        step += 1
        op = program[0]
        try:
            stack, program = interpret_step(program, stack)
        except ForthError as exc:
            exc.forth_op = op
            exc.forth_token = op.name
            if exc.forth_stack is None: exc.forth_stack = stack
            raise

    if verbosity > 0:
        print(f"\033[90m{step:>3} :\033[0m  ", end='')
        show_program_and_stack(program, stack)
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step

    return stack


def evaluate(tokens, stack: Stack = None, lib: Library = None, verbosity=0, stats=None) -> Stack:
    """Consume classified `(type, value, meta)` tokens left to right, executing words or capturing
    definitions.  Stops at the first error; whatever the stack became up to then is attached to it.
    """
    stack = nil if stack is None else stack
    state, pending, capture = State.IDLE, None, []

    def _invalid(message, token, meta):
        return ForthInvalidWord(message, forth_token=token, forth_meta=meta, forth_stack=stack)

    for typ, value, meta in tokens:
        match state, typ:
            case State.IDLE, 'INTEGER':
                stack = Stack(stack, value)
            case State.IDLE, 'WORD':
                if value == DEFINE_OPEN:
                    state = State.AWAITING_NAME
                elif value == DEFINE_CLOSE:
                    raise _invalid(f"Stray `{DEFINE_CLOSE}` outside of a definition.", value, meta)
                elif (word := lib.lookup(value)) is None:
                    raise ForthUnknownWord(f"Word `{value}` is not defined.", forth_token=value, forth_meta=meta, forth_stack=stack)
                else:
                    try:
                        stack = interpret(word.program, stack, lib, verbosity=verbosity, stats=stats)
                    except ForthError as exc:
                        if exc.forth_meta is None: exc.forth_meta = meta
                        raise

            case State.AWAITING_NAME, 'INTEGER':
                raise _invalid(f"Numbers cannot be redefined, got `{value}` as a word name.", str(value), meta)
            case State.AWAITING_NAME, 'WORD':
                if value in (DEFINE_OPEN, DEFINE_CLOSE):
                    raise _invalid(f"Definition is missing a name before `{value}`.", value, meta)
                state, pending, capture = State.CAPTURING, (value, meta), []

            case State.CAPTURING, 'INTEGER':
                capture.append(Operation(Operation.LITERAL, value, str(value), meta))
            case State.CAPTURING, 'WORD':
                if value == DEFINE_CLOSE:
                    name, name_meta = pending
                    if not capture:
                        raise _invalid(f"Definition of `{name}` has an empty body.", name, name_meta)
                    lib.define(name, capture, meta=name_meta)
                    state, pending, capture = State.IDLE, None, []
                elif value == DEFINE_OPEN:
                    raise _invalid(f"Nested definition inside `{pending[0]}` is not allowed.", value, meta)
                elif (word := lib.lookup(value)) is None:
                    raise ForthUnknownWord(f"Word `{value}` used in `{pending[0]}` is not defined.", forth_token=value, forth_meta=meta, forth_stack=stack)
                else:
                    # Bound now: redefining `value` later does not change this body.
                    capture.append(Operation(Operation.REFERENCE, word.program, value, meta))

    if state is not State.IDLE:
        name, meta = pending if pending is not None else (DEFINE_OPEN, None)
        raise _invalid(f"Definition of `{name}` was not terminated with `{DEFINE_CLOSE}`.", name, meta)
    return stack
