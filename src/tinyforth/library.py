## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from typing import Any, Callable, get_origin, get_args
from dataclasses import dataclass, field

from .types import Stack, Word, nil
from .errors import ForthError, ForthNameError, ForthInvalidWord, ForthStackUnderflow, ForthTypeMissing


def get_forth_name(py_name: str) -> str:
    """Map a Python operator function name `op_xyz` to its primitive name `xyz`."""
    if not py_name.startswith("op_"):
        raise ForthNameError(f"Operator function `{py_name}` requires prefix `op_` by convention.", forth_token=py_name)
    return py_name[3:].replace('_', '-')


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Parse the type annotations from Python to determine the stack effects in Forth.

    Arity is the number of positional parameters, popped from the stack and passed
    bottom-first.  Valency is 0 for `None`, the length of a `tuple[...]`, or 1.
    """
    sig = inspect.signature(fn)
    op_name = name or getattr(fn, '__name__', '<unnamed>')
    positional = [p for p in sig.parameters.values()
                  if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)]

    ret_ann = sig.return_annotation
    if ret_ann is inspect.Signature.empty:
        raise ForthTypeMissing(f"Operation `{op_name}` must declare a return annotation.", forth_token=op_name)

    returns_none = (ret_ann is type(None) or ret_ann is None)
    returns_tuple = (get_origin(ret_ann) is tuple)

    return {
        'arity': len(positional),
        'valency': 0 if returns_none else (len(get_args(ret_ann)) if returns_tuple else 1),
    }


@dataclass
class Library:
    functions: dict[str, Callable[[Stack], Stack]]
    words: dict[str, Word]
    aliases: dict[str, str] = field(default_factory=dict)

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        fn, meta = _make_wrapper(fn, name)
        fn.__forth_meta__ = meta
        self.functions[name] = fn

    def get_function(self, name: str) -> Callable[[Stack], Stack]:
        if (function := self.functions.get(name)) is not None:
            return function
        raise ForthNameError(f"Primitive `{name}` not found in library.", forth_token=name)

    def ensure_consistent(self) -> None:
        for _, fn in list(self.functions.items()):
            assert hasattr(fn, '__forth_meta__')

    # Word table
    def lookup(self, name: str) -> Word | None:
        return self.words.get(name.upper())

    def define(self, name: str, program, meta: dict | None = None) -> Word:
        """Insert or overwrite a word.  Words already holding a reference to the old body keep it."""
        if len(program) == 0:
            raise ForthInvalidWord(f"Definition of `{name}` must contain at least one operation.", forth_token=name, forth_meta=meta)
        word = Word(program=tuple(program), meta=meta or {})
        self.words[name.upper()] = word
        return word

    def list_words(self) -> list[str]:
        return sorted(self.words.keys())


def _make_wrapper(fn: Callable[..., Any], name: str) -> tuple[Callable[[Stack], Stack], dict]:
    meta = get_stack_effects(fn=fn, name=name)
    arity = meta['arity']

    match meta['valency']:
        case 0:
            def push(base, _): return base
        case 1:
            def push(base, res): return Stack(base, res)
        case _:
            def push(base, res):
                for v in res: base = Stack(base, v)
                return base

    def w_x(stk: Stack) -> Stack:
        args, base = (), stk
        for _ in range(arity):
            # Operands already popped are not restored.
            if base is nil:
                raise ForthStackUnderflow(f"`{name}` needs {arity} item(s) on the stack.", forth_token=name, forth_stack=base)
            base, h = base
            args = (h,) + args
        try:
            res = fn(*args)
        except ForthError as exc:
            if exc.forth_stack is None: exc.forth_stack = base
            raise
        return push(base, res)

    return w_x, meta
