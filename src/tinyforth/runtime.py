## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Stack, Word, nil
from .errors import ForthError
from .parser import parse
from .library import Library
from .builtins import load_builtins_library
from .formatting import list_to_stack as _list_to_stack, stack_to_list as _stack_to_list
from .interpreter import evaluate


class Runtime:
    """Minimal runtime facade owning one stack and one word table, for embedding."""

    def __init__(self, library: Library | None = None):
        self.library = library or load_builtins_library()
        self.stack: Stack = nil

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def evaluate(self, source: str, filename: str | None = None,
                 verbosity: int = 0, stats: dict | None = None) -> None:
        """Run one batch of source against the persistent stack.  On error the stack keeps
        every change made before the failing token, and the runtime stays usable.
        """
        try:
            self.stack = evaluate(parse(source, filename=filename), self.stack, self.library,
                                  verbosity=verbosity, stats=stats)
        except ForthError as exc:
            if exc.forth_stack is not None:
                self.stack = exc.forth_stack
            raise

    def current_stack(self) -> list[int]:
        return self.from_stack(self.stack)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def lookup(self, name: str) -> Word | None:
        return self.library.lookup(name)

    def list_words(self) -> list[str]:
        return self.library.list_words()

    def to_stack(self, values: list) -> Stack:
        """Bottom-to-top list into a Stack."""
        return _list_to_stack(list(reversed(values)))

    def from_stack(self, stack: Stack) -> list:
        """Stack into a bottom-to-top list."""
        return list(reversed(_stack_to_list(stack)))
