## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .types import Operation
from .library import Library, get_forth_name


def load_builtins_library():
    aliases = {
        '+': 'add', '-': 'sub', '*': 'mul', '/': 'div',
        'DUP': 'dup', 'DROP': 'drop', 'SWAP': 'swap', 'OVER': 'over',
    }

    lib = Library(functions={}, words={}, aliases=aliases)

    # Functions (wrapped via Library helper)
    for k in dir(operators):
        if not k.startswith('op_'): continue
        lib.add_function(get_forth_name(k), getattr(operators, k))

    # Each built-in word is a single-operation body naming itself.
    for word, primitive in aliases.items():
        op = Operation(Operation.FUNCTION, lib.get_function(primitive), word, {'primitive': primitive})
        lib.define(word, (op,), meta={'builtin': True})

    lib.ensure_consistent()
    return lib
