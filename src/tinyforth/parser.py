## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

import lark
from .errors import ForthParseError


GRAMMAR = r"""start: (INTEGER | WORD)*

// TOKENS
INTEGER.2: /[+-]?[0-9]+(?!\S)/
WORD: /\S+/

// WHITESPACE
WS: /\s+/
%ignore WS
"""

INT_MIN, INT_MAX = -2**31, 2**31 - 1

_INTEGER_RE = re.compile(r'[+-]?[0-9]+')
_PARSER: lark.Lark | None = None


def _get_parser() -> lark.Lark:
    global _PARSER
    if _PARSER is None:
        _PARSER = lark.Lark(GRAMMAR, start='start', parser="lalr", lexer="contextual", propagate_positions=True)
    return _PARSER


def classify(token: str) -> tuple[str, int | str]:
    """Decide whether a raw token is a 32-bit integer literal or a word, normalized for lookups."""
    if _INTEGER_RE.fullmatch(token) and INT_MIN <= (value := int(token)) <= INT_MAX:
        return 'INTEGER', value
    return 'WORD', token.upper()


def parse(source: str, filename=None):
    """Yield `(type, value, meta)` for each whitespace-separated token of the source, in order."""
    try:
        tree = _get_parser().parse(source)
    except lark.exceptions.UnexpectedInput as exc:
        def attr(k): return getattr(exc, k, None)
        token_val = getattr(token, 'value', '') if (token := attr('token')) is not None else ''
        raise ForthParseError(str(exc), filename=filename, line=attr('line'), column=attr('column'), token=token_val) from None

    for tok in tree.children:
        typ, value = classify(tok.value)
        meta = {'filename': filename, 'line': tok.line, 'column': tok.column, 'token': tok.value}
        yield typ, value, meta


def format_token_context(source: str, meta: dict) -> str:
    """Render the source line holding a token, with the token highlighted."""
    if not meta or meta.get('line') is None: return ""
    lines = source.splitlines()
    if not (0 < meta['line'] <= len(lines)): return ""

    line, column, token = lines[meta['line']-1], meta['column'], meta.get('token', '')
    if column > 0 and column <= len(line):
        line = line[:column-1] + f"\033[48;5;30m\033[1;97m{token}\033[0m" + line[column-1+len(token):]
    header = f"\033[97m  File \"{meta.get('filename')}\", line {meta['line']}, column {column}\033[0m"
    return f"{header}\n\033[90m{meta['line']:>5} |\033[0m {line}\n"
