## tinyforth — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class ForthError(Exception):
    kind: str = "Error"

    def __init__(self, message: str = "", *, forth_op=None, forth_token=None, forth_meta=None, forth_stack=None):
        """Base class for all errors raised while evaluating Forth source."""
        super().__init__(message)
        self.forth_op: object = forth_op
        self.forth_token: str = forth_token
        self.forth_meta: dict = forth_meta
        self.forth_stack = forth_stack

class ForthParseError(ForthError):
    kind = "ParseError"

    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, forth_token=token)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token


class ForthDivisionByZero(ForthError, ZeroDivisionError):
    kind = "DivisionByZero"

class ForthStackUnderflow(ForthError, IndexError):
    """An operation needed more operands than the stack holds."""
    kind = "StackUnderflow"

class ForthUnknownWord(ForthError, NameError):
    kind = "UnknownWord"

class ForthInvalidWord(ForthError, ValueError):
    """Malformed definition syntax, e.g. stray `;` or a numeric word name."""
    kind = "InvalidWord"


class ForthNameError(ForthError, LookupError):
    kind = "NameError"

class ForthTypeMissing(ForthError, TypeError):
    """Loading-time problems with primitives registered from Python."""
    kind = "TypeMissing"
