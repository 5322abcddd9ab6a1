"""
Retrograde BASIC error codes and exceptions.

Every failure the toolchain reports to the user carries one of the fixed
Applesoft-style codes below, optionally followed by a free-text detail.
"""

from typing import Optional


# ============================================================================
# Error Codes
# ============================================================================

E_SYNTAX = "?SYNTAX ERROR"
E_UNDEF_STATEMENT = "?UNDEF'D STATEMENT ERROR"
E_TYPE_MISMATCH = "?TYPE MISMATCH ERROR"
E_NEXT_WITHOUT_FOR = "?NEXT WITHOUT FOR ERROR"
E_DIVISION_BY_ZERO = "?DIVISION BY ZERO ERROR"
E_OVERFLOW = "?OVERFLOW ERROR"

# Informational, printed by RUN on an empty program
NO_PROGRAM = "NO PROGRAM"


# ============================================================================
# Exceptions
# ============================================================================

class BasicError(Exception):
    """Base exception for Retrograde BASIC errors"""

    def __init__(self, code: str, detail: Optional[str] = None, line_number: Optional[int] = None):
        self.code = code
        self.detail = detail
        self.line_number = line_number
        super().__init__(f"{code}: {detail}" if detail else code)

    def report(self) -> str:
        """
        Text shown to the user: the code, then the detail on its own line.

        Errors raised while a program is running also name the failing line.
        """
        extra = []
        if self.detail:
            extra.append(self.detail)
        if self.line_number is not None:
            extra.append(f"IN LINE {self.line_number}")
        if not extra:
            return self.code
        return self.code + "\n" + " ".join(extra)


class LexerError(BasicError):
    """Unrecognized character in a source line"""

    def __init__(self, char: str, column: int):
        self.char = char
        self.column = column
        super().__init__(E_SYNTAX, f"Unknown character: '{char}' at column {column}")


class ParseError(BasicError):
    """Unexpected or missing token"""

    def __init__(self, detail: str):
        super().__init__(E_SYNTAX, detail)


class ScreenError(Exception):
    """Misuse of the screen's line-input protocol"""
    pass


__all__ = [
    'E_SYNTAX',
    'E_UNDEF_STATEMENT',
    'E_TYPE_MISMATCH',
    'E_NEXT_WITHOUT_FOR',
    'E_DIVISION_BY_ZERO',
    'E_OVERFLOW',
    'NO_PROGRAM',
    'BasicError',
    'LexerError',
    'ParseError',
    'ScreenError',
]
