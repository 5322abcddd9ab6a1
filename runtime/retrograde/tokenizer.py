"""
Retrograde BASIC Tokenizer

Turns one source line into a flat list of tokens. The tokenizer keeps no
state between lines; the keyword, operator and punctuation tables are
class constants.

Example:
    >>> [(t.type, t.value) for t in tokenize('10 PRINT "HI";A')]
    [('NUMBER', 10), ('KEYWORD', 'PRINT'), ('STRING', 'HI'),
     ('PUNCTUATION', ';'), ('IDENTIFIER', 'A'), ('EOL', None)]
"""

import string
from dataclasses import dataclass
from typing import Any, List

from .errors import LexerError


# ============================================================================
# Token Types
# ============================================================================

class TokenType:
    """Token type constants"""
    NUMBER = "NUMBER"
    STRING = "STRING"
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"

    # Special
    EOL = "EOL"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """Token from a BASIC source line"""
    type: str
    value: Any
    column: int


# ============================================================================
# Tokenizer
# ============================================================================

class BasicTokenizer:
    """Tokenize a single line of BASIC source"""

    KEYWORDS = frozenset({
        'PRINT', 'LET', 'INPUT', 'IF', 'THEN', 'GOTO', 'GOSUB', 'RETURN',
        'FOR', 'TO', 'STEP', 'NEXT', 'REM', 'END', 'LIST', 'RUN', 'NEW',
        'HOME', 'AND', 'OR', 'NOT',
    })

    # Longest match first
    OPERATORS = ('<>', '<=', '>=', '=', '<', '>', '+', '-', '*', '/', '^')

    PUNCTUATION = frozenset('(),;:')

    # ASCII only; other Unicode letters and digits are unknown characters
    DIGITS = frozenset(string.digits)
    LETTERS = frozenset(string.ascii_letters)
    WORD_CHARS = LETTERS | DIGITS

    def __init__(self, line: str):
        self.source = line.strip()
        self.pos = 0
        self.tokens: List[Token] = []

    def tokenize(self) -> List[Token]:
        """Tokenize the line, always ending with one EOL token"""
        while self.pos < len(self.source):
            ch = self.source[self.pos]

            if ch.isspace():
                self.pos += 1
            elif ch in self.DIGITS:
                self._read_number()
            elif ch == '"':
                self._read_string()
            elif ch in self.LETTERS:
                self._read_word()
                if self.tokens[-1].type == TokenType.KEYWORD and self.tokens[-1].value == 'REM':
                    self._read_remark()
            elif self._read_operator():
                pass
            elif ch in self.PUNCTUATION:
                self._add_token(TokenType.PUNCTUATION, ch, self.pos)
                self.pos += 1
            else:
                raise LexerError(ch, self.pos)

        self._add_token(TokenType.EOL, None, self.pos)
        return self.tokens

    def _read_number(self):
        """Read an integer, or a float if one '.' is present"""
        start = self.pos
        has_dot = False

        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in self.DIGITS:
                self.pos += 1
            elif ch == '.' and not has_dot:
                has_dot = True
                self.pos += 1
            else:
                break

        text = self.source[start:self.pos]
        self._add_token(TokenType.NUMBER, float(text) if has_dot else int(text), start)

    def _read_string(self):
        """Read a quoted string; an unterminated string runs to end of line"""
        start = self.pos
        self.pos += 1  # Skip opening quote

        end = self.source.find('"', self.pos)
        if end == -1:
            end = len(self.source)
            text = self.source[self.pos:end]
            self.pos = end
        else:
            text = self.source[self.pos:end]
            self.pos = end + 1

        self._add_token(TokenType.STRING, text, start)

    def _read_word(self):
        """Read a keyword or identifier; a '$' closes the word"""
        start = self.pos

        while self.pos < len(self.source) and self.source[self.pos] in self.WORD_CHARS:
            self.pos += 1
        if self.pos < len(self.source) and self.source[self.pos] == '$':
            self.pos += 1

        word = self.source[start:self.pos].upper()
        if word in self.KEYWORDS:
            self._add_token(TokenType.KEYWORD, word, start)
        else:
            self._add_token(TokenType.IDENTIFIER, word, start)

    def _read_remark(self):
        """Everything after REM is free text"""
        rest = self.source[self.pos:]
        text = rest.strip()
        if text:
            self._add_token(TokenType.STRING, text, self.pos + (len(rest) - len(rest.lstrip())))
        self.pos = len(self.source)

    def _read_operator(self) -> bool:
        for op in self.OPERATORS:
            if self.source.startswith(op, self.pos):
                self._add_token(TokenType.OPERATOR, op, self.pos)
                self.pos += len(op)
                return True
        return False

    def _add_token(self, type: str, value: Any, column: int):
        self.tokens.append(Token(type=type, value=value, column=column))


# ============================================================================
# Convenience Function
# ============================================================================

def tokenize(line: str) -> List[Token]:
    """Tokenize one BASIC source line"""
    return BasicTokenizer(line).tokenize()


__all__ = ['TokenType', 'Token', 'BasicTokenizer', 'tokenize']
