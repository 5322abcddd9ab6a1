"""
Retrograde BASIC Parser

Recursive-descent parser turning the tokens of one line into one AST node:
a ProgramLine when the line starts with a line number, otherwise the
statement itself (immediate mode).

Expression precedence, lowest first:
    comparison      = <> < > <= >=
    addition        + -
    multiplication  * /
    primary         number, string, variable, ( expr ), -primary
"""

from typing import List, Optional

from .errors import ParseError
from .nodes import (
    ASTNode, Binary, Empty, End, For, Goto, Home, If, Input, Let, Listing,
    New, Next, Number, Print, ProgramLine, Rem, Run, String, Unary, Variable,
)
from .tokenizer import Token, TokenType


COMPARISON_OPERATORS = ('=', '<>', '<', '>', '<=', '>=')
ADDITION_OPERATORS = ('+', '-')
MULTIPLICATION_OPERATORS = ('*', '/')


class BasicParser:
    """Parse the tokens of one BASIC line into an AST"""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> ASTNode:
        """Parse a program line or an immediate-mode statement"""
        if self._is_at_end():
            return Empty()

        if self._check(TokenType.NUMBER):
            line_number = self._line_number()
            if self._is_at_end():
                return ProgramLine(line_number=line_number, statement=Empty())
            return ProgramLine(line_number=line_number, statement=self._parse_statement())

        return self._parse_statement()

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> ASTNode:
        token = self._peek()

        if token.type == TokenType.KEYWORD:
            handler = {
                'PRINT': self._parse_print,
                'LET': self._parse_let,
                'INPUT': self._parse_input,
                'IF': self._parse_if,
                'GOTO': self._parse_goto,
                'FOR': self._parse_for,
                'NEXT': self._parse_next,
                'REM': self._parse_rem,
                'LIST': self._parse_list,
            }.get(token.value)
            if handler is not None:
                return handler()

            simple = {'END': End, 'RUN': Run, 'NEW': New, 'HOME': Home}.get(token.value)
            if simple is not None:
                self._advance()
                return simple()

            raise ParseError(f"Unknown keyword: {token.value}")

        if token.type == TokenType.IDENTIFIER:
            return self._parse_let()

        raise ParseError(f"Unexpected token: {token.type}")

    def _parse_print(self) -> Print:
        self.expect(TokenType.KEYWORD, 'PRINT')
        expressions = []
        separators = []

        while not self._is_at_end():
            expressions.append(self._parse_expression())

            if self._match(TokenType.PUNCTUATION, ';'):
                separators.append(';')
            elif self._match(TokenType.PUNCTUATION, ','):
                separators.append(',')
            else:
                break

        return Print(expressions=tuple(expressions), separators=tuple(separators))

    def _parse_let(self) -> Let:
        """LET is optional: 'A = 1' and 'LET A = 1' are the same"""
        self._match(TokenType.KEYWORD, 'LET')
        variable = self.expect(TokenType.IDENTIFIER).value
        self.expect(TokenType.OPERATOR, '=')
        return Let(variable=variable, value=self._parse_expression())

    def _parse_input(self) -> Input:
        self.expect(TokenType.KEYWORD, 'INPUT')
        prompt = ''

        if self._check(TokenType.STRING):
            prompt = self._advance().value
            if self._match(TokenType.PUNCTUATION, ','):
                prompt += ','
            else:
                self._match(TokenType.PUNCTUATION, ';')

        variable = self.expect(TokenType.IDENTIFIER).value
        return Input(prompt=prompt, variable=variable)

    def _parse_if(self) -> If:
        self.expect(TokenType.KEYWORD, 'IF')
        condition = self._parse_expression()
        self.expect(TokenType.KEYWORD, 'THEN')

        # IF ... THEN 100 is shorthand for IF ... THEN GOTO 100
        if self._check(TokenType.NUMBER):
            then_statement = Goto(line_number=self._line_number())
        else:
            then_statement = self._parse_statement()

        return If(condition=condition, then_statement=then_statement)

    def _parse_goto(self) -> Goto:
        self.expect(TokenType.KEYWORD, 'GOTO')
        return Goto(line_number=self._line_number())

    def _parse_for(self) -> For:
        self.expect(TokenType.KEYWORD, 'FOR')
        variable = self.expect(TokenType.IDENTIFIER).value
        self.expect(TokenType.OPERATOR, '=')
        start = self._parse_expression()
        self.expect(TokenType.KEYWORD, 'TO')
        end = self._parse_expression()

        step = Number(1)
        if self._match(TokenType.KEYWORD, 'STEP'):
            step = self._parse_expression()

        return For(variable=variable, start=start, end=end, step=step)

    def _parse_next(self) -> Next:
        self.expect(TokenType.KEYWORD, 'NEXT')
        variable = None
        if self._check(TokenType.IDENTIFIER):
            variable = self._advance().value
        return Next(variable=variable)

    def _parse_rem(self) -> Rem:
        self.expect(TokenType.KEYWORD, 'REM')
        text = ''
        if self._check(TokenType.STRING):
            text = self._advance().value
        return Rem(text=text)

    def _parse_list(self) -> Listing:
        """LIST, LIST 10, LIST 10-50, LIST 10-, LIST -50"""
        self.expect(TokenType.KEYWORD, 'LIST')
        start = None
        end = None

        if self._check(TokenType.NUMBER):
            start = self._line_number()
            if self._match(TokenType.OPERATOR, '-') and self._check(TokenType.NUMBER):
                end = self._line_number()
        elif self._match(TokenType.OPERATOR, '-'):
            end = self._line_number()

        return Listing(start=start, end=end)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _parse_expression(self) -> ASTNode:
        return self._parse_comparison()

    def _parse_comparison(self) -> ASTNode:
        left = self._parse_addition()
        while self._check_operator(COMPARISON_OPERATORS):
            op = self._advance().value
            right = self._parse_addition()
            left = Binary(operator=op, left=left, right=right)
        return left

    def _parse_addition(self) -> ASTNode:
        left = self._parse_multiplication()
        while self._check_operator(ADDITION_OPERATORS):
            op = self._advance().value
            right = self._parse_multiplication()
            left = Binary(operator=op, left=left, right=right)
        return left

    def _parse_multiplication(self) -> ASTNode:
        left = self._parse_primary()
        while self._check_operator(MULTIPLICATION_OPERATORS):
            op = self._advance().value
            right = self._parse_primary()
            left = Binary(operator=op, left=left, right=right)
        return left

    def _parse_primary(self) -> ASTNode:
        token = self._peek()

        if self._match(TokenType.NUMBER):
            return Number(value=token.value)

        if self._match(TokenType.STRING):
            return String(value=token.value)

        if self._match(TokenType.IDENTIFIER):
            return Variable(name=token.value)

        if self._match(TokenType.PUNCTUATION, '('):
            expr = self._parse_expression()
            self.expect(TokenType.PUNCTUATION, ')')
            return expr

        if self._match(TokenType.OPERATOR, '-'):
            return Unary(operator='-', operand=self._parse_primary())

        raise ParseError(f"Unexpected token in expression: {token.type} ({token.value})")

    # ------------------------------------------------------------------
    # Parser utilities
    # ------------------------------------------------------------------

    def expect(self, type: str, value: Optional[str] = None) -> Token:
        """Consume the current token if it matches, otherwise fail"""
        if not self._check(type, value):
            expected = f"{type} '{value}'" if value is not None else type
            raise ParseError(f"Expected {expected}, got {self._peek().type}")
        return self._advance()

    def _line_number(self) -> int:
        token = self.expect(TokenType.NUMBER)
        if isinstance(token.value, float):
            if not token.value.is_integer():
                raise ParseError(f"Illegal line number: {token.value}")
            return self._positive_line_number(int(token.value))
        return self._positive_line_number(token.value)

    @staticmethod
    def _positive_line_number(value: int) -> int:
        if value < 1:
            raise ParseError(f"Illegal line number: {value}")
        return value

    def _check_operator(self, operators) -> bool:
        return self._check(TokenType.OPERATOR) and self._peek().value in operators

    def _match(self, type: str, value: Optional[str] = None) -> bool:
        """Consume the current token if it matches"""
        if self._check(type, value):
            self._advance()
            return True
        return False

    def _check(self, type: str, value: Optional[str] = None) -> bool:
        if self._is_at_end():
            return False
        token = self._peek()
        return token.type == type and (value is None or token.value == value)

    def _advance(self) -> Token:
        token = self._peek()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _is_at_end(self) -> bool:
        return self._peek().type in (TokenType.EOL, TokenType.EOF)

    def _peek(self) -> Token:
        if self.pos >= len(self.tokens):
            return Token(type=TokenType.EOF, value=None, column=self.pos)
        return self.tokens[self.pos]


def parse(tokens: List[Token]) -> ASTNode:
    """Parse the tokens of one line"""
    return BasicParser(tokens).parse()


__all__ = ['BasicParser', 'parse']
