"""
Test suite for the BASIC parser
"""

import pytest
import sys
import os

# Add grandparent directory to path for imports (to find retrograde package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from retrograde.errors import E_SYNTAX, ParseError
from retrograde.nodes import (
    Binary, Empty, End, For, Goto, Home, If, Input, Let, Listing, New, Next,
    Number, Print, ProgramLine, Rem, Run, String, Unary, Variable,
)
from retrograde.parser import BasicParser, parse
from retrograde.tokenizer import tokenize


def parse_line(line):
    return parse(tokenize(line))


class TestProgramLines:
    """Test line-number handling"""

    def test_empty(self):
        assert parse_line('') == Empty()

    def test_program_line(self):
        assert parse_line('10 END') == ProgramLine(line_number=10, statement=End())

    def test_bare_line_number(self):
        assert parse_line('10') == ProgramLine(line_number=10, statement=Empty())

    def test_immediate_statement(self):
        assert parse_line('HOME') == Home()

    def test_fractional_line_number(self):
        with pytest.raises(ParseError):
            parse_line('10.5 END')

    def test_line_zero_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            parse_line('0 PRINT 1')
        assert exc_info.value.detail == "Illegal line number: 0"

    def test_goto_zero_rejected(self):
        with pytest.raises(ParseError):
            parse_line('GOTO 0')

    def test_class_interface(self):
        assert BasicParser(tokenize('RUN')).parse() == Run()


class TestExpressions:
    """Test expression precedence"""

    def test_multiplication_binds_tighter(self):
        assert parse_line('PRINT A+B*2') == Print(
            expressions=(Binary('+', Variable('A'), Binary('*', Variable('B'), Number(2))),),
            separators=(),
        )

    def test_left_associative_subtraction(self):
        node = parse_line('X = 10-4-3')
        assert node.value == Binary('-', Binary('-', Number(10), Number(4)), Number(3))

    def test_left_associative_division(self):
        node = parse_line('X = 8/4/2')
        assert node.value == Binary('/', Binary('/', Number(8), Number(4)), Number(2))

    def test_parentheses(self):
        node = parse_line('X = (1+2)*3')
        assert node.value == Binary('*', Binary('+', Number(1), Number(2)), Number(3))

    def test_comparison_lowest(self):
        node = parse_line('X = A+1 < B*2')
        assert node.value == Binary(
            '<',
            Binary('+', Variable('A'), Number(1)),
            Binary('*', Variable('B'), Number(2)),
        )

    def test_comparison_left_fold(self):
        node = parse_line('X = 1 < 2 = 1')
        assert node.value == Binary('=', Binary('<', Number(1), Number(2)), Number(1))

    def test_unary_minus(self):
        node = parse_line('X = -A*2')
        assert node.value == Binary('*', Unary('-', Variable('A')), Number(2))

    def test_string_literal(self):
        assert parse_line('A$ = "HI"').value == String('HI')

    def test_missing_close_paren(self):
        with pytest.raises(ParseError) as exc_info:
            parse_line('X = (1+2')
        assert "Expected PUNCTUATION ')'" in exc_info.value.detail

    def test_dangling_operator(self):
        with pytest.raises(ParseError):
            parse_line('X = 1+')


class TestPrint:
    """Test PRINT parsing"""

    def test_empty_print(self):
        assert parse_line('PRINT') == Print()

    def test_separators(self):
        node = parse_line('PRINT "A";B,C;')
        assert node.expressions == (String('A'), Variable('B'), Variable('C'))
        assert node.separators == (';', ',', ';')

    def test_stops_at_other_token(self):
        node = parse_line('PRINT 1 2')
        assert node.expressions == (Number(1),)


class TestLet:
    """Test assignment parsing"""

    def test_let(self):
        assert parse_line('LET A = 5') == Let(variable='A', value=Number(5))

    def test_implicit_let(self):
        assert parse_line('A = 5') == Let(variable='A', value=Number(5))

    def test_missing_equals(self):
        with pytest.raises(ParseError) as exc_info:
            parse_line('LET A 5')
        assert exc_info.value.detail == "Expected OPERATOR '=', got NUMBER"


class TestInput:
    """Test INPUT parsing"""

    def test_plain(self):
        assert parse_line('INPUT A') == Input(prompt='', variable='A')

    def test_prompt_semicolon(self):
        assert parse_line('INPUT "NAME";N$') == Input(prompt='NAME', variable='N$')

    def test_prompt_comma(self):
        assert parse_line('INPUT "AGE",A') == Input(prompt='AGE,', variable='A')

    def test_requires_variable(self):
        with pytest.raises(ParseError):
            parse_line('INPUT "X";')


class TestControlFlow:
    """Test IF, GOTO, FOR and NEXT"""

    def test_if_then_line_number(self):
        assert parse_line('IF A THEN 100') == If(condition=Variable('A'), then_statement=Goto(100))

    def test_if_then_statement(self):
        node = parse_line('IF A = 1 THEN PRINT "ONE"')
        assert node.then_statement == Print(expressions=(String('ONE'),))

    def test_if_requires_then(self):
        with pytest.raises(ParseError):
            parse_line('IF A PRINT 1')

    def test_goto(self):
        assert parse_line('GOTO 30') == Goto(line_number=30)

    def test_goto_requires_number(self):
        with pytest.raises(ParseError):
            parse_line('GOTO A')

    def test_for_default_step(self):
        assert parse_line('FOR I = 1 TO 10') == For('I', Number(1), Number(10), Number(1))

    def test_for_step(self):
        node = parse_line('FOR I = 10 TO 1 STEP -1')
        assert node.step == Unary('-', Number(1))

    def test_for_requires_to(self):
        with pytest.raises(ParseError):
            parse_line('FOR I = 1 10')

    def test_next(self):
        assert parse_line('NEXT') == Next(variable=None)
        assert parse_line('NEXT I') == Next(variable='I')


class TestCommands:
    """Test REM, END, LIST, RUN, NEW, HOME"""

    def test_rem(self):
        assert parse_line('REM A COMMENT') == Rem(text='A COMMENT')

    def test_simple_commands(self):
        assert parse_line('END') == End()
        assert parse_line('RUN') == Run()
        assert parse_line('NEW') == New()
        assert parse_line('HOME') == Home()

    def test_list_forms(self):
        assert parse_line('LIST') == Listing(None, None)
        assert parse_line('LIST 10') == Listing(10, None)
        assert parse_line('LIST 10-20') == Listing(10, 20)
        assert parse_line('LIST 10-') == Listing(10, None)
        assert parse_line('LIST -20') == Listing(None, 20)


class TestErrors:
    """Test parse errors"""

    def test_unknown_keyword(self):
        with pytest.raises(ParseError) as exc_info:
            parse_line('GOSUB 100')
        assert exc_info.value.detail == "Unknown keyword: GOSUB"
        assert exc_info.value.code == E_SYNTAX

    def test_unexpected_token(self):
        with pytest.raises(ParseError) as exc_info:
            parse_line('"HELLO"')
        assert exc_info.value.detail == "Unexpected token: STRING"

    def test_nodes_are_immutable(self):
        node = parse_line('PRINT 1')
        with pytest.raises(AttributeError):
            node.expressions = ()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
