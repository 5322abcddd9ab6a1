"""
Retrograde - Applesoft BASIC toolchain

**Language:**
- Tokenizer: one source line -> tokens
- Parser: tokens -> AST (precedence climbing for expressions)
- Interpreter: program store, variables, FOR/NEXT stack, RUN driver

**Terminal:**
- BasicScreen: 24x40 scrolling character grid with line input
- AppleIIEnvironment: REPL wiring screen and interpreter together
- Output sinks: callback, null and capturing sinks for interpreter output

Version: 1.0.0
"""

__version__ = '1.0.0'

# ============================================================================
# Errors
# ============================================================================

from .errors import (
    E_SYNTAX, E_UNDEF_STATEMENT, E_TYPE_MISMATCH, E_NEXT_WITHOUT_FOR,
    E_DIVISION_BY_ZERO, E_OVERFLOW, NO_PROGRAM,
    BasicError, LexerError, ParseError, ScreenError,
)

# ============================================================================
# Language
# ============================================================================

from .tokenizer import TokenType, Token, BasicTokenizer, tokenize
from .nodes import (
    ASTNode, Number, String, Variable, Binary, Unary,
    Empty, ProgramLine, Print, Let, Input, If, Goto, For, Next, Rem, End,
    Listing, Run, New, Home,
)
from .parser import BasicParser, parse
from .interpreter import BasicInterpreter, LoopFrame, ProgramEntry, format_value

# ============================================================================
# Terminal
# ============================================================================

from .sinks import OutputSink, NullSink, CallbackSink, CaptureSink
from .screen import BasicScreen, ScreenConfig
from .environment import AppleIIEnvironment

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Version
    '__version__',

    # Errors
    'E_SYNTAX', 'E_UNDEF_STATEMENT', 'E_TYPE_MISMATCH', 'E_NEXT_WITHOUT_FOR',
    'E_DIVISION_BY_ZERO', 'E_OVERFLOW', 'NO_PROGRAM',
    'BasicError', 'LexerError', 'ParseError', 'ScreenError',

    # Tokenizer
    'TokenType', 'Token', 'BasicTokenizer', 'tokenize',

    # AST
    'ASTNode', 'Number', 'String', 'Variable', 'Binary', 'Unary',
    'Empty', 'ProgramLine', 'Print', 'Let', 'Input', 'If', 'Goto', 'For',
    'Next', 'Rem', 'End', 'Listing', 'Run', 'New', 'Home',

    # Parser / Interpreter
    'BasicParser', 'parse',
    'BasicInterpreter', 'LoopFrame', 'ProgramEntry', 'format_value',

    # Terminal
    'OutputSink', 'NullSink', 'CallbackSink', 'CaptureSink',
    'BasicScreen', 'ScreenConfig',
    'AppleIIEnvironment',
]
