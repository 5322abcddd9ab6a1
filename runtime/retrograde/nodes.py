"""
AST nodes for Retrograde BASIC.

Nodes are immutable; sequences are stored as tuples.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class ASTNode:
    """Base AST node"""
    pass


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Number(ASTNode):
    """Numeric literal"""
    value: Union[int, float]


@dataclass(frozen=True)
class String(ASTNode):
    """String literal"""
    value: str


@dataclass(frozen=True)
class Variable(ASTNode):
    """Variable reference; names ending in '$' are string variables"""
    name: str


@dataclass(frozen=True)
class Binary(ASTNode):
    """Binary operation"""
    operator: str
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class Unary(ASTNode):
    """Unary operation"""
    operator: str
    operand: ASTNode


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class Empty(ASTNode):
    pass


@dataclass(frozen=True)
class ProgramLine(ASTNode):
    """A numbered line to be stored rather than executed"""
    line_number: int
    statement: ASTNode


@dataclass(frozen=True)
class Print(ASTNode):
    expressions: Tuple[ASTNode, ...] = ()
    separators: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Let(ASTNode):
    variable: str
    value: ASTNode


@dataclass(frozen=True)
class Input(ASTNode):
    prompt: str
    variable: str


@dataclass(frozen=True)
class If(ASTNode):
    condition: ASTNode
    then_statement: ASTNode


@dataclass(frozen=True)
class Goto(ASTNode):
    line_number: int


@dataclass(frozen=True)
class For(ASTNode):
    variable: str
    start: ASTNode
    end: ASTNode
    step: ASTNode = field(default_factory=lambda: Number(1))


@dataclass(frozen=True)
class Next(ASTNode):
    variable: Optional[str] = None


@dataclass(frozen=True)
class Rem(ASTNode):
    text: str = ""


@dataclass(frozen=True)
class End(ASTNode):
    pass


@dataclass(frozen=True)
class Listing(ASTNode):
    """LIST statement with an optional inclusive line range"""
    start: Optional[int] = None
    end: Optional[int] = None


@dataclass(frozen=True)
class Run(ASTNode):
    pass


@dataclass(frozen=True)
class New(ASTNode):
    pass


@dataclass(frozen=True)
class Home(ASTNode):
    pass


__all__ = [
    'ASTNode',
    'Number',
    'String',
    'Variable',
    'Binary',
    'Unary',
    'Empty',
    'ProgramLine',
    'Print',
    'Let',
    'Input',
    'If',
    'Goto',
    'For',
    'Next',
    'Rem',
    'End',
    'Listing',
    'Run',
    'New',
    'Home',
]
