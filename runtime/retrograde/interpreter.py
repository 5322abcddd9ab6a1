"""
Retrograde BASIC Interpreter

Tree-walking execution of the AST produced by the parser.

An interpreter instance owns:
- the program store (line number -> source text + statement AST)
- the variable environment
- the FOR/NEXT loop stack
- the I/O callbacks: an OutputSink, an awaitable input callback and a
  clear-screen callback

Lines are fed in through execute_immediate(). A line starting with a number
is stored (or deleted when it has no body); anything else runs at once.
RUN walks the stored lines in ascending order with an explicit cursor so
GOTO and NEXT can move it.

INPUT is the only statement that suspends: it awaits the input callback,
which pauses the whole RUN loop until the user finishes a line.
"""

import inspect
import logging
import math
import re
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Union

from .errors import (
    E_DIVISION_BY_ZERO, E_NEXT_WITHOUT_FOR, E_OVERFLOW, E_SYNTAX, E_TYPE_MISMATCH,
    E_UNDEF_STATEMENT, NO_PROGRAM, BasicError,
)
from .nodes import (
    ASTNode, Binary, Empty, End, For, Goto, Home, If, Input, Let, Listing,
    New, Next, Number, Print, ProgramLine, Rem, Run, String, Unary, Variable,
)
from .parser import parse
from .sinks import CallbackSink, CaptureSink, NullSink, OutputSink
from .tokenizer import tokenize


log = logging.getLogger(__name__)

Value = Union[int, float, str]

InputCallback = Callable[[str], Union[str, Awaitable[str]]]

DEFAULT_INPUT_PROMPT = '? '

# Gap inserted by a ',' in PRINT, standing in for tab zones
PRINT_ZONE_GAP = ' ' * 5

_LEADING_FLOAT = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')
_LEADING_LINE_NUMBER = re.compile(r'^\d+\s*')


@dataclass
class ProgramEntry:
    """A stored program line"""
    source: str
    statement: ASTNode


@dataclass
class LoopFrame:
    """An active FOR loop"""
    variable: str
    limit: float
    step: float
    return_line: Optional[int]


@dataclass
class Jump:
    """Where the RUN driver continues after the current line"""
    line_number: int
    resume_after: bool = False


def format_value(value: Value) -> str:
    """Render a value the way PRINT shows it"""
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def parse_number(text: str) -> Optional[float]:
    """Leading numeric prefix of text, or None if there is none"""
    match = _LEADING_FLOAT.match(text)
    if match is None:
        return None
    return float(match.group(1))


class BasicInterpreter:
    """Interpreter session: program store, variables, loop stack and I/O"""

    def __init__(self, sink: Optional[OutputSink] = None,
                 input_callback: Optional[InputCallback] = None,
                 clear_callback: Optional[Callable[[], None]] = None):
        self.program: Dict[int, ProgramEntry] = {}
        self.variables: Dict[str, Value] = {}
        self.for_stack: List[LoopFrame] = []
        self.current_line: Optional[int] = None
        self.running = False
        self.sink: OutputSink = sink if sink is not None else NullSink()
        self.input_callback = input_callback
        self.clear_callback = clear_callback
        self._jump: Optional[Jump] = None

    def init(self, output: Optional[Callable[[str], None]] = None,
             output_line: Optional[Callable[[str], None]] = None,
             input: Optional[InputCallback] = None,
             clear: Optional[Callable[[], None]] = None):
        """Register the four I/O callbacks"""
        self.sink = CallbackSink(output, output_line)
        self.input_callback = input
        self.clear_callback = clear

    @contextmanager
    def capture(self) -> Iterator[CaptureSink]:
        """
        Record everything printed inside the block.

        Output still reaches the original sink, which is restored on exit.

        Example:
            >>> with interpreter.capture() as captured:
            ...     await interpreter.execute_immediate('PRINT 1+1')
            >>> captured.lines()
            ['2']
        """
        original = self.sink
        captured = CaptureSink(original)
        self.sink = captured
        try:
            yield captured
        finally:
            self.sink = original

    # ========================================================================
    # Entry Points
    # ========================================================================

    async def execute_immediate(self, line: str) -> None:
        """Store a numbered program line or execute a statement now"""
        if not line.strip():
            return

        try:
            node = parse(tokenize(line))

            if isinstance(node, ProgramLine):
                self.store_line(node.line_number, line, node.statement)
            elif isinstance(node, Empty):
                return
            else:
                await self.execute_node(node)
        except BasicError as error:
            self.print_line(error.report())
        finally:
            # No driver outside RUN to honor a GOTO or NEXT jump
            self._jump = None

    async def run(self) -> None:
        """Execute the stored program from its lowest line"""
        if not self.program:
            self.print_line(NO_PROGRAM)
            return

        self._reset_run_state()
        self.running = True
        lines = self.line_numbers()
        index = 0
        log.debug("RUN: %d lines", len(lines))

        try:
            while self.running and index < len(lines):
                self.current_line = lines[index]
                await self.execute_node(self.program[self.current_line].statement)

                if self._jump is not None:
                    index = self._resolve_jump(lines, self._jump)
                    self._jump = None
                else:
                    index += 1
        except BasicError as error:
            if error.line_number is None:
                error.line_number = self.current_line
            self.print_line(error.report())
        finally:
            log.debug("RUN stopped at line %s", self.current_line)
            self.running = False
            self.current_line = None
            self._jump = None

    def execute_new(self) -> None:
        """Clear program, variables and loop stack"""
        self.program.clear()
        self.variables = {}
        self.for_stack = []
        self.running = False
        self.print_line('')

    # ========================================================================
    # Program Store
    # ========================================================================

    def store_line(self, line_number: int, source: str, statement: ASTNode) -> None:
        """Store a program line; an empty body deletes the line"""
        if isinstance(statement, Empty):
            self.program.pop(line_number, None)
            log.debug("Deleted line %d", line_number)
        else:
            self.program[line_number] = ProgramEntry(source=source, statement=statement)
            log.debug("Stored line %d", line_number)

    def line_numbers(self) -> List[int]:
        return sorted(self.program)

    def list_lines(self, start: Optional[int] = None, end: Optional[int] = None) -> List[str]:
        """Program lines in the inclusive range, as LIST prints them"""
        listing = []
        for line_number in self.line_numbers():
            if start is not None and line_number < start:
                continue
            if end is not None and line_number > end:
                continue
            text = _LEADING_LINE_NUMBER.sub('', self.program[line_number].source.strip())
            listing.append(f"{line_number} {text}")
        return listing

    # ========================================================================
    # Variables
    # ========================================================================

    def get_var(self, name: str) -> Value:
        """Read a variable, creating it with its default if unset"""
        if name not in self.variables:
            self.variables[name] = '' if name.endswith('$') else 0
        return self.variables[name]

    def set_var(self, name: str, value: Value) -> None:
        self.variables[name] = value

    # ========================================================================
    # Statements
    # ========================================================================

    async def execute_node(self, node: ASTNode) -> None:
        """Execute a single statement"""
        if isinstance(node, Print):
            self._execute_print(node)

        elif isinstance(node, Let):
            self.set_var(node.variable, self.evaluate(node.value))

        elif isinstance(node, Input):
            await self._execute_input(node)

        elif isinstance(node, If):
            if self._is_true(self.evaluate(node.condition)):
                await self.execute_node(node.then_statement)

        elif isinstance(node, Goto):
            if node.line_number not in self.program:
                raise BasicError(E_UNDEF_STATEMENT)
            self._jump = Jump(node.line_number)

        elif isinstance(node, For):
            self._execute_for(node)

        elif isinstance(node, Next):
            self._execute_next(node)

        elif isinstance(node, End):
            self.running = False

        elif isinstance(node, Run):
            if self.running:
                # RUN from inside a program starts it over
                self._reset_run_state()
                self._jump = Jump(self.line_numbers()[0])
            else:
                await self.run()

        elif isinstance(node, Listing):
            self._execute_list(node)

        elif isinstance(node, New):
            self.execute_new()

        elif isinstance(node, Home):
            if self.clear_callback is not None:
                self.clear_callback()

        elif isinstance(node, (Rem, Empty)):
            pass

        else:
            raise BasicError(E_SYNTAX, f"Cannot execute {type(node).__name__}")

    def _execute_print(self, node: Print):
        parts = []
        for i, expr in enumerate(node.expressions):
            parts.append(format_value(self.evaluate(expr)))
            if i < len(node.separators) and node.separators[i] == ',':
                parts.append(PRINT_ZONE_GAP)

        text = ''.join(parts)
        if node.separators and node.separators[-1] == ';':
            self.print(text)
        else:
            self.print_line(text)

    async def _execute_input(self, node: Input):
        result = None
        if self.input_callback is not None:
            result = self.input_callback(node.prompt or DEFAULT_INPUT_PROMPT)
            if inspect.isawaitable(result):
                result = await result
        text = '' if result is None else str(result)

        if node.variable.endswith('$'):
            self.set_var(node.variable, text)
            return

        number = parse_number(text)
        if number is None:
            raise BasicError(E_TYPE_MISMATCH)
        self.set_var(node.variable, number)

    def _execute_for(self, node: For):
        start = self._to_number(self.evaluate(node.start))
        limit = self._to_number(self.evaluate(node.end))
        step = self._to_number(self.evaluate(node.step))

        # Re-entering a loop drops its old frame and any nested inside it
        for depth, frame in enumerate(self.for_stack):
            if frame.variable == node.variable:
                del self.for_stack[depth:]
                break

        self.set_var(node.variable, start)
        self.for_stack.append(LoopFrame(
            variable=node.variable, limit=limit, step=step, return_line=self.current_line,
        ))
        log.debug("FOR %s: depth %d", node.variable, len(self.for_stack))

    def _execute_next(self, node: Next):
        if not self.for_stack:
            raise BasicError(E_NEXT_WITHOUT_FOR)

        frame = self.for_stack[-1]
        if node.variable is not None and node.variable != frame.variable:
            raise BasicError(E_NEXT_WITHOUT_FOR)

        value = self._to_number(self.get_var(frame.variable)) + frame.step
        self.set_var(frame.variable, value)

        if (frame.step > 0 and value <= frame.limit) or (frame.step < 0 and value >= frame.limit):
            if frame.return_line is not None:
                self._jump = Jump(frame.return_line, resume_after=True)
        else:
            self.for_stack.pop()
            log.debug("NEXT %s: loop done", frame.variable)

    def _execute_list(self, node: Listing):
        if not self.program:
            self.print_line('')
            return
        for text in self.list_lines(node.start, node.end):
            self.print_line(text)

    # ========================================================================
    # Expressions
    # ========================================================================

    def evaluate(self, node: ASTNode) -> Value:
        """Evaluate an expression node"""
        if isinstance(node, (Number, String)):
            return node.value

        elif isinstance(node, Variable):
            return self.get_var(node.name)

        elif isinstance(node, Binary):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self._eval_binary_op(node.operator, left, right)

        elif isinstance(node, Unary):
            operand = self.evaluate(node.operand)
            if node.operator == '-':
                return -self._to_number(operand)
            raise BasicError(E_TYPE_MISMATCH, f"Unknown unary operator: {node.operator}")

        else:
            raise BasicError(E_SYNTAX, f"Cannot evaluate {type(node).__name__}")

    def _eval_binary_op(self, op: str, left: Value, right: Value) -> Value:
        if op == '+' and isinstance(left, str) and isinstance(right, str):
            return left + right

        if op in ('+', '-', '*', '/'):
            left = self._to_number(left)
            right = self._to_number(right)
            if op == '+':
                return left + right
            elif op == '-':
                return left - right
            elif op == '*':
                return left * right
            if right == 0:
                raise BasicError(E_DIVISION_BY_ZERO)
            return left / right

        if op == '=':
            return 1 if left == right else 0
        elif op == '<>':
            return 1 if left != right else 0

        try:
            if op == '<':
                return 1 if left < right else 0
            elif op == '>':
                return 1 if left > right else 0
            elif op == '<=':
                return 1 if left <= right else 0
            elif op == '>=':
                return 1 if left >= right else 0
        except TypeError:
            raise BasicError(E_TYPE_MISMATCH)

        raise BasicError(E_TYPE_MISMATCH, f"Unknown operator: {op}")

    # ========================================================================
    # Helpers
    # ========================================================================

    def print(self, text: str) -> None:
        self.sink.emit(text)

    def print_line(self, text: str) -> None:
        self.sink.emit_line(text)

    def _reset_run_state(self):
        self.variables = {}
        self.for_stack = []
        self._jump = None

    def _resolve_jump(self, lines: List[int], jump: Jump) -> int:
        try:
            index = lines.index(jump.line_number)
        except ValueError:
            raise BasicError(E_UNDEF_STATEMENT)
        log.debug("Jump from %s to %d", self.current_line, jump.line_number)
        return index + 1 if jump.resume_after else index

    @staticmethod
    def _to_number(value: Any) -> float:
        if isinstance(value, str):
            raise BasicError(E_TYPE_MISMATCH)
        try:
            return float(value)
        except OverflowError:
            raise BasicError(E_OVERFLOW)

    @staticmethod
    def _is_true(value: Value) -> bool:
        if isinstance(value, str):
            return value != ''
        return value != 0


__all__ = [
    'BasicInterpreter',
    'ProgramEntry',
    'LoopFrame',
    'Jump',
    'Value',
    'format_value',
    'parse_number',
    'DEFAULT_INPUT_PROMPT',
    'PRINT_ZONE_GAP',
]
