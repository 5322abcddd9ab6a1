"""
Output sinks

The interpreter never writes to a screen directly; it emits text into an
OutputSink. A CaptureSink can be chained in front of any other sink to
record what a program printed while still forwarding it downstream.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional


class OutputSink(ABC):
    """Destination for interpreter output"""

    @abstractmethod
    def emit(self, text: str) -> None:
        """Write text without a line break"""

    @abstractmethod
    def emit_line(self, text: str) -> None:
        """Write text followed by a line break"""


class NullSink(OutputSink):
    """Discards everything"""

    def emit(self, text: str) -> None:
        pass

    def emit_line(self, text: str) -> None:
        pass


class CallbackSink(OutputSink):
    """Forwards output to a pair of plain callables"""

    def __init__(self, output: Optional[Callable[[str], None]] = None,
                 output_line: Optional[Callable[[str], None]] = None):
        self.output = output
        self.output_line = output_line

    def emit(self, text: str) -> None:
        if self.output is not None:
            self.output(text)

    def emit_line(self, text: str) -> None:
        if self.output_line is not None:
            self.output_line(text)


class CaptureSink(OutputSink):
    """Records emitted text and forwards it to an optional downstream sink"""

    def __init__(self, downstream: Optional[OutputSink] = None):
        self.downstream = downstream
        self.chunks: List[str] = []

    def emit(self, text: str) -> None:
        self.chunks.append(text)
        if self.downstream is not None:
            self.downstream.emit(text)

    def emit_line(self, text: str) -> None:
        self.chunks.append(text + '\n')
        if self.downstream is not None:
            self.downstream.emit_line(text)

    def output(self) -> str:
        """Everything captured so far, stripped of surrounding whitespace"""
        return ''.join(self.chunks).strip()

    def lines(self) -> List[str]:
        """Captured output as stripped, non-empty lines"""
        return [line.strip() for line in self.output().split('\n') if line.strip()]

    def clear(self) -> None:
        self.chunks = []


__all__ = ['OutputSink', 'NullSink', 'CallbackSink', 'CaptureSink']
