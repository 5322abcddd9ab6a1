"""
Test suite for output sinks
"""

import pytest
import sys
import os

# Add grandparent directory to path for imports (to find retrograde package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from retrograde.sinks import CallbackSink, CaptureSink, NullSink, OutputSink


class TestCaptureSink:
    """Test recording and forwarding"""

    def test_output_and_lines(self):
        sink = CaptureSink()
        sink.emit('A')
        sink.emit_line('B')
        sink.emit_line('')
        sink.emit_line('  C  ')
        assert sink.chunks == ['A', 'B\n', '\n', '  C  \n']
        assert sink.output() == 'AB\n\n  C'
        assert sink.lines() == ['AB', 'C']

    def test_clear(self):
        sink = CaptureSink()
        sink.emit_line('X')
        sink.clear()
        assert sink.output() == ''
        assert sink.lines() == []

    def test_forwards_downstream(self):
        downstream = CaptureSink()
        sink = CaptureSink(downstream)
        sink.emit('1')
        sink.emit_line('2')
        assert downstream.chunks == ['1', '2\n']


class TestCallbackSink:
    """Test callback forwarding"""

    def test_callbacks(self):
        calls = []
        sink = CallbackSink(lambda t: calls.append(('emit', t)), lambda t: calls.append(('line', t)))
        sink.emit('A')
        sink.emit_line('B')
        assert calls == [('emit', 'A'), ('line', 'B')]

    def test_missing_callbacks(self):
        sink = CallbackSink()
        sink.emit('A')
        sink.emit_line('B')


class TestNullSink:
    """Test the discarding sink"""

    def test_discards(self):
        sink = NullSink()
        sink.emit('A')
        sink.emit_line('B')
        assert isinstance(sink, OutputSink)

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            OutputSink()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
