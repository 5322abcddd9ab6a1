"""
Pytest configuration and fixtures for the Retrograde BASIC tests.
"""

import asyncio
import os
import sys

import pytest

# Add grandparent directory to path for imports (to find retrograde package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from retrograde.interpreter import BasicInterpreter
from retrograde.sinks import CaptureSink


class Session:
    """An interpreter wired to a capture sink and scripted input"""

    def __init__(self, inputs=()):
        self.sink = CaptureSink()
        self.inputs = list(inputs)
        self.prompts = []
        self.cleared = 0
        self.interpreter = BasicInterpreter(
            sink=self.sink,
            input_callback=self._input,
            clear_callback=self._clear,
        )

    async def _input(self, prompt):
        self.prompts.append(prompt)
        return self.inputs.pop(0)

    def _clear(self):
        self.cleared += 1

    def execute(self, *lines):
        """Feed lines to execute_immediate and return the captured lines"""
        async def feed():
            for line in lines:
                await self.interpreter.execute_immediate(line)
        asyncio.run(feed())
        return self.sink.lines()

    @property
    def raw(self):
        return ''.join(self.sink.chunks)


@pytest.fixture
def session():
    return Session()


@pytest.fixture
def make_session():
    """Build a session with scripted INPUT responses"""
    return Session
