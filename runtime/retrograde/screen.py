"""
Retrograde - Apple II BASIC Screen

A fixed ROWS x COLS character grid with a cursor and a line-input mode.
The grid is a numpy array of single characters; printing past the last
column wraps, and moving past the last row scrolls the whole grid up.

get_input() is the only suspension point: it returns once handle_key()
receives 'Enter'.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .errors import ScreenError


@dataclass
class ScreenConfig:
    """Screen geometry and glyphs"""
    rows: int = 24
    cols: int = 40
    prompt: str = ']'
    cursor: str = '_'


class BasicScreen:
    """Character-grid terminal used as the interpreter's I/O backend"""

    def __init__(self, config: Optional[ScreenConfig] = None,
                 on_render: Optional[Callable[[List[str]], None]] = None):
        self.config = config if config is not None else ScreenConfig()
        self.on_render = on_render
        self.input_mode = False
        self.input_buffer = ''
        self._pending: Optional[asyncio.Future] = None
        self._init_buffer()
        self.render()

    def _init_buffer(self):
        self.buffer = np.full((self.config.rows, self.config.cols), ' ', dtype='<U1')
        self.cursor_x = 0
        self.cursor_y = 0

    # ========================================================================
    # Output
    # ========================================================================

    def print(self, text) -> None:
        """Print text at the cursor; '\\n' starts a new row"""
        for ch in str(text):
            if ch == '\n':
                self.newline()
            else:
                self.put_char(ch)
        self.render()

    def println(self, text='') -> None:
        self.print(str(text) + '\n')

    def put_char(self, ch: str) -> None:
        if self.cursor_x >= self.config.cols:
            self.newline()
        if self.cursor_y >= self.config.rows:
            self.scroll()

        self.buffer[self.cursor_y, self.cursor_x] = ch
        self.cursor_x += 1

    def newline(self) -> None:
        self.cursor_x = 0
        self.cursor_y += 1
        if self.cursor_y >= self.config.rows:
            self.scroll()

    def scroll(self) -> None:
        """Drop the top row and open a blank one at the bottom"""
        self.buffer = np.roll(self.buffer, -1, axis=0)
        self.buffer[-1, :] = ' '
        self.cursor_y = self.config.rows - 1

    def clear(self) -> None:
        """HOME: blank the grid and move the cursor to the top left"""
        self._init_buffer()
        self.render()

    # ========================================================================
    # Line Input
    # ========================================================================

    async def get_input(self, prompt: str = '') -> str:
        """Print prompt, then wait for a line of keystrokes ending in Enter"""
        if self._pending is not None:
            raise ScreenError("Input already pending")

        if prompt:
            self.print(prompt)

        future = asyncio.get_running_loop().create_future()
        self._pending = future
        self.input_mode = True
        self.input_buffer = ''
        self.render()

        try:
            return await future
        finally:
            if self._pending is future:
                self._pending = None
                self.input_mode = False

    async def show_prompt(self) -> str:
        """Show the ']' prompt and read a command line"""
        self.print(self.config.prompt + ' ')
        return await self.get_input()

    def handle_key(self, key: str) -> None:
        """Feed one keystroke: 'Enter', 'Backspace' or a printable character"""
        if not self.input_mode:
            return

        if key == 'Enter':
            text = self.input_buffer
            future = self._pending
            self.input_buffer = ''
            self.input_mode = False
            self._pending = None

            # Leave the typed line on screen
            for ch in text:
                self.put_char(ch)
            self.newline()
            self.render()

            if future is not None and not future.done():
                future.set_result(text)
        elif key == 'Backspace':
            if self.input_buffer:
                self.input_buffer = self.input_buffer[:-1]
                self.render()
        elif len(key) == 1 and key.isprintable():
            self.input_buffer += key.upper()
            self.render()

    def type_line(self, text: str) -> None:
        """Type every character of text, then Enter"""
        for ch in text:
            self.handle_key(ch)
        self.handle_key('Enter')

    # ========================================================================
    # Rendering
    # ========================================================================

    def render(self) -> List[str]:
        """
        Redraw every row from the buffer.

        The cursor row is cut at the cursor and followed by the line being
        typed (in input mode) and the cursor glyph.
        """
        lines = [''.join(row) for row in self.buffer]

        if 0 <= self.cursor_y < self.config.rows:
            text = ''.join(self.buffer[self.cursor_y, :self.cursor_x])
            if self.input_mode:
                text += self.input_buffer
            lines[self.cursor_y] = text + self.config.cursor

        if self.on_render is not None:
            self.on_render(lines)
        return lines

    def text(self) -> str:
        """Buffer contents without the cursor, trailing blanks removed"""
        return '\n'.join(''.join(row).rstrip() for row in self.buffer).rstrip('\n')

    def row_text(self, row: int) -> str:
        return ''.join(self.buffer[row]).rstrip()

    def destroy(self) -> None:
        """Abandon any pending input and reset the screen"""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self.input_mode = False
        self.input_buffer = ''
        self.on_render = None
        self._init_buffer()


__all__ = ['BasicScreen', 'ScreenConfig']
