"""
Retrograde - Apple II BASIC Environment

Wires a BasicScreen to a BasicInterpreter and runs the read-eval-print
loop: show the ']' prompt, read a line, hand it to the interpreter.
"""

import asyncio
import logging
from typing import Optional

from .interpreter import BasicInterpreter
from .screen import BasicScreen


log = logging.getLogger(__name__)

BANNER = (
    '',
    'APPLE II',
    'APPLESOFT BASIC',
    '',
    'TYPE "LIST" TO SEE PROGRAM',
    'TYPE "RUN" TO EXECUTE',
    'TYPE "NEW" TO CLEAR',
    '',
)


class AppleIIEnvironment:
    """REPL orchestrator for one screen and one interpreter session"""

    name = 'apple-ii-basic'
    display_name = 'Applesoft BASIC'
    version = '1.0'

    def __init__(self, screen: Optional[BasicScreen] = None,
                 interpreter: Optional[BasicInterpreter] = None):
        self.screen = screen if screen is not None else BasicScreen()
        self.interpreter = interpreter if interpreter is not None else BasicInterpreter()
        self.initialized = False
        self._running = False

    def init(self) -> None:
        """Connect the interpreter's I/O to the screen and show the banner"""
        self.interpreter.init(
            output=self.screen.print,
            output_line=self.screen.println,
            input=self.screen.get_input,
            clear=self.screen.clear,
        )
        self.show_banner()
        self.initialized = True

    def show_banner(self) -> None:
        for line in BANNER:
            self.screen.println(line)

    async def start_repl(self) -> None:
        """Prompt, read, execute, until stop() or destroy()"""
        if not self.initialized:
            self.init()

        self._running = True
        while self._running:
            try:
                line = await self.screen.show_prompt()
            except asyncio.CancelledError:
                if self._running:
                    raise
                break

            log.debug("REPL line: %r", line)
            try:
                await self.interpreter.execute_immediate(line)
            except Exception as error:
                log.exception("Unhandled error executing %r", line)
                self.screen.println(f"ERROR: {error}")

    def stop(self) -> None:
        """End the REPL after the current line"""
        self._running = False

    def reset(self) -> None:
        """NEW, clear the screen and show the banner again"""
        self.interpreter.execute_new()
        self.screen.clear()
        self.show_banner()

    def destroy(self) -> None:
        self.stop()
        self.screen.destroy()
        self.initialized = False


__all__ = ['AppleIIEnvironment', 'BANNER']
