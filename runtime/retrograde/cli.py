"""
Console front end for Retrograde BASIC.

    retrograde                  interactive REPL on the terminal
    retrograde hello.bas        load a program and RUN it
    retrograde --screen         REPL drawn on the 24x40 screen grid
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .environment import BANNER, AppleIIEnvironment
from .interpreter import BasicInterpreter
from .screen import BasicScreen, ScreenConfig


log = logging.getLogger(__name__)


class ConsoleSession:
    """Interpreter session streaming to a text console"""

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.interpreter = BasicInterpreter()
        self.interpreter.init(
            output=self.write,
            output_line=self.write_line,
            input=self.read_line,
            clear=self.clear,
        )

    def write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

    def write_line(self, text: str) -> None:
        self.write(text + '\n')

    def clear(self) -> None:
        if self.stdout.isatty():
            self.write('\033[2J\033[H')

    async def read_line(self, prompt: str = '') -> str:
        """Read one line without blocking the event loop; EOF raises EOFError"""
        self.write(prompt)
        line = await asyncio.get_running_loop().run_in_executor(None, self.stdin.readline)
        if not line:
            raise EOFError
        # The Apple II keyboard only types capitals
        return line.rstrip('\r\n').upper()

    async def load(self, lines: List[str]) -> None:
        for line in lines:
            await self.interpreter.execute_immediate(line)

    async def run_program(self, lines: List[str]) -> None:
        await self.load(lines)
        await self.interpreter.run()

    async def repl(self) -> None:
        for line in BANNER:
            self.write_line(line)
        while True:
            try:
                line = await self.read_line('] ')
            except EOFError:
                self.write_line('')
                return
            await self.interpreter.execute_immediate(line)


def format_frame(lines: List[str], cols: int) -> str:
    """Draw the screen rows inside a border"""
    border = '+' + '-' * cols + '+'
    body = ['|' + line[:cols].ljust(cols) + '|' for line in lines]
    return '\n'.join([border] + body + [border]) + '\n'


async def _settle(rounds: int = 3) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


async def run_screen(config: ScreenConfig, program: Optional[List[str]] = None,
                     stdin=None, stdout=None) -> None:
    """Drive the screen environment from console lines"""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    environment = AppleIIEnvironment(screen=BasicScreen(config))
    environment.init()
    if program:
        for line in program:
            await environment.interpreter.execute_immediate(line)

    repl = asyncio.ensure_future(environment.start_repl())
    loop = asyncio.get_running_loop()
    pending = ['RUN'] if program else []

    try:
        while True:
            await _settle()
            if repl.done():
                break
            if pending:
                environment.screen.type_line(pending.pop(0))
                continue

            stdout.write(format_frame(environment.screen.render(), config.cols))
            stdout.flush()
            line = await loop.run_in_executor(None, stdin.readline)
            if not line:
                break
            environment.screen.type_line(line.rstrip('\r\n'))
    finally:
        environment.destroy()
        await asyncio.gather(repl, return_exceptions=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Retrograde Applesoft BASIC')
    parser.add_argument('program', nargs='?', help='BASIC program file to load and RUN')
    parser.add_argument('--screen', action='store_true', help='Draw output on the character-grid screen')
    parser.add_argument('--rows', type=int, default=ScreenConfig.rows, help='Screen rows (with --screen)')
    parser.add_argument('--cols', type=int, default=ScreenConfig.cols, help='Screen columns (with --screen)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    program = None
    if args.program:
        try:
            with open(args.program, 'r') as file:
                program = [line for line in file.read().splitlines() if line.strip()]
        except OSError as e:
            print(f"Error: {e}")
            return 1
        log.debug("Loaded %d lines from %s", len(program), args.program)

    try:
        if args.screen:
            asyncio.run(run_screen(ScreenConfig(rows=args.rows, cols=args.cols), program))
        elif program is not None:
            asyncio.run(ConsoleSession().run_program(program))
        else:
            asyncio.run(ConsoleSession().repl())
    except EOFError:
        print("Error: end of input")
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
