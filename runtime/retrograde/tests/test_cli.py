"""
Test suite for the console front end
"""

import asyncio
import io
import pytest
import sys
import os

# Add grandparent directory to path for imports (to find retrograde package)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from retrograde.cli import ConsoleSession, build_parser, format_frame, main, run_screen
from retrograde.screen import ScreenConfig


PROGRAM = [
    '10 FOR I=1 TO 3',
    '20 PRINT "LINE",I',
    '30 NEXT I',
]


class TestConsoleSession:
    """Test the line-oriented console"""

    def test_run_program(self):
        stdout = io.StringIO()
        session = ConsoleSession(stdin=io.StringIO(''), stdout=stdout)
        asyncio.run(session.run_program(PROGRAM))
        assert stdout.getvalue() == 'LINE     1\nLINE     2\nLINE     3\n'

    def test_program_input(self):
        stdout = io.StringIO()
        session = ConsoleSession(stdin=io.StringIO('ada\n'), stdout=stdout)
        asyncio.run(session.run_program(['10 INPUT "NAME? ";N$', '20 PRINT "HI " + N$']))
        assert stdout.getvalue() == 'NAME? HI ADA\n'

    def test_repl_until_eof(self):
        stdout = io.StringIO()
        session = ConsoleSession(stdin=io.StringIO('10 print 2+2\nrun\n'), stdout=stdout)
        asyncio.run(session.repl())
        output = stdout.getvalue()
        assert 'APPLESOFT BASIC' in output
        assert output.endswith('] ] 4\n] \n')

    def test_input_at_eof(self):
        session = ConsoleSession(stdin=io.StringIO(''), stdout=io.StringIO())
        with pytest.raises(EOFError):
            asyncio.run(session.run_program(['10 INPUT A']))

    def test_clear_skipped_when_not_tty(self):
        stdout = io.StringIO()
        session = ConsoleSession(stdin=io.StringIO(''), stdout=stdout)
        session.clear()
        assert stdout.getvalue() == ''


class TestScreenMode:
    """Test the character-grid front end"""

    def test_format_frame(self):
        frame = format_frame(['AB', 'CDEFG'], 4)
        assert frame == '+----+\n|AB  |\n|CDEF|\n+----+\n'

    def test_run_screen_program(self):
        stdout = io.StringIO()
        asyncio.run(run_screen(ScreenConfig(rows=12, cols=20), PROGRAM,
                               stdin=io.StringIO(''), stdout=stdout))
        frame = stdout.getvalue()
        assert '|LINE     3' in frame
        assert frame.startswith('+' + '-' * 20 + '+')

    def test_run_screen_typed_lines(self):
        stdout = io.StringIO()
        asyncio.run(run_screen(ScreenConfig(), None,
                               stdin=io.StringIO('print "typed"\n'), stdout=stdout))
        assert '|TYPED' in stdout.getvalue()


class TestMain:
    """Test argument handling and exit codes"""

    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        assert args.program is None
        assert args.screen is False
        assert (args.rows, args.cols) == (24, 40)

    def test_run_file(self, tmp_path, capsys):
        path = tmp_path / 'hello.bas'
        path.write_text('10 PRINT "HELLO"\n\n20 END\n')
        assert main([str(path)]) == 0
        assert capsys.readouterr().out == 'HELLO\n'

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / 'missing.bas')]) == 1
        assert capsys.readouterr().out.startswith('Error: ')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
