#!/usr/bin/env python3
"""
Tests for the siteterm terminal session.

This module covers line submission, key handling, the scrollback, the
delayed exit and the command-line entry point.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import json
import unittest
from datetime import datetime
from unittest.mock import patch

from siteterm.content import ContentIndex, Post
from siteterm.output import KIND_COMMAND, KIND_ERROR
from siteterm.scheduler import ManualClock, Scheduler
from siteterm.site import BIO
from siteterm.terminal import (
    ConsolePrinter, TerminalConfig, TerminalSession, main,
)


class TestTerminalSession(unittest.TestCase):
    """Test terminal session functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.clock = ManualClock()
        self.session = TerminalSession(scheduler=Scheduler(self.clock))

    def test_prompt(self):
        self.assertEqual(self.session.get_prompt(), 'void-strike@terminal:/$')
        self.session.submit('cd notes')
        self.assertEqual(self.session.get_prompt(), 'void-strike@terminal:/notes$')

    def test_custom_prompt_values(self):
        config = TerminalConfig(user='guest', hostname='box')
        session = TerminalSession(config=config)
        self.assertEqual(session.get_prompt(), 'guest@box:/$')

    def test_echo_scenario(self):
        self.session.submit('echo hello world')
        self.assertEqual(self.session.output.texts(), [
            'void-strike@terminal:/$ echo hello world',
            'hello world',
        ])
        self.assertEqual(self.session.output.lines[0].kind, KIND_COMMAND)

    def test_cat_scenario(self):
        result = self.session.submit('cat bio.txt')
        self.assertEqual(result.text, BIO)
        self.assertEqual(self.session.output.texts()[1:], BIO.split('\n'))

    def test_cd_scenario(self):
        self.session.submit('cd /nowhere')
        self.assertEqual(self.session.output.texts()[-1], 'cd: no such directory: /nowhere')
        self.assertEqual(self.session.output.lines[-1].kind, KIND_ERROR)
        self.assertEqual(self.session.cwd, '/')

    def test_unknown_command_scenario(self):
        self.session.submit('foobar')
        self.assertEqual(
            self.session.output.texts()[-1],
            "Command not found: foobar. Type 'help' for available commands.")
        # The session carries on
        self.session.submit('pwd')
        self.assertEqual(self.session.output.texts()[-1], '/')

    def test_blank_input_is_ignored(self):
        for line in ['', '   ', '\t']:
            self.assertIsNone(self.session.submit(line))
        self.assertEqual(len(self.session.history), 0)
        self.assertEqual(len(self.session.output), 0)

    def test_successful_cd_prints_nothing(self):
        self.session.submit('cd notes')
        self.assertEqual(self.session.output.texts(), ['void-strike@terminal:/$ cd notes'])

    def test_echo_without_args_prints_blank_line(self):
        self.session.submit('echo')
        self.assertEqual(self.session.output.texts()[-1], '')
        self.assertEqual(len(self.session.output), 2)

    def test_history_records_raw_lines(self):
        self.session.submit('  ECHO hi ')
        self.session.submit('foobar')
        self.assertEqual(self.session.history.history, ['  ECHO hi ', 'foobar'])

    def test_clear(self):
        self.session.submit('echo one')
        self.session.submit('ls')
        self.session.submit('clear')
        self.assertEqual(len(self.session.output), 0)
        self.assertEqual(self.session.output.render(self.session.get_prompt()),
                         ['void-strike@terminal:/$'])
        # History survives a clear
        self.assertEqual(len(self.session.history), 3)

    def test_navigation_round_trip(self):
        self.session.submit('cd notes')
        self.session.submit('cd web-security')
        self.session.submit('ls')
        self.assertEqual(self.session.output.texts()[-3:], [
            'Directory listing:', '  XSS-Attacks.md', '  SQL-Injection.md',
        ])

    def test_execute_command(self):
        self.assertEqual(self.session.execute_command('echo hi'), 'hi')
        self.assertEqual(self.session.execute_command('cd notes'), '')
        self.assertEqual(self.session.execute_command(''), '')

    def test_execute_exit_returns_farewell(self):
        self.assertEqual(self.session.execute_command('exit'), 'Goodbye!')
        self.assertTrue(self.session.closing)
        self.assertFalse(self.session.closed)


class TestExit(unittest.TestCase):
    """The close is scheduled, not immediate."""

    def setUp(self):
        self.clock = ManualClock()
        self.scheduler = Scheduler(self.clock)
        self.session = TerminalSession(scheduler=self.scheduler)
        self.closed = []
        self.session.on_close(lambda: self.closed.append(True))

    def test_exit_closes_after_delay(self):
        self.session.submit('exit')
        self.assertEqual(self.session.output.texts()[-1], 'Goodbye!')
        self.assertFalse(self.session.closed)
        self.assertTrue(self.session.closing)

        self.scheduler.advance(0.5)
        self.assertFalse(self.session.closed)
        # Input still works while the close is pending
        self.session.submit('echo still here')
        self.assertEqual(self.session.output.texts()[-1], 'still here')

        self.scheduler.advance(0.5)
        self.assertTrue(self.session.closed)
        self.assertEqual(self.closed, [True])

    def test_repeated_exit_schedules_once(self):
        self.session.submit('exit')
        self.session.submit('exit')
        self.assertEqual(len(self.scheduler.pending), 1)
        self.scheduler.advance(1.0)
        self.assertEqual(self.closed, [True])

    def test_cancel_close(self):
        self.session.submit('exit')
        self.assertTrue(self.session.cancel_close())
        self.scheduler.advance(5)
        self.assertFalse(self.session.closed)

    def test_configurable_delay(self):
        session = TerminalSession(config=TerminalConfig(exit_delay=3.0),
                                  scheduler=self.scheduler)
        session.submit('exit')
        self.scheduler.advance(2.5)
        self.assertFalse(session.closed)
        self.scheduler.advance(0.5)
        self.assertTrue(session.closed)


class TestKeyHandling:
    """Enter and the arrow keys on the input line."""

    def setup_method(self):
        self.session = TerminalSession()

    def press(self, *keys):
        for key in keys:
            self.session.handle_key(key)

    def test_enter_submits_and_clears_input(self):
        self.session.type_text('echo hi')
        result = self.session.handle_key('Enter')
        assert result.text == 'hi'
        assert self.session.input_value == ''

    def test_enter_on_blank_input(self):
        self.session.type_text('   ')
        assert self.session.handle_key('Enter') is None
        assert len(self.session.history) == 0

    def test_arrows_with_empty_history(self):
        self.session.type_text('draft')
        self.press('ArrowUp', 'ArrowDown')
        assert self.session.input_value == 'draft'

    def test_arrow_up_recalls(self):
        for line in ['pwd', 'ls', 'whoami']:
            self.session.type_text(line)
            self.session.handle_key('Enter')

        self.press('ArrowUp')
        assert self.session.input_value == 'whoami'
        self.press('ArrowUp', 'ArrowUp')
        assert self.session.input_value == 'pwd'
        self.press('ArrowUp')
        assert self.session.input_value == 'pwd'

    def test_arrow_down_returns_to_blank(self):
        for line in ['pwd', 'ls']:
            self.session.type_text(line)
            self.session.handle_key('Enter')

        self.press('ArrowUp', 'ArrowUp', 'ArrowDown')
        assert self.session.input_value == 'ls'
        self.press('ArrowDown')
        assert self.session.input_value == ''
        self.press('ArrowDown')
        assert self.session.input_value == ''

    def test_other_keys_ignored(self):
        self.session.type_text('abc')
        assert self.session.handle_key('Tab') is None
        assert self.session.input_value == 'abc'

    def test_focus(self):
        assert not self.session.focused
        self.session.focus()
        assert self.session.focused


class TestProfiles:

    def test_classic_profile(self):
        session = TerminalSession(config=TerminalConfig(profile='classic'))
        assert session.get_prompt() == '$'
        assert session.output.texts() == [
            "Welcome to Void-Strike's Terminal",
            "Type 'help' for available commands",
        ]
        session.submit('cat bio.txt')
        assert session.output.texts()[-1] == (
            "Command not found: cat. Type 'help' for available commands.")

    def test_classic_help(self):
        session = TerminalSession(config=TerminalConfig(profile='classic', show_welcome=False))
        session.submit('help')
        assert session.output.texts()[1:] == [
            'Available commands:',
            '  help     - Show this help message',
            '  clear    - Clear the terminal',
            '  echo     - Print text to the terminal',
            '  ls       - List contents of current directory',
            '  cd       - Change directory',
            '  pwd      - Print current working directory',
            '  about    - Show information about me',
            '  contact  - Show contact information',
        ]

    def test_home_root(self):
        session = TerminalSession(config=TerminalConfig(root='~'))
        session.submit('cd notes')
        assert session.get_prompt() == 'void-strike@terminal:~/notes$'
        session.submit('pwd')
        assert session.output.texts()[-1] == '~/notes'

    def test_sessions_are_independent(self):
        first, second = TerminalSession(), TerminalSession()
        first.submit('cd notes')
        first.submit('echo a')
        assert second.cwd == '/'
        assert len(second.history) == 0
        assert len(second.output) == 0

    def test_custom_content(self):
        content = ContentIndex([Post('Intro.md', 'reversing', date=datetime(2024, 1, 1))])
        session = TerminalSession(content=content)
        session.submit('ls /notes')
        assert session.output.texts()[-1] == '  reversing/'

    def test_date_with_injected_clock(self):
        session = TerminalSession(clock=lambda: datetime(2025, 1, 2, 15, 4, 5))
        session.submit('date')
        assert session.output.texts()[-1] == '1/2/2025, 3:04:05 PM'


class TestConsolePrinter:

    def test_skips_echoed_commands_and_colours_errors(self):
        stream = io.StringIO()
        session = TerminalSession()
        session.output.subscribe(ConsolePrinter(enable_colors=True, stream=stream))
        session.submit('foobar')
        session.submit('echo plain')
        assert stream.getvalue() == (
            "\033[31mCommand not found: foobar. Type 'help' for available commands.\033[0m\n"
            "plain\n"
        )

    def test_clear_clears_screen(self):
        stream = io.StringIO()
        session = TerminalSession()
        session.output.subscribe(ConsolePrinter(enable_colors=False, stream=stream))
        session.submit('clear')
        assert stream.getvalue() == '\033[2J\033[H'


class TestRunInteractive:

    def test_reads_until_eof(self, capsys):
        session = TerminalSession(config=TerminalConfig(enable_colors=False))
        with patch('builtins.input', side_effect=['echo hi', 'pwd', EOFError]):
            session.run_interactive()
        assert capsys.readouterr().out == 'hi\n/\n\n'

    def test_exit_waits_out_delay(self, capsys):
        clock = ManualClock()
        scheduler = Scheduler(clock)
        session = TerminalSession(config=TerminalConfig(enable_colors=False),
                                  scheduler=scheduler)
        with patch('builtins.input', side_effect=['exit', 'echo unreachable']), \
                patch('siteterm.scheduler.time.sleep', side_effect=clock.advance):
            session.run_interactive()
        assert session.closed
        assert capsys.readouterr().out == 'Goodbye!\n'


class TestMain:

    def test_single_command(self, capsys):
        assert main(['-c', 'echo hello world']) == 0
        assert capsys.readouterr().out == 'hello world\n'

    def test_single_exit_prints_farewell(self, capsys):
        assert main(['-c', 'exit']) == 0
        assert capsys.readouterr().out == 'Goodbye!\n'

    def test_classic_profile_flag(self, capsys):
        main(['--profile', 'classic', '-c', 'pwd'])
        assert capsys.readouterr().out == '/\n'

    def test_content_manifest(self, tmp_path, capsys):
        manifest = tmp_path / 'posts.json'
        manifest.write_text(json.dumps([
            {'title': 'Kerberoasting.md', 'category': 'active-directory'},
        ]))
        assert main(['--content', str(manifest), '-c', 'ls /notes']) == 0
        assert capsys.readouterr().out == 'Directory listing:\n  active-directory/\n'

    def test_bad_content_source(self, tmp_path, capsys):
        assert main(['--content', str(tmp_path / 'missing.txt'), '-c', 'ls']) == 1
        assert 'siteterm:' in capsys.readouterr().err


if __name__ == '__main__':
    unittest.main()
