#!/usr/bin/env python3
"""
Terminal emulator for siteterm.

This module ties the pieces together: it receives input lines and key
events, feeds them through the parser and the command registry, keeps the
input history and appends results to the scrollback. It also provides the
plain console front end and the ``siteterm`` command-line entry point.

Design Principles:
- The session is the only owner of its state; instances share nothing
- Submitting a line never blocks; delayed effects go through the scheduler
- Blank input is neither dispatched nor recorded
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional

from .command_parser import CommandParser
from .commands import CommandResult, build_registry
from .content import ContentIndex
from .exceptions import SitetermError
from .output import (
    KIND_COMMAND, KIND_ERROR, KIND_SUCCESS, OutputLine, OutputListener, OutputSink
)
from .scheduler import ScheduledTask, Scheduler
from .session import SessionState
from .site import SiteProfile, classic_profile

logger = logging.getLogger(__name__)

PROMPT_FORMATS = {
    'full': '{user}@{hostname}:{cwd}$',
    'classic': '$',
}

KEY_ENTER = 'Enter'
KEY_UP = 'ArrowUp'
KEY_DOWN = 'ArrowDown'


@dataclass
class TerminalConfig:
    """Configuration for terminal session."""
    user: Optional[str] = None  # defaults to the site profile's user
    hostname: Optional[str] = None
    prompt_format: Optional[str] = None  # defaults per profile
    root: str = '/'
    profile: str = 'full'
    enable_colors: bool = True
    history_size: Optional[int] = None  # None keeps every entry
    exit_delay: float = 1.0
    show_welcome: Optional[bool] = None  # classic profile greets by default


class CommandHistory:
    """
    Manages command history for the terminal session.

    ``position`` equal to the number of entries means the user is on a fresh
    input line rather than browsing.
    """

    def __init__(self, max_size: Optional[int] = None):
        """Initialize with an optional maximum history size."""
        self.max_size = max_size
        self.history: List[str] = []
        self.position = 0

    def __len__(self) -> int:
        return len(self.history)

    def add(self, command: str):
        """Add a command to history, verbatim. Blank lines are ignored."""
        if command and command.strip():
            self.history.append(command)
            if self.max_size is not None and len(self.history) > self.max_size:
                self.history.pop(0)
        self.position = len(self.history)

    def previous(self) -> Optional[str]:
        """Get previous command in history, staying on the oldest entry."""
        if not self.history:
            return None
        if self.position > 0:
            self.position -= 1
        return self.history[self.position]

    def next(self) -> str:
        """Get next command in history, or '' once past the newest."""
        if self.position < len(self.history) - 1:
            self.position += 1
            return self.history[self.position]
        self.position = len(self.history)
        return ''

    def reset(self):
        """Stop browsing and return to a fresh input line."""
        self.position = len(self.history)


class TerminalSession:
    """
    Main terminal session manager.

    One session is one terminal window: its own path, history, scrollback
    and pending close. It accepts whole lines through ``submit`` and key
    events through ``handle_key``.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 content: Optional[ContentIndex] = None,
                 site: Optional[SiteProfile] = None,
                 scheduler: Optional[Scheduler] = None,
                 clock=None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        if site is None:
            site = classic_profile() if self.config.profile == 'classic' else SiteProfile()
        self.site = site

        self.parser = CommandParser()
        self.registry = build_registry(self.config.profile)
        self.state = SessionState(
            content=content if content is not None else ContentIndex.sample(),
            site=site,
            root=self.config.root,
            clock=clock,
        )
        self.history = CommandHistory(self.config.history_size)
        self.output = OutputSink()
        self.scheduler = scheduler or Scheduler()

        self.input_value = ''
        self.focused = False
        self.closed = False
        self._close_task: Optional[ScheduledTask] = None
        self._close_callbacks: List[Callable[[], None]] = []

        show_welcome = self.config.show_welcome
        if show_welcome is None:
            show_welcome = self.config.profile == 'classic'
        if show_welcome:
            self.output.write(site.welcome)

    # Prompt

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        prompt_format = self.config.prompt_format or PROMPT_FORMATS.get(
            self.config.profile, PROMPT_FORMATS['full'])
        return prompt_format.format(
            user=self.config.user or self.site.user,
            hostname=self.config.hostname or self.site.hostname,
            cwd=self.state.cwd,
        )

    @property
    def cwd(self) -> str:
        return self.state.cwd

    # Line submission

    def submit(self, command_line: str) -> Optional[CommandResult]:
        """
        Execute one input line.

        Returns the handler's result, or None when the line was blank and
        nothing happened.
        """
        parsed = self.parser.parse(command_line)
        if parsed is None:
            return None

        self.history.add(command_line)
        self.output.write(f"{self.get_prompt()} {command_line}", KIND_COMMAND)

        result = self.registry.dispatch(parsed, self.state)
        self._apply(result)
        return result

    def _apply(self, result: CommandResult):
        """Carry out a result's effects on the scrollback and lifecycle."""
        if result.clear:
            self.output.clear()
        if result.text is not None:
            self.output.write(result.text, result.kind)
        if result.exit:
            self.request_close()

    # Key and focus events

    def focus(self):
        """Clicking anywhere in the terminal focuses the input line."""
        self.focused = True

    def type_text(self, text: str):
        self.input_value += text

    def handle_key(self, key: str) -> Optional[CommandResult]:
        """
        Handle a key press on the input line.

        Enter submits and empties the input; the arrow keys walk the
        history. Other keys are ignored.
        """
        if key == KEY_ENTER:
            line, self.input_value = self.input_value, ''
            return self.submit(line)

        if not len(self.history):
            return None

        if key == KEY_UP:
            recalled = self.history.previous()
            if recalled is not None:
                self.input_value = recalled
        elif key == KEY_DOWN:
            self.input_value = self.history.next()
        return None

    # Session lifecycle

    def on_close(self, callback: Callable[[], None]):
        """Register a callback run when the session finally closes."""
        self._close_callbacks.append(callback)

    @property
    def closing(self) -> bool:
        return self._close_task is not None and self._close_task.pending

    def request_close(self) -> ScheduledTask:
        """Schedule the session close after the configured delay."""
        if self.closing:
            return self._close_task
        self._close_task = self.scheduler.call_later(
            self.config.exit_delay, self.close, name='close-session')
        return self._close_task

    def cancel_close(self) -> bool:
        if self._close_task is None:
            return False
        return self._close_task.cancel()

    def close(self):
        """Close the session now."""
        if self.closed:
            return
        self.closed = True
        logger.debug("Session closed")
        for callback in self._close_callbacks:
            callback()

    # Non-interactive use

    def execute_command(self, command_line: str) -> str:
        """
        Submit one line and return what it printed.

        Blank lines give ''. ``exit`` returns its farewell and leaves the
        close pending on the scheduler.
        """
        result = self.submit(command_line)
        return str(result) if result is not None else ''

    # Console front end

    def console_prompt(self) -> str:
        """Prompt for the console, coloured when colours are enabled."""
        prompt = self.get_prompt()
        if self.config.enable_colors:
            prompt = f'\033[32m{prompt}\033[0m'
        return prompt + ' '

    def read_line(self) -> str:
        return input(self.console_prompt())

    def run_interactive(self):
        """Run the interactive REPL loop."""
        printer = ConsolePrinter(enable_colors=self.config.enable_colors)
        for line in self.output:
            printer.on_append(line)
        self.output.subscribe(printer)

        try:
            while not self.closed:
                try:
                    command_line = self.read_line()
                except KeyboardInterrupt:
                    print("^C")
                    continue
                except EOFError:
                    print()
                    break

                self.submit(command_line)

                # The close delay is the only deferred work; let it elapse.
                if self.scheduler.pending:
                    self.scheduler.run_until_idle()
        finally:
            self.output.unsubscribe(printer)


class ConsolePrinter(OutputListener):
    """Draws scrollback lines on a text console."""

    COLORS = {
        KIND_ERROR: '\033[31m',
        KIND_SUCCESS: '\033[32m',
    }

    def __init__(self, enable_colors: bool = True, stream=None):
        self.enable_colors = enable_colors
        self.stream = stream or sys.stdout

    def on_append(self, line: OutputLine) -> None:
        # The console already echoed what was typed
        if line.kind == KIND_COMMAND:
            return
        text = line.text
        color = self.COLORS.get(line.kind)
        if color and self.enable_colors:
            text = f'{color}{text}\033[0m'
        print(text, file=self.stream)

    def on_clear(self) -> None:
        self.stream.write('\033[2J\033[H')
        self.stream.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='siteterm', description='Site terminal emulator')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('--profile', choices=['full', 'classic'], default='full',
                        help='Command set and texts to use')
    parser.add_argument('--root', choices=['/', '~'], default='/',
                        help='Root marker of the virtual tree')
    parser.add_argument('--content', help='Site directory containing posts/, or a JSON manifest')
    parser.add_argument('--no-colors', action='store_true', help='Disable ANSI colours')
    parser.add_argument('--plain', action='store_true', help='Do not use readline')
    parser.add_argument('--no-completion', action='store_true', help='Disable tab completion')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for terminal emulator."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        content = ContentIndex.load(args.content) if args.content else ContentIndex.sample()
    except SitetermError as e:
        print(f"siteterm: {e}", file=sys.stderr)
        return 1

    use_enhanced = not args.plain and not args.command
    if use_enhanced:
        # readline is missing on some platforms
        try:
            import readline  # noqa: F401
        except ImportError:
            use_enhanced = False

    try:
        if use_enhanced:
            from .enhanced_terminal import EnhancedTerminalSession, EnhancedTerminalConfig

            config = EnhancedTerminalConfig(
                profile=args.profile,
                root=args.root,
                enable_colors=not args.no_colors,
                enable_tab_completion=not args.no_completion,
            )
            session = EnhancedTerminalSession(config=config, content=content)
        else:
            config = TerminalConfig(
                profile=args.profile,
                root=args.root,
                enable_colors=not args.no_colors,
            )
            session = TerminalSession(config=config, content=content)
    except SitetermError as e:
        print(f"siteterm: {e}", file=sys.stderr)
        return 1

    if args.command:
        output = session.execute_command(args.command)
        if output:
            print(output)
        return 0

    session.run_interactive()
    return 0


if __name__ == '__main__':
    sys.exit(main())
