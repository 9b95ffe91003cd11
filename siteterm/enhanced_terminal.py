#!/usr/bin/env python3
"""
Readline front end for the siteterm terminal.

This module provides:
- Arrow-key history navigation through readline, fed from the session's
  own CommandHistory so both always agree
- Tab completion for command names and ``cd``/``ls`` targets

History lives only as long as the session: nothing is read from or written
to a history file.
"""

import readline
from dataclasses import dataclass
from typing import List, Optional

from .commands import CommandResult, CommandRegistry
from .session import SessionState
from .terminal import TerminalConfig, TerminalSession

PATH_COMMANDS = ('cd', 'ls')


@dataclass
class EnhancedTerminalConfig(TerminalConfig):
    """Extended configuration for enhanced terminal session."""
    enable_tab_completion: bool = True


class TabCompleter:
    """
    Provides tab completion for commands and virtual paths.

    The first word completes against the registry; arguments of ``cd`` and
    ``ls`` complete against the directories reachable from the current path,
    and ``cat`` completes virtual file names.
    """

    def __init__(self, registry: CommandRegistry, state: SessionState):
        """Initialize tab completer."""
        self.registry = registry
        self.state = state
        self._matches: List[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """
        Readline completion function.

        Called by readline to get completions.
        """
        if state == 0:
            line = readline.get_line_buffer()
            begin = readline.get_begidx()
            self._matches = self.candidates(line, begin, text)

        try:
            return self._matches[state]
        except IndexError:
            return None

    def candidates(self, line: str, begin: int, text: str) -> List[str]:
        """Completion candidates for ``text`` starting at column ``begin``."""
        before = line[:begin].split()
        if not before:
            return self._complete_command(text)

        command = before[0].lower()
        if len(before) > 1:
            # Only the first argument is ever used
            return []
        if command in PATH_COMMANDS and command in self.registry:
            return [name + '/' for name in self.state.completions(text)]
        if command == 'cat' and command in self.registry:
            return sorted(name for name in self.state.site.files if name.startswith(text))
        return []

    def _complete_command(self, text: str) -> List[str]:
        """Complete command names."""
        return [name for name in self.registry.names() if name.startswith(text.lower())]


class EnhancedTerminalSession(TerminalSession):
    """
    Enhanced terminal session with readline support.

    Up and down arrows recall earlier lines, Tab completes. Everything else
    behaves exactly like TerminalSession.
    """

    def __init__(self, config: Optional[EnhancedTerminalConfig] = None, **kwargs):
        """Initialize the enhanced session."""
        config = config or EnhancedTerminalConfig()
        super().__init__(config=config, **kwargs)
        self.completer = TabCompleter(self.registry, self.state)
        self._setup_readline()

    def _setup_readline(self):
        """Configure readline for this session."""
        try:
            readline.clear_history()
        except AttributeError:
            # readline might not have clear_history on some platforms
            pass

        if self.config.enable_tab_completion:
            readline.set_completer(self.completer.complete)
            readline.set_completer_delims(' \t\n')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind('bind ^I rl_complete')
            else:
                readline.parse_and_bind('tab: complete')

    def submit(self, command_line: str) -> Optional[CommandResult]:
        """Submit a line, keeping readline's history in step with ours."""
        before = len(self.history)
        result = super().submit(command_line)
        if len(self.history) > before:
            readline.add_history(command_line)
        return result

    def console_prompt(self) -> str:
        # Mark colour codes as zero-width so readline measures the prompt right
        prompt = self.get_prompt()
        if self.config.enable_colors:
            prompt = f'\001\033[32m\002{prompt}\001\033[0m\002'
        return prompt + ' '
