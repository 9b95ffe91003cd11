#!/usr/bin/env python3
"""
Command parser for the siteterm terminal.

This module turns a raw input line into a structured command. The grammar is
deliberately small: one command word followed by positional arguments.
There is no quoting, escaping, piping or command chaining.

Design Principles:
- Single responsibility: Parse commands, don't execute them
- Pure functions with predictable outputs
- Blank input is not a command
"""

import re
from typing import List, Optional
from dataclasses import dataclass, field


_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class ParsedCommand:
    """
    A single command word and its arguments.

    ``name`` is case-folded for registry lookup while ``raw_name`` keeps the
    word exactly as typed, which is what diagnostics echo back.
    """
    name: str
    args: List[str] = field(default_factory=list)
    raw_name: str = ''
    raw: str = ''

    @property
    def first_arg(self) -> Optional[str]:
        """The first argument, or None when the command was given bare."""
        return self.args[0] if self.args else None

    def __str__(self) -> str:
        return ' '.join([self.name] + list(self.args))


class CommandParser:
    """
    Parser for terminal input lines.

    Examples:
        >>> CommandParser().parse('ECHO Hello  World')
        ParsedCommand(name='echo', args=['Hello', 'World'], raw_name='ECHO', raw='ECHO Hello  World')
        >>> CommandParser().parse('   ') is None
        True
    """

    def parse(self, raw: str) -> Optional[ParsedCommand]:
        """
        Parse a raw line into a ParsedCommand.

        Returns None for empty or whitespace-only input; the caller must skip
        both dispatch and history recording in that case.
        """
        if raw is None:
            return None

        tokens = self.tokenize(raw)
        if not tokens:
            return None

        head, args = tokens[0], tokens[1:]
        return ParsedCommand(name=head.lower(), args=args, raw_name=head, raw=raw)

    def tokenize(self, raw: str) -> List[str]:
        """Split a line on runs of whitespace after trimming it."""
        stripped = raw.strip()
        if not stripped:
            return []
        return _WHITESPACE.split(stripped)
