#!/usr/bin/env python3
"""
Command registry and the built-in command handlers.

Every command is an explicit Command object: a name, a one-line description
for ``help`` and a handler. Handlers take the argument list and the session
state and return a CommandResult; they never write to the screen directly.

Design Principles:
- The registry is built once and is read-only afterwards
- Lookup is case-insensitive because the parser folds the name
- A failing handler becomes an error line, never an exception
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Optional

from .command_parser import ParsedCommand
from .exceptions import ConfigurationError, NavigationError
from .output import KIND_ERROR, KIND_PLAIN, KIND_SUCCESS
from .session import SessionState

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 127


@dataclass(frozen=True)
class CommandResult:
    """
    What a handler produced.

    ``clear`` asks the terminal to wipe its scrollback and ``exit`` asks it
    to schedule the session close. Both are applied by the terminal, not by
    the handler. ``text`` of None means no output line at all, while an
    empty string is one blank line.
    """
    text: Optional[str] = None
    kind: str = KIND_PLAIN
    exit_code: int = EXIT_OK
    clear: bool = False
    exit: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == EXIT_OK

    def __str__(self) -> str:
        return self.text or ''


def error(text: str, exit_code: int = EXIT_ERROR) -> CommandResult:
    return CommandResult(text=text, kind=KIND_ERROR, exit_code=exit_code)


def success(text: str) -> CommandResult:
    return CommandResult(text=text, kind=KIND_SUCCESS)


Handler = Callable[[List[str], SessionState], Any]


@dataclass(frozen=True)
class Command:
    """A named command bound to its handler."""
    name: str
    description: str
    handler: Handler

    def run(self, args: List[str], state: SessionState) -> Any:
        return self.handler(args, state)


class CommandRegistry:
    """
    Immutable name -> Command table with dispatch.

    Examples:
        >>> registry = build_registry()
        >>> 'cd' in registry
        True
    """

    def __init__(self, commands: Iterable[Command]):
        table: Dict[str, Command] = {}
        for command in commands:
            table[command.name.lower()] = command
        self._commands = MappingProxyType(table)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def commands(self) -> MappingProxyType:
        return self._commands

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name.lower())

    def names(self) -> List[str]:
        """Command names in registration order."""
        return list(self._commands)

    def dispatch(self, parsed: ParsedCommand, state: SessionState) -> CommandResult:
        """Run the command named by ``parsed`` against ``state``."""
        command = self._commands.get(parsed.name)
        if command is None:
            logger.debug("Unknown command %r", parsed.raw_name)
            return error(
                f"Command not found: {parsed.raw_name}. Type 'help' for available commands.",
                exit_code=EXIT_NOT_FOUND,
            )

        logger.debug("Dispatching %s %s", parsed.name, parsed.args)
        try:
            result = command.run(list(parsed.args), state)
        except Exception as e:
            logger.warning("Command %s failed", parsed.name, exc_info=True)
            return error(f"{parsed.name}: {e}")

        if result is None:
            return CommandResult()
        if not isinstance(result, CommandResult):
            return CommandResult(text=str(result))
        return result


# Handlers

def make_help(commands: List[Command]) -> Handler:
    """Build the ``help`` handler over the final command list."""
    def show_help(args: List[str], state: SessionState) -> CommandResult:
        lines = ['Available commands:']
        lines.extend(f"  {command.name:<8} - {command.description}" for command in commands)
        return CommandResult(text='\n'.join(lines))
    return show_help


def clear_screen(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(clear=True)


def echo(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=' '.join(args))


def pwd(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.cwd)


def cd(args: List[str], state: SessionState) -> CommandResult:
    """Change the current virtual directory.

    Usage:
        cd [PATH]

    Examples:
        cd                     # Back to the root
        cd notes               # Enter the notes section
        cd ..                  # Up one level
    """
    target = args[0] if args else None
    try:
        state.change_directory(target)
    except NavigationError as e:
        return error(str(e))
    return CommandResult()


def ls(args: List[str], state: SessionState) -> CommandResult:
    """List the current virtual directory, or the one given."""
    target = args[0] if args else None
    try:
        entries = state.list_directory(target)
    except NavigationError as e:
        return error(str(e))
    return CommandResult(text='\n'.join(['Directory listing:'] + entries))


def cat(args: List[str], state: SessionState) -> CommandResult:
    if not args:
        return error('cat: missing file operand')

    name = args[0]
    text = state.site.files.get(name)
    if text is None:
        return error(f"cat: {name}: No such file")
    return CommandResult(text=text)


def about(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.site.about)


def contact(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.site.contact)


def skills(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.site.skills)


def projects(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.site.projects)


def whoami(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=state.site.whoami)


def notes(args: List[str], state: SessionState) -> CommandResult:
    """Summarize the note categories and their posts."""
    categories = state.content.categories()
    if not categories:
        return CommandResult(text='Security Notes:\n  No categories available')

    blocks = []
    for number, category in enumerate(categories, 1):
        block = [f"  {number}. {category}"]
        block.extend(f"     - {title}" for title in state.content.titles_in(category))
        blocks.append('\n'.join(block))

    header = 'Security Notes:\n  Available Categories:\n'
    return CommandResult(text=header + '\n\n'.join(blocks))


def theme(args: List[str], state: SessionState) -> CommandResult:
    # Any name is accepted; the theme list is only advisory.
    if not args:
        return error(f"Available themes: {', '.join(state.site.themes)}")
    return success(f"Theme changed to: {args[0]}")


def format_timestamp(moment: datetime) -> str:
    """
    Format like an en-US ``Date.toLocaleString()``.

    Examples:
        >>> format_timestamp(datetime(2024, 3, 20, 14, 5, 9))
        '3/20/2024, 2:05:09 PM'
    """
    hour = moment.hour % 12 or 12
    meridiem = 'AM' if moment.hour < 12 else 'PM'
    return (f"{moment.month}/{moment.day}/{moment.year}, "
            f"{hour}:{moment.minute:02d}:{moment.second:02d} {meridiem}")


def date(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text=format_timestamp(state.clock()))


def exit_session(args: List[str], state: SessionState) -> CommandResult:
    return CommandResult(text='Goodbye!', kind=KIND_SUCCESS, exit=True)


# Profiles

DESCRIPTIONS = {
    'help': 'Show this help message',
    'clear': 'Clear the terminal',
    'echo': 'Print text to the terminal',
    'ls': 'List available sections',
    'cd': 'Change directory/section',
    'pwd': 'Show current directory',
    'cat': 'Display content of a file',
    'about': 'Show information about me',
    'contact': 'Show contact information',
    'skills': 'List my technical skills',
    'projects': 'Show my projects',
    'notes': 'Access security notes',
    'theme': 'Change terminal theme',
    'date': 'Show current date and time',
    'whoami': 'Show current user info',
    'exit': 'Exit the terminal',
}

CLASSIC_DESCRIPTIONS = dict(
    DESCRIPTIONS,
    ls='List contents of current directory',
    cd='Change directory',
    pwd='Print current working directory',
)

HANDLERS: Dict[str, Handler] = {
    'clear': clear_screen,
    'echo': echo,
    'ls': ls,
    'cd': cd,
    'pwd': pwd,
    'cat': cat,
    'about': about,
    'contact': contact,
    'skills': skills,
    'projects': projects,
    'notes': notes,
    'theme': theme,
    'date': date,
    'whoami': whoami,
    'exit': exit_session,
}

PROFILES = {
    'full': (list(DESCRIPTIONS), DESCRIPTIONS),
    'classic': (['help', 'clear', 'echo', 'ls', 'cd', 'pwd', 'about', 'contact'],
                CLASSIC_DESCRIPTIONS),
}


def build_registry(profile: str = 'full') -> CommandRegistry:
    """Build the command table for a named profile (``full`` or ``classic``)."""
    if profile not in PROFILES:
        raise ConfigurationError(
            f"unknown profile: {profile!r} (choose from {', '.join(sorted(PROFILES))})")

    names, descriptions = PROFILES[profile]
    commands: List[Command] = []
    for name in names:
        handler = make_help(commands) if name == 'help' else HANDLERS[name]
        commands.append(Command(name, descriptions[name], handler))
    return CommandRegistry(commands)
