"""
siteterm - A simulated command-line terminal for a personal research site

This package provides a small command interpreter with a virtual directory
tree built from the site's sections and post categories, a command registry,
an input history and a scrollback buffer, plus console front ends.
"""

__version__ = "0.1.0"

from .command_parser import (
    CommandParser,
    ParsedCommand,
)

from .content import (
    ContentIndex,
    Post,
    category_from_path,
)

from .site import (
    Section,
    SiteProfile,
    classic_profile,
)

from .session import (
    SessionState,
)

from .commands import (
    Command,
    CommandRegistry,
    CommandResult,
    build_registry,
)

from .output import (
    OutputLine,
    OutputSink,
)

from .scheduler import (
    ManualClock,
    ScheduledTask,
    Scheduler,
)

from .terminal import (
    CommandHistory,
    TerminalConfig,
    TerminalSession,
)

from .exceptions import (
    ConfigurationError,
    ContentError,
    NavigationError,
    SitetermError,
)

__all__ = [
    # Parsing
    "CommandParser",
    "ParsedCommand",

    # Content
    "ContentIndex",
    "Post",
    "category_from_path",

    # Site data
    "Section",
    "SiteProfile",
    "classic_profile",

    # Session and commands
    "SessionState",
    "Command",
    "CommandRegistry",
    "CommandResult",
    "build_registry",

    # Scrollback and timing
    "OutputLine",
    "OutputSink",
    "ManualClock",
    "ScheduledTask",
    "Scheduler",

    # Terminal
    "CommandHistory",
    "TerminalConfig",
    "TerminalSession",

    # Errors
    "ConfigurationError",
    "ContentError",
    "NavigationError",
    "SitetermError",

    # Version info
    "__version__",
]
