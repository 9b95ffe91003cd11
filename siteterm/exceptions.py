"""
Exceptions raised inside siteterm.

None of these reach the person typing at the prompt: command handlers and
the registry turn them into ordinary output lines. Content and configuration
errors surface at startup instead.
"""


class SitetermError(Exception):
    """Base exception class for siteterm errors."""

    pass


class NavigationError(SitetermError):
    """Raised when a virtual path does not resolve to a directory."""

    def __init__(self, message: str, target: str = ''):
        super().__init__(message)
        self.target = target


class ContentError(SitetermError):
    """Raised when a content source cannot be read or is malformed."""

    pass


class ConfigurationError(SitetermError):
    """Raised for an unknown profile, root marker or similar setting."""

    pass
