#!/usr/bin/env python3
"""
Session state and the virtual path state machine.

The virtual tree is at most two levels deep::

    /                       root
    /<section>              a top-level section (notes, projects, about)
    /notes/<category>       a category published by the content index

Paths are written with a configurable root marker. ``/`` is canonical;
``~`` gives the home-style spelling (``~``, ``~/notes``). Both markers are
always accepted as input, whatever the display marker is.

Design Principles:
- The current path is only ever replaced by a validated one
- Validation reads the content index at navigation time
- Resolution follows the usual shell rules for ``.`` and ``..``
"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .content import ContentIndex
from .exceptions import ConfigurationError, NavigationError
from .site import SiteProfile

ROOT_MARKERS = ('/', '~')


class SessionState:
    """
    Mutable state of one terminal session.

    Holds the current virtual path plus references to the read-only site
    data the command handlers draw on.
    """

    def __init__(self, content: Optional[ContentIndex] = None,
                 site: Optional[SiteProfile] = None,
                 root: str = '/',
                 clock: Optional[Callable[[], datetime]] = None):
        """Initialize a session positioned at the root."""
        if root not in ROOT_MARKERS:
            raise ConfigurationError(f"unknown root marker: {root!r}")
        self.root = root
        self.content = content if content is not None else ContentIndex()
        self.site = site or SiteProfile()
        self.clock = clock or datetime.now
        self._segments: Tuple[str, ...] = ()

    # Path formatting

    @property
    def segments(self) -> Tuple[str, ...]:
        return self._segments

    @property
    def cwd(self) -> str:
        """The current path as displayed by ``pwd`` and the prompt."""
        return self.format_path(self._segments)

    def format_path(self, segments: Tuple[str, ...]) -> str:
        if not segments:
            return self.root
        return self.root.rstrip('/') + '/' + '/'.join(segments)

    @property
    def at_root(self) -> bool:
        return not self._segments

    # Resolution

    def _split(self, target: str) -> Tuple[bool, List[str]]:
        """Return (is_absolute, raw parts) for a cd/ls argument."""
        if target in ROOT_MARKERS:
            return True, []
        if target.startswith('/'):
            return True, target[1:].split('/')
        if target.startswith('~/'):
            return True, target[2:].split('/')
        return False, target.split('/')

    def resolve(self, target: Optional[str]) -> Tuple[str, ...]:
        """
        Resolve a path argument to normalized segments.

        Resolution does not check that the result exists; use
        ``is_directory`` for that.
        """
        if not target:
            return ()

        absolute, parts = self._split(target)
        normalized = [] if absolute else list(self._segments)

        for part in parts:
            if part == '' or part == '.':
                continue
            elif part == '..':
                # Popping past the root is a no-op
                if normalized:
                    normalized.pop()
            else:
                normalized.append(part)

        return tuple(normalized)

    def is_directory(self, segments: Tuple[str, ...]) -> bool:
        """Check a resolved path against the sections and live categories."""
        if not segments:
            return True
        if self.site.section(segments[0]) is None:
            return False
        if len(segments) == 1:
            return True
        if len(segments) == 2 and segments[0] == self.site.category_section:
            return self.content.has_category(segments[1])
        return False

    # State transitions

    def change_directory(self, target: Optional[str] = None) -> str:
        """
        Move to ``target`` and return the new path.

        No target, ``/`` and ``~`` all lead to the root. An unknown target
        raises NavigationError and leaves the current path untouched.
        """
        segments = self.resolve(target)
        if not self.is_directory(segments):
            raise NavigationError(f"cd: no such directory: {target}", target=target or '')
        self._segments = segments
        return self.cwd

    def list_directory(self, target: Optional[str] = None) -> List[str]:
        """
        Return the listing lines for ``target`` (default: the current path).

        Raises NavigationError when the path does not resolve, which also
        covers a category that has disappeared from the content since the
        session navigated into it.
        """
        segments = self.resolve(target) if target else self._segments
        if not self.is_directory(segments):
            raise NavigationError("ls: directory not found", target=target or self.cwd)

        if not segments:
            return [f"  {section.name + '/':<11}- {section.description}"
                    for section in self.site.sections]

        section = self.site.section(segments[0])
        if section.name == self.site.category_section:
            if len(segments) == 1:
                return [f"  {category}/" for category in self.content.categories()]
            return [f"  {title}" for title in self.content.titles_in(segments[1])]

        return [f"  {entry}" for entry in section.entries]

    def completions(self, prefix: str = '') -> List[str]:
        """Names ``cd`` could accept from the current path, for tab completion."""
        if self.at_root:
            names = self.site.section_names()
        elif self._segments == (self.site.category_section,):
            names = self.content.categories()
        else:
            names = []
        return [name for name in names if name.startswith(prefix)]
