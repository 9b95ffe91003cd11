#!/usr/bin/env python3
"""
Scrollback buffer for the terminal.

Lines are only ever appended, always ahead of the live prompt, and nothing
but ``clear`` removes them. Front ends subscribe as listeners to draw lines
as they arrive.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional


KIND_PLAIN = ''
KIND_COMMAND = 'command'
KIND_ERROR = 'error'
KIND_SUCCESS = 'success'


@dataclass(frozen=True)
class OutputLine:
    """One rendered line of scrollback."""
    text: str
    kind: str = KIND_PLAIN


class OutputListener:
    """Receives scrollback events. Subclasses override what they need."""

    def on_append(self, line: OutputLine) -> None:
        pass

    def on_clear(self) -> None:
        pass


class OutputSink:
    """
    Append-only list of output lines.

    Multi-line text is split into one OutputLine per physical line so every
    entry renders as exactly one row.
    """

    def __init__(self):
        self._lines: List[OutputLine] = []
        self._listeners: List[OutputListener] = []

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[OutputLine]:
        return iter(self._lines)

    @property
    def lines(self) -> List[OutputLine]:
        """A copy of the current scrollback."""
        return list(self._lines)

    def texts(self) -> List[str]:
        return [line.text for line in self._lines]

    def subscribe(self, listener: OutputListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: OutputListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def write(self, text: str, kind: str = KIND_PLAIN) -> List[OutputLine]:
        """Append ``text`` and return the lines that were added."""
        added = [OutputLine(part, kind) for part in text.split('\n')]
        for line in added:
            self._lines.append(line)
            for listener in self._listeners:
                listener.on_append(line)
        return added

    def clear(self) -> None:
        """Remove every line. The prompt is not part of the sink."""
        self._lines.clear()
        for listener in self._listeners:
            listener.on_clear()

    def render(self, prompt: Optional[str] = None) -> List[str]:
        """Scrollback text with the live prompt as the final row."""
        rendered = self.texts()
        if prompt is not None:
            rendered.append(prompt)
        return rendered


class CallbackListener(OutputListener):
    """Adapter turning two plain callables into a listener."""

    def __init__(self, on_append: Callable[[OutputLine], None],
                 on_clear: Optional[Callable[[], None]] = None):
        self._append = on_append
        self._clear = on_clear

    def on_append(self, line: OutputLine) -> None:
        self._append(line)

    def on_clear(self) -> None:
        if self._clear is not None:
            self._clear()
