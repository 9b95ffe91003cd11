#!/usr/bin/env python3
"""
Deferred callbacks for the terminal.

The terminal is single-threaded: nothing here spawns threads or sleeps on
its own. A Scheduler only records when callbacks are due; whoever drives the
session (the console loop, or a test with a ManualClock) calls
``run_pending`` to fire them.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class ManualClock:
    """A clock that only moves when told to. Used by tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        self.now += seconds
        return self.now


@dataclass
class ScheduledTask:
    """A callback due at ``deadline`` on the scheduler's clock."""
    deadline: float
    callback: Callable[[], None]
    name: str = ''
    cancelled: bool = False
    done: bool = False
    _seq: int = field(default=0, repr=False)

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> bool:
        """Cancel the task. Returns False if it already ran."""
        if self.done:
            return False
        self.cancelled = True
        return True


class Scheduler:
    """Keeps deferred callbacks ordered by deadline."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.monotonic
        self._tasks: List[ScheduledTask] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], None],
                   name: str = '') -> ScheduledTask:
        """Schedule ``callback`` to run ``delay`` seconds from now."""
        self._seq += 1
        task = ScheduledTask(self.clock() + max(delay, 0.0), callback, name, _seq=self._seq)
        self._tasks.append(task)
        self._tasks.sort(key=lambda t: (t.deadline, t._seq))
        logger.debug("Scheduled %s in %.2fs", name or 'task', delay)
        return task

    @property
    def pending(self) -> List[ScheduledTask]:
        return [task for task in self._tasks if task.pending]

    def next_deadline(self) -> Optional[float]:
        pending = self.pending
        return pending[0].deadline if pending else None

    def run_pending(self) -> int:
        """Run every task whose deadline has passed. Returns how many ran."""
        now = self.clock()
        ran = 0
        for task in list(self._tasks):
            if not task.pending:
                continue
            if task.deadline > now:
                break
            task.done = True
            logger.debug("Running %s", task.name or 'task')
            task.callback()
            ran += 1
        self._tasks = [task for task in self._tasks if task.pending]
        return ran

    def advance(self, seconds: float) -> int:
        """Move a ManualClock forward and run whatever became due."""
        if not isinstance(self.clock, ManualClock):
            raise TypeError("advance() needs a scheduler built on a ManualClock")
        self.clock.advance(seconds)
        return self.run_pending()

    def run_until_idle(self, sleep: Optional[Callable[[float], None]] = None) -> int:
        """Wait out and run all pending tasks. Only console front ends call this."""
        sleep = sleep or time.sleep
        ran = 0
        while True:
            deadline = self.next_deadline()
            if deadline is None:
                return ran
            remaining = deadline - self.clock()
            if remaining > 0:
                sleep(remaining)
            ran += self.run_pending()
