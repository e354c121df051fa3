"""Schedulers: the deferred-execution primitive futures defer their reactions to.

A scheduler runs a zero-argument action after the current synchronous block
completes, preserving FIFO order among actions scheduled on the same instance.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pledge.errors import NoRunningLoop

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'AsyncioScheduler',
    'QueueScheduler',
    'Scheduler',
]

_logger = logging.getLogger(__name__)


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for "run later" primitives."""

    def schedule(self, action: Callable[[], object]) -> None:
        """Arrange for ``action`` to run on a later turn, in FIFO order."""
        ...


class QueueScheduler:
    """Deterministic in-process FIFO queue.

    Actions are only run when the owner drains the queue, which makes the
    ordering of reactions fully reproducible.

    Example:
        ```python
        scheduler = QueueScheduler()
        Future(lambda resolve, reject: resolve(1), scheduler=scheduler).then(print)
        scheduler.run_until_idle()  # prints 1
        ```
    """

    __slots__ = ('_queue',)

    def __init__(self) -> None:
        self._queue: deque[Callable[[], object]] = deque()

    def schedule(self, action: Callable[[], object]) -> None:
        self._queue.append(action)

    @property
    def pending(self) -> int:
        """Number of actions waiting to run."""
        return len(self._queue)

    def run_once(self) -> bool:
        """Run the oldest queued action.

        Returns:
            True if an action was run, False if the queue was empty.
        """
        if not self._queue:
            return False
        action = self._queue.popleft()
        try:
            action()
        except Exception:
            _logger.exception('Scheduled action %r raised', action)
        return True

    def run_until_idle(self) -> int:
        """Run queued actions until the queue is empty.

        Actions scheduled while draining are run in the same call.

        Returns:
            The number of actions that were run.
        """
        count = 0
        while self.run_once():
            count += 1
        return count

    def clear(self) -> None:
        """Drop every queued action without running it."""
        self._queue.clear()

    def __repr__(self) -> str:
        return f'QueueScheduler(pending={len(self._queue)})'


class AsyncioScheduler:
    """Scheduler backed by ``loop.call_soon``.

    With no explicit loop the running loop at schedule time is used, so a
    single instance can serve whichever loop is current. Scheduling with
    neither raises ``NoRunningLoopError``. ``done`` propagates it to the
    caller. ``then`` runs ``done`` inside the derived future's producer, so
    there the error rejects the derived future instead.
    """

    __slots__ = ('_loop',)

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def schedule(self, action: Callable[[], object]) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise NoRunningLoop().to_exception() from None
        loop.call_soon(action)

    def __repr__(self) -> str:
        return f'AsyncioScheduler(loop={self._loop!r})'
