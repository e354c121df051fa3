"""Future error types: dual struct+exception for Result and raise-based code."""

from __future__ import annotations

from typing import Any

import msgspec

__all__ = [
    'ChainingCycle',
    'ChainingCycleError',
    'NoRunningLoop',
    'NoRunningLoopError',
    'NotAwaitable',
    'NotAwaitableError',
    'NotSettled',
    'NotSettledError',
    'Rejected',
    'RejectedError',
]


# --- State Errors ---


class NotSettled(msgspec.Struct, frozen=True, gc=False):
    """Future is still pending - struct variant for Result[T, NotSettled]."""

    operation: str | None = None

    def to_exception(self) -> NotSettledError:
        """Convert to exception for raise-based code."""
        return NotSettledError(self.operation)


class NotSettledError(RuntimeError):
    """Future is still pending - exception variant."""

    def __init__(self, operation: str | None = None) -> None:
        self.operation = operation
        msg = 'Future not yet settled'
        if operation:
            msg = f'{operation}: {msg}'
        super().__init__(msg)

    def to_struct(self) -> NotSettled:
        """Convert to struct for Result-based code."""
        return NotSettled(self.operation)


class NotAwaitable(msgspec.Struct, frozen=True, gc=False):
    """Pending future whose scheduler cannot run while a coroutine waits - struct variant."""

    scheduler: str | None = None

    def to_exception(self) -> NotAwaitableError:
        """Convert to exception for raise-based code."""
        return NotAwaitableError(self.scheduler)


class NotAwaitableError(RuntimeError):
    """Pending future whose scheduler cannot run while a coroutine waits - exception variant.

    A QueueScheduler only advances when something calls ``run_once`` or
    ``run_until_idle``, so awaiting would suspend forever.
    """

    def __init__(self, scheduler: str | None = None) -> None:
        self.scheduler = scheduler
        msg = (
            'Cannot await a pending future on a queue scheduler; '
            'drain it with run_until_idle() or use AsyncioScheduler'
        )
        if scheduler:
            msg = f'{msg} ({scheduler})'
        super().__init__(msg)

    def to_struct(self) -> NotAwaitable:
        """Convert to struct for Result-based code."""
        return NotAwaitable(self.scheduler)


# --- Scheduler Errors ---


class NoRunningLoop(msgspec.Struct, frozen=True, gc=False):
    """AsyncioScheduler used with no bound or running loop - struct variant."""

    def to_exception(self) -> NoRunningLoopError:
        """Convert to exception for raise-based code."""
        return NoRunningLoopError()


class NoRunningLoopError(RuntimeError):
    """AsyncioScheduler used with no bound or running loop - exception variant."""

    def __init__(self) -> None:
        super().__init__(
            'AsyncioScheduler has no event loop: pass loop= or schedule from inside a coroutine'
        )

    def to_struct(self) -> NoRunningLoop:
        """Convert to struct for Result-based code."""
        return NoRunningLoop()


# --- Rejection Errors ---


class Rejected(msgspec.Struct, frozen=True):
    """Future rejected with a reason that is not an exception - struct variant."""

    reason: Any = None

    def to_exception(self) -> RejectedError:
        """Convert to exception for raise-based code."""
        return RejectedError(self.reason)


class RejectedError(Exception):
    """Future rejected with a reason that is not an exception - exception variant.

    Raised when awaiting such a future, since only exceptions can be raised.
    The original reason is kept on ``reason``.
    """

    def __init__(self, reason: Any = None) -> None:
        self.reason = reason
        super().__init__(f'Future rejected: {reason!r}')

    def to_struct(self) -> Rejected:
        """Convert to struct for Result-based code."""
        return Rejected(self.reason)


# --- Adoption Errors ---


class ChainingCycle(msgspec.Struct, frozen=True, gc=False):
    """Future resolved with itself - struct variant."""

    def to_exception(self) -> ChainingCycleError:
        """Convert to exception for raise-based code."""
        return ChainingCycleError()


class ChainingCycleError(TypeError):
    """Future resolved with itself - exception variant."""

    def __init__(self) -> None:
        super().__init__('Chaining cycle detected: a future cannot adopt itself')

    def to_struct(self) -> ChainingCycle:
        """Convert to struct for Result-based code."""
        return ChainingCycle()
