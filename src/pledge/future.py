"""Future: a value that settles exactly once, as a success value or a failure reason.

A future is created from a producer callable that receives two entry points,
``resolve`` and ``reject``. Consumers register reactions with ``then`` (which
derives a new future) or ``done`` (terminal). Reactions never run
synchronously: they are deferred to the future's scheduler and fire in
registration order once the future settles.

Example:
    ```python
    from pledge import Future, QueueScheduler

    scheduler = QueueScheduler()
    Future(lambda resolve, reject: resolve(42), scheduler=scheduler).then(
        lambda value: value + 1
    ).then(print)
    scheduler.run_until_idle()  # prints 43
    ```
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Generator, Iterable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any

import anyio

from pledge._config import get_config
from pledge.decorators import safe
from pledge.errors import ChainingCycle, NotAwaitable, NotSettled, Rejected
from pledge.result import Err, Ok, Result
from pledge.scheduler import QueueScheduler, Scheduler

__all__ = [
    'Future',
    'Reaction',
    'State',
    'is_thenable',
]

_logger = logging.getLogger(__name__)

type Resolve = Callable[[Any], None]
type Reject = Callable[[Any], None]
type Producer = Callable[[Resolve, Reject], object]


class State(Enum):
    """Lifecycle of a future. Only PENDING is ever left, and only once."""

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'


@dataclass(slots=True, frozen=True)
class Reaction:
    """A pair of optional callbacks fired once when a future settles."""

    on_fulfilled: Callable[[Any], object] | None = None
    on_rejected: Callable[[Any], object] | None = None


def _get_then(value: object) -> Callable[..., object] | None:
    # Classes are skipped: reading ``then`` on a class yields an unbound function.
    if value is None or isinstance(value, type):
        return None
    then = getattr(value, 'then', None)
    return then if callable(then) else None


def is_thenable(value: object) -> bool:
    """Return True if ``value`` exposes a callable ``then`` attribute.

    Any exception raised while reading the attribute propagates.
    """
    return _get_then(value) is not None


def _run_guarded(producer: Producer, on_fulfilled: Resolve, on_rejected: Reject) -> None:
    """Run an untrusted producer so that at most one of the callbacks fires, once.

    An exception raised by the producer before it settled counts as a
    rejection; raised afterwards it is ignored.
    """
    settled = False

    def resolve(value: Any) -> None:
        nonlocal settled
        if settled:
            return
        settled = True
        on_fulfilled(value)

    def reject(reason: Any) -> None:
        nonlocal settled
        if settled:
            return
        settled = True
        on_rejected(reason)

    try:
        producer(resolve, reject)
    except Exception as e:
        if settled:
            _logger.debug('Producer raised %r after settling; ignored', e)
            return
        settled = True
        on_rejected(e)


class _DispatchQueue(threading.local):
    """Reactions awaiting dispatch on this thread.

    Settling a future can settle the futures derived from it, and so on down a
    chain. The outermost settlement drains this queue in a loop, so the
    cascade runs at constant stack depth however long the chain is.
    """

    def __init__(self) -> None:
        self.pending: deque[tuple[Future[Any], Reaction]] = deque()
        self.draining = False


_dispatch_queue = _DispatchQueue()


def _dispatch_all(future: Future[Any], reactions: Iterable[Reaction]) -> None:
    queue = _dispatch_queue
    queue.pending.extend((future, reaction) for reaction in reactions)
    if queue.draining:
        return
    queue.draining = True
    try:
        while queue.pending:
            target, reaction = queue.pending.popleft()
            target._dispatch(reaction)
    finally:
        queue.draining = False


class Future[T]:
    """Handle to a value that becomes available exactly once.

    Attributes:
        _state: Current lifecycle state.
        _value: Fulfillment value or rejection reason once settled.
        _reactions: Reactions waiting for settlement; None once settled.
        _scheduler: Where deferred reactions are run.
    """

    __slots__ = ('_reactions', '_scheduler', '_state', '_value')

    def __init__(self, producer: Producer, *, scheduler: Scheduler | None = None) -> None:
        """Create a future and run its producer synchronously.

        Args:
            producer: Callable receiving ``(resolve, reject)``. It may call
                either of them any number of times, or raise; only the first
                outcome counts.
            scheduler: Scheduler for deferred reactions. Defaults to the one
                from ``get_config()``.
        """
        self._state = State.PENDING
        self._value: Any = None
        self._reactions: list[Reaction] | None = []
        self._scheduler = scheduler if scheduler is not None else get_config().scheduler
        _run_guarded(producer, self._fulfill, self._reject)

    @classmethod
    def resolved(cls, value: Any, *, scheduler: Scheduler | None = None) -> Future[Any]:
        """Create a future resolved with ``value`` (thenables are adopted)."""
        return cls(lambda resolve, _reject: resolve(value), scheduler=scheduler)

    @classmethod
    def rejected(cls, reason: Any, *, scheduler: Scheduler | None = None) -> Future[Any]:
        """Create a future rejected with ``reason``."""
        return cls(lambda _resolve, reject: reject(reason), scheduler=scheduler)

    # --- Settlement ---

    def _fulfill(self, result: Any) -> None:
        try:
            if result is self:
                raise ChainingCycle().to_exception()
            then = _get_then(result)
            if then is not None:
                _logger.debug('Future adopting thenable %r', result)
                _run_guarded(then, self._fulfill, self._reject)
                return
            self._settle(State.FULFILLED, result)
        except Exception as e:
            self._reject(e)

    def _reject(self, reason: Any) -> None:
        self._settle(State.REJECTED, reason)

    def _settle(self, state: State, value: Any) -> None:
        if self._state is not State.PENDING:
            return
        reactions, self._reactions = self._reactions, None
        self._state = state
        self._value = value
        _logger.debug('Future %s with %r', state.value, value)
        _dispatch_all(self, reactions or ())

    # --- Reactions ---

    def _handle(self, reaction: Reaction) -> None:
        if self._state is State.PENDING:
            self._reactions.append(reaction)  # type: ignore[union-attr]
            return
        _dispatch_all(self, (reaction,))

    def _dispatch(self, reaction: Reaction) -> None:
        if self._state is State.FULFILLED:
            callback = reaction.on_fulfilled
        else:
            callback = reaction.on_rejected
        if callback is None:
            return
        try:
            callback(self._value)
        except Exception:
            _logger.exception('Reaction callback %r raised', callback)

    def done(
        self,
        on_fulfilled: Callable[[T], object] | None = None,
        on_rejected: Callable[[Any], object] | None = None,
    ) -> None:
        """Register terminal callbacks without deriving a new future.

        The registration itself is deferred to the scheduler, so neither
        callback runs before the caller returns, even if the future has
        already settled.
        """
        reaction = Reaction(
            on_fulfilled if callable(on_fulfilled) else None,
            on_rejected if callable(on_rejected) else None,
        )
        self._scheduler.schedule(partial(self._handle, reaction))

    def then(
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[Any], Any] | None = None,
    ) -> Future[Any]:
        """Derive a future from the outcome of this one.

        The derived future is resolved with whatever the matching callback
        returns, or rejected with whatever it raises. A missing callback
        passes the value or reason through unchanged.

        Args:
            on_fulfilled: Called with the value when this future fulfills.
            on_rejected: Called with the reason when this future rejects.

        Returns:
            A new Future on the same scheduler.

        Example:
            ```python
            Future.rejected(ValueError('boom')).then(None, lambda e: 42).then(print)
            ```
        """

        def producer(resolve: Resolve, reject: Reject) -> None:
            def fulfilled(value: T) -> None:
                if callable(on_fulfilled):
                    _settle_from(safe(on_fulfilled)(value), resolve, reject)
                else:
                    resolve(value)

            def rejected(reason: Any) -> None:
                if callable(on_rejected):
                    _settle_from(safe(on_rejected)(reason), resolve, reject)
                else:
                    reject(reason)

            self.done(fulfilled, rejected)

        return Future(producer, scheduler=self._scheduler)

    def catch(self, on_rejected: Callable[[Any], Any]) -> Future[Any]:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    # --- Inspection ---

    @property
    def state(self) -> State:
        return self._state

    @property
    def value(self) -> Any:
        """The value or reason once settled, None while pending."""
        return self._value

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def is_pending(self) -> bool:
        return self._state is State.PENDING

    def is_fulfilled(self) -> bool:
        return self._state is State.FULFILLED

    def is_rejected(self) -> bool:
        return self._state is State.REJECTED

    def result(self) -> Result[T, Any]:
        """Get the outcome as a Result type (non-blocking).

        Returns:
            Ok(value) if fulfilled, Err(reason) if rejected.

        Raises:
            NotSettledError: If the future is still pending.
        """
        if self._state is State.PENDING:
            raise NotSettled('result').to_exception()
        if self._state is State.FULFILLED:
            return Ok(self._value)
        return Err(self._value)

    # --- Async bridge ---

    async def wait(self) -> T:
        """Wait for settlement and return the value.

        A settled future returns at once. A pending one needs a scheduler
        driven by the running event loop (see ``AsyncioScheduler``).

        Raises:
            NotAwaitableError: If the future is pending on a QueueScheduler,
                which nothing drains while the caller is suspended.
            BaseException: The rejection reason, if it is an exception.
            RejectedError: If the rejection reason is not an exception.
        """
        if self._state is State.PENDING:
            if isinstance(self._scheduler, QueueScheduler):
                raise NotAwaitable(repr(self._scheduler)).to_exception()
            event = anyio.Event()
            self.done(lambda _value: event.set(), lambda _reason: event.set())
            await event.wait()
        outcome = self.result()
        if outcome.is_err():
            raise outcome.map_err(_as_exception).error
        return outcome.unwrap()

    def __await__(self) -> Generator[Any, None, T]:
        """Support await syntax."""
        return self.wait().__await__()

    def __repr__(self) -> str:
        if self._state is State.PENDING:
            return 'Future(<pending>)'
        return f'Future({self._state.value}={self._value!r})'


def _settle_from(outcome: Ok[Any] | Err[Any], resolve: Resolve, reject: Reject) -> None:
    match outcome:
        case Ok(value=value):
            resolve(value)
        case Err(error=error):
            reject(error)


def _as_exception(reason: Any) -> BaseException:
    if isinstance(reason, BaseException):
        return reason
    return Rejected(reason).to_exception()
