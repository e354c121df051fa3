"""Result type: Ok[T] | Err[E], the settled outcome of a future.

``Future.result()`` snapshots a settled future as a Result, and the callbacks
passed to ``Future.then`` run through ``safe`` so their outcome is one too.
Only the operations the future machinery needs are provided.

Examples:
    >>> Ok(42).unwrap()
    42
    >>> Err('late').map_err(str.upper)
    Err(error='LATE')
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NoReturn, TypeIs

import msgspec

__all__ = ['Err', 'Ok', 'Result']


class Ok[T](msgspec.Struct, frozen=True):
    """A fulfillment value."""

    value: T

    def is_ok(self) -> TypeIs[Ok[T]]:
        return True

    def is_err(self) -> TypeIs[Err[object]]:
        return False

    def unwrap(self) -> T:
        """Return the fulfillment value."""
        return self.value

    def map_err[F](self, _f: Callable[[object], F]) -> Ok[T]:
        """Return self; there is no reason to transform."""
        return self


class Err[E](msgspec.Struct, frozen=True):
    """A rejection reason, or the exception a callback raised.

    A future may be rejected with any value, so ``error`` need not be an
    exception.
    """

    error: E

    def is_ok(self) -> TypeIs[Ok[object]]:
        return False

    def is_err(self) -> TypeIs[Err[E]]:
        return True

    def unwrap(self) -> NoReturn:
        """Raise, since a rejected outcome has no value.

        Raises:
            RuntimeError: Always, naming the reason.
        """
        raise RuntimeError(f'Called unwrap on Err: {self.error!r}')

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Transform the reason, e.g. into something that can be raised."""
        return Err(f(self.error))


type Result[T, E = Exception] = Ok[T] | Err[E]
