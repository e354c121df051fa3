"""Pytest configuration and shared fixtures for pledge tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pledge import QueueScheduler, init

if TYPE_CHECKING:
    from collections.abc import Callable

    from pledge import Future


@pytest.fixture
def scheduler() -> QueueScheduler:
    """Deterministic scheduler, also installed as the process-wide default."""
    queue = QueueScheduler()
    init(scheduler=queue)
    return queue


@pytest.fixture
def recorder() -> Callable[[Future], list[tuple[str, object]]]:
    """Attach terminal callbacks recording a future's outcome."""

    def attach(future: Future) -> list[tuple[str, object]]:
        calls: list[tuple[str, object]] = []
        future.done(
            lambda value: calls.append(('fulfilled', value)),
            lambda reason: calls.append(('rejected', reason)),
        )
        return calls

    return attach
