"""Configuration: SchedulerKind enum, FutureConfig, and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from pledge._logging import configure_logging
from pledge.scheduler import AsyncioScheduler, QueueScheduler, Scheduler

__all__ = [
    'FutureConfig',
    'SchedulerKind',
    'get_config',
    'init',
]


class SchedulerKind(Enum):
    """Built-in scheduler implementations."""

    QUEUE = 'queue'
    ASYNCIO = 'asyncio'
    CUSTOM = 'custom'


def _make_scheduler(kind: SchedulerKind) -> Scheduler:
    if kind == SchedulerKind.ASYNCIO:
        return AsyncioScheduler()
    return QueueScheduler()


@dataclass(frozen=True)
class FutureConfig:
    """Process-wide configuration for futures.

    Attributes:
        scheduler_kind: Which scheduler implementation is in use.
        scheduler: Scheduler used by futures created without an explicit one.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
    """

    scheduler_kind: SchedulerKind = SchedulerKind.QUEUE
    scheduler: Scheduler = field(default_factory=QueueScheduler)
    log_level: str | None = None


# Global configuration (set by init())
_config: FutureConfig | None = None


def _detect_scheduler_kind() -> SchedulerKind:
    """Detect the scheduler kind from the environment.

    Priority:
    1. PLEDGE_SCHEDULER environment variable ("queue" or "asyncio")
    2. Default to QUEUE
    """
    env_scheduler = os.environ.get('PLEDGE_SCHEDULER', '').lower()
    if env_scheduler == 'asyncio':
        return SchedulerKind.ASYNCIO
    if env_scheduler and env_scheduler != 'queue':
        logging.warning("Unknown PLEDGE_SCHEDULER value '%s', defaulting to queue", env_scheduler)
    return SchedulerKind.QUEUE


def init(
    scheduler: Scheduler | SchedulerKind | str | None = None,
    log_level: str | None = None,
    *,
    json_logs: bool = True,
) -> FutureConfig:
    """Initialize pledge with the specified configuration.

    Args:
        scheduler: Scheduler instance, SchedulerKind, or its string value
            ("queue", "asyncio"). Auto-detected if None.
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.
        json_logs: Render logs as JSON (True) or for the console (False).

    Returns:
        The FutureConfig that was set.

    Example:
        ```python
        from pledge import init, SchedulerKind

        # Deterministic queue, drained by the caller
        init()

        # Reactions run on the running asyncio loop
        init(scheduler=SchedulerKind.ASYNCIO, log_level="DEBUG")
        ```
    """
    global _config  # noqa: PLW0603

    if scheduler is None:
        kind = _detect_scheduler_kind()
        resolved = _make_scheduler(kind)
    elif isinstance(scheduler, str | SchedulerKind):
        kind = SchedulerKind(scheduler.lower()) if isinstance(scheduler, str) else scheduler
        if kind == SchedulerKind.CUSTOM:
            msg = 'A custom scheduler must be passed as an instance'
            raise ValueError(msg)
        resolved = _make_scheduler(kind)
    elif isinstance(scheduler, Scheduler):
        resolved = scheduler
        if isinstance(scheduler, QueueScheduler):
            kind = SchedulerKind.QUEUE
        elif isinstance(scheduler, AsyncioScheduler):
            kind = SchedulerKind.ASYNCIO
        else:
            kind = SchedulerKind.CUSTOM
    else:
        msg = f'Not a scheduler: {scheduler!r}'
        raise TypeError(msg)

    _config = FutureConfig(scheduler_kind=kind, scheduler=resolved, log_level=log_level)

    if log_level is not None:
        configure_logging(log_level, json_output=json_logs)

    return _config


def get_config() -> FutureConfig:
    """Get the current configuration, initializing defaults on first use.

    Example:
        ```python
        from pledge import get_config

        get_config().scheduler.run_until_idle()
        ```
    """
    if _config is None:
        return init()
    return _config
