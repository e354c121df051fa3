"""pledge: a settle-once Future with deferred reactions and thenable flattening.

Flat imports (preferred):
    from pledge import Future, QueueScheduler, AsyncioScheduler, Ok, Err
    from pledge import init, get_config, configure_logging

Submodule imports (for organization):
    from pledge.future import Future, State, Reaction
    from pledge.scheduler import Scheduler, QueueScheduler
    from pledge.errors import NotSettledError, RejectedError
"""

# Config
from pledge._config import FutureConfig, SchedulerKind, get_config, init

# Logging
from pledge._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    remove_log_hook,
)

# Decorators
from pledge.decorators import safe

# Errors
from pledge.errors import (
    ChainingCycle,
    ChainingCycleError,
    NoRunningLoop,
    NoRunningLoopError,
    NotAwaitable,
    NotAwaitableError,
    NotSettled,
    NotSettledError,
    Rejected,
    RejectedError,
)

# Future
from pledge.future import Future, Reaction, State, is_thenable

# Result types
from pledge.result import Err, Ok, Result

# Schedulers
from pledge.scheduler import AsyncioScheduler, QueueScheduler, Scheduler

__all__ = [
    # Schedulers
    'AsyncioScheduler',
    # Errors
    'ChainingCycle',
    'ChainingCycleError',
    # Result types
    'Err',
    # Future
    'Future',
    # Config
    'FutureConfig',
    'NoRunningLoop',
    'NoRunningLoopError',
    'NotAwaitable',
    'NotAwaitableError',
    'NotSettled',
    'NotSettledError',
    'Ok',
    'QueueScheduler',
    'Reaction',
    'Rejected',
    'RejectedError',
    'Result',
    'Scheduler',
    'SchedulerKind',
    'State',
    # Logging
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_config',
    'init',
    'is_thenable',
    'remove_log_hook',
    # Decorators
    'safe',
]
