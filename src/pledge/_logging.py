"""Structured log output for the ``pledge`` logger namespace.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
until the application opts in. ``configure_logging`` attaches a handler to
the ``pledge`` logger whose structlog ProcessorFormatter renders those
records as JSON or console lines, and passes each one to the log hooks.
Other loggers in the process are left alone unless ``logger_name=None``
is given.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'remove_log_hook',
]

type LogHook = Callable[[dict[str, Any]], None]

_log_hooks: list[LogHook] = []
_handler: logging.Handler | None = None


def _pre_chain() -> list[Any]:
    """Processors that turn a record into an event dict and feed the hooks."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _run_hooks,
    ]


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
    logger_name: str | None = 'pledge',
) -> None:
    """Route pledge's log records through structlog.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Threshold for the target logger, e.g. "DEBUG" or "WARNING".
        json_output: Render JSON lines if True, console lines otherwise.
        logger_name: Logger to attach the handler to. None means the root
            logger, which also captures every other library's records.
    """
    global _handler

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer(default=repr)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
        )
    )

    if _handler is not None:
        for existing in logging.Logger.manager.loggerDict.values():
            if isinstance(existing, logging.Logger):
                existing.removeHandler(_handler)
        logging.getLogger().removeHandler(_handler)
    _handler = handler

    target = logging.getLogger(logger_name)
    target.addHandler(handler)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))


# --- Log hooks ---


def add_log_hook(hook: LogHook) -> None:
    """Call ``hook`` with a copy of every event dict rendered by the handler."""
    _log_hooks.append(hook)


def remove_log_hook(hook: LogHook) -> None:
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    _log_hooks.clear()


def _run_hooks(_logger: Any, _method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for hook in _log_hooks:
        try:
            hook(event_dict.copy())
        except Exception:  # noqa: S112
            # A failing hook must not stop the record or the other hooks.
            continue
    return event_dict
