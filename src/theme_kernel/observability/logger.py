"""Structured logging with boot_id support.

Uses structlog on top of stdlib logging. Modules keep logging through
``logging.getLogger(__name__)``; every entry rendered by structlog carries
the boot_id of the kernel boot it belongs to.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

# Context var for boot_id propagation
_boot_id: ContextVar[str] = ContextVar("boot_id", default="")

_HANDLER_NAME = "theme_kernel"


def get_boot_id() -> str:
    """Current boot ID, empty before any kernel boot."""
    return _boot_id.get()


def set_boot_id(boot_id: str) -> None:
    _boot_id.set(boot_id)


def new_boot_id() -> str:
    """Generate and set a new boot ID."""
    bid = uuid.uuid4().hex
    _boot_id.set(bid)
    return bid


def _add_boot_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add boot_id when one is set."""
    bid = _boot_id.get()
    if bid:
        event_dict["boot_id"] = bid
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "console",
) -> None:
    """Configure structured logging for the kernel and its host.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for machine-readable output, "console" for terminals.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_boot_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    final: list[Any] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if format == "json":
        final += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route plain stdlib records (logging.getLogger users) through the same renderer.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=final,
        )
    )
    handler.set_name(_HANDLER_NAME)

    # Replace only our own handler; host or test handlers stay attached.
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
