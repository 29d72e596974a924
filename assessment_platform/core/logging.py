from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

_CONFIGURED = False


def resolve_level(level: int | str) -> int:
    """Accept ``LOG_LEVEL`` names as well as numeric levels; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def add_service_name(service: str) -> Processor:
    """Stamp every event with the emitting service, unless the call site set one."""

    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def setup_logging(level: int | str = logging.INFO, *, service: str | None = None) -> None:
    """Configure structlog to emit JSON logs with contextvars support.

    One service runs per process, so the first call wins.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    level = resolve_level(level)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)

    processors: list[Any] = [structlog.contextvars.merge_contextvars]
    if service:
        processors.append(add_service_name(service))
    processors += [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True
