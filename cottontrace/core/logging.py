"""structlog setup shared by the API, the CLI and the stores.

Module loggers stay plain ``logging.getLogger(__name__)``; their records are
rendered by the same processor chain as structlog events, so the request id
and store fields bound in ``structlog.contextvars`` appear on both.
"""

import logging
import sys
from typing import Any

import structlog

from cottontrace.config import AppConfig, get_config

# Context keys promoted to the front of console output
CONTEXT_KEYS = ("request_id", "store", "generation")

_handler: logging.Handler | None = None


def add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", "cottontrace")
    return event_dict


def order_context(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Move request and store context ahead of the event's own fields."""
    ordered = {key: event_dict.pop(key) for key in CONTEXT_KEYS if key in event_dict}
    return {**ordered, **event_dict}


def shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service,
        order_context,
    ]


def build_renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "text":
        return structlog.dev.ConsoleRenderer()
    raise ValueError(f"Unknown log format: {log_format!r} (expected json or text)")


def configure_logging(config: AppConfig | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler.

    Safe to call more than once: the handler installed by a previous call is
    replaced, not duplicated.
    """
    global _handler
    config = config or get_config()
    renderer = build_renderer(config.log_format)

    structlog.configure(
        processors=[
            *shared_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(config.log_level.upper())
    _handler = handler
