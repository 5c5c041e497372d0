"""Timing for store fetches and export rendering."""

import logging
import time
from functools import wraps
from typing import Callable

import structlog

logger = logging.getLogger(__name__)


def timed_fetch(threshold_ms: float = 1000):
    """Decorate a store's fetch runner ``(store, generation)``.

    While the fetch runs, ``store`` and ``generation`` are bound in the
    structlog context so every log line it emits carries them. On exit the
    duration is logged with the outcome: the store's new status, or
    ``superseded`` when a newer fetch or a cancel took over.

    Example:
        @timed_fetch(threshold_ms=1000)
        async def _run(self, generation):
            ...
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(store, generation: int, *args, **kwargs):
            start = time.perf_counter()
            with structlog.contextvars.bound_contextvars(store=store.name, generation=generation):
                try:
                    return await func(store, generation, *args, **kwargs)
                finally:
                    duration_ms = (time.perf_counter() - start) * 1000
                    outcome = (
                        "superseded"
                        if generation != store.generation
                        else store.state.status.value
                    )
                    if duration_ms > threshold_ms:
                        logger.warning(
                            f"Slow {store.name} fetch: {duration_ms:.2f}ms "
                            f"(threshold: {threshold_ms}ms, outcome: {outcome})"
                        )
                    else:
                        logger.debug(
                            f"{store.name} fetch {outcome} in {duration_ms:.2f}ms"
                        )

        return wrapper

    return decorator


class ExportTimer:
    """Time one export render and log its format, row count and size.

    Example:
        with ExportTimer("csv", rows=len(records)) as timer:
            timer.size = len(render(...))
    """

    def __init__(self, export_format: str, rows: int, threshold_ms: float = 500):
        self.export_format = export_format
        self.rows = rows
        self.threshold_ms = threshold_ms
        self.size: int | None = None
        self.start_time: float | None = None
        self.duration_ms: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000
        if exc_type is not None:
            logger.warning(
                f"{self.export_format} export of {self.rows} rows failed after "
                f"{self.duration_ms:.2f}ms: {exc_val}"
            )
            return
        summary = f"{self.export_format} export of {self.rows} rows ({self.size or 0} bytes)"
        if self.duration_ms > self.threshold_ms:
            logger.warning(f"Slow {summary}: {self.duration_ms:.2f}ms")
        else:
            logger.debug(f"{summary} rendered in {self.duration_ms:.2f}ms")
