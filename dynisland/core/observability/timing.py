"""Timing helpers for lightweight observability."""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

T = TypeVar("T")

# Counter reads are expected to be sub-millisecond; anything slower is worth a line.
SLOW_READ_MS = 50.0


@contextmanager
def time_block(
    name: str,
    *,
    logger: logging.Logger | None = None,
    level: int = logging.DEBUG,
    slow_ms: float | None = None,
) -> Iterator[None]:
    """Log how long the block took.

    With ``slow_ms`` set, only blocks slower than the threshold are logged
    (at WARNING), so the per-tick counter reads stay silent.
    """
    log = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        dur_ms = (time.perf_counter() - start) * 1000
        if slow_ms is None:
            log.log(level, "%s took %.1fms", name, dur_ms, extra={"event": "timing"})
        elif dur_ms > slow_ms:
            log.warning("%s was slow: %.1fms", name, dur_ms, extra={"event": "timing"})


def timed(name: str, *, slow_ms: float | None = SLOW_READ_MS) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator to log slow executions of a function."""

    def _decorator(fn: Callable[..., T]) -> Callable[..., T]:
        log = logging.getLogger(fn.__module__)

        @functools.wraps(fn)
        def _wrapped(*args: Any, **kwargs: Any) -> T:
            with time_block(name, logger=log, slow_ms=slow_ms):
                return fn(*args, **kwargs)

        return _wrapped

    return _decorator
