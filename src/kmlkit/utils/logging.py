"""
Timing helpers for reads, writes and conversions.

Each timed operation produces one log record carrying ``duration_ms`` and
``operation`` extras, and ``item_count`` when the caller reports how many
nodes or geometries it handled. JSONFormatter copies these fields into
structured log files.

Example:
    with PerformanceTimer("KML write") as timer:
        text = serialize(tree)
        timer.count = 42
    # DEBUG: "KML write completed in 1.84ms (42 nodes)"
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PerformanceTimer:
    """
    Context manager that logs how long a block took.

    A block that raises is logged as failed and the exception propagates.
    Set ``count`` inside the block to include the amount of work done.
    """

    def __init__(
        self,
        operation_name: str,
        log_level: int = logging.DEBUG,
        threshold_ms: Optional[float] = None,
        unit: str = "nodes",
    ):
        """
        Args:
            operation_name: Label used in the log message
            log_level: Logging level of the record
            threshold_ms: Skip the record for blocks faster than this
            unit: What ``count`` counts, for the log message
        """
        self.operation_name = operation_name
        self.log_level = log_level
        self.threshold_ms = threshold_ms
        self.unit = unit
        self.count: Optional[int] = None
        self.duration_ms: Optional[float] = None
        self._start: Optional[float] = None

    def __enter__(self) -> "PerformanceTimer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._start is None:
            return
        self.duration_ms = (time.perf_counter() - self._start) * 1000
        if self.threshold_ms is not None and self.duration_ms < self.threshold_ms:
            return

        status = "failed" if exc_type is not None else "completed"
        message = f"{self.operation_name} {status} in {self.duration_ms:.2f}ms"
        extra: Dict[str, Any] = {"duration_ms": self.duration_ms, "operation": self.operation_name}
        if self.count is not None:
            message += f" ({self.count} {self.unit})"
            extra["item_count"] = self.count

        logger.log(self.log_level, message, extra=extra)


def log_performance(
    log_level: int = logging.DEBUG,
    threshold_ms: Optional[float] = None,
    count: Optional[Callable[[Any], int]] = None,
    unit: str = "items",
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator that times each call with a PerformanceTimer.

    The operation is named after the function's module and qualified name.

    Args:
        log_level: Logging level of the record
        threshold_ms: Skip the record for calls faster than this
        count: Derives the item count from the return value
        unit: What ``count`` counts, for the log message

    Example:
        @log_performance(count=lambda collection: len(collection.geoms), unit="geometries")
        def quick_collection(kml):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        operation = f"{func.__module__}.{func.__qualname__}"

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with PerformanceTimer(operation, log_level, threshold_ms, unit) as timer:
                result = func(*args, **kwargs)
                if count is not None:
                    timer.count = count(result)
            return result

        return wrapper

    return decorator
