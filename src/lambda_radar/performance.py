"""
Execution timing helpers.

Durations are fractional milliseconds computed from the monotonic performance counter,
so wall-clock adjustments never skew a measurement.
"""

import inspect
import time
from typing import Any, Awaitable, Callable, Dict, TypeVar, Union

from lambda_radar.exceptions import UnknownMarkError
from lambda_radar.models.output import ExecutionResult

T = TypeVar('T')


def _now() -> int:
    return time.perf_counter_ns()


def _elapsed_ms(start: int, end: int) -> float:
    seconds_diff, nanos_diff = divmod(end - start, 1_000_000_000)
    return (seconds_diff * 1e3) + (nanos_diff / 1e6)


class ExecutionTimer:
    """
    Stopwatch tracking named stages of one invocation.

    Marks and measures share a single namespace per timer. A timer belongs to a
    single invocation and is never shared, so it takes no locks.
    """

    def __init__(self) -> None:
        self._marks: Dict[str, int] = {}
        self._measures: Dict[str, float] = {}

    def mark(self, name: str) -> None:
        """
        Mark a point in execution to measure from or to.

        Args:
            name: Name of the mark; an existing mark with the same name is overwritten
        """
        self._marks[name] = _now()

    def measure(self, name: str, start_mark: str, end_mark: str | None = None) -> float:
        """
        Measure time between two marks.

        Args:
            name: Name for the measurement
            start_mark: Start mark name
            end_mark: End mark name, defaults to now when omitted

        Returns:
            Duration in milliseconds

        Raises:
            UnknownMarkError: If a referenced mark was never recorded
        """
        if start_mark not in self._marks:
            raise UnknownMarkError(start_mark, role='Start')
        if end_mark is not None and end_mark not in self._marks:
            raise UnknownMarkError(end_mark, role='End')

        end = self._marks[end_mark] if end_mark is not None else _now()
        duration = _elapsed_ms(self._marks[start_mark], end)
        self._measures[name] = duration
        return duration

    def get_measures(self) -> Dict[str, float]:
        """Return a copy of all measurements recorded so far."""
        return dict(self._measures)


def create_execution_timer() -> ExecutionTimer:
    """Create a timer for tracking stages in one Lambda execution."""
    return ExecutionTimer()


async def measure_execution_time(
    fn: Callable[..., Union[Awaitable[T], T]], *args: Any, **kwargs: Any
) -> ExecutionResult[T]:
    """
    Measure execution time of an asynchronous call.

    Exceptions raised by ``fn`` propagate unchanged and no timing is reported for them.

    Args:
        fn: Coroutine function (or plain function returning an awaitable) to execute
        *args: Positional arguments passed to ``fn``
        **kwargs: Keyword arguments passed to ``fn``

    Returns:
        Result of the function and its execution time in milliseconds
    """
    start = _now()
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return ExecutionResult(result=result, execution_time=_elapsed_ms(start, _now()))


def measure_execution_time_sync(fn: Callable[..., T], *args: Any, **kwargs: Any) -> ExecutionResult[T]:
    """Synchronous counterpart of :func:`measure_execution_time`."""
    start = _now()
    result = fn(*args, **kwargs)
    return ExecutionResult(result=result, execution_time=_elapsed_ms(start, _now()))
