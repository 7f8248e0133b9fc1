"""
Method decorators adding logging, timing and error handling to Lambda handlers.

The decorated callable may be a plain function ``handler(event, context)`` or a
method ``handler(self, event, context)``, synchronous or ``async``. The invocation
context is the argument bound to the parameter named ``context``, or the last
positional argument when no parameter has that name. Without a recognized context
the logging and timing decorators call the original function untouched.

Stacked decorators run outermost-first, exactly like Python's ``@`` syntax::

    class Handler:
        @handle_errors()
        @log_lambda_info({'verbose': True})
        @measure_performance()
        async def handle(self, event, context):
            ...
"""

from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from lambda_radar.context_logger import LogSink, OptionsLike
from lambda_radar.info import get_lambda_info, get_minimal_lambda_info, is_lambda_context
from lambda_radar.instrumentation import (
    ErrorHandlingInvocation,
    Invocation,
    LoggingInvocation,
    TimingInvocation,
    instrument,
    locate_argument,
    safe_signature,
)
from lambda_radar.metadata import copy_metadata

F = TypeVar('F', bound=Callable[..., Any])
Decorator = Callable[[F], F]


def _callable_name(func: Callable[..., Any]) -> str:
    return getattr(func, '__name__', type(func).__name__)


class _LambdaInfoInvocation(LoggingInvocation):
    def started(self) -> None:
        if self.logger.options.verbose:
            lambda_info = get_lambda_info(self.context, cold_start=self.logger.cold_start)
        else:
            lambda_info = get_minimal_lambda_info(self.context, cold_start=self.logger.cold_start)
        # The metadata is the payload here, so skip the metadata segment
        self.logger.info('Lambda execution details', lambda_info, {'include_lambda_info': False})
        super().started()


def _decorator(
    open_invocation: Callable[[Callable[..., Any], Any, Any], Optional[Invocation]],
) -> Decorator:
    def decorator(func: F) -> F:
        signature = safe_signature(func)

        def opener(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Optional[Invocation]:
            context = locate_argument(signature, args, kwargs, 'context', -1)
            event = locate_argument(signature, args, kwargs, 'event', -2)
            return open_invocation(func, event, context)

        return instrument(func, opener)  # type: ignore[return-value]

    return decorator


def log_lambda_info(options: OptionsLike = None, sink: LogSink | None = None) -> Decorator:
    """
    Method decorator to log Lambda information around each invocation.

    Logs the execution details, then the start, completion (with execution time and
    memory utilization) or failure of the call. Failures are re-raised unchanged.

    Args:
        options: Options to customize logging behavior
        sink: Output sink, defaults to the package logger
    """

    def open_invocation(func, event, context):
        if not is_lambda_context(context):
            return None
        return _LambdaInfoInvocation(event, context, options, sink)

    return _decorator(open_invocation)


def measure_performance(options: OptionsLike = None, sink: LogSink | None = None) -> Decorator:
    """
    Method decorator to measure and log execution time.

    Args:
        options: Options to customize logging behavior
        sink: Output sink, defaults to the package logger
    """

    def open_invocation(func, event, context):
        if not is_lambda_context(context):
            return None
        return TimingInvocation(_callable_name(func), context, options, sink)

    return _decorator(open_invocation)


def handle_errors(options: OptionsLike = None, sink: LogSink | None = None) -> Decorator:
    """
    Method decorator to handle errors.

    Any exception raised by the method is logged with verbose metadata and replaced by
    a 500 response. Logging is skipped when no Lambda context is available; the
    response then carries the request id ``"unknown"``.

    Args:
        options: Options to customize error logging behavior
        sink: Output sink, defaults to the package logger
    """

    def open_invocation(func, event, context):
        return ErrorHandlingInvocation(f'Error in method {_callable_name(func)}', context, options, sink)

    return _decorator(open_invocation)


def compose_decorators(*decorators: Decorator) -> Decorator:
    """
    Combine several decorators into one, preserving metadata at every step.

    ``compose_decorators(a, b)`` behaves like stacking ``@a`` above ``@b``: ``a`` is the
    outermost wrapper. This is the reverse of a plain left fold, which would leave the
    first decorator innermost. A decorator returning ``None`` leaves the function unchanged.
    """

    def decorator(func: F) -> F:
        result: Callable[..., Any] = func
        for inner_decorator in reversed(decorators):
            decorated = inner_decorator(result)
            if decorated is None:
                continue
            copy_metadata(result, decorated)
            result = decorated
        return result  # type: ignore[return-value]

    return decorator
