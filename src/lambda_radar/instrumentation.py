"""
Shared core of the decorator and middleware surfaces.

Every behavior is an ``Invocation`` subclass driven by :func:`instrument`:

1. the opener inspects the call arguments and returns an ``Invocation``, or ``None``
   to bypass instrumentation and call the wrapped function directly;
2. ``started`` runs before the delegate call;
3. the delegate call is timed;
4. ``completed`` receives the ``ExecutionResult`` and returns the wrapper's result, or
   ``failed`` observes the exception, after which it is re-raised unchanged unless the
   behavior ``stops_errors``, in which case ``error_response`` is returned instead.

Wrappers keep the kind of the wrapped callable: coroutine functions get coroutine
wrappers, plain functions get plain wrappers. A plain wrapper whose delegate hands
back an awaitable returns a coroutine that completes the same lifecycle.
"""

import functools
import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple

from aws_lambda_powertools.utilities.typing import LambdaContext

from lambda_radar.context_logger import LogSink, OptionsLike, create_context_logger
from lambda_radar.info import get_lambda_info, get_memory_utilization, invocation_scope, is_lambda_context
from lambda_radar.metadata import copy_metadata
from lambda_radar.models.env_vars import is_development_mode
from lambda_radar.models.options import LogOptions
from lambda_radar.models.output import ErrorResponse, ExecutionResult
from lambda_radar.performance import measure_execution_time, measure_execution_time_sync

Opener = Callable[[Tuple[Any, ...], Dict[str, Any]], Optional['Invocation']]


class Invocation:
    """One instrumented call of a handler."""

    stops_errors = False

    def started(self) -> None:
        pass

    def completed(self, outcome: ExecutionResult) -> Any:
        return outcome.result

    def failed(self, error: Exception) -> None:
        pass

    def error_response(self) -> Any:
        raise NotImplementedError


class LoggingInvocation(Invocation):
    """Logs start, completion with duration and memory, or failure."""

    def __init__(self, event: Any, context: LambdaContext, options: OptionsLike = None, sink: LogSink | None = None):
        self.event = event
        self.context = context
        self.logger = create_context_logger(context, options, sink)

    def started(self) -> None:
        data: Dict[str, Any] = {'is_cold_start': self.logger.cold_start}
        if is_development_mode():
            data['event'] = self.event
        self.logger.info('Lambda invocation started', data)

    def completed(self, outcome: ExecutionResult) -> Any:
        memory_usage = get_lambda_info(self.context, cold_start=self.logger.cold_start).memory_usage_in_mb
        self.logger.info('Lambda invocation completed', {
            'execution_time': outcome.execution_time,
            'memory_usage': f'{memory_usage}MB',
            'memory_utilization': get_memory_utilization(self.context),
        })
        return outcome.result

    def failed(self, error: Exception) -> None:
        self.logger.error('Lambda invocation failed', error)


class TimingInvocation(Invocation):
    """Logs the duration of the delegate call tagged with the method name."""

    def __init__(self, method_name: str, context: LambdaContext, options: OptionsLike = None, sink: LogSink | None = None):
        self.method_name = method_name
        self.logger = create_context_logger(context, options, sink)

    def completed(self, outcome: ExecutionResult) -> Any:
        # Always include the execution time, whatever the logger options say
        self.logger.info(
            f'Method {self.method_name} execution completed',
            {'execution_time': outcome.execution_time},
            {'include_data': True},
        )
        return outcome.result


class ErrorHandlingInvocation(Invocation):
    """Logs a failure verbosely and converts it into a 500 response."""

    stops_errors = True

    def __init__(self, message: str, context: Any, options: OptionsLike = None, sink: LogSink | None = None):
        self.message = message
        self.context = context
        self.options = LogOptions.coerce(options)
        self.sink = sink

    def failed(self, error: Exception) -> None:
        if not is_lambda_context(self.context):
            return
        # Errors need the full picture: force verbose metadata, keep lambda info unless disabled
        error_options = self.options.merged_with({
            'verbose': True,
            'include_lambda_info': self.options.include_lambda_info is not False,
        })
        logger = create_context_logger(self.context, error_options, self.sink)
        logger.error(self.message, error, None, {'verbose': True})

    def error_response(self) -> Dict[str, Any]:
        request_id = getattr(self.context, 'aws_request_id', None)
        if not isinstance(request_id, str) or not request_id:
            request_id = 'unknown'
        return ErrorResponse(request_id=request_id).to_response()


def instrument(func: Callable[..., Any], open_invocation: Opener) -> Callable[..., Any]:
    """
    Wrap ``func`` so that every call is driven through the invocation returned by
    ``open_invocation``.

    All layers wrapping one call share a single cold-start read. When a plain
    callable returns an awaitable (an object with ``async def __call__``, or a
    function handing back a coroutine), the wrapper returns a coroutine that
    finishes the invocation once the awaitable settles.

    Metadata registered for ``func`` is carried over to the wrapper.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with invocation_scope():
                invocation = open_invocation(args, kwargs)
                if invocation is None:
                    return await func(*args, **kwargs)

                invocation.started()
                try:
                    outcome = await measure_execution_time(func, *args, **kwargs)
                except Exception as error:
                    invocation.failed(error)
                    if not invocation.stops_errors:
                        raise
                    return invocation.error_response()
                return invocation.completed(outcome)

        wrapper = async_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with invocation_scope() as scope:
                invocation = open_invocation(args, kwargs)
                if invocation is None:
                    return func(*args, **kwargs)

                invocation.started()
                try:
                    outcome = measure_execution_time_sync(func, *args, **kwargs)
                except Exception as error:
                    invocation.failed(error)
                    if not invocation.stops_errors:
                        raise
                    return invocation.error_response()
                if inspect.isawaitable(outcome.result):
                    return _settle(invocation, outcome, scope)
                return invocation.completed(outcome)

        wrapper = sync_wrapper

    copy_metadata(func, wrapper)
    return wrapper


async def _settle(invocation: Invocation, pending: ExecutionResult, scope: List[bool]) -> Any:
    """Finish an invocation whose delegate returned an awaitable."""
    with invocation_scope(scope):
        try:
            settled = await measure_execution_time(lambda: pending.result)
        except Exception as error:
            invocation.failed(error)
            if not invocation.stops_errors:
                raise
            return invocation.error_response()
        return invocation.completed(ExecutionResult(
            result=settled.result,
            execution_time=pending.execution_time + settled.execution_time,
        ))


def locate_argument(
    signature: inspect.Signature | None,
    args: Tuple[Any, ...],
    kwargs: Dict[str, Any],
    name: str,
    fallback_index: int,
) -> Any:
    """
    Find the argument bound to the parameter called ``name``.

    When the signature has no such parameter (or cannot be bound), the positional
    argument at ``fallback_index`` is used instead; ``None`` when there is none.
    """
    if signature is not None and name in signature.parameters:
        try:
            bound = signature.bind_partial(*args, **kwargs)
        except TypeError:
            bound = None
        if bound is not None:
            return bound.arguments.get(name)

    if name in kwargs:
        return kwargs[name]
    try:
        return args[fallback_index]
    except IndexError:
        return None


def safe_signature(func: Callable[..., Any]) -> inspect.Signature | None:
    try:
        return inspect.signature(func)
    except (TypeError, ValueError):
        return None
