"""
Middleware for AWS Lambda handlers.

A middleware takes a handler ``handler(event, context)`` and returns a handler of the
same shape. Both can be used bare or configured::

    handler = with_logging(handler)
    handler = with_logging(options={'verbose': True})(handler)

    lambda_handler = compose(with_error_handling, with_logging)(handler)

``compose(a, b)(handler)`` is ``a(b(handler))``: the first middleware is the outermost
one, sees the invocation first and the outcome last.
"""

import functools
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from lambda_radar.context_logger import LogSink, OptionsLike
from lambda_radar.info import is_lambda_context
from lambda_radar.instrumentation import ErrorHandlingInvocation, Invocation, LoggingInvocation, instrument

H = TypeVar('H', bound=Callable[..., Any])
Middleware = Callable[[Callable[..., Any]], Callable[..., Any]]


def _event_and_context(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Tuple[Any, Any]:
    event = kwargs['event'] if 'event' in kwargs else (args[0] if args else None)
    context = kwargs['context'] if 'context' in kwargs else (args[1] if len(args) > 1 else None)
    return event, context


def with_logging(
    handler: Optional[H] = None,
    options: OptionsLike = None,
    sink: LogSink | None = None,
) -> Any:
    """
    Create middleware for AWS Lambda handlers that adds automatic logging.

    Logs the start of the invocation (with the cold-start flag, and the raw event in
    development mode), then its completion with execution time and memory usage, or
    its failure. Failures are always re-raised unchanged.

    Args:
        handler: Your Lambda handler function
        options: Options for the invocation logger
        sink: Output sink, defaults to the package logger

    Returns:
        Enhanced handler function with automatic logging
    """
    if handler is None:
        return functools.partial(with_logging, options=options, sink=sink)

    def opener(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Optional[Invocation]:
        event, context = _event_and_context(args, kwargs)
        if not is_lambda_context(context):
            return None
        return LoggingInvocation(event, context, options, sink)

    return instrument(handler, opener)


def with_error_handling(
    handler: Optional[H] = None,
    options: OptionsLike = None,
    sink: LogSink | None = None,
) -> Any:
    """
    Create middleware for AWS Lambda handlers that adds error handling.

    Exceptions raised by the handler are logged with verbose metadata and converted
    into ``{"statusCode": 500, "body": '{"message": "Internal server error", "requestId": ...}'}``.
    Place it first in ``compose`` so nothing reaches the platform.

    Args:
        handler: Your Lambda handler function
        options: Options for the error logger
        sink: Output sink, defaults to the package logger

    Returns:
        Enhanced handler function with error handling
    """
    if handler is None:
        return functools.partial(with_error_handling, options=options, sink=sink)

    def opener(args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Optional[Invocation]:
        _, context = _event_and_context(args, kwargs)
        return ErrorHandlingInvocation('Unhandled error in Lambda', context, options, sink)

    return instrument(handler, opener)


def compose(*middlewares: Middleware) -> Middleware:
    """
    Combine multiple middleware functions.

    Args:
        middlewares: Middleware functions, outermost first

    Returns:
        Combined middleware function
    """

    def composed(handler: H) -> H:
        return functools.reduce(lambda acc, middleware: middleware(acc), reversed(middlewares), handler)

    return composed
