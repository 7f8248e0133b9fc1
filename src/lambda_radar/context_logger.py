"""
Context-aware structured logger for Lambda invocations.

A ``ContextLogger`` reads the invocation metadata once, at construction, and formats
every record as a single text line::

    message | Function: f, Version: v, RequestID: r, ColdStart: c | Timestamp: t | Data: {...} | Error: ...

Which segments appear is decided per record by merging the logger's options with the
options given to the call. The formatted line is written to an output sink, by default
the AWS Lambda Powertools logger from ``lambda_radar.utils.observability``.
"""

import asyncio
import json
import os
import sys
import threading
import traceback
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Protocol, Union

from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel

from lambda_radar.exceptions import SerializationError
from lambda_radar.info import get_lambda_info, get_minimal_lambda_info
from lambda_radar.models.info import LambdaInfo, MinimalLambdaInfo
from lambda_radar.models.options import LogOptions, resolve_log_options
from lambda_radar.utils.observability import logger as default_sink

LOG_STREAM_ENV_VAR = 'AWS_LAMBDA_LOG_STREAM_NAME'
SEGMENT_SEPARATOR = ' | '

OptionsLike = Union[LogOptions, Dict[str, Any], None]


class LogSink(Protocol):
    """Anything with the four severity methods, e.g. a Powertools or stdlib logger."""

    def info(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> Any: ...


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json')
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def serialize_data(data: Any) -> str:
    """
    Render a log payload as compact JSON.

    Raises:
        SerializationError: If the payload cannot be rendered (e.g. circular data)
    """
    try:
        return json.dumps(data, default=_json_default, separators=(',', ':'))
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(f'Could not serialize log data: {exc}', cause=exc) from exc


def _render_data(data: Any) -> str:
    try:
        return serialize_data(data)
    except SerializationError as exc:
        return f'[Unserializable data: {exc.cause}]'


def _render_error(error: Any) -> str:
    if isinstance(error, BaseException):
        stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__)).rstrip()
        return f'Error: {type(error).__name__} - {error}\nStack: {stack}'
    return f'Error: Error - {error}'


def _flag(value: bool) -> str:
    return 'true' if value else 'false'


class ContextLogger:
    """Logger bound to one invocation context."""

    def __init__(self, context: LambdaContext, options: OptionsLike = None, sink: LogSink | None = None):
        self.context = context
        self.options = resolve_log_options(options)
        self.sink = sink if sink is not None else default_sink

        if self.options.verbose:
            self.lambda_info: MinimalLambdaInfo = get_lambda_info(context)
        else:
            self.lambda_info = get_minimal_lambda_info(context)

        base_stream_name = getattr(context, 'log_stream_name', None)
        if not isinstance(base_stream_name, str):
            base_stream_name = ''
        if self.lambda_info.alias:
            self.log_stream_name = f'[{self.lambda_info.alias}]-{base_stream_name}'
        else:
            self.log_stream_name = base_stream_name

        # Platform-level log routing picks the alias up from here
        os.environ[LOG_STREAM_ENV_VAR] = self.log_stream_name

    @property
    def cold_start(self) -> bool:
        return self.lambda_info.cold_start

    def info(self, message: str, data: Any = None, options: OptionsLike = None) -> None:
        self._emit(self.sink.info, message, data, None, options)

    def warning(self, message: str, data: Any = None, options: OptionsLike = None) -> None:
        self._emit(self.sink.warning, message, data, None, options)

    warn = warning

    def error(self, message: str, error: Any = None, data: Any = None, options: OptionsLike = None) -> None:
        self._emit(self.sink.error, message, data, error, options)

    def debug(self, message: str, data: Any = None, options: OptionsLike = None) -> None:
        self._emit(self.sink.debug, message, data, None, options)

    def format(self, message: str, data: Any = None, error: Any = None, options: OptionsLike = None) -> str:
        """Format one record using the logger options overridden by ``options``."""
        opts = self.options.merged_with(options)
        parts = [message]

        if opts.include_lambda_info:
            parts.append(self._format_lambda_info(opts.verbose))

        if opts.include_timestamp:
            parts.append(f'Timestamp: {datetime.now(timezone.utc).isoformat()}')

        if data is not None and opts.include_data:
            parts.append(f'Data: {_render_data(data)}')

        if error is not None:
            parts.append(_render_error(error))

        return SEGMENT_SEPARATOR.join(parts)

    def _emit(self, emit: Callable[[str], Any], message: str, data: Any, error: Any, options: OptionsLike) -> None:
        emit(self.format(message, data, error, options))

    def _format_lambda_info(self, verbose: bool | None) -> str:
        info = self.lambda_info
        fields = [f'Function: {info.function_name}']
        if info.alias:
            fields.append(f'Alias: {info.alias}')
        fields += [
            f'Version: {info.function_version}',
            f'RequestID: {info.aws_request_id}',
            f'ColdStart: {_flag(info.cold_start)}',
        ]

        if verbose:
            full = info if isinstance(info, LambdaInfo) else get_lambda_info(self.context, cold_start=info.cold_start)
            fields += [
                f'MemoryLimitMB: {full.memory_limit_in_mb}',
                f'MemoryUsedMB: {full.memory_usage_in_mb}',
                f'RemainingTimeMs: {full.remaining_time}',
                f'LogGroup: {full.log_group_name}',
                f'LogStream: {full.log_stream_name}',
                f'Region: {full.region}',
            ]

        return ', '.join(fields)


def create_context_logger(
    context: LambdaContext,
    default_options: OptionsLike = None,
    sink: LogSink | None = None,
) -> ContextLogger:
    """
    Create a logger that includes Lambda context information.

    Args:
        context: The Lambda context object
        default_options: Default options for all log calls
        sink: Output sink, defaults to the package Powertools logger

    Returns:
        Logger bound to the invocation
    """
    return ContextLogger(context, default_options, sink)


def create_error_capture_logger(
    base_logger: ContextLogger,
    loop: asyncio.AbstractEventLoop | None = None,
) -> ContextLogger:
    """
    Route uncaught exceptions through ``base_logger.error``.

    Registers ``sys.excepthook``, ``threading.excepthook`` and, when ``loop`` is given
    or one is running, the loop's exception handler. Registration is process-wide;
    calling this twice installs the hooks twice.

    Args:
        base_logger: Logger receiving the captured errors

    Returns:
        ``base_logger`` itself
    """

    def _excepthook(exc_type, exc_value, exc_traceback) -> None:
        base_logger.error('Uncaught exception', exc_value)

    def _thread_excepthook(args: threading.ExceptHookArgs) -> None:
        base_logger.error('Uncaught exception in thread', args.exc_value)

    def _loop_exception_handler(_loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        error = context.get('exception')
        if not isinstance(error, BaseException):
            error = RuntimeError(context.get('message', 'Unhandled asynchronous error'))
        base_logger.error('Unhandled asynchronous exception', error)

    sys.excepthook = _excepthook
    threading.excepthook = _thread_excepthook

    if loop is None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
    if loop is not None:
        loop.set_exception_handler(_loop_exception_handler)

    default_sink.debug('Error capture hooks registered')
    return base_logger
