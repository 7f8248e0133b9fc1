"""
Invocation facts extracted from the Lambda context and the host.

The cold-start flag is process-wide: it is True for the first read after the module
is imported and False for every read after that. The Lambda Python runtime serves one
invocation at a time per process, which is what makes a process-wide flag correct.
Stacked wrappers share one read of the flag per invocation through
:func:`invocation_scope`.
"""

import contextlib
import contextvars
import os
import platform
import sys
import threading
import time
from typing import Any, Iterator, List

import psutil
from aws_lambda_powertools.utilities.typing import LambdaContext

from lambda_radar.models.info import LambdaInfo, MinimalLambdaInfo, SystemInfo
from lambda_radar.utils.observability import logger

_BYTES_PER_MB = 1024 * 1024

_cold_start_lock = threading.Lock()
_is_first_invocation = True

# Cold-start value shared by every layer of the current invocation, empty until read
_invocation_cold_start: contextvars.ContextVar[List[bool] | None] = contextvars.ContextVar(
    'invocation_cold_start', default=None
)


def is_cold_start() -> bool:
    """
    Read and clear the process-wide cold-start flag.

    Returns:
        True only for the first call in the process lifetime
    """
    global _is_first_invocation

    with _cold_start_lock:
        cold_start = _is_first_invocation
        _is_first_invocation = False

    if cold_start:
        logger.debug('Cold start detected')
    return cold_start


def reset_cold_start() -> None:
    """Restore the cold-start flag, as if the process had just initialized."""
    global _is_first_invocation

    with _cold_start_lock:
        _is_first_invocation = True


@contextlib.contextmanager
def invocation_scope(scope: List[bool] | None = None) -> Iterator[List[bool]]:
    """
    Share one cold-start read between every instrumented layer of an invocation.

    The outermost caller opens the scope; nested calls join the one already open.
    Passing ``scope`` re-enters a scope opened earlier, e.g. from a coroutine that
    finishes after the opening call has returned.
    """
    current = _invocation_cold_start.get()
    if current is not None and scope is None:
        yield current
        return

    if scope is None:
        scope = []
    token = _invocation_cold_start.set(scope)
    try:
        yield scope
    finally:
        _invocation_cold_start.reset(token)


def invocation_cold_start() -> bool:
    """
    Cold-start value of the current invocation.

    Inside :func:`invocation_scope` the process-wide flag is read once and the same
    value is returned to every caller; outside a scope this is :func:`is_cold_start`.
    """
    scope = _invocation_cold_start.get()
    if scope is None:
        return is_cold_start()
    if not scope:
        scope.append(is_cold_start())
    return scope[0]


def is_lambda_context(value: Any) -> bool:
    """Check whether ``value`` looks like a Lambda invocation context."""
    return value is not None and isinstance(getattr(value, 'function_name', None), str)


def _context_str(context: LambdaContext, name: str, default: str = 'unknown') -> str:
    value = getattr(context, name, None)
    return value if isinstance(value, str) else default


def _memory_limit_in_mb(context: LambdaContext) -> int:
    try:
        return int(getattr(context, 'memory_limit_in_mb', 0) or 0)
    except (TypeError, ValueError):
        return 0


def _remaining_time(context: LambdaContext) -> int:
    get_remaining = getattr(context, 'get_remaining_time_in_millis', None)
    if not callable(get_remaining):
        return 0
    try:
        return int(get_remaining())
    except (TypeError, ValueError):
        return 0


def _rss_bytes() -> int:
    return psutil.Process().memory_info().rss


def get_alias_from_context(context: LambdaContext) -> str | None:
    """
    Extract the alias name from the Lambda context.

    ARN format: arn:aws:lambda:region:account-id:function:function-name[:alias-or-version]
    A numeric qualifier is a version, not an alias. An unqualified ARN has no alias, so
    this returns None for it rather than falling back to the function name.

    Args:
        context: The Lambda context object

    Returns:
        The alias name if the function was invoked through one, otherwise None
    """
    function_arn = _context_str(context, 'invoked_function_arn', default='')
    arn_parts = function_arn.split(':')

    # Unqualified ARNs end with the function name itself
    if 'function' in arn_parts:
        name_index = arn_parts.index('function') + 1
        if len(arn_parts) <= name_index + 1:
            return None

    qualifier = arn_parts[-1]
    if not qualifier or qualifier.isdigit():
        return None
    return qualifier


def get_minimal_lambda_info(context: LambdaContext, cold_start: bool | None = None) -> MinimalLambdaInfo:
    """
    Get minimal Lambda execution information for less verbose logging.

    Args:
        context: The Lambda context object
        cold_start: Cold-start value already read for this invocation; when omitted it
            comes from :func:`invocation_cold_start`

    Returns:
        Identity facts of the current invocation
    """
    if cold_start is None:
        cold_start = invocation_cold_start()

    return MinimalLambdaInfo(
        function_name=_context_str(context, 'function_name'),
        function_version=_context_str(context, 'function_version'),
        aws_request_id=_context_str(context, 'aws_request_id'),
        alias=get_alias_from_context(context),
        cold_start=cold_start,
    )


def get_lambda_info(context: LambdaContext, cold_start: bool | None = None) -> LambdaInfo:
    """
    Get comprehensive information about the current Lambda execution.

    Args:
        context: The Lambda context object
        cold_start: Cold-start value already read for this invocation; when omitted it
            comes from :func:`invocation_cold_start`

    Returns:
        Identity, resource and environment facts of the current invocation
    """
    if cold_start is None:
        cold_start = invocation_cold_start()

    return LambdaInfo(
        function_name=_context_str(context, 'function_name'),
        function_version=_context_str(context, 'function_version'),
        aws_request_id=_context_str(context, 'aws_request_id'),
        alias=get_alias_from_context(context),
        cold_start=cold_start,
        memory_limit_in_mb=_memory_limit_in_mb(context),
        memory_usage_in_mb=round(_rss_bytes() / _BYTES_PER_MB, 2),
        execution_environment=os.environ.get('AWS_EXECUTION_ENV'),
        log_group_name=_context_str(context, 'log_group_name'),
        log_stream_name=_context_str(context, 'log_stream_name'),
        remaining_time=_remaining_time(context),
        region=os.environ.get('AWS_REGION', 'unknown'),
    )


def get_system_info() -> SystemInfo:
    """Get information about system resources."""
    virtual_memory = psutil.virtual_memory()
    return SystemInfo(
        platform=sys.platform,
        arch=platform.machine() or 'unknown',
        python_version=platform.python_version(),
        cpu_model=platform.processor() or 'unknown',
        cpu_count=os.cpu_count() or 0,
        total_memory=round(virtual_memory.total / _BYTES_PER_MB),
        free_memory=round(virtual_memory.available / _BYTES_PER_MB),
        uptime=round(time.time() - psutil.boot_time(), 2),
    )


def get_memory_utilization(context: LambdaContext) -> float:
    """
    Calculate the memory utilization percentage.

    Args:
        context: The Lambda context object

    Returns:
        Percentage of allocated memory in use, 0.0 when the limit is unknown
    """
    limit_bytes = _memory_limit_in_mb(context) * _BYTES_PER_MB
    if limit_bytes <= 0:
        return 0.0
    return round(_rss_bytes() / limit_bytes * 100, 2)
