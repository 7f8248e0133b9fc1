"""
Lambda Radar.

Instrumentation for AWS Lambda handlers: structured context logging, execution
timing and error containment, combined around a handler in a caller-chosen order.

- performance: execution timer and call timing helpers
- info: invocation facts, cold-start tracking, host resources
- context_logger: context-aware structured logger
- decorators / middleware: the two composition surfaces
- metadata: out-of-band metadata preserved across stacked wrappers
- function_config: Lambda control-plane client
"""

__version__ = "1.0.0"

from lambda_radar.context_logger import (
    ContextLogger,
    create_context_logger,
    create_error_capture_logger,
    serialize_data,
)
from lambda_radar.decorators import compose_decorators, handle_errors, log_lambda_info, measure_performance
from lambda_radar.exceptions import RadarError, SerializationError, UnknownMarkError
from lambda_radar.function_config import (
    get_lambda_configuration,
    list_lambda_aliases,
    list_lambda_versions,
    set_lambda_client,
)
from lambda_radar.info import (
    get_alias_from_context,
    get_lambda_info,
    get_memory_utilization,
    get_minimal_lambda_info,
    get_system_info,
    is_cold_start,
)
from lambda_radar.metadata import annotate, define_metadata, get_metadata, get_metadata_keys
from lambda_radar.middleware import compose, with_error_handling, with_logging
from lambda_radar.models import (
    ErrorResponse,
    ExecutionResult,
    LambdaInfo,
    LogOptions,
    MinimalLambdaInfo,
    SystemInfo,
)
from lambda_radar.performance import (
    ExecutionTimer,
    create_execution_timer,
    measure_execution_time,
    measure_execution_time_sync,
)

__all__ = [
    "__version__",
    # Timer
    "ExecutionTimer",
    "create_execution_timer",
    "measure_execution_time",
    "measure_execution_time_sync",
    # Invocation facts
    "get_lambda_info",
    "get_minimal_lambda_info",
    "get_alias_from_context",
    "get_system_info",
    "get_memory_utilization",
    "is_cold_start",
    # Logging
    "ContextLogger",
    "create_context_logger",
    "create_error_capture_logger",
    "serialize_data",
    # Composition
    "log_lambda_info",
    "measure_performance",
    "handle_errors",
    "compose_decorators",
    "with_logging",
    "with_error_handling",
    "compose",
    # Metadata
    "annotate",
    "define_metadata",
    "get_metadata",
    "get_metadata_keys",
    # Remote configuration
    "get_lambda_configuration",
    "list_lambda_aliases",
    "list_lambda_versions",
    "set_lambda_client",
    # Models and errors
    "LogOptions",
    "MinimalLambdaInfo",
    "LambdaInfo",
    "SystemInfo",
    "ExecutionResult",
    "ErrorResponse",
    "RadarError",
    "UnknownMarkError",
    "SerializationError",
]
