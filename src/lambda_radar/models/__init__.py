"""
Models Package

Pydantic models and result types shared by the timer, logger and composition layers.
"""

from .env_vars import RadarEnvVars, get_radar_env_vars, is_development_mode
from .info import LambdaInfo, MinimalLambdaInfo, SystemInfo
from .options import DEFAULT_LOG_OPTIONS, LogOptions, resolve_log_options
from .output import ErrorResponse, ExecutionResult

__all__ = [
    # Configuration
    "RadarEnvVars",
    "get_radar_env_vars",
    "is_development_mode",
    "LogOptions",
    "DEFAULT_LOG_OPTIONS",
    "resolve_log_options",

    # Invocation metadata
    "MinimalLambdaInfo",
    "LambdaInfo",
    "SystemInfo",

    # Results
    "ExecutionResult",
    "ErrorResponse",
]
