"""
Centralized observability utilities for the instrumentation layer.

This module provides the configured AWS Lambda Powertools logger that serves as the
default output sink for context loggers and as the library's own diagnostic logger.
"""

from aws_lambda_powertools.logging import Logger

from lambda_radar.models.env_vars import get_radar_env_vars

_env = get_radar_env_vars()

# JSON output format, one record per line
# Service name and level can be set by environment variables "POWERTOOLS_SERVICE_NAME" and "LOG_LEVEL"
logger: Logger = Logger(service=_env.POWERTOOLS_SERVICE_NAME, level=_env.LOG_LEVEL)
