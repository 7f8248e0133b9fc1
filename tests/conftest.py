"""
Pytest configuration and shared fixtures for Lambda Radar.

This module provides common test fixtures and configuration used across
unit, integration, and benchmark tests.
"""

import os

# The package logger reads these at import time
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "POWERTOOLS_SERVICE_NAME": "test-lambda-radar",
    "LOG_LEVEL": "DEBUG",
    "ENVIRONMENT": "test",
})

from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from lambda_radar.context_logger import LOG_STREAM_ENV_VAR
from lambda_radar.function_config import set_lambda_client
from lambda_radar.info import reset_cold_start

FUNCTION_ARN = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"


def make_context(invoked_function_arn: str = FUNCTION_ARN, request_id: str = "test-request-id-123") -> Mock:
    """Build a mock Lambda context with the attributes the runtime provides."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "$LATEST"
    context.invoked_function_arn = invoked_function_arn
    context.memory_limit_in_mb = "512"
    context.aws_request_id = request_id
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


def logged_lines(sink_method: Mock) -> List[str]:
    """Return every line written to one severity of a mock sink."""
    return [call.args[0] for call in sink_method.call_args_list]


@pytest.fixture
def lambda_context() -> Mock:
    """Create a mock Lambda context invoked through the unqualified ARN."""
    return make_context()


@pytest.fixture
def aliased_context() -> Mock:
    """Create a mock Lambda context invoked through the ``prod`` alias."""
    return make_context(invoked_function_arn=f"{FUNCTION_ARN}:prod")


@pytest.fixture
def versioned_context() -> Mock:
    """Create a mock Lambda context invoked through version 42."""
    return make_context(invoked_function_arn=f"{FUNCTION_ARN}:42")


@pytest.fixture
def sink() -> Mock:
    """Output sink recording every formatted line per severity."""
    return Mock(spec=["info", "warning", "error", "debug"])


@pytest.fixture
def api_gateway_event() -> Dict[str, Any]:
    """Create a sample API Gateway event for testing."""
    return {
        "httpMethod": "GET",
        "path": "/hello",
        "headers": {"User-Agent": "test-agent/1.0"},
        "requestContext": {"requestId": "api-request-id-456", "stage": "test"},
        "body": None,
    }


@pytest.fixture(autouse=True)
def fresh_process_state(monkeypatch):
    """Each test starts as the first invocation of a freshly initialized process."""
    reset_cold_start()
    monkeypatch.delenv(LOG_STREAM_ENV_VAR, raising=False)
    yield
    set_lambda_client(None)


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "benchmark: Performance benchmark tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "benchmark" in str(item.fspath):
            item.add_marker(pytest.mark.benchmark)
