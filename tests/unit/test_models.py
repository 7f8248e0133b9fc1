"""
Unit tests for Pydantic models.

This module tests option resolution, aliases and the rendering of the
models used throughout the package.
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from lambda_radar.models.env_vars import RadarEnvVars
from lambda_radar.models.options import DEFAULT_LOG_OPTIONS, LogOptions, resolve_log_options
from lambda_radar.models.output import ErrorResponse, ExecutionResult


class TestLogOptions:
    """Test cases for LogOptions."""

    def test_defaults(self):
        """Test the built-in defaults."""
        assert DEFAULT_LOG_OPTIONS == LogOptions(
            verbose=False,
            include_lambda_info=True,
            include_timestamp=True,
            include_data=True,
        )

    def test_camel_case_aliases(self):
        """Test that camelCase and snake_case names are both accepted."""
        camel = LogOptions.coerce({"includeData": False, "includeLambdaInfo": False})
        snake = LogOptions.coerce({"include_data": False, "include_lambda_info": False})

        assert camel == snake
        assert camel.include_data is False

    def test_unset_fields_do_not_override(self):
        """Test that None fields leave the lower layer in place."""
        base = LogOptions(verbose=True, include_data=False)

        merged = base.merged_with(LogOptions(include_timestamp=False))

        assert merged.verbose is True
        assert merged.include_data is False
        assert merged.include_timestamp is False

    def test_resolution_order(self):
        """Test defaults, then construction options, then call options."""
        resolved = resolve_log_options({"includeData": True, "verbose": True}, {"includeData": False})

        assert resolved.include_data is False
        assert resolved.verbose is True
        assert resolved.include_lambda_info is True

    def test_coerce_none_and_instances(self):
        """Test coercion of missing options and ready-made models."""
        options = LogOptions(verbose=True)

        assert LogOptions.coerce(None) == LogOptions()
        assert LogOptions.coerce(options) is options

    def test_options_are_immutable(self):
        """Test that merging never mutates the source options."""
        base = LogOptions(include_data=True)
        base.merged_with({"include_data": False})

        assert base.include_data is True
        with pytest.raises(ValidationError):
            base.include_data = False

    def test_invalid_value(self):
        """Test validation of non-boolean option values."""
        with pytest.raises(ValidationError):
            LogOptions.coerce({"verbose": "sometimes"})


class TestErrorResponse:
    """Test cases for ErrorResponse."""

    def test_to_response(self):
        """Test the API Gateway proxy rendering."""
        response = ErrorResponse(request_id="req-1").to_response()

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {"message": "Internal server error", "requestId": "req-1"}

    def test_default_request_id(self):
        """Test the request id used when none is known."""
        assert json.loads(ErrorResponse().to_response()["body"])["requestId"] == "unknown"


class TestExecutionResult:
    """Test cases for ExecutionResult."""

    def test_unpacking(self):
        """Test that results unpack into value and duration."""
        result, execution_time = ExecutionResult(result="value", execution_time=1.5)

        assert result == "value"
        assert execution_time == 1.5


class TestRadarEnvVars:
    """Test cases for the environment model."""

    @pytest.mark.parametrize("environment, expected", [
        ("dev", True),
        ("development", True),
        ("Development", True),
        ("production", False),
        ("test", False),
    ])
    def test_is_development(self, environment, expected):
        """Test development mode detection."""
        assert RadarEnvVars(ENVIRONMENT=environment).is_development is expected

    def test_defaults(self):
        """Test the defaults applied when nothing is configured."""
        env_vars = RadarEnvVars()

        assert env_vars.POWERTOOLS_SERVICE_NAME == "lambda-radar"
        assert env_vars.LOG_LEVEL == "INFO"
        assert env_vars.is_development is False

    def test_invalid_log_level(self):
        """Test validation of the log level."""
        with pytest.raises(ValidationError):
            RadarEnvVars(LOG_LEVEL="LOUD")

    @pytest.mark.parametrize("level, expected", [
        ("info", "INFO"),
        ("Debug", "DEBUG"),
        (" warning ", "WARNING"),
    ])
    def test_log_level_case_insensitive(self, level, expected):
        """Test that log levels are accepted in any case, as Powertools does."""
        assert RadarEnvVars(LOG_LEVEL=level).LOG_LEVEL == expected

    def test_import_with_lower_case_log_level(self):
        """Test that the package imports when LOG_LEVEL is lower case."""
        src_dir = Path(__file__).resolve().parents[2] / "src"
        env = {**os.environ, "LOG_LEVEL": "info", "PYTHONPATH": str(src_dir)}

        completed = subprocess.run(
            [sys.executable, "-c", "import lambda_radar.utils.observability as o; print(o.logger.log_level)"],
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )

        assert completed.returncode == 0, completed.stderr
        assert completed.stdout.strip() == "20"
