"""
Performance benchmark tests for Lambda Radar.

These benchmarks track the overhead instrumentation adds to every invocation,
so regressions in the hot path show up before they reach a deployed function.
"""

from unittest.mock import Mock

import pytest

from conftest import make_context
from lambda_radar.context_logger import create_context_logger
from lambda_radar.decorators import compose_decorators, handle_errors, log_lambda_info, measure_performance
from lambda_radar.middleware import compose, with_error_handling, with_logging
from lambda_radar.performance import create_execution_timer


def handler(event, context):
    return {"statusCode": 200}


@pytest.mark.benchmark
class TestTimerPerformance:
    """Benchmark tests for the execution timer."""

    def test_mark_and_measure_performance(self, benchmark):
        """Benchmark a mark/measure pair."""
        timer = create_execution_timer()

        def mark_and_measure():
            timer.mark("start")
            return timer.measure("stage", "start")

        assert benchmark(mark_and_measure) >= 0


@pytest.mark.benchmark
class TestLoggerPerformance:
    """Benchmark tests for record formatting."""

    def test_format_record_performance(self, benchmark):
        """Benchmark formatting a record with every segment."""
        logger = create_context_logger(make_context(), sink=Mock())
        payload = {"order_id": "ord_123", "items": list(range(20))}

        line = benchmark(logger.format, "Order processed", payload)

        assert line.startswith("Order processed | Function: test-lambda-function")


@pytest.mark.benchmark
class TestCompositionPerformance:
    """Benchmark tests for composed handlers."""

    def test_middleware_chain_performance(self, benchmark):
        """Benchmark a full middleware chain around a trivial handler."""
        context = make_context()
        lambda_handler = compose(with_error_handling(sink=Mock()), with_logging(sink=Mock()))(handler)

        result = benchmark(lambda_handler, {}, context)

        assert result == {"statusCode": 200}

    def test_decorator_chain_performance(self, benchmark):
        """Benchmark a full decorator chain around a trivial handler."""
        context = make_context()
        sink = Mock()
        decorated = compose_decorators(
            handle_errors(sink=sink),
            log_lambda_info(sink=sink),
            measure_performance(sink=sink),
        )(handler)

        result = benchmark(decorated, {}, context)

        assert result == {"statusCode": 200}
