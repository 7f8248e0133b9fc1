import json
import os
from datetime import datetime, timezone
from typing import Any, Dict

from aws_lambda_powertools.utilities.typing import LambdaContext

from lambda_radar import compose, create_execution_timer, with_error_handling, with_logging


def get_app_version() -> str:
    """Get application version from environment variable."""
    return os.environ.get("APP_VERSION", "v1.0.0")


def process_hello_request(event: Dict[str, Any]) -> Dict[str, Any]:
    """Process the hello request with business logic."""
    return {
        "message": "Hello from Python Lambda with Lambda Radar!",
        "path": event.get("path", "/hello"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": event.get("requestContext", {}).get("requestId", "unknown"),
        "version": get_app_version(),
    }


def hello_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
    """
    Hello Lambda function handler

    Args:
        event: Lambda event payload
        context: Lambda context object

    Returns:
        API Gateway response
    """
    timer = create_execution_timer()
    timer.mark("start")

    response_data = process_hello_request(event)

    timer.measure("processing", "start")
    response_data["timings"] = timer.get_measures()

    return {
        "statusCode": 200,
        "headers": {
            "Content-Type": "application/json",
            "X-Request-ID": context.aws_request_id,
        },
        "body": json.dumps(response_data),
    }


# Error handling outermost: failures are logged by both layers, then turned into a 500
lambda_handler = compose(with_error_handling, with_logging)(hello_handler)
