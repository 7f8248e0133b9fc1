"""
Result and response models produced by the instrumentation behaviors.
"""

import json
from dataclasses import dataclass
from typing import Annotated, Any, Dict, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar('T')

INTERNAL_SERVER_ERROR_MESSAGE = 'Internal server error'


@dataclass(frozen=True)
class ExecutionResult(Generic[T]):
    """Return value of a timed call together with its duration."""

    result: T
    execution_time: float  # milliseconds

    def __iter__(self):
        # Allows ``result, execution_time = ExecutionResult(...)``
        yield self.result
        yield self.execution_time


class ErrorResponse(BaseModel):
    """Normalized failure response returned by the error-handling behavior."""

    status_code: Annotated[int, Field(
        default=500,
        description='HTTP status code'
    )] = 500

    message: Annotated[str, Field(
        default=INTERNAL_SERVER_ERROR_MESSAGE,
        description='Client-facing error message'
    )] = INTERNAL_SERVER_ERROR_MESSAGE

    request_id: Annotated[str, Field(
        default='unknown',
        description='Request ID of the failed invocation'
    )] = 'unknown'

    def to_response(self) -> Dict[str, Any]:
        """Render as an API Gateway proxy response."""
        return {
            'statusCode': self.status_code,
            'body': json.dumps({'message': self.message, 'requestId': self.request_id}),
        }
