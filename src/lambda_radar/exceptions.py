"""
Exception types raised by the instrumentation layer.

Handler failures are never wrapped in these types: instrumentation re-raises
the handler's original exception unchanged.
"""


class RadarError(Exception):
    """Base exception for instrumentation errors."""


class UnknownMarkError(RadarError, KeyError):
    """Raised when a measurement references a mark that was never recorded."""

    def __init__(self, mark_name: str, role: str = 'Start'):
        self.mark_name = mark_name
        self.role = role
        super().__init__(f'{role} mark "{mark_name}" doesn\'t exist')

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.args[0]


class SerializationError(RadarError):
    """Raised when a log data payload cannot be rendered as JSON."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause
