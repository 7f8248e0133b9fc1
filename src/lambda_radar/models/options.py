"""
Log option models.

Options resolve per field: built-in defaults, then logger-construction options,
then per-call options. A field left as ``None`` does not override the layer below.
"""

from typing import Annotated, Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LogOptions(BaseModel):
    """Options controlling which segments a log record carries."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    verbose: Annotated[bool | None, Field(
        default=None,
        description='Use full invocation metadata instead of the minimal projection'
    )] = None

    include_lambda_info: Annotated[bool | None, Field(
        default=None,
        description='Append the invocation metadata segment'
    )] = None

    include_timestamp: Annotated[bool | None, Field(
        default=None,
        description='Append an ISO-8601 UTC timestamp segment'
    )] = None

    include_data: Annotated[bool | None, Field(
        default=None,
        description='Append the JSON-rendered data payload'
    )] = None

    @classmethod
    def coerce(cls, value: Union['LogOptions', Dict[str, Any], None]) -> 'LogOptions':
        """Accept an options model, a plain dict (snake_case or camelCase) or None."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def merged_with(self, override: Union['LogOptions', Dict[str, Any], None]) -> 'LogOptions':
        """Return a copy where every field set on ``override`` wins."""
        override = LogOptions.coerce(override)
        return self.model_copy(update=override.model_dump(exclude_none=True))


DEFAULT_LOG_OPTIONS = LogOptions(
    verbose=False,
    include_lambda_info=True,
    include_timestamp=True,
    include_data=True,
)


def resolve_log_options(*layers: Union[LogOptions, Dict[str, Any], None]) -> LogOptions:
    """Fold option layers over the defaults, later layers winning per field."""
    resolved = DEFAULT_LOG_OPTIONS
    for layer in layers:
        resolved = resolved.merged_with(layer)
    return resolved
