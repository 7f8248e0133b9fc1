"""
Invocation metadata and system resource models.

Instances are immutable: they are extracted once per invocation and only read afterwards.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class MinimalLambdaInfo(BaseModel):
    """Identity facts about the current invocation."""

    model_config = ConfigDict(frozen=True)

    function_name: Annotated[str, Field(
        description='Name of the Lambda function',
        examples=['orders-api']
    )]

    function_version: Annotated[str, Field(
        description='Version of the Lambda function ($LATEST or a version number)',
        examples=['$LATEST', '42']
    )]

    alias: Annotated[str | None, Field(
        default=None,
        description='Function alias if invoked through an alias'
    )] = None

    aws_request_id: Annotated[str, Field(
        description='Unique request ID for the current invocation'
    )]

    cold_start: Annotated[bool, Field(
        description='Whether this invocation is the first one served by the process'
    )]


class LambdaInfo(MinimalLambdaInfo):
    """Identity facts plus resource and environment facts."""

    memory_limit_in_mb: Annotated[int, Field(
        description='Memory limit allocated to the function in MB',
        ge=0
    )]

    memory_usage_in_mb: Annotated[float, Field(
        description='Resident memory of the process in MB'
    )]

    execution_environment: Annotated[str | None, Field(
        default=None,
        description='AWS execution environment identifier',
        examples=['AWS_Lambda_python3.12']
    )] = None

    log_group_name: Annotated[str, Field(
        description='CloudWatch log group name'
    )]

    log_stream_name: Annotated[str, Field(
        description='CloudWatch log stream name'
    )]

    remaining_time: Annotated[int, Field(
        description='Remaining execution time in milliseconds'
    )]

    region: Annotated[str, Field(
        default='unknown',
        description='AWS region where the function executes'
    )] = 'unknown'


class SystemInfo(BaseModel):
    """Host resource facts."""

    model_config = ConfigDict(frozen=True)

    platform: str
    arch: str
    python_version: str
    cpu_model: str
    cpu_count: int
    total_memory: Annotated[int, Field(description='Total system memory in MB')]
    free_memory: Annotated[int, Field(description='Available system memory in MB')]
    uptime: Annotated[float, Field(description='System uptime in seconds')]
