"""
Environment variable model for type-safe configuration.
"""

from typing import Annotated

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, field_validator

DEVELOPMENT_ENVIRONMENTS = ('dev', 'development')


class RadarEnvVars(BaseModel):
    """Environment variables read by the instrumentation layer."""

    # Service name for the output logger
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='lambda-radar',
        description='Service name attached to every log record'
    )] = 'lambda-radar'

    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for the output logger',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Deployment environment; development mode logs raw events
    ENVIRONMENT: Annotated[str, Field(
        default='production',
        description='Deployment environment name'
    )] = 'production'

    @field_validator('LOG_LEVEL', mode='before')
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        # Powertools accepts any case, e.g. LOG_LEVEL=info
        return value.strip().upper() if isinstance(value, str) else value

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() in DEVELOPMENT_ENVIRONMENTS


def get_radar_env_vars() -> RadarEnvVars:
    """
    Get typed environment variables for the instrumentation layer.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=RadarEnvVars)


def is_development_mode() -> bool:
    return get_radar_env_vars().is_development
