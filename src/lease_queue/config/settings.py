"""
Module: settings.py
Description: Queue configuration using pydantic-settings.

Resolves credentials, region, lease and long-poll defaults from
environment variables (prefixed LEASE_QUEUE_) with validation and
defaults. Supports .env files for local development.

The resulting QueueConfig is frozen: build it once at startup with
load_config() and pass it to every QueueClient.
"""

import re
from typing import Literal, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..utils.logger import configure_logging

# SQS hard limits
MAX_VISIBILITY_TIMEOUT = 43200
MAX_WAIT_TIME_SECONDS = 20
MAX_MESSAGE_BYTES = 262144

QUEUE_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,80}$')


class QueueConfig(BaseSettings):
    """Queue settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LEASE_QUEUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True
    )

    # Backend selection
    backend: Literal["sqs", "memory"] = Field(
        default="sqs",
        description="Transport backend (sqs or memory)"
    )

    # AWS settings
    aws_access_key_id: Optional[str] = Field(default=None, description="AWS access key")
    aws_secret_access_key: Optional[SecretStr] = Field(default=None, description="AWS secret key")
    aws_session_token: Optional[SecretStr] = Field(default=None, description="AWS session token")
    aws_region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom SQS endpoint (e.g. a local SQS emulator)"
    )

    # Lease settings
    visibility_timeout: int = Field(
        default=60,
        ge=1,
        le=MAX_VISIBILITY_TIMEOUT,
        description="Default lease time in seconds for claimed items"
    )
    wait_time_seconds: int = Field(
        default=1,
        ge=0,
        le=MAX_WAIT_TIME_SECONDS,
        description="Default long-poll wait in seconds (0 disables long polling)"
    )

    # Queue settings
    queue_name_prefix: str = Field(default="", description="Prefix added to every queue name")
    max_message_bytes: int = Field(
        default=MAX_MESSAGE_BYTES,
        ge=1,
        le=MAX_MESSAGE_BYTES,
        description="Maximum encoded payload size in bytes"
    )
    serializer: Literal["json", "pickle"] = Field(
        default="json",
        description="Payload serializer"
    )
    treat_receive_errors_as_empty: bool = Field(
        default=False,
        description="Report transport errors during claim as an empty queue"
    )
    request_timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Transport read timeout in seconds, added on top of long-poll waits"
    )

    # Observability
    metrics_namespace: Optional[str] = Field(
        default=None,
        description="CloudWatch namespace for queue metrics (disabled when unset)"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('queue_name_prefix')
    @classmethod
    def validate_queue_name_prefix(cls, v: str) -> str:
        """Validate the prefix only uses characters SQS accepts in queue names."""
        if v and not re.match(r'^[A-Za-z0-9_-]+$', v):
            raise ValueError(
                "queue_name_prefix must contain only letters, numbers, hyphens, and underscores"
            )
        return v

    @field_validator('endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate endpoint URL scheme; empty strings mean no override."""
        if not v:
            return None
        if not v.startswith(('http://', 'https://')):
            raise ValueError("endpoint_url must be a valid HTTP/HTTPS URL")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    def has_credentials(self) -> bool:
        """Return True when both access key and secret key are non-empty."""
        if not self.aws_access_key_id or not self.aws_access_key_id.strip():
            return False
        if self.aws_secret_access_key is None:
            return False
        return bool(self.aws_secret_access_key.get_secret_value().strip())

    def queue_name(self, name: str) -> str:
        """
        Build the remote queue name for a logical queue name.

        Args:
            name: Logical queue name supplied by the caller

        Returns:
            Prefixed queue name

        Raises:
            ValueError: If the resulting name is not a valid SQS queue name
        """
        if not name or not isinstance(name, str):
            raise ValueError("queue name must be a non-empty string")

        full_name = f"{self.queue_name_prefix}{name}"
        if not QUEUE_NAME_PATTERN.match(full_name):
            raise ValueError(
                f"Invalid queue name '{full_name}': use 1-80 letters, numbers, "
                "hyphens, and underscores"
            )
        return full_name


def load_config(**overrides) -> QueueConfig:
    """
    Resolve queue configuration and apply its log level.

    Keyword overrides take precedence over environment variables,
    which take precedence over the .env file and field defaults.

    Example:
        >>> config = load_config(backend="memory", wait_time_seconds=0)
    """
    config = QueueConfig(**overrides)
    configure_logging(config.log_level)
    return config
