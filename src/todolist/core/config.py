"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class DynamoDBConfig(BaseSettings):
    """DynamoDB table holding the to-do records."""

    model_config = {"env_prefix": "TODOS_DYNAMO_"}

    table: str = "Todos-dev"
    todo_id_index: str = "TodoIdIndex"  # GSI keyed by todoId alone
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class S3Config(BaseSettings):
    """S3 attachment bucket configuration."""

    model_config = {"env_prefix": "TODOS_S3_"}

    attachment_bucket: str = "todos-attachments-dev"
    signed_url_expiration: int = Field(default=300, gt=0)  # seconds
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "TODOS_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    s3: S3Config = Field(default_factory=S3Config)
