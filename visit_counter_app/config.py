from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below

    The flat variable names used by earlier deployments
    (REDISADDRESS, RESPONSEFILE, KAFKAADDRESS, ...) are accepted as aliases.
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "IP Visit Counter"
    app_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = Field(..., gt=0, le=65535)
    trust_forwarded_headers: bool = True  # Use X-Forwarded-For / X-Real-IP for client address
    cors_allow_origins: List[str] = ["*"]

    # Static text prepended to "hi from" in every /count response
    response_file: str = Field(
        ..., validation_alias=AliasChoices("response_file", "responsefile")
    )

    # Counter cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory"
    redis_address: Optional[str] = Field(
        None, validation_alias=AliasChoices("redis_address", "redisaddress")
    )
    counter_key_prefix: str = "ip-visit-counter-"
    counter_ttl_seconds: int = Field(120, gt=0)

    # Queue settings
    queue_backend: str = "sqs"  # Options: "sqs", "memory"
    sqs_queue_name: str = Field(
        ..., validation_alias=AliasChoices("sqs_queue_name", "sqsqueuename")
    )
    aws_region: Optional[str] = None  # None = boto3 default chain

    # Stream settings
    stream_backend: str = "kafka"  # Options: "kafka", "memory"
    kafka_address: Optional[str] = Field(
        None, validation_alias=AliasChoices("kafka_address", "kafkaaddress")
    )
    kafka_topic: str = Field(
        ..., validation_alias=AliasChoices("kafka_topic", "kafkatopic")
    )

    # Enrichment (IP info lookup service)
    ip_info_address: str = Field(
        ..., validation_alias=AliasChoices("ip_info_address", "ipinfoaddress")
    )
    lookup_timeout_seconds: Optional[float] = None  # None = wait for the server

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @model_validator(mode="after")
    def check_backend_addresses(self) -> "Settings":
        """Network backends need an address, memory backends don't."""
        if self.cache_backend == "redis" and not self.redis_address:
            raise ValueError("redis_address is required when cache_backend is 'redis'")
        if self.stream_backend == "kafka" and not self.kafka_address:
            raise ValueError("kafka_address is required when stream_backend is 'kafka'")
        return self


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings instance (singleton).

    Only called while the app starts, so importing the app
    never touches the environment.
    """
    return Settings()
