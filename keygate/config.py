"""Configuration management using Pydantic Settings."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Only load .env file in development (not Lambda/production)
        env_file=".env" if os.getenv("AWS_EXECUTION_ENV") is None else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AWS Configuration
    aws_region: str = "us-east-2"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_session_token: str | None = None  # Required for temporary credentials

    @field_validator(
        "aws_access_key_id",
        "aws_secret_access_key",
        "aws_session_token",
        "dynamodb_endpoint_url",
        mode="before",
    )
    @classmethod
    def convert_empty_string_to_none(cls, v):
        """Convert empty strings to None so boto3 can use IAM role in Lambda."""
        if v is None:
            return None
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    # DynamoDB Configuration
    dynamodb_endpoint_url: str | None = None
    dynamodb_table_api_keys: str = "keygate-api-keys"
    dynamodb_table_projects: str = "keygate-projects"
    api_key_digest_index: str = "KeyDigestIndex"

    # Application Configuration
    log_level: str = "INFO"
    environment: str = "development"
    api_title: str = "Keygate Project API"
    api_version: str = "1.0.0"
    api_description: str = "Project-scoped API key authentication gateway"

    # Credential transport and format
    credential_header: str = "X-API-Key"
    credential_query_param: str = "apikey"
    credential_namespace: str = "proj"
    bypass_credentials: list[str] = ["local-dev-key", "dev-key"]

    # Client origin resolution
    forwarded_for_header: str = "X-Forwarded-For"
    real_ip_header: str = "X-Real-IP"

    # Store resilience
    store_timeout_seconds: float = 2.0
    # Upper bound on how long a revoked or rotated key can still be served
    # from cache
    lookup_cache_ttl_seconds: float = 2.0

    @property
    def is_hardened(self) -> bool:
        """Whether origin policy is enforced for production-class keys."""
        return self.environment.lower() == "production"


# Global settings instance
settings = Settings()
