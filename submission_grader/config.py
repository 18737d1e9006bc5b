"""
Configuration management for the submission grader.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are validated at startup. Missing required fields
    will raise clear validation errors.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Generative-text service
    # ==========================================================================
    llm_api_key: str = Field(
        ...,
        description="API key for the OpenAI-compatible chat completions endpoint",
        min_length=10,
    )

    llm_base_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1",
        description="Base URL for the chat completions API",
    )

    llm_model: str = Field(
        default="google/gemini-2.5-flash",
        description="Model used for grading and summary feedback",
    )

    llm_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Temperature for LLM generation",
    )

    llm_request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for a single HTTP request to the service",
    )

    llm_max_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retries for rate-limit, connection and server errors",
    )

    # ==========================================================================
    # Grading Configuration
    # ==========================================================================
    grading_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound in seconds for the batched grading call, retries included",
    )

    summary_timeout: float = Field(
        default=20.0,
        gt=0,
        description="Upper bound in seconds for the summary feedback call",
    )

    fallback_partial_credit: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Share of marks awarded to answered open questions when the service fails",
    )

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level for the submission_grader logger",
    )

    @field_validator("llm_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only level names the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
