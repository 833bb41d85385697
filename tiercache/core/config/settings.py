#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
tiered cache coordinator. All configuration is centralized here so the
coordinator, the concrete tiers and the logging layer agree on one source.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisSettings(BaseSettings):
    """
    Redis configuration for the remote cache tier.

    STAGE-0.1: Redis connection configuration
    """

    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")

    REDIS_MAX_CONNECTIONS: int = Field(default=100, description="Maximum total pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Coordinator and tier configuration.

    STAGE-2: Cache TTL and tier configuration

    CACHE_TTL_FACTOR drives the staggered expiry policy: tier i > 0 caches
    for max(1, i * factor) times the requested TTL.
    """

    CACHE_DEFAULT_TTL: int = Field(default=300, description="Base TTL in seconds when the caller passes none")
    CACHE_L1_MAX_SIZE: int = Field(default=1000, description="In-memory tier max entries")
    CACHE_TTL_FACTOR: int = Field(default=2, description="Per-tier TTL multiplier for tiers after the first")
    CACHE_KEY_PREFIX: str = Field(default="tiercache", description="Namespace prefix for remote tier keys")
    TIER_OPERATION_TIMEOUT: float | None = Field(
        default=2.0, description="Seconds to wait on a single tier get/put/delete (None disables)"
    )
    CACHE_PARALLEL_BACKFILL: bool = Field(default=False, description="Issue backfill writes concurrently")

    @field_validator("CACHE_TTL_FACTOR")
    @classmethod
    def validate_ttl_factor(cls, v):
        """TTL factor below 1 would make later tiers expire first."""
        if v < 1:
            raise ValueError("CACHE_TTL_FACTOR must be >= 1")
        return v

    @field_validator("TIER_OPERATION_TIMEOUT")
    @classmethod
    def validate_operation_timeout(cls, v):
        """Validate tier operation timeout."""
        if v is not None and v <= 0:
            raise ValueError("TIER_OPERATION_TIMEOUT must be positive")
        return v

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from tiercache.core.config.settings import get_settings

        settings = get_settings()
        redis_host = settings.redis.REDIS_HOST
        default_ttl = settings.cache.CACHE_DEFAULT_TTL
    """

    # Redis settings
    REDIS_HOST: str = Field(default="localhost", description="Redis server host")
    REDIS_PORT: int = Field(default=6379, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_MAX_CONNECTIONS: int = Field(default=100, description="Maximum total pooled connections")
    REDIS_SOCKET_TIMEOUT: int = Field(default=5, description="Socket timeout in seconds")
    REDIS_SOCKET_CONNECT_TIMEOUT: int = Field(default=5, description="Connection timeout in seconds")
    REDIS_HEALTH_CHECK_INTERVAL: int = Field(default=30, description="Health check interval in seconds")

    # Cache settings
    CACHE_DEFAULT_TTL: int = Field(default=300, description="Base TTL in seconds when the caller passes none")
    CACHE_L1_MAX_SIZE: int = Field(default=1000, description="In-memory tier max entries")
    CACHE_TTL_FACTOR: int = Field(default=2, description="Per-tier TTL multiplier for tiers after the first")
    CACHE_KEY_PREFIX: str = Field(default="tiercache", description="Namespace prefix for remote tier keys")
    TIER_OPERATION_TIMEOUT: float | None = Field(
        default=2.0, description="Seconds to wait on a single tier get/put/delete (None disables)"
    )
    CACHE_PARALLEL_BACKFILL: bool = Field(default=False, description="Issue backfill writes concurrently")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("CACHE_TTL_FACTOR")
    @classmethod
    def validate_ttl_factor(cls, v):
        """TTL factor below 1 would make later tiers expire first."""
        if v < 1:
            raise ValueError("CACHE_TTL_FACTOR must be >= 1")
        return v

    @field_validator("TIER_OPERATION_TIMEOUT")
    @classmethod
    def validate_operation_timeout(cls, v):
        """Validate tier operation timeout."""
        if v is not None and v <= 0:
            raise ValueError("TIER_OPERATION_TIMEOUT must be positive")
        return v

    # Nested configuration objects
    @property
    def redis(self) -> "RedisSettings":
        """Get Redis settings."""
        return RedisSettings(
            REDIS_HOST=self.REDIS_HOST,
            REDIS_PORT=self.REDIS_PORT,
            REDIS_DB=self.REDIS_DB,
            REDIS_PASSWORD=self.REDIS_PASSWORD,
            REDIS_MAX_CONNECTIONS=self.REDIS_MAX_CONNECTIONS,
            REDIS_SOCKET_TIMEOUT=self.REDIS_SOCKET_TIMEOUT,
            REDIS_SOCKET_CONNECT_TIMEOUT=self.REDIS_SOCKET_CONNECT_TIMEOUT,
            REDIS_HEALTH_CHECK_INTERVAL=self.REDIS_HEALTH_CHECK_INTERVAL,
        )

    @property
    def cache(self) -> "CacheSettings":
        """Get cache settings."""
        return CacheSettings(
            CACHE_DEFAULT_TTL=self.CACHE_DEFAULT_TTL,
            CACHE_L1_MAX_SIZE=self.CACHE_L1_MAX_SIZE,
            CACHE_TTL_FACTOR=self.CACHE_TTL_FACTOR,
            CACHE_KEY_PREFIX=self.CACHE_KEY_PREFIX,
            TIER_OPERATION_TIMEOUT=self.TIER_OPERATION_TIMEOUT,
            CACHE_PARALLEL_BACKFILL=self.CACHE_PARALLEL_BACKFILL,
        )

    @property
    def logging(self) -> "LoggingSettings":
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
