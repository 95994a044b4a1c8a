"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from shared.config import settings

    print(settings.environment)
    print(settings.verifier.admin)
"""

from shared.config.settings import (
    Environment,
    LedgerBackend,
    LogLevel,
    RedisSettings,
    Settings,
    VerifierSettings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "VerifierSettings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
    "LedgerBackend",
    "RedisSettings",
]
