"""Configuration settings using Pydantic Settings.

Provides typed engine configuration with environment variable support.

Usage:
    from classmite.config import EngineSettings

    # Load from environment variables (CLASSMITE_*)
    settings = EngineSettings()

    # Or override with explicit values
    settings = EngineSettings(autoload=False)
    registry = Registry(settings=settings)
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a type registry.

    Attributes:
        autoload: Import the module named by an unknown parent or role before
            failing, so declarations living in other modules register themselves.
        warn_on_reapply: Emit RoleReapplicationWarning when a role is applied twice.
        warn_on_dropped_attributes: Emit RoleAttributesIgnoredWarning when a role's
            attributes are dropped for a type without attribute handling.
        thread_safe: Guard registry mutation with a re-entrant lock.

    Environment Variables:
        CLASSMITE_AUTOLOAD
        CLASSMITE_WARN_ON_REAPPLY
        CLASSMITE_WARN_ON_DROPPED_ATTRIBUTES
        CLASSMITE_THREAD_SAFE
    """

    model_config = SettingsConfigDict(
        env_prefix="CLASSMITE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    autoload: bool = True
    warn_on_reapply: bool = True
    warn_on_dropped_attributes: bool = True
    thread_safe: bool = True
