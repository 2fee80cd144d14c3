"""Configuration module using Pydantic Settings.

Usage:
    from classmite.config import EngineSettings

    settings = EngineSettings(autoload=False)
"""

from classmite.config.settings import EngineSettings

__all__ = [
    "EngineSettings",
]
