"""Configuration for obskit.

Process defaults come from the environment through pydantic-settings;
per-logger and per-middleware options are pydantic models merged over
those defaults.

Usage:
    from obskit.config import get_settings

    settings = get_settings()
    level = settings.log_level
"""

from functools import lru_cache

from obskit.config.settings import ObservabilitySettings


@lru_cache(maxsize=1)
def get_settings() -> ObservabilitySettings:
    """Get the singleton settings instance.

    The environment is read once and cached for the lifetime of the process.
    Call `get_settings.cache_clear()` or `reload_settings()` to re-read it.
    """
    return ObservabilitySettings()


def reload_settings() -> ObservabilitySettings:
    """Clear the settings cache and read the environment again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "ObservabilitySettings"]
