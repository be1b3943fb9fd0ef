"""Application configuration helpers."""

from __future__ import annotations

from .cache import DEFAULT_CACHE_TTL_SECONDS, CacheConfig, get_cache_config
from .env import env_bool, env_float, optional_env, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .logging import configure_logging, get_log_level
from .storage import DatabaseConfig, get_data_dir, get_database_config

__all__ = [
    "DEFAULT_CACHE_TTL_SECONDS",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "configure_logging",
    "env_bool",
    "env_float",
    "get_cache_config",
    "get_data_dir",
    "get_database_config",
    "get_log_level",
    "optional_env",
    "require_env_vars",
]
