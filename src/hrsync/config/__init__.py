"""Application configuration helpers."""

from __future__ import annotations

from hrsync.common.logging import configure_logging

from .env import env_flag, env_int, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .pipefy import PipefyConfig, get_pipefy_config
from .sinergy import SinergyConfig, get_sinergy_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "NO_RETRY",
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "PipefyConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SinergyConfig",
    "StorageConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "get_pipefy_config",
    "get_sinergy_config",
    "get_storage_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
