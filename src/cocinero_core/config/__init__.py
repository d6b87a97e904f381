"""Cocinero configuration - Config loading and models."""

from .loader import (
    CONFIG_PATH_ENV,
    ConfigLoader,
    deep_merge,
    resolve_env_vars,
)
from .models import (
    CocineroConfig,
    ExecutionConfig,
    LoggingComponentsConfig,
    LoggingConfig,
    LoggingOptionsConfig,
    PackagesConfig,
    RecipesConfig,
    ServicesConfig,
)

__all__ = [
    # Config models
    "CocineroConfig",
    "ExecutionConfig",
    "LoggingComponentsConfig",
    "LoggingConfig",
    "LoggingOptionsConfig",
    "PackagesConfig",
    "RecipesConfig",
    "ServicesConfig",
    # Loader
    "CONFIG_PATH_ENV",
    "ConfigLoader",
    "deep_merge",
    "resolve_env_vars",
]
