"""Cocinero logging - Hierarchical colored logging for provisioning runs."""

from .colors import (
    CYAN,
    GREEN,
    GREY,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from .logger import (
    ActionLogger,
    HookLogger,
    LibraryLogHandler,
    LogConfig,
    ProvisionLogger,
    RunLogger,
)

__all__ = [
    # Logger classes
    "ProvisionLogger",
    "RunLogger",
    "ActionLogger",
    "HookLogger",
    "LibraryLogHandler",
    "LogConfig",
    # Colors
    "RESET",
    "GREEN",
    "RED",
    "YELLOW",
    "LIGHT_BLUE",
    "CYAN",
    "MAGENTA",
    "GREY",
]
