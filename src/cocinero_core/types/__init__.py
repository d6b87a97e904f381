"""Shared types for cocinero.

Import from here rather than submodules:
    from cocinero_core.types import LogLevel, StepKind, ProcessResult
"""

from .collaborators import (
    FileSystem,
    PackageManager,
    ProcessResult,
    ProcessRunner,
    ServiceControl,
)
from .enums import (
    ActionKind,
    ActionStatus,
    HookStatus,
    LogFormat,
    LogLevel,
    RunStatus,
    StepKind,
)
from .validation import ValidationIssue, ValidationResult

__all__ = [
    # Enums
    "LogLevel",
    "LogFormat",
    "StepKind",
    "ActionKind",
    "RunStatus",
    "ActionStatus",
    "HookStatus",
    # Collaborators
    "FileSystem",
    "ProcessRunner",
    "ProcessResult",
    "PackageManager",
    "ServiceControl",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
