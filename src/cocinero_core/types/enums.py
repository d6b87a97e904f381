"""Shared enumerations for cocinero."""

from enum import Enum


class LogLevel(str, Enum):
    """Log verbosity level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Log output format."""

    COLORED = "colored"
    JSON = "json"


class StepKind(str, Enum):
    """Recipe step kind."""

    INSTALL = "install"
    SHELL = "shell"
    RUN = "run"


class ActionKind(str, Enum):
    """Concrete action kind produced by the plan builder."""

    WRITE_FILE = "write_file"
    SHELL_COMMAND = "shell_command"
    RUN_SCRIPT = "run_script"


class RunStatus(str, Enum):
    """Plan runner state."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ActionStatus(str, Enum):
    """Individual action status."""

    COMPLETED = "completed"
    FAILED = "failed"


class HookStatus(str, Enum):
    """Post-provision hook outcome."""

    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"
