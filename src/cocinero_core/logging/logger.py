"""Cocinero logger - Hierarchical colored logging for provisioning runs."""

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TextIO

from cocinero_core.logging.colors import (
    CYAN,
    GREEN,
    GREY,
    LIGHT_BLUE,
    MAGENTA,
    RED,
    RESET,
    YELLOW,
)
from cocinero_core.types import LogFormat, LogLevel

PACKAGE_LOGGER = "cocinero_core"

STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


@dataclass
class LogConfig:
    """Logger configuration."""

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.COLORED
    show_context: bool = True
    show_output: bool = True
    truncate_at: int = 200
    components: dict[str, bool] = field(default_factory=dict)
    output: TextIO = field(default=sys.stderr)

    def __post_init__(self) -> None:
        """Initialize default components if not provided."""
        if not self.components:
            self.components = {
                "plan": True,
                "run": True,
                "action": True,
                "hook": True,
            }


class ProvisionLogger:
    """Main logger facade. Creates scoped loggers for runs."""

    def __init__(self, config: LogConfig | None = None):
        """Initialize logger with configuration.

        Args:
            config: Logger configuration (defaults to LogConfig())
        """
        self.config = config or LogConfig()
        self._level_order = {
            LogLevel.DEBUG: 0,
            LogLevel.INFO: 1,
            LogLevel.WARN: 2,
            LogLevel.ERROR: 3,
        }

    def run(self, run_id: str) -> "RunLogger":
        """Get a logger scoped to a provisioning run.

        Args:
            run_id: Run identifier

        Returns:
            RunLogger instance
        """
        return RunLogger(self, run_id)

    def capture_library_logs(self) -> "LibraryLogHandler":
        """Send records from cocinero's module loggers through this logger.

        Replaces a handler installed by an earlier call.

        Returns:
            The installed handler
        """
        package = logging.getLogger(PACKAGE_LOGGER)
        for existing in list(package.handlers):
            if isinstance(existing, LibraryLogHandler):
                package.removeHandler(existing)

        handler = LibraryLogHandler(self)
        package.addHandler(handler)
        package.setLevel(STDLIB_LEVELS[self.config.level])
        return handler

    def _should_log(self, level: LogLevel) -> bool:
        return self._level_order.get(level, 0) >= self._level_order.get(self.config.level, 1)

    def _log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Internal logging method.

        Args:
            level: Log level
            component: Component name (plan, run, action, hook)
            message: Log message
            context: Additional context data
        """
        if not self._should_log(level):
            return

        if not self.config.components.get(component, True):
            return

        if self.config.format == LogFormat.JSON:
            self._log_json(level, component, message, context)
        else:
            self._log_colored(level, component, message, context)

    def _log_json(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": level.value,
            "component": component,
            "message": message,
        }
        if context:
            log_entry.update(context)

        print(json.dumps(log_entry, default=str), file=self.config.output)

    def _log_colored(
        self,
        level: LogLevel,
        component: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        level_colors = {
            LogLevel.DEBUG: LIGHT_BLUE,
            LogLevel.INFO: CYAN,
            LogLevel.WARN: YELLOW,
            LogLevel.ERROR: RED,
        }

        color = level_colors.get(level, RESET)
        component_color = {
            "plan": LIGHT_BLUE,
            "run": MAGENTA,
            "action": CYAN,
            "hook": GREEN,
        }.get(component, RESET)

        # Format: [COMPONENT] message
        output = f"{component_color}[{component.upper()}]{RESET} {color}{message}{RESET}"

        if context and self.config.show_context:
            context_str = str(context)
            if len(context_str) > self.config.truncate_at:
                context_str = context_str[: self.config.truncate_at] + "..."
            output += f" {LIGHT_BLUE}{context_str}{RESET}"

        print(output, file=self.config.output)

    def _truncate(self, text: str) -> str:
        if len(text) > self.config.truncate_at:
            return text[: self.config.truncate_at] + "..."
        return text


class RunLogger:
    """Logger for run-level events."""

    def __init__(self, parent: ProvisionLogger, run_id: str):
        """Initialize run logger.

        Args:
            parent: Parent ProvisionLogger instance
            run_id: Run identifier
        """
        self.parent = parent
        self.run_id = run_id

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        return {"run_id": self.run_id, "event": event, **extra}

    def started(self, action_count: int) -> None:
        """Log run start.

        Args:
            action_count: Number of actions in the plan
        """
        self.parent._log(
            LogLevel.INFO,
            "run",
            f"Provisioning started ({action_count} actions)",
            self._context("run_started", action_count=action_count),
        )

    def completed(self, duration_ms: int, action_count: int) -> None:
        """Log run completion with summary.

        Args:
            duration_ms: Run duration in milliseconds
            action_count: Number of actions executed
        """
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.INFO,
            "run",
            f"Provisioning completed ({action_count} actions, {duration_s:.2f}s) ✓",
            self._context("run_completed", duration_ms=duration_ms, action_count=action_count),
        )

    def failed(self, error: Exception, duration_ms: int, completed: int) -> None:
        """Log run failure.

        Args:
            error: Error that stopped the run
            duration_ms: Run duration in milliseconds
            completed: Number of actions applied before the failure
        """
        duration_s = duration_ms / 1000
        self.parent._log(
            LogLevel.ERROR,
            "run",
            f"Provisioning failed after {completed} applied actions ({duration_s:.2f}s): {error}",
            self._context(
                "run_failed",
                duration_ms=duration_ms,
                completed=completed,
                error=str(error),
                error_type=type(error).__name__,
            ),
        )

    def cancelled(self, completed: int, remaining: int) -> None:
        """Log run cancellation.

        Args:
            completed: Number of actions applied before cancellation
            remaining: Number of actions that were not started
        """
        self.parent._log(
            LogLevel.WARN,
            "run",
            f"Provisioning cancelled ({completed} applied, {remaining} not started)",
            self._context("run_cancelled", completed=completed, remaining=remaining),
        )

    def action(self, index: int, total: int) -> "ActionLogger":
        """Get a logger scoped to one action of the plan.

        Args:
            index: Position of the action in the plan (0-based)
            total: Number of actions in the plan

        Returns:
            ActionLogger instance
        """
        return ActionLogger(self, index, total)

    def hooks(self) -> "HookLogger":
        """Get a logger for post-provision hooks."""
        return HookLogger(self)


class ActionLogger:
    """Logger for action-level events."""

    def __init__(self, parent: RunLogger, index: int, total: int):
        self.parent = parent
        self.index = index
        self.total = total

    @property
    def _root(self) -> ProvisionLogger:
        return self.parent.parent

    def _context(self, event: str, **extra: Any) -> dict[str, Any]:
        return {
            "run_id": self.parent.run_id,
            "action_index": self.index,
            "event": event,
            **extra,
        }

    def _prefix(self) -> str:
        return f"[{self.index + 1}/{self.total}]"

    def started(self, description: str, step_index: int, kind: str) -> None:
        """Log action start.

        Args:
            description: Human-readable action description
            step_index: Recipe step the action came from
            kind: Action kind
        """
        self._root._log(
            LogLevel.INFO,
            "action",
            f"{self._prefix()} {description}",
            self._context("action_started", step_index=step_index, kind=kind),
        )

    def completed(self, duration_ms: int) -> None:
        """Log action completion.

        Args:
            duration_ms: Action duration in milliseconds
        """
        duration_s = duration_ms / 1000
        self._root._log(
            LogLevel.DEBUG,
            "action",
            f"{self._prefix()} done ({duration_s:.2f}s) ✓",
            self._context("action_completed", duration_ms=duration_ms),
        )

    def failed(self, error: Exception) -> None:
        """Log action failure.

        Args:
            error: Error raised by the action
        """
        self._root._log(
            LogLevel.ERROR,
            "action",
            f"{self._prefix()} failed: {error}",
            self._context("action_failed", error=str(error), error_type=type(error).__name__),
        )

    def output(self, stdout: str, stderr: str) -> None:
        """Log captured process output at debug level.

        Args:
            stdout: Captured standard output
            stderr: Captured standard error
        """
        if not self._root.config.show_output:
            return
        for stream, text in (("stdout", stdout), ("stderr", stderr)):
            text = text.strip()
            if not text:
                continue
            self._root._log(
                LogLevel.DEBUG,
                "action",
                f"{self._prefix()} {stream}: {GREY}{self._root._truncate(text)}{RESET}",
                self._context(f"action_{stream}"),
            )


class HookLogger:
    """Logger for post-provision hook events."""

    def __init__(self, parent: RunLogger):
        self.parent = parent

    def _log(self, level: LogLevel, message: str, event: str, **extra: Any) -> None:
        self.parent.parent._log(
            level,
            "hook",
            message,
            {"run_id": self.parent.run_id, "event": event, **extra},
        )

    def installing(self, packages: list[str]) -> None:
        """Log package installation start."""
        self._log(
            LogLevel.INFO,
            f"Installing {len(packages)} packages: {' '.join(packages)}",
            "hook_packages",
            packages=packages,
        )

    def reloading(self, unit: str) -> None:
        """Log systemd unit enable + reload."""
        self._log(LogLevel.INFO, f"Enabling and reloading {unit}", "hook_unit", unit=unit)

    def completed(self) -> None:
        """Log hook completion."""
        self._log(LogLevel.INFO, "Post-provision hooks completed ✓", "hook_completed")

    def skipped(self, reason: str) -> None:
        """Log hooks being skipped.

        Args:
            reason: Why the hooks did not run
        """
        self._log(LogLevel.WARN, f"Post-provision hooks skipped: {reason}", "hook_skipped")

    def failed(self, hook: str, error: Exception) -> None:
        """Log hook failure.

        Args:
            hook: Which hook failed
            error: Error raised by the collaborator
        """
        self._log(
            LogLevel.ERROR,
            f"Hook '{hook}' failed: {error}",
            "hook_failed",
            hook=hook,
            error=str(error),
        )


class LibraryLogHandler(logging.Handler):
    """``logging`` handler that forwards records to a ProvisionLogger.

    The component is the subpackage the record came from, so
    ``cocinero_core.plan.executors`` logs under ``plan``.
    """

    def __init__(self, target: ProvisionLogger):
        super().__init__()
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.ERROR:
            level = LogLevel.ERROR
        elif record.levelno >= logging.WARNING:
            level = LogLevel.WARN
        elif record.levelno >= logging.INFO:
            level = LogLevel.INFO
        else:
            level = LogLevel.DEBUG

        component = record.name.removeprefix(f"{PACKAGE_LOGGER}.").split(".")[0]
        try:
            self.target._log(level, component, record.getMessage())
        except Exception:
            self.handleError(record)
