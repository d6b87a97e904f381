"""Subprocess collaborator."""

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from cocinero_core.types import ProcessResult

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Run processes to completion with ``subprocess.run``."""

    def __init__(
        self,
        shell: str = "/bin/sh",
        timeout: float | None = None,
        capture_output: bool = True,
    ):
        """Initialize runner.

        Args:
            shell: Shell used for command strings
            timeout: Seconds before a process is killed (None = wait forever)
            capture_output: Capture stdout/stderr instead of inheriting them
        """
        self._shell = shell
        self._timeout = timeout
        self._capture_output = capture_output

    def run(
        self,
        command: str | Sequence[str],
        cwd: Path | None = None,
        shell: bool = False,
    ) -> ProcessResult:
        """Run command and wait for it to exit.

        Args:
            command: Command string (with shell=True) or argv
            cwd: Working directory
            shell: Run command through the configured shell

        Returns:
            ProcessResult with exit code and captured output

        Raises:
            OSError: If the process cannot be started
            subprocess.TimeoutExpired: If the timeout elapses
        """
        if shell and not isinstance(command, str):
            command = " ".join(command)
        if not shell and isinstance(command, str):
            command = [command]

        logger.debug("Running %r (cwd=%s, shell=%s)", command, cwd, shell)
        completed = subprocess.run(
            command,
            cwd=cwd,
            shell=shell,
            executable=self._shell if shell else None,
            capture_output=self._capture_output,
            text=True,
            errors="replace",
            timeout=self._timeout,
            check=False,
        )
        return ProcessResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def check(result: ProcessResult, command: Sequence[str]) -> None:
    """Raise CalledProcessError when result is a failure."""
    if not result.success:
        raise subprocess.CalledProcessError(
            result.exit_code,
            list(command),
            output=result.stdout,
            stderr=result.stderr,
        )
