"""Protocols for the host collaborators the engine talks to.

The engine never touches the file system or the process table directly.
Everything goes through these narrow interfaces so a run can be exercised
against recording fakes.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of a finished process."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        """Whether the process exited with status 0."""
        return self.exit_code == 0


class FileSystem(Protocol):
    """File-system operations used by plan building and running."""

    def exists(self, path: Path) -> bool:
        """Return True if path exists."""
        ...

    def read_bytes(self, path: Path) -> bytes:
        """Read a file. Raises FileNotFoundError when missing."""
        ...

    def mode(self, path: Path) -> int:
        """Return the permission bits of path."""
        ...

    def write(self, path: Path, data: bytes, mode: int) -> None:
        """Write data to path, creating parents, and set its mode."""
        ...

    def is_executable(self, path: Path) -> bool:
        """Return True if the owner may execute path."""
        ...

    def set_executable(self, path: Path) -> None:
        """Add owner read and execute permission to path."""
        ...


class ProcessRunner(Protocol):
    """Synchronous process invocation."""

    def run(
        self,
        command: str | Sequence[str],
        cwd: Path | None = None,
        shell: bool = False,
    ) -> ProcessResult:
        """Run command to completion and return its result."""
        ...


class PackageManager(Protocol):
    """System package installation."""

    def install(self, packages: Sequence[str]) -> None:
        """Install all packages in a single call. Raises on failure."""
        ...


class ServiceControl(Protocol):
    """Systemd unit control."""

    def enable(self, unit: str) -> None:
        """Enable and start unit. Raises on failure."""
        ...

    def reload(self, unit: str) -> None:
        """Reload or restart unit. Raises on failure."""
        ...
