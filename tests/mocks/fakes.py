"""Recording fakes for the host collaborators.

Each fake keeps an ordered log of what it was asked to do so tests can
assert on the exact sequence of side effects without touching the host.
"""

import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from cocinero_core.types import ProcessResult


class FakeFileSystem:
    """In-memory file system.

    Example:
        fs = FakeFileSystem({"/src/app.conf": (b"managed by cocinero", 0o644)})
        fs.write(Path("/etc/app.conf"), b"x", 0o600)
        assert fs.writes == [(Path("/etc/app.conf"), b"x", 0o600)]
    """

    def __init__(self, files: dict[str | Path, tuple[bytes, int]] | None = None):
        self.files: dict[Path, tuple[bytes, int]] = {
            Path(path): entry for path, entry in (files or {}).items()
        }
        self.writes: list[tuple[Path, bytes, int]] = []
        self.chmods: list[Path] = []
        self.fail_on_write: set[Path] = set()

    def add(self, path: str | Path, content: bytes = b"", mode: int = 0o644) -> Path:
        path = Path(path)
        self.files[path] = (content, mode)
        return path

    def exists(self, path: Path) -> bool:
        return Path(path) in self.files

    def read_bytes(self, path: Path) -> bytes:
        try:
            return self.files[Path(path)][0]
        except KeyError:
            raise FileNotFoundError(2, "No such file or directory", str(path)) from None

    def mode(self, path: Path) -> int:
        try:
            return self.files[Path(path)][1]
        except KeyError:
            raise FileNotFoundError(2, "No such file or directory", str(path)) from None

    def write(self, path: Path, data: bytes, mode: int) -> None:
        path = Path(path)
        if path in self.fail_on_write:
            raise PermissionError(13, "Permission denied", str(path))
        self.writes.append((path, data, mode))
        self.files[path] = (data, mode)

    def is_executable(self, path: Path) -> bool:
        return bool(self.mode(path) & 0o100)

    def set_executable(self, path: Path) -> None:
        path = Path(path)
        self.chmods.append(path)
        content, mode = self.files[path]
        self.files[path] = (content, mode | 0o500)


class FakeProcessRunner:
    """Process runner that records commands and returns scripted results.

    ``results`` maps a command (string, or argv joined by spaces) to the
    result it returns; anything else succeeds with empty output. A
    ``side_effect`` callable runs before each command, e.g. to trigger
    cancellation mid-run.
    """

    def __init__(
        self,
        results: dict[str, ProcessResult | Exception] | None = None,
        side_effect: Callable[[str], None] | None = None,
    ):
        self.results = results or {}
        self.side_effect = side_effect
        self.calls: list[tuple[str, Path | None, bool]] = []

    @property
    def commands(self) -> list[str]:
        return [command for command, _, _ in self.calls]

    def run(
        self,
        command: str | Sequence[str],
        cwd: Path | None = None,
        shell: bool = False,
    ) -> ProcessResult:
        key = command if isinstance(command, str) else " ".join(command)
        self.calls.append((key, cwd, shell))
        if self.side_effect:
            self.side_effect(key)

        result = self.results.get(key, ProcessResult(exit_code=0))
        if isinstance(result, Exception):
            raise result
        return result


class FakePackageManager:
    """Records install calls; fails when ``error`` is set."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.installs: list[list[str]] = []

    def install(self, packages: Sequence[str]) -> None:
        self.installs.append(list(packages))
        if self.error is not None:
            raise self.error


class FakeServiceControl:
    """Records enable/reload calls in order; fails for units in ``fail``."""

    def __init__(self, fail: dict[tuple[str, str], Exception] | None = None):
        self.fail = fail or {}
        self.calls: list[tuple[str, str]] = []

    def _call(self, action: str, unit: str) -> None:
        self.calls.append((action, unit))
        error = self.fail.get((action, unit))
        if error is not None:
            raise error

    def enable(self, unit: str) -> None:
        self._call("enable", unit)

    def reload(self, unit: str) -> None:
        self._call("reload", unit)


def failed_command(command: Sequence[str], exit_code: int = 1, stderr: str = "") -> Exception:
    """Build the error the real collaborators raise for a failed command."""
    return subprocess.CalledProcessError(exit_code, list(command), stderr=stderr)
