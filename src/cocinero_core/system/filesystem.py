"""Local file-system collaborator."""

import os
import stat
from pathlib import Path

# Added to a script's mode before running it
OWNER_READ_EXECUTE = stat.S_IRUSR | stat.S_IXUSR


class LocalFileSystem:
    """File-system operations on the local host."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_bytes(self, path: Path) -> bytes:
        return path.read_bytes()

    def mode(self, path: Path) -> int:
        return stat.S_IMODE(path.stat().st_mode)

    def write(self, path: Path, data: bytes, mode: int) -> None:
        """Write data to path and set its mode.

        Parent directories are created. The mode is applied with chmod
        after writing so the process umask does not mask it.

        Args:
            path: Destination file
            data: File content
            mode: Permission bits
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        os.chmod(path, mode)

    def is_executable(self, path: Path) -> bool:
        return bool(path.stat().st_mode & stat.S_IXUSR)

    def set_executable(self, path: Path) -> None:
        os.chmod(path, self.mode(path) | OWNER_READ_EXECUTE)
