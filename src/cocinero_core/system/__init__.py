"""Host collaborators: file system, processes, packages and services."""

from .filesystem import OWNER_READ_EXECUTE, LocalFileSystem
from .packages import DEFAULT_INSTALL_COMMAND, AptPackageManager
from .process import SubprocessRunner
from .services import SystemdServiceControl

__all__ = [
    "LocalFileSystem",
    "OWNER_READ_EXECUTE",
    "SubprocessRunner",
    "AptPackageManager",
    "DEFAULT_INSTALL_COMMAND",
    "SystemdServiceControl",
]
