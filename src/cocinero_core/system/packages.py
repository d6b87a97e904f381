"""Package-manager collaborator."""

from collections.abc import Sequence

from cocinero_core.types import ProcessRunner

from .process import check

DEFAULT_INSTALL_COMMAND = ("apt-get", "install", "-y")


class AptPackageManager:
    """Install packages with a fixed installer command."""

    def __init__(
        self,
        process: ProcessRunner,
        install_command: Sequence[str] = DEFAULT_INSTALL_COMMAND,
    ):
        self._process = process
        self._install_command = list(install_command)

    def install(self, packages: Sequence[str]) -> None:
        """Install all packages in one installer invocation.

        Raises:
            subprocess.CalledProcessError: If the installer exits non-zero
        """
        command = [*self._install_command, *packages]
        check(self._process.run(command), command)
