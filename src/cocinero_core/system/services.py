"""Service-control collaborator (systemd)."""

from cocinero_core.types import ProcessRunner

from .process import check


class SystemdServiceControl:
    """Enable and reload systemd units through systemctl."""

    def __init__(self, process: ProcessRunner, systemctl: str = "systemctl"):
        self._process = process
        self._systemctl = systemctl

    def enable(self, unit: str) -> None:
        """Enable and start unit (``systemctl enable --now``)."""
        command = [self._systemctl, "enable", "--now", unit]
        check(self._process.run(command), command)

    def reload(self, unit: str) -> None:
        """Reload unit, restarting it if it cannot reload."""
        command = [self._systemctl, "reload-or-restart", unit]
        check(self._process.run(command), command)
