"""Export a plan as a standalone bash script.

The script replays the plan on a host without cocinero installed: file
payloads are staged next to the script and installed with ``install -D``,
commands run from their recipe directory, and the hooks come last.
"""

import logging
import os
import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from cocinero_core.recipe.modes import format_mode

from .types import Plan, RunScriptAction, ShellCommandAction, WriteFileAction

logger = logging.getLogger(__name__)

SCRIPT_NAME = "cook.sh"
FILES_DIR = "files"

HEADER = [
    "#!/usr/bin/env bash",
    "",
    "# Generated by cocinero",
    "",
    "set -e",
    "",
    'HERE="$(cd "$(dirname "$0")" && pwd)"',
    "",
]


def _q(value: str | Path) -> str:
    return shlex.quote(str(value))


def _in_dir(cwd: Path | None, command: str) -> str:
    if cwd is None:
        return command
    return f"(cd {_q(cwd)} && {command})"


class ScriptExporter:
    """Render plans as bash scripts."""

    def __init__(
        self,
        install_command: Sequence[str] = ("apt-get", "install", "-y"),
        systemctl: str = "systemctl",
    ):
        """Initialize exporter.

        Args:
            install_command: Package install argv prefix
            systemctl: systemctl executable
        """
        self._install_command = list(install_command)
        self._systemctl = systemctl

    def payload_name(self, index: int, action: WriteFileAction) -> str:
        """Name of the staged copy of a file action's content."""
        return f"{index:03d}-{action.dest.name or 'file'}"

    def export(self, plan: Plan) -> str:
        """Render a plan as script text.

        Args:
            plan: Plan to render

        Returns:
            Bash script
        """
        lines = list(HEADER)
        lines.append("echo 'starting to cook'")

        current_recipe: str | None = None
        for index, action in enumerate(plan.actions):
            if action.recipe and action.recipe != current_recipe:
                current_recipe = action.recipe
                lines.append("")
                lines.append(f"echo {_q(f'running recipe {current_recipe}')}")

            match action:
                case WriteFileAction():
                    payload = f'"$HERE"/{FILES_DIR}/{_q(self.payload_name(index, action))}'
                    lines.append(
                        f"install -D -m {format_mode(action.mode)} {payload} {_q(action.dest)}"
                    )
                case ShellCommandAction():
                    lines.append(_in_dir(action.cwd, action.command))
                case RunScriptAction():
                    lines.append(f"chmod u+rx {_q(action.script)}")
                    lines.append(_in_dir(action.cwd, _q(action.script)))

        if plan.packages:
            lines.append("")
            lines.append(" ".join(_q(part) for part in [*self._install_command, *plan.packages]))

        if plan.systemd_units:
            lines.append("")
            for unit in plan.systemd_units:
                lines.append(f"{_q(self._systemctl)} enable --now {_q(unit)}")
                lines.append(f"{_q(self._systemctl)} reload-or-restart {_q(unit)}")

        lines.append("")
        return "\n".join(lines)

    def export_to(self, plan: Plan, target_dir: str | Path) -> Path:
        """Write the script and staged payloads into target_dir.

        The target directory is replaced.

        Args:
            plan: Plan to export
            target_dir: Output directory

        Returns:
            Path of the written script
        """
        target = Path(target_dir)
        if target.exists():
            shutil.rmtree(target)
        files_dir = target / FILES_DIR
        files_dir.mkdir(parents=True)

        for index, action in enumerate(plan.actions):
            if isinstance(action, WriteFileAction):
                payload = files_dir / self.payload_name(index, action)
                payload.write_bytes(action.content)
                os.chmod(payload, action.mode)

        script_path = target / SCRIPT_NAME
        script_path.write_text(self.export(plan))
        script_path.chmod(0o755)

        logger.info("Exported %d actions to %s", len(plan), script_path)
        return script_path
