"""Action executors: one per step kind.

Each executor turns an execution unit into a concrete action. The only
host access allowed here is reading source files; every write and every
process spawn is left to the plan runner.
"""

import logging
from pathlib import Path

from cocinero_core.errors import create_error
from cocinero_core.recipe import InstallStep, Recipe, RunStep, ShellStep, parse_mode
from cocinero_core.template import TemplateEngine
from cocinero_core.types import FileSystem

from .types import (
    ConcreteAction,
    ExecutionUnit,
    RunScriptAction,
    ShellCommandAction,
    WriteFileAction,
)

logger = logging.getLogger(__name__)

DEFAULT_DISCLAIMER = "managed by cocinero"


class ActionExecutors:
    """Map execution units to concrete actions, dispatching on step kind."""

    def __init__(
        self,
        filesystem: FileSystem,
        template_engine: TemplateEngine | None = None,
        disclaimer: str | None = DEFAULT_DISCLAIMER,
    ):
        """Initialize executors.

        Args:
            filesystem: File-system collaborator used to read sources
            template_engine: Engine for templated fields
            disclaimer: Marker text installed files are expected to carry;
                a missing marker only logs a warning. None disables the check.
        """
        self._fs = filesystem
        self._templates = template_engine or TemplateEngine()
        self._disclaimer = disclaimer.encode() if disclaimer else None

    def execute(self, unit: ExecutionUnit, recipe: Recipe) -> ConcreteAction:
        """Produce the concrete action for one unit.

        Args:
            unit: Step plus optional variable set
            recipe: Recipe the step belongs to (for path resolution)

        Returns:
            Concrete action

        Raises:
            ProvisionError(UNDEFINED_VARIABLE, SOURCE_NOT_FOUND, INVALID_MODE)
        """
        match unit.step:
            case InstallStep() as step:
                return self.install(step, unit, recipe)
            case ShellStep() as step:
                return self.shell(step, unit, recipe)
            case RunStep() as step:
                return self.run(step, unit, recipe)
        raise TypeError(f"Unsupported step type: {type(unit.step).__name__}")

    def install(self, step: InstallStep, unit: ExecutionUnit, recipe: Recipe) -> WriteFileAction:
        dest = recipe.resolve_path(self._templates.render_optional(step.dest, unit.variables))
        src = recipe.resolve_path(step.src)

        content = self._read_source(src)
        mode = parse_mode(step.mode) if step.mode is not None else self._fs.mode(src)

        if self._disclaimer is not None and self._disclaimer not in content:
            logger.warning(
                'File %s has no "%s" disclaimer', src, self._disclaimer.decode(errors="replace")
            )

        return WriteFileAction(
            step_index=unit.step_index,
            src=src,
            dest=dest,
            content=content,
            mode=mode,
            variables=unit.variables,
            recipe=recipe.name,
        )

    def shell(self, step: ShellStep, unit: ExecutionUnit, recipe: Recipe) -> ShellCommandAction:
        return ShellCommandAction(
            step_index=unit.step_index,
            command=self._templates.render_optional(step.cmd, unit.variables),
            cwd=recipe.base_dir,
            variables=unit.variables,
            recipe=recipe.name,
        )

    def run(self, step: RunStep, unit: ExecutionUnit, recipe: Recipe) -> RunScriptAction:
        script = recipe.resolve_path(step.script)
        if not self._fs.exists(script):
            raise create_error("SOURCE_NOT_FOUND", path=str(script), target=str(script))

        return RunScriptAction(
            step_index=unit.step_index,
            script=script,
            cwd=recipe.base_dir,
            variables=unit.variables,
            recipe=recipe.name,
        )

    def _read_source(self, src: Path) -> bytes:
        if not self._fs.exists(src):
            raise create_error("SOURCE_NOT_FOUND", path=str(src), target=str(src))
        try:
            return self._fs.read_bytes(src)
        except OSError as e:
            raise create_error(
                "SOURCE_NOT_FOUND",
                path=str(src),
                target=str(src),
                detail=e.strerror or str(e),
            ) from e
