"""Recipe data model types."""

from dataclasses import dataclass, field
from pathlib import Path

from cocinero_core.types import StepKind

VariableSet = dict[str, str]


@dataclass(frozen=True)
class InstallStep:
    """Copy a file into place. Also spelled ``kind = "copy"``.

    ``src`` and ``mode`` are literal; ``dest`` is rendered when ``template``
    is set. Without ``mode`` the source file's permissions are kept.
    """

    src: str
    dest: str
    mode: str | None = None
    template: bool = False

    kind = StepKind.INSTALL


@dataclass(frozen=True)
class ShellStep:
    """Run a command string through the system shell."""

    cmd: str
    template: bool = False

    kind = StepKind.SHELL


@dataclass(frozen=True)
class RunStep:
    """Execute a script file.

    The script path and contents are never rendered; ``template`` only
    repeats the invocation once per variable set.
    """

    script: str
    template: bool = False

    kind = StepKind.RUN


Step = InstallStep | ShellStep | RunStep


@dataclass
class Recipe:
    """Complete parsed recipe document."""

    name: str
    packages: list[str] = field(default_factory=list)
    systemd_units: list[str] = field(default_factory=list)
    template_vars: list[VariableSet] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)

    # Source
    base_dir: Path = field(default_factory=Path.cwd)
    source_path: Path | None = None

    def resolve_path(self, path: str) -> Path:
        """Resolve a step path against the recipe directory.

        Args:
            path: Path as written in the recipe

        Returns:
            Absolute paths unchanged, relative paths joined to base_dir
        """
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.base_dir / candidate
