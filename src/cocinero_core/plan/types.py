"""Plan data types: execution units, concrete actions and plans."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cocinero_core.recipe import Step, VariableSet
from cocinero_core.recipe.modes import format_mode
from cocinero_core.types import ActionKind


@dataclass(frozen=True)
class ExecutionUnit:
    """A step paired with zero or one variable set, the unit of expansion."""

    step: Step
    step_index: int
    variables: VariableSet | None = None


@dataclass(frozen=True)
class WriteFileAction:
    """Write ``content`` to ``dest`` and set its permissions to ``mode``."""

    step_index: int
    src: Path
    dest: Path
    content: bytes = field(repr=False)
    mode: int
    variables: VariableSet | None = None
    recipe: str | None = None

    kind = ActionKind.WRITE_FILE
    step_kind = "install"

    @property
    def target(self) -> str:
        return str(self.dest)

    def describe(self) -> str:
        return f"install {self.src} -> {self.dest} (mode {format_mode(self.mode)})"


@dataclass(frozen=True)
class ShellCommandAction:
    """Run ``command`` through the system shell from ``cwd``."""

    step_index: int
    command: str
    cwd: Path | None = None
    variables: VariableSet | None = None
    recipe: str | None = None

    kind = ActionKind.SHELL_COMMAND
    step_kind = "shell"

    @property
    def target(self) -> str:
        return self.command

    def describe(self) -> str:
        return f"shell: {self.command}"


@dataclass(frozen=True)
class RunScriptAction:
    """Make ``script`` executable if needed, then execute it from ``cwd``."""

    step_index: int
    script: Path
    cwd: Path | None = None
    variables: VariableSet | None = None
    recipe: str | None = None

    kind = ActionKind.RUN_SCRIPT
    step_kind = "run"

    @property
    def target(self) -> str:
        return str(self.script)

    def describe(self) -> str:
        return f"run {self.script}"


ConcreteAction = WriteFileAction | ShellCommandAction | RunScriptAction


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True)
class Plan:
    """The complete ordered sequence of actions for one provisioning run.

    Also carries what the post-provision hooks need, so a plan can be run
    without the recipe it was built from.
    """

    actions: tuple[ConcreteAction, ...] = ()
    packages: tuple[str, ...] = ()
    systemd_units: tuple[str, ...] = ()
    recipes: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.actions)

    def __iter__(self) -> Iterator[ConcreteAction]:
        return iter(self.actions)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing at all to do, hooks included."""
        return not (self.actions or self.packages or self.systemd_units)

    @classmethod
    def concat(cls, plans: Iterable["Plan"]) -> "Plan":
        """Join plans in order.

        Actions keep their order; packages and units are deduplicated,
        keeping first occurrence.
        """
        plans = list(plans)
        return cls(
            actions=tuple(action for plan in plans for action in plan.actions),
            packages=_unique(pkg for plan in plans for pkg in plan.packages),
            systemd_units=_unique(unit for plan in plans for unit in plan.systemd_units),
            recipes=tuple(name for plan in plans for name in plan.recipes),
        )

    def describe(self) -> list[str]:
        """Numbered, human-readable listing of the plan."""
        lines = []
        for i, action in enumerate(self.actions, start=1):
            origin = f"{action.recipe}#{action.step_index}" if action.recipe else f"#{action.step_index}"
            lines.append(f"{i:>3}. [{origin}] {action.describe()}")
        if self.packages:
            lines.append(f"  +  install packages: {' '.join(self.packages)}")
        for unit in self.systemd_units:
            lines.append(f"  +  enable and reload {unit}")
        return lines

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output (file contents are omitted)."""
        actions: list[dict[str, Any]] = []
        for action in self.actions:
            entry: dict[str, Any] = {
                "kind": action.kind.value,
                "step_index": action.step_index,
                "recipe": action.recipe,
                "target": action.target,
                "variables": action.variables,
            }
            if isinstance(action, WriteFileAction):
                entry["src"] = str(action.src)
                entry["mode"] = format_mode(action.mode)
                entry["size"] = len(action.content)
            actions.append(entry)
        return {
            "recipes": list(self.recipes),
            "actions": actions,
            "packages": list(self.packages),
            "systemd_units": list(self.systemd_units),
        }
