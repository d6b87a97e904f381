"""Types for the plan runner and post-provision hooks."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cocinero_core.errors import ProvisionError
from cocinero_core.plan import ConcreteAction
from cocinero_core.types import ActionStatus, HookStatus, RunStatus


@dataclass
class ActionResult:
    """Result of a single action."""

    index: int
    action: ConcreteAction
    status: ActionStatus

    # Process output (shell and run actions)
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""

    duration_ms: int | None = None
    error: ProvisionError | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "kind": self.action.kind.value,
            "step_index": self.action.step_index,
            "recipe": self.action.recipe,
            "target": self.action.target,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "duration_ms": self.duration_ms,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class HookOutcome:
    """Result of the post-provision hooks."""

    status: HookStatus
    packages_installed: list[str] = field(default_factory=list)
    units_reloaded: list[str] = field(default_factory=list)
    error: ProvisionError | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "packages_installed": self.packages_installed,
            "units_reloaded": self.units_reloaded,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class RunOutcome:
    """
    Result of running a plan.

    ``results`` holds one entry per action that was started, so a failed
    or cancelled run shows exactly how far it got.
    """

    # Identity
    run_id: str

    # Status
    status: RunStatus

    # Actions
    results: list[ActionResult] = field(default_factory=list)
    total_actions: int = 0

    # Error (if failed)
    error: ProvisionError | None = None
    failed_index: int | None = None

    # Hooks (None until the hook runner has been consulted)
    hooks: HookOutcome | None = None

    # Timing
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int | None = None

    @property
    def actions_completed(self) -> int:
        return sum(1 for r in self.results if r.status == ActionStatus.COMPLETED)

    @property
    def succeeded(self) -> bool:
        """True when every action ran and the hooks did not fail."""
        if self.status != RunStatus.COMPLETED:
            return False
        return self.hooks is None or self.hooks.status != HookStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "total_actions": self.total_actions,
            "actions_completed": self.actions_completed,
            "failed_index": self.failed_index,
            "error": self.error.to_dict() if self.error else None,
            "results": [r.to_dict() for r in self.results],
            "hooks": self.hooks.to_dict() if self.hooks else None,
        }


def generate_run_id() -> str:
    """Generate a unique run ID."""
    return f"run-{uuid.uuid4().hex[:12]}"
