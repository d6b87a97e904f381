"""Plan execution: runner state machine and post-provision hooks."""

from .api import build_plan, run_plan
from .hooks import PostProvisionHookRunner
from .runner import PlanRunner
from .types import ActionResult, HookOutcome, RunOutcome, generate_run_id

__all__ = [
    "build_plan",
    "run_plan",
    "PlanRunner",
    "PostProvisionHookRunner",
    "ActionResult",
    "HookOutcome",
    "RunOutcome",
    "generate_run_id",
]
