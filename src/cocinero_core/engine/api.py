"""Entry points: build a plan from a recipe, run a plan."""

from collections.abc import Iterable

from cocinero_core.logging import ProvisionLogger
from cocinero_core.plan import ActionExecutors, Plan, PlanBuilder
from cocinero_core.recipe import Recipe
from cocinero_core.system import (
    AptPackageManager,
    LocalFileSystem,
    SubprocessRunner,
    SystemdServiceControl,
)
from cocinero_core.types import FileSystem, PackageManager, ProcessRunner, ServiceControl

from .hooks import PostProvisionHookRunner
from .runner import PlanRunner
from .types import RunOutcome


def build_plan(
    recipe: Recipe | Iterable[Recipe],
    filesystem: FileSystem | None = None,
    logger: ProvisionLogger | None = None,
) -> Plan:
    """Build the plan for one recipe or several.

    Raises:
        ProvisionError on the first step that cannot be planned
    """
    builder = PlanBuilder(ActionExecutors(filesystem or LocalFileSystem()), logger=logger)
    if isinstance(recipe, Recipe):
        return builder.build(recipe)
    return builder.build_many(recipe)


def run_plan(
    plan: Plan,
    filesystem: FileSystem | None = None,
    process: ProcessRunner | None = None,
    packages: PackageManager | None = None,
    services: ServiceControl | None = None,
    logger: ProvisionLogger | None = None,
    runner: PlanRunner | None = None,
) -> RunOutcome:
    """Run plan, then its hooks if every action completed.

    Action and hook failures are reported in the outcome, never raised.

    Args:
        plan: Plan to run
        filesystem: File-system collaborator (default: local)
        process: Process collaborator (default: subprocess)
        packages: Package manager (default: apt-get)
        services: Service control (default: systemctl)
        logger: Optional logger
        runner: Pre-built runner, e.g. one a signal handler can cancel

    Returns:
        RunOutcome with hook outcome attached
    """
    process = process or SubprocessRunner()
    runner = runner or PlanRunner(filesystem or LocalFileSystem(), process, logger=logger)
    hooks = PostProvisionHookRunner(
        packages or AptPackageManager(process),
        services or SystemdServiceControl(process),
    )

    outcome = runner.run(plan)
    hook_logger = logger.run(outcome.run_id).hooks() if logger else None
    outcome.hooks = hooks.run(plan, outcome, logger=hook_logger)
    return outcome
