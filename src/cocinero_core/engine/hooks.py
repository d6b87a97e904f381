"""Post-provision hooks: package installation and service reloads."""

import subprocess

from cocinero_core.errors import create_error
from cocinero_core.logging import HookLogger
from cocinero_core.plan import Plan
from cocinero_core.types import HookStatus, PackageManager, RunStatus, ServiceControl

from .types import HookOutcome, RunOutcome


def _describe(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        stderr = (error.stderr or "").strip()
        text = f"exit status {error.returncode}"
        return f"{text}: {stderr}" if stderr else text
    if isinstance(error, OSError):
        return error.strerror or str(error)
    return str(error)


class PostProvisionHookRunner:
    """
    Run the hooks of a completed plan.

    1. Install all packages with one package-manager call
    2. For each unit in order: enable it, then reload it

    The first failing hook stops the rest. Already-applied steps and hooks
    are left as they are.
    """

    def __init__(
        self,
        packages: PackageManager,
        services: ServiceControl,
    ):
        """Initialize hook runner.

        Args:
            packages: Package-manager collaborator
            services: Service-control collaborator
        """
        self._packages = packages
        self._services = services

    def run(
        self,
        plan: Plan,
        outcome: RunOutcome,
        logger: HookLogger | None = None,
    ) -> HookOutcome:
        """Run hooks for plan if its run completed.

        Args:
            plan: Plan that was run
            outcome: Outcome of the run
            logger: Optional hook logger

        Returns:
            HookOutcome (SKIPPED unless the run is COMPLETED)
        """
        if outcome.status != RunStatus.COMPLETED:
            if logger and (plan.packages or plan.systemd_units):
                logger.skipped(f"run {outcome.status.value}")
            return HookOutcome(status=HookStatus.SKIPPED)

        result = HookOutcome(status=HookStatus.COMPLETED)

        if plan.packages:
            packages = list(plan.packages)
            if logger:
                logger.installing(packages)
            try:
                self._packages.install(packages)
            except Exception as e:
                return self._failed(result, "install packages", " ".join(packages), e, logger)
            result.packages_installed = packages

        for unit in plan.systemd_units:
            if logger:
                logger.reloading(unit)
            try:
                self._services.enable(unit)
            except Exception as e:
                return self._failed(result, f"enable {unit}", unit, e, logger)
            try:
                self._services.reload(unit)
            except Exception as e:
                return self._failed(result, f"reload {unit}", unit, e, logger)
            result.units_reloaded.append(unit)

        if logger and (plan.packages or plan.systemd_units):
            logger.completed()
        return result

    def _failed(
        self,
        result: HookOutcome,
        hook: str,
        target: str,
        error: Exception,
        logger: HookLogger | None,
    ) -> HookOutcome:
        if logger:
            logger.failed(hook, error)
        result.status = HookStatus.FAILED
        result.error = create_error(
            "HOOK_FAILED",
            hook=hook,
            target=target,
            detail=_describe(error),
        )
        return result
