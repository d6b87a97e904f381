"""Plan runner: executes a plan's actions in order."""

import threading
import time
from datetime import UTC, datetime

from cocinero_core.errors import ErrorFactory, ProvisionError, create_error, get_error_factory
from cocinero_core.logging import ActionLogger, ProvisionLogger, RunLogger
from cocinero_core.plan import (
    ConcreteAction,
    Plan,
    RunScriptAction,
    ShellCommandAction,
    WriteFileAction,
)
from cocinero_core.types import ActionStatus, FileSystem, ProcessResult, ProcessRunner, RunStatus

from .types import ActionResult, RunOutcome, generate_run_id


class PlanRunner:
    """
    Run a plan, one action at a time.

    State machine:
        IDLE -> RUNNING -> COMPLETED | FAILED | CANCELLED

    The first failing action moves the run to FAILED and nothing after it
    runs. There are no retries and nothing is rolled back: the outcome
    reports which actions were applied so an operator can recover by hand.

    A runner instance runs a single plan.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        process: ProcessRunner,
        logger: ProvisionLogger | None = None,
        error_factory: ErrorFactory | None = None,
    ):
        """Initialize plan runner.

        Args:
            filesystem: File-system collaborator for writes and chmod
            process: Process collaborator for commands and scripts
            logger: Optional logger
            error_factory: Factory for converting collaborator exceptions
        """
        self._fs = filesystem
        self._process = process
        self._logger = logger
        self._error_factory = error_factory or get_error_factory()
        self._state = RunStatus.IDLE
        self._cancelled = threading.Event()

    @property
    def state(self) -> RunStatus:
        return self._state

    def cancel(self) -> None:
        """Request cancellation.

        Safe to call from another thread or a signal handler. The action in
        progress finishes; no further action starts.
        """
        self._cancelled.set()

    @property
    def cancel_requested(self) -> bool:
        return self._cancelled.is_set()

    def run(self, plan: Plan, run_id: str | None = None) -> RunOutcome:
        """Execute every action of plan in order.

        Args:
            plan: Plan to execute
            run_id: Optional run identifier (generated if omitted)

        Returns:
            RunOutcome in a terminal state

        Raises:
            ProvisionError(INTERNAL_ERROR) if this runner was already used
        """
        if self._state != RunStatus.IDLE:
            raise create_error(
                "INTERNAL_ERROR",
                detail=f"PlanRunner already used (state: {self._state.value})",
            )

        self._state = RunStatus.RUNNING
        outcome = RunOutcome(
            run_id=run_id or generate_run_id(),
            status=RunStatus.RUNNING,
            total_actions=len(plan),
            started_at=datetime.now(UTC),
        )
        start = time.monotonic()
        run_log = self._logger.run(outcome.run_id) if self._logger else None

        if run_log:
            run_log.started(len(plan))

        status = RunStatus.COMPLETED
        for index, action in enumerate(plan.actions):
            if self._cancelled.is_set():
                status = RunStatus.CANCELLED
                break

            action_log = run_log.action(index, len(plan)) if run_log else None
            result = self._run_action(index, action, action_log)
            outcome.results.append(result)

            if result.status == ActionStatus.FAILED:
                status = RunStatus.FAILED
                outcome.error = result.error
                outcome.failed_index = index
                break

        self._state = status
        outcome.status = status
        outcome.completed_at = datetime.now(UTC)
        outcome.duration_ms = int((time.monotonic() - start) * 1000)

        if run_log:
            self._log_finished(run_log, outcome)

        return outcome

    def _run_action(
        self,
        index: int,
        action: ConcreteAction,
        action_log: ActionLogger | None,
    ) -> ActionResult:
        if action_log:
            action_log.started(action.describe(), action.step_index, action.kind.value)

        start = time.monotonic()
        result = ActionResult(index=index, action=action, status=ActionStatus.COMPLETED)

        try:
            process_result = self._apply(action)
        except Exception as e:
            result.status = ActionStatus.FAILED
            result.error = self._error_factory.from_exception(
                e,
                step_index=action.step_index,
                step_kind=action.step_kind,
                target=action.target,
                recipe=action.recipe,
            )
        else:
            if process_result is not None:
                result.exit_code = process_result.exit_code
                result.stdout = process_result.stdout
                result.stderr = process_result.stderr
                if action_log:
                    action_log.output(process_result.stdout, process_result.stderr)
                if not process_result.success:
                    result.status = ActionStatus.FAILED
                    result.error = self._exit_error(action, process_result)

        result.duration_ms = int((time.monotonic() - start) * 1000)

        if action_log:
            if result.error:
                action_log.failed(result.error)
            else:
                action_log.completed(result.duration_ms)

        return result

    def _apply(self, action: ConcreteAction) -> ProcessResult | None:
        """Perform the side effect of one action."""
        match action:
            case WriteFileAction():
                self._fs.write(action.dest, action.content, action.mode)
                return None
            case ShellCommandAction():
                return self._process.run(action.command, cwd=action.cwd, shell=True)
            case RunScriptAction():
                if not self._fs.is_executable(action.script):
                    self._fs.set_executable(action.script)
                return self._process.run([str(action.script)], cwd=action.cwd)
        raise TypeError(f"Unsupported action type: {type(action).__name__}")

    def _exit_error(self, action: ConcreteAction, process_result: ProcessResult) -> ProvisionError:
        stderr = process_result.stderr.strip()
        detail = f"exit status {process_result.exit_code}"
        if stderr:
            detail += f": {stderr}"
        return create_error(
            "ACTION_FAILED",
            target=action.target,
            detail=detail,
            step_index=action.step_index,
            step_kind=action.step_kind,
            recipe=action.recipe,
            exit_code=process_result.exit_code,
        )

    def _log_finished(self, run_log: RunLogger, outcome: RunOutcome) -> None:
        duration_ms = outcome.duration_ms or 0
        match outcome.status:
            case RunStatus.COMPLETED:
                run_log.completed(duration_ms, outcome.actions_completed)
            case RunStatus.FAILED:
                assert outcome.error is not None
                run_log.failed(outcome.error, duration_ms, outcome.actions_completed)
            case RunStatus.CANCELLED:
                run_log.cancelled(
                    outcome.actions_completed,
                    outcome.total_actions - len(outcome.results),
                )
