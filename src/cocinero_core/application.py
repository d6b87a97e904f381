"""Cocinero application - wires configuration, logging and collaborators.

``Provisioner`` is the entry point used by the CLI. Tests build one with
fake collaborators; everything else uses the local-host defaults.
"""

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO

from cocinero_core.config import CocineroConfig, ConfigLoader
from cocinero_core.engine import PlanRunner, PostProvisionHookRunner, RunOutcome
from cocinero_core.errors import ErrorFactory, ErrorRegistry
from cocinero_core.logging import LogConfig, ProvisionLogger
from cocinero_core.plan import ActionExecutors, Plan, PlanBuilder, ScriptExporter
from cocinero_core.recipe import Recipe, RecipeValidator, load_recipes
from cocinero_core.system import (
    AptPackageManager,
    LocalFileSystem,
    SubprocessRunner,
    SystemdServiceControl,
)
from cocinero_core.template import TemplateEngine
from cocinero_core.types import (
    FileSystem,
    PackageManager,
    ProcessRunner,
    ServiceControl,
    ValidationResult,
)


class Provisioner:
    """
    Cocinero application orchestrator.

    Initialization sequence:
    1. Config loading
    2. Logger setup
    3. Error registry and factory
    4. Host collaborators (file system, processes, packages, services)
    5. Template engine, executors and plan builder
    6. Script exporter
    """

    def __init__(
        self,
        config_path: str | Path | None = None,
        config: CocineroConfig | None = None,
        overrides: dict[str, Any] | None = None,
        log_output: TextIO | None = None,
        filesystem: FileSystem | None = None,
        process: ProcessRunner | None = None,
        packages: PackageManager | None = None,
        services: ServiceControl | None = None,
    ):
        """Initialize application.

        Args:
            config_path: Path to config file (optional)
            config: Ready-made configuration; skips loading when given
            overrides: Values merged over the loaded configuration
            log_output: Output stream for logs (default: sys.stderr)
            filesystem: File-system collaborator (default: local)
            process: Process collaborator (default: subprocess)
            packages: Package manager (default: from config)
            services: Service control (default: from config)
        """
        if config is None:
            config = ConfigLoader().load(config_path, overrides=overrides)
        self.config = config

        log = config.logging
        self.logger = ProvisionLogger(
            LogConfig(
                level=log.level,
                format=log.format,
                show_context=log.options.show_context,
                show_output=log.options.show_output,
                truncate_at=log.options.truncate_at,
                components={
                    "plan": log.components.plan,
                    "run": log.components.run,
                    "action": log.components.action,
                    "hook": log.components.hook,
                },
                output=log_output or sys.stderr,
            )
        )

        self.error_registry = ErrorRegistry()
        self.error_factory = ErrorFactory(registry=self.error_registry)

        execution = config.execution
        self.filesystem = filesystem or LocalFileSystem()
        self.process = process or SubprocessRunner(
            shell=execution.shell,
            timeout=execution.action_timeout,
            capture_output=execution.capture_output,
        )
        self.packages = packages or AptPackageManager(
            self.process, install_command=config.packages.install_command
        )
        self.services = services or SystemdServiceControl(
            self.process, systemctl=config.services.systemctl
        )

        self.template_engine = TemplateEngine()
        self.executors = ActionExecutors(
            self.filesystem,
            template_engine=self.template_engine,
            disclaimer=config.recipes.disclaimer,
        )
        self.builder = PlanBuilder(self.executors, logger=self.logger)
        self.validator = RecipeValidator()
        self.exporter = ScriptExporter(
            install_command=config.packages.install_command,
            systemctl=config.services.systemctl,
        )

        self._runner: PlanRunner | None = None

    def load(self, path: str | Path) -> list[Recipe]:
        """Load a recipe file, a recipe directory or a cookbook.

        Raises:
            ProvisionError(RECIPE_NOT_FOUND, PARSE_DEFECT)
        """
        return load_recipes(path, filename=self.config.recipes.filename)

    def validate(self, recipes: Iterable[Recipe]) -> dict[str, ValidationResult]:
        """Validate recipes without building a plan.

        Returns:
            Mapping of recipe name to validation result
        """
        return {recipe.name: self.validator.validate(recipe) for recipe in recipes}

    def build(self, recipes: Recipe | Iterable[Recipe]) -> Plan:
        """Build one plan for the given recipes.

        Raises:
            ProvisionError from the first step that cannot be planned
        """
        if isinstance(recipes, Recipe):
            return self.builder.build(recipes)
        return self.builder.build_many(recipes)

    def run(self, plan: Plan) -> RunOutcome:
        """Run plan and, if it completes, its post-provision hooks.

        Action and hook failures are reported in the outcome.
        """
        self._runner = PlanRunner(
            self.filesystem,
            self.process,
            logger=self.logger,
            error_factory=self.error_factory,
        )
        hooks = PostProvisionHookRunner(self.packages, self.services)

        outcome = self._runner.run(plan)
        outcome.hooks = hooks.run(plan, outcome, logger=self.logger.run(outcome.run_id).hooks())
        return outcome

    def provision(self, path: str | Path) -> RunOutcome:
        """Load, build and run in one go.

        Raises:
            ProvisionError if loading or building fails (nothing has run)
        """
        return self.run(self.build(self.load(path)))

    def export_script(self, path: str | Path, target_dir: str | Path) -> Path:
        """Build the plan for path and write it out as a shell script.

        Returns:
            Path of the written script
        """
        return self.exporter.export_to(self.build(self.load(path)), target_dir)

    def cancel(self) -> None:
        """Stop the current run before its next action."""
        if self._runner is not None:
            self._runner.cancel()

    @property
    def cancel_requested(self) -> bool:
        return self._runner is not None and self._runner.cancel_requested
