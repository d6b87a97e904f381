"""Execution plan builder."""

from collections.abc import Iterable

from cocinero_core.errors import ProvisionError
from cocinero_core.logging import ProvisionLogger
from cocinero_core.recipe import Recipe
from cocinero_core.types import LogLevel

from .executors import ActionExecutors
from .resolver import resolve
from .types import ConcreteAction, Plan


class PlanBuilder:
    """
    Turn recipes into plans.

    For each step in recipe order:
    1. Expand it into execution units (one, or one per variable set)
    2. Map each unit to a concrete action
    3. Append the action to the plan

    Building is atomic: the first failure propagates and no partial plan
    is ever returned, so a configuration defect blocks the whole run
    before anything touches the host.
    """

    def __init__(
        self,
        executors: ActionExecutors,
        logger: ProvisionLogger | None = None,
    ):
        """Initialize plan builder.

        Args:
            executors: Action executors for all step kinds
            logger: Optional logger
        """
        self._executors = executors
        self._logger = logger

    def build(self, recipe: Recipe) -> Plan:
        """Build the plan for one recipe.

        Args:
            recipe: Parsed recipe

        Returns:
            Plan with actions in execution order

        Raises:
            ProvisionError annotated with the failing step's index and kind
        """
        actions: list[ConcreteAction] = []

        for step_index, step in enumerate(recipe.steps):
            for unit in resolve(step, recipe.template_vars, step_index=step_index):
                try:
                    actions.append(self._executors.execute(unit, recipe))
                except ProvisionError as e:
                    raise e.with_context(
                        step_index=step_index,
                        step_kind=step.kind.value,
                        recipe=recipe.name,
                    ) from e

        plan = Plan(
            actions=tuple(actions),
            packages=tuple(recipe.packages),
            systemd_units=tuple(recipe.systemd_units),
            recipes=(recipe.name,),
        )

        if self._logger:
            self._logger._log(
                LogLevel.DEBUG,
                "plan",
                f"Recipe '{recipe.name}' planned: {len(recipe.steps)} steps -> {len(plan)} actions",
                {"recipe": recipe.name, "steps": len(recipe.steps), "actions": len(plan)},
            )

        return plan

    def build_many(self, recipes: Iterable[Recipe]) -> Plan:
        """Build one plan for several recipes, in the given order.

        Any recipe failing to build fails the whole cookbook.
        """
        return Plan.concat(self.build(recipe) for recipe in recipes)
