"""Expansion of steps into execution units."""

from collections.abc import Sequence

from cocinero_core.recipe import Step, VariableSet

from .types import ExecutionUnit


def resolve(
    step: Step,
    template_vars: Sequence[VariableSet],
    step_index: int = 0,
) -> list[ExecutionUnit]:
    """Expand a step into the units it executes as.

    A plain step runs once with no variables. A templated step runs once
    per variable set, in order, and not at all when there are none.

    Args:
        step: Recipe step
        template_vars: The recipe's variable sets
        step_index: Position of the step in the recipe

    Returns:
        Execution units in execution order
    """
    if not step.template:
        return [ExecutionUnit(step=step, step_index=step_index)]

    return [
        ExecutionUnit(step=step, step_index=step_index, variables=variables)
        for variables in template_vars
    ]
