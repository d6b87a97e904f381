"""Execution planning: expand recipe steps into concrete actions."""

from .builder import PlanBuilder
from .executors import DEFAULT_DISCLAIMER, ActionExecutors
from .resolver import resolve
from .script import ScriptExporter
from .types import (
    ConcreteAction,
    ExecutionUnit,
    Plan,
    RunScriptAction,
    ShellCommandAction,
    WriteFileAction,
)

__all__ = [
    "PlanBuilder",
    "ActionExecutors",
    "DEFAULT_DISCLAIMER",
    "resolve",
    "ScriptExporter",
    "ExecutionUnit",
    "ConcreteAction",
    "WriteFileAction",
    "ShellCommandAction",
    "RunScriptAction",
    "Plan",
]
