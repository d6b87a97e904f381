"""Shared plan fixtures."""

from pathlib import Path

import pytest

from cocinero_core.plan import Plan, RunScriptAction, ShellCommandAction, WriteFileAction


@pytest.fixture
def sample_plan() -> Plan:
    """One action of each kind plus hook data, all from recipe 'base'."""
    return Plan(
        actions=(
            WriteFileAction(
                step_index=0,
                src=Path("/r/motd"),
                dest=Path("/etc/motd"),
                content=b"hello",
                mode=0o644,
                recipe="base",
            ),
            ShellCommandAction(step_index=1, command="echo hi", recipe="base"),
            RunScriptAction(step_index=2, script=Path("/r/go.sh"), recipe="base"),
        ),
        packages=("curl",),
        systemd_units=("nginx.service",),
        recipes=("base",),
    )
