"""End-to-end provisioning against the real file system and shell.

Packages and services stay faked; everything else touches tmp_path.
"""

import stat

import pytest

from cocinero_core.engine import build_plan, run_plan
from cocinero_core.errors import ProvisionError
from cocinero_core.recipe import load_recipe
from cocinero_core.system import LocalFileSystem, SubprocessRunner
from cocinero_core.types import HookStatus, RunStatus

pytestmark = pytest.mark.integration


@pytest.fixture
def provision(fake_packages, fake_services):
    """Load, build and run a recipe file on the local host."""

    def _provision(path):
        recipe = load_recipe(path)
        plan = build_plan(recipe, filesystem=LocalFileSystem())
        return run_plan(
            plan,
            filesystem=LocalFileSystem(),
            process=SubprocessRunner(),
            packages=fake_packages,
            services=fake_services,
        )

    return _provision


def file_mode(path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


def test_install_with_explicit_mode(write_recipe, provision, tmp_path):
    dest = tmp_path / "out" / "app.sh"
    path = write_recipe(
        f"""
[[steps]]
kind = "install"
src = "app.sh"
dest = "{dest}"
mode = "0755"
""",
        files={"app.sh": "#!/bin/sh\n# managed by cocinero\n"},
    )
    (path.parent / "app.sh").chmod(0o644)

    outcome = provision(path)

    assert outcome.status == RunStatus.COMPLETED
    assert dest.read_text() == "#!/bin/sh\n# managed by cocinero\n"
    assert file_mode(dest) == 0o755


def test_install_without_mode_keeps_source_mode(write_recipe, provision, tmp_path):
    dest = tmp_path / "out" / "secret.conf"
    path = write_recipe(
        f"""
[[steps]]
kind = "copy"
src = "secret.conf"
dest = "{dest}"
""",
        files={"secret.conf": "managed by cocinero\n"},
    )
    (path.parent / "secret.conf").chmod(0o600)

    provision(path)

    assert file_mode(dest) == 0o600


def test_templated_shell_runs_once_per_variable_set(write_recipe, provision, recipe_dir):
    path = write_recipe(
        """
template_vars = [{ username = "alice" }, { username = "bob" }]

[[steps]]
kind = "shell"
cmd = "echo {{username}} >> names.txt"
template = true
"""
    )

    outcome = provision(path)

    assert outcome.status == RunStatus.COMPLETED
    assert outcome.total_actions == 2
    assert (recipe_dir / "names.txt").read_text() == "alice\nbob\n"


def test_undefined_variable_writes_nothing(write_recipe, tmp_path):
    first = tmp_path / "out" / "first.txt"
    path = write_recipe(
        f"""
template_vars = [{{ username = "alice" }}]

[[steps]]
kind = "install"
src = "first.txt"
dest = "{first}"

[[steps]]
kind = "shell"
cmd = "echo {{{{ missing }}}}"
template = true
""",
        files={"first.txt": "managed by cocinero\n"},
    )

    with pytest.raises(ProvisionError) as exc_info:
        build_plan(load_recipe(path), filesystem=LocalFileSystem())

    assert exc_info.value.code == "UNDEFINED_VARIABLE"
    assert exc_info.value.step_index == 1
    assert not first.exists()


def test_packages_installed_once_after_steps(write_recipe, provision, fake_packages, fake_services):
    path = write_recipe(
        """
packages = ["curl"]
systemd = ["nginx.service"]

[[steps]]
kind = "shell"
cmd = "true"
"""
    )

    outcome = provision(path)

    assert outcome.status == RunStatus.COMPLETED
    assert fake_packages.installs == [["curl"]]
    assert fake_services.calls == [("enable", "nginx.service"), ("reload", "nginx.service")]
    assert outcome.hooks.status == HookStatus.COMPLETED


def test_later_step_sees_earlier_effects(write_recipe, provision, recipe_dir):
    path = write_recipe(
        """
[[steps]]
kind = "shell"
cmd = "mkdir -p build"

[[steps]]
kind = "shell"
cmd = "touch build/done"
"""
    )

    outcome = provision(path)

    assert outcome.status == RunStatus.COMPLETED
    assert (recipe_dir / "build" / "done").exists()


def test_run_step_makes_script_executable(write_recipe, provision, recipe_dir):
    path = write_recipe(
        """
[[steps]]
kind = "run"
script = "setup.sh"
""",
        files={"setup.sh": "#!/bin/sh\necho ran > ran.txt\n"},
    )
    script = recipe_dir / "setup.sh"
    script.chmod(0o644)

    outcome = provision(path)

    assert outcome.status == RunStatus.COMPLETED
    assert file_mode(script) & stat.S_IXUSR
    assert (recipe_dir / "ran.txt").read_text() == "ran\n"


def test_failing_command_stops_the_run(write_recipe, provision, recipe_dir, fake_packages):
    path = write_recipe(
        """
packages = ["curl"]

[[steps]]
kind = "shell"
cmd = "echo oops >&2; exit 3"

[[steps]]
kind = "shell"
cmd = "touch never"
"""
    )

    outcome = provision(path)

    assert outcome.status == RunStatus.FAILED
    assert outcome.failed_index == 0
    assert outcome.error.code == "ACTION_FAILED"
    assert outcome.error.exit_code == 3
    assert "oops" in outcome.error.detail
    assert not (recipe_dir / "never").exists()
    assert fake_packages.installs == []
    assert outcome.hooks.status == HookStatus.SKIPPED


@pytest.mark.parametrize(
    "step",
    [
        'kind = "shell"\ncmd = "echo {{x}}"',
        'kind = "install"\nsrc = "motd"\ndest = "out/{{x}}"',
    ],
)
def test_unusable_value_fails_the_run(write_recipe, provision, step):
    path = write_recipe(
        'template_vars = [{ x = "a\\u0000b" }]\n\n[[steps]]\n' + step + "\ntemplate = true\n",
        files={"motd": "managed by cocinero\n"},
    )

    outcome = provision(path)

    assert outcome.status == RunStatus.FAILED
    assert outcome.failed_index == 0
    assert outcome.error.code == "INTERNAL_ERROR"
    assert "null byte" in outcome.error.detail
    assert outcome.hooks.status == HookStatus.SKIPPED
