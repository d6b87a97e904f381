"""Cocinero command-line interface.

Usage:
    cocinero run ./cookbook
    cocinero plan ./cookbook/nginx/recipe.toml
    cocinero validate ./cookbook
    cocinero export ./cookbook --target ./out
"""

import json
import signal
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from cocinero_core import __version__
from cocinero_core.application import Provisioner
from cocinero_core.engine import RunOutcome
from cocinero_core.errors import ProvisionError
from cocinero_core.types import HookStatus, LogFormat, LogLevel, RunStatus

EXIT_OK = 0
EXIT_ACTION_FAILED = 1
EXIT_BUILD_FAILED = 2
EXIT_HOOK_FAILED = 3
EXIT_CANCELLED = 130


def exit_code(outcome: RunOutcome) -> int:
    """Process exit status for a run outcome."""
    match outcome.status:
        case RunStatus.CANCELLED:
            return EXIT_CANCELLED
        case RunStatus.FAILED:
            return EXIT_ACTION_FAILED
    if outcome.hooks is not None and outcome.hooks.status == HookStatus.FAILED:
        return EXIT_HOOK_FAILED
    return EXIT_OK


def _fail(error: ProvisionError) -> NoReturn:
    click.secho(f"❌ {error}", fg="red", err=True)
    if error.suggestion:
        click.echo(f"   {error.suggestion}", err=True)
    sys.exit(EXIT_BUILD_FAILED)


def _provisioner(ctx: click.Context) -> Provisioner:
    try:
        provisioner = Provisioner(
            config_path=ctx.obj.get("config_path"),
            overrides=ctx.obj.get("overrides"),
        )
    except ProvisionError as e:
        _fail(e)
    provisioner.logger.capture_library_logs()
    return provisioner


@click.group()
@click.version_option(version=__version__, prog_name="cocinero")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to cocinero.yaml (default: auto-detect).",
)
@click.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=None,
    help="Override logging.level.",
)
@click.option(
    "--log-format",
    type=click.Choice([fmt.value for fmt in LogFormat], case_sensitive=False),
    default=None,
    help="Override logging.format.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Cocinero - cook a host from recipes."""
    ctx.ensure_object(dict)

    overrides: dict[str, Any] = {}
    if log_level:
        overrides.setdefault("logging", {})["level"] = log_level
    if log_format:
        overrides.setdefault("logging", {})["format"] = log_format

    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = overrides


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the outcome as JSON.")
@click.pass_context
def run(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Provision this host from a recipe or a cookbook directory."""
    provisioner = _provisioner(ctx)

    try:
        plan = provisioner.build(provisioner.load(path))
    except ProvisionError as e:
        _fail(e)

    def on_interrupt(signum: int, frame: Any) -> None:
        # A second Ctrl-C interrupts the action in progress
        signal.signal(signal.SIGINT, signal.default_int_handler)
        click.secho("Cancelling after the current action...", fg="yellow", err=True)
        provisioner.cancel()

    previous = signal.signal(signal.SIGINT, on_interrupt)
    try:
        outcome = provisioner.run(plan)
    except KeyboardInterrupt:
        click.secho("Interrupted", fg="red", err=True)
        sys.exit(EXIT_CANCELLED)
    finally:
        signal.signal(signal.SIGINT, previous)

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    else:
        _print_outcome(outcome)

    code = exit_code(outcome)
    if code == EXIT_ACTION_FAILED and provisioner.cancel_requested:
        code = EXIT_CANCELLED
    sys.exit(code)


def _print_outcome(outcome: RunOutcome) -> None:
    done = f"{outcome.actions_completed}/{outcome.total_actions} actions"
    match outcome.status:
        case RunStatus.COMPLETED:
            click.secho(f"✅ Cooked ({done})", fg="green", bold=True)
        case RunStatus.CANCELLED:
            click.secho(f"⚠️  Cancelled ({done})", fg="yellow", bold=True)
        case RunStatus.FAILED:
            click.secho(f"❌ Failed ({done})", fg="red", bold=True)
            if outcome.error:
                click.echo(f"   {outcome.error}")
                if outcome.error.suggestion:
                    click.echo(f"   {outcome.error.suggestion}")

    hooks = outcome.hooks
    if hooks is not None and hooks.status == HookStatus.FAILED and hooks.error:
        click.secho(f"❌ {hooks.error}", fg="red")


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Print the plan as JSON.")
@click.pass_context
def plan(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Show what a run would do, without doing it."""
    provisioner = _provisioner(ctx)

    try:
        built = provisioner.build(provisioner.load(path))
    except ProvisionError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(built.to_dict(), indent=2))
        return

    if built.is_empty:
        click.echo("Nothing to do")
        return

    click.secho(f"📋 {', '.join(built.recipes)}", fg="cyan", bold=True)
    for line in built.describe():
        click.echo(line)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.pass_context
def validate(ctx: click.Context, path: Path) -> None:
    """Check recipes for errors without building a plan."""
    provisioner = _provisioner(ctx)

    try:
        recipes = provisioner.load(path)
    except ProvisionError as e:
        _fail(e)

    results = provisioner.validate(recipes)
    valid = True
    for name, result in results.items():
        if result.valid:
            click.secho(f"✅ {name}", fg="green")
        else:
            valid = False
            click.secho(f"❌ {name}", fg="red")
        for issue in result.errors:
            click.echo(f"   • {issue.path}: {issue.message}")
        for issue in result.warnings:
            click.secho(f"   ⚠ {issue.path}: {issue.message}", fg="yellow")

    if not results:
        click.echo("No recipes found")

    sys.exit(EXIT_OK if valid else EXIT_BUILD_FAILED)


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option(
    "--target",
    "-t",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write cook.sh and file payloads here (replaced if it exists).",
)
@click.pass_context
def export(ctx: click.Context, path: Path, target: Path | None) -> None:
    """Export the plan as a standalone bash script."""
    provisioner = _provisioner(ctx)

    try:
        if target is None:
            click.echo(provisioner.exporter.export(provisioner.build(provisioner.load(path))), nl=False)
            return
        script = provisioner.export_script(path, target)
    except ProvisionError as e:
        _fail(e)

    click.secho(f"✅ Wrote {script}", fg="green")


def main() -> None:
    """Console-script entry point."""
    cli(obj={}, prog_name="cocinero")


if __name__ == "__main__":
    main()
