"""
Command-line interface for oslaunch.

    oslaunch run filemanager ~/projects/readme.md
    oslaunch run shell /var/log
    oslaunch run custom --command 'code --goto "${resource_path}"' src/main.py
    oslaunch run systemapp --text "https://example.com"
    oslaunch classify "/etc/hosts" --type file

Exit codes for ``run``: 0 when every process started, 1 when a target could
not be interpreted or the action is not available on this platform, 2 when a
process could not be started.
"""

from typing import Optional, Sequence

import click

from oslaunch.__version__ import __version__
from oslaunch.actions import ACTIONS, classify_for_action, run_for_text
from oslaunch.launcher import ProcessLauncher
from oslaunch.logging_config import setup_logging
from oslaunch.models import (
    Action,
    CustomCommand,
    FailureKind,
    Invalid,
    LaunchResult,
    ResourceType,
    ValidationOutcome,
    ValidPath,
)
from oslaunch.platform import current
from oslaunch.validators import classify
from oslaunch.variables import describe_variables, environment_lookup

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_SPAWN_FAILURE = 2

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _describe_outcome(outcome: ValidationOutcome) -> str:
    if isinstance(outcome, ValidPath):
        kind = "directory" if outcome.path.is_dir() else "file"
        return f"{kind}: {outcome.path}"
    if isinstance(outcome, Invalid):
        return f"invalid ({outcome.reason.value}): {outcome.message}"
    return f"url: {outcome.url}"


def _report(ctx: click.Context, result: LaunchResult) -> None:
    for warning in result.warnings:
        click.echo(f"warning: {warning}", err=True)
    if result.success:
        click.echo(result.message)
        ctx.exit(EXIT_OK)
    click.echo(result.message, err=True)
    ctx.exit(EXIT_SPAWN_FAILURE if result.failure_kind is FailureKind.SPAWN else EXIT_INVALID)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log file level (default: INFO).",
)
@click.version_option(__version__, prog_name="oslaunch")
def cli(log_level: Optional[str]) -> None:
    """Open file managers, applications and shells for paths and URLs."""
    setup_logging(log_level=log_level)


@cli.command()
@click.argument("action", type=click.Choice([a.value for a in Action], case_sensitive=False))
@click.argument("targets", nargs=-1, required=True)
@click.option("--command", "-c", "command", help="Command template for the custom action.")
@click.option(
    "--select/--no-select",
    default=None,
    help="Highlight files in the file manager (default: on).",
)
@click.option("--wrap/--no-wrap", default=False, help="Quote substituted values when needed.")
@click.option("--escape/--no-escape", default=False, help="Escape shell metacharacters.")
@click.option(
    "--type",
    "resource_type",
    type=click.Choice([t.value for t in ResourceType]),
    default=ResourceType.EITHER.value,
    help="Kind of entry the custom command accepts.",
)
@click.option("--allow-url", is_flag=True, help="Let the custom command accept URLs.")
@click.option(
    "--text",
    "as_text",
    is_flag=True,
    help="Treat the targets as one raw text selection.",
)
@click.option(
    "--pass-text",
    is_flag=True,
    help="Run the custom command on a temporary file holding the text.",
)
@click.pass_context
def run(
    ctx: click.Context,
    action: str,
    targets: Sequence[str],
    command: Optional[str],
    select: Optional[bool],
    wrap: bool,
    escape: bool,
    resource_type: str,
    allow_url: bool,
    as_text: bool,
    pass_text: bool,
) -> None:
    """Perform ACTION (filemanager, systemapp, shell, custom) on TARGETS."""
    selected = Action(action.lower())
    custom_command = None
    if selected is Action.CUSTOM:
        if not command:
            raise click.UsageError("--command is required for the custom action")
        custom_command = CustomCommand(
            command,
            wrap_in_quotes=wrap,
            escape_special_chars=escape,
            resource_type=ResourceType(resource_type),
            accepts_urls=allow_url,
            pass_selected_text=pass_text,
        )

    capabilities = current()
    launcher = ProcessLauncher(capabilities)

    if as_text:
        outcome = run_for_text(
            selected,
            " ".join(targets),
            custom_command=custom_command,
            select_file=select,
            lookup=environment_lookup,
            launcher=launcher,
        )
        if isinstance(outcome, Invalid):
            click.echo(outcome.message, err=True)
            ctx.exit(EXIT_INVALID)
        _report(ctx, outcome)

    outcomes = [
        classify_for_action(target, selected, custom_command, capabilities) for target in targets
    ]
    invalid = [o for o in outcomes if isinstance(o, Invalid)]
    if invalid:
        for outcome in invalid:
            click.echo(outcome.message, err=True)
        ctx.exit(EXIT_INVALID)

    if select is None:
        select = ACTIONS[selected].select_file
    result = launcher.launch(
        selected,
        [o.target for o in outcomes],
        custom_command=custom_command,
        select_file=select,
        lookup=environment_lookup,
    )
    _report(ctx, result)


@cli.command("classify")
@click.argument("text")
@click.option(
    "--type",
    "resource_type",
    type=click.Choice([t.value for t in ResourceType]),
    default=ResourceType.EITHER.value,
    help="Kind of entry required.",
)
@click.option(
    "--action",
    type=click.Choice([a.value for a in Action if a is not Action.CUSTOM], case_sensitive=False),
    default=None,
    help="Allow URLs when ACTION supports them on this platform.",
)
@click.option("--allow-url", is_flag=True, help="Always try URL interpretation.")
@click.pass_context
def classify_command(
    ctx: click.Context,
    text: str,
    resource_type: str,
    action: Optional[str],
    allow_url: bool,
) -> None:
    """Show how TEXT would be interpreted."""
    capabilities = current()
    url_allowed = allow_url
    if action:
        url_allowed = url_allowed or capabilities.supports_url(Action(action.lower()))

    outcome = classify(
        text,
        expected_type=ResourceType(resource_type),
        url_allowed=url_allowed,
        os_family=capabilities.os_family,
    )
    click.echo(_describe_outcome(outcome))
    ctx.exit(EXIT_OK if outcome.is_valid else EXIT_INVALID)


@cli.command()
def variables() -> None:
    """List the variables available in custom commands."""
    descriptions = describe_variables({"env_var:NAME": "Value of environment variable NAME"})
    width = max(len(name) for name in descriptions)
    for name, description in descriptions.items():
        click.echo(f"{name.ljust(width)}  {description}")


@cli.command()
def capabilities() -> None:
    """Show what the current platform supports."""
    for key, value in current().summary().items():
        if isinstance(value, bool):
            value = "yes" if value else "no"
        click.echo(f"{key}: {value if value is not None else '-'}")


def main() -> None:
    cli(prog_name="oslaunch")


if __name__ == "__main__":
    main()
