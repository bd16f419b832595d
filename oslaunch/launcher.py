"""
Process launching for file manager, system application, shell and custom
command actions.

Processes are started and forgotten: the launcher never waits for them,
never reads their output and does not care about their exit status. The only
failure it reports is a process that could not be started at all.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from oslaunch.exceptions import (
    SpawnError,
    UnsupportedActionError,
    ValidationError,
    VariableResolutionError,
)
from oslaunch.logging_config import get_logger
from oslaunch.models import Action, CustomCommand, FailureKind, LaunchResult, Target, Url
from oslaunch.platform import Capabilities, CommandPattern, current, describe_action
from oslaunch.tokenizer import join_tokens, tokenize
from oslaunch.variables import VariableLookup, substitute

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlannedCommand:
    """A fully built process invocation.

    ``command_line`` is set for programs that parse their raw command line
    themselves and is passed to the OS unchanged instead of ``argv``.
    """

    argv: Tuple[str, ...]
    cwd: Optional[str] = None
    command_line: Optional[str] = None

    @property
    def args(self) -> Union[str, Tuple[str, ...]]:
        return self.command_line if self.command_line is not None else self.argv


Spawner = Callable[[Union[str, Sequence[str]], Optional[str]], None]


def spawn(args: Union[str, Sequence[str]], cwd: Optional[str] = None) -> None:
    """
    Start a detached process without waiting for it.

    Args:
        args: Argument vector, or a complete command line that is handed to
            the OS as written (Windows only)
        cwd: Working directory for the process

    Raises:
        SpawnError: If the process cannot be started
    """
    kwargs: Dict[str, object] = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
        "cwd": cwd,
        "close_fds": True,
    }
    if os.name == "posix":
        kwargs["start_new_session"] = True

    popen_args = args if isinstance(args, str) else list(args)
    try:
        subprocess.Popen(popen_args, **kwargs)  # type: ignore[call-overload]
    except (OSError, ValueError, subprocess.SubprocessError) as exc:
        raise SpawnError(str(exc), command=[args] if isinstance(args, str) else args) from exc


class ProcessLauncher:
    """Build and start the processes for an action on a list of targets."""

    def __init__(
        self,
        capabilities: Optional[Capabilities] = None,
        spawner: Optional[Spawner] = None,
    ):
        """
        Args:
            capabilities: Platform table to use; defaults to the running platform
            spawner: Function starting one process; defaults to ``spawn``
        """
        self.capabilities = capabilities or current()
        self._spawn = spawner or spawn

    # ==================== Planning ====================

    def _pattern_and_argument(
        self, action: Action, target: Target, select_file: bool
    ) -> Tuple[CommandPattern, str]:
        caps = self.capabilities
        if isinstance(target, Url):
            return caps.pattern_for(action, is_url=True), str(target)

        path = Path(target)
        is_dir = path.is_dir()

        if action is Action.FILE_MANAGER:
            if is_dir:
                return caps.pattern_for(action), str(path)
            if select_file and caps.supports_select_file_in_file_manager:
                return caps.pattern_for(action, select=True), str(path)
            return caps.pattern_for(action), str(path.parent)

        if action is Action.SHELL:
            return caps.pattern_for(action), str(path if is_dir else path.parent)

        return caps.pattern_for(action), str(path)

    def plan(
        self, action: Action, targets: Sequence[Target], select_file: bool = True
    ) -> List[PlannedCommand]:
        """
        Build the invocations for a built-in action.

        Targets sharing a multi-target pattern are passed to one process, in
        the order given; every other target gets its own process.

        Raises:
            UnsupportedActionError: If the platform cannot perform the action
                for one of the targets
        """
        if action is Action.CUSTOM:
            raise ValidationError(
                "Custom commands are planned with plan_custom", field_name="action"
            )

        grouped: Dict[CommandPattern, List[str]] = {}
        order: List[Tuple[CommandPattern, Optional[str]]] = []

        for target in targets:
            pattern, argument = self._pattern_and_argument(action, target, select_file)
            if pattern.multi_target and not pattern.cwd_is_target:
                if pattern not in grouped:
                    grouped[pattern] = []
                    order.append((pattern, None))
                grouped[pattern].append(argument)
            else:
                order.append((pattern, argument))

        commands = []
        for pattern, argument in order:
            arguments = grouped[pattern] if argument is None else [argument]
            cwd = argument if pattern.cwd_is_target else None
            commands.append(
                PlannedCommand(
                    tuple(pattern.build(arguments)),
                    cwd=cwd,
                    command_line=pattern.command_line(arguments),
                )
            )
        return commands

    def plan_custom(
        self,
        custom_command: CustomCommand,
        targets: Sequence[Target],
        lookup: Optional[VariableLookup] = None,
    ) -> Tuple[List[PlannedCommand], List[str]]:
        """
        Build one invocation per target for a custom command.

        Returns:
            (commands, warnings)

        Raises:
            ValidationError: If the command is empty
            VariableResolutionError: If the external lookup failed
        """
        if isinstance(custom_command.command, str):
            template = tokenize(custom_command.command)
        else:
            template = list(custom_command.command)
        if not template:
            raise ValidationError("Custom command is empty", field_name="command")

        commands = []
        warnings: List[str] = []
        for target in targets:
            result = substitute(
                template,
                target,
                wrap_in_quotes=custom_command.wrap_in_quotes,
                escape_special_chars=custom_command.escape_special_chars,
                lookup=lookup,
                os_family=self.capabilities.os_family,
            )
            commands.append(PlannedCommand(result.tokens))
            warnings.extend(w for w in result.warnings if w not in warnings)
        return commands, warnings

    # ==================== Execution ====================

    def execute(
        self, description: str, commands: Sequence[PlannedCommand], warnings: Sequence[str] = ()
    ) -> LaunchResult:
        """Start every planned command; collect spawn failures."""
        started = []
        errors = []
        for command in commands:
            shown = command.command_line or join_tokens(command.argv)
            logger.info(f"{description}: starting {shown}")
            try:
                self._spawn(command.args, command.cwd)
            except SpawnError as exc:
                logger.error(f"{description}: could not start {command.argv[0]}: {exc}")
                errors.append(str(exc))
            else:
                started.append(command.argv)

        if errors:
            return LaunchResult.failure(
                description, "; ".join(errors), FailureKind.SPAWN, started, warnings
            )
        return LaunchResult.ok(description, started, warnings)

    def launch(
        self,
        action: Action,
        targets: Sequence[Target],
        custom_command: Optional[CustomCommand] = None,
        select_file: bool = True,
        lookup: Optional[VariableLookup] = None,
    ) -> LaunchResult:
        """
        Perform an action on a list of resolved targets.

        Args:
            action: Action to perform
            targets: Resolved paths and URLs
            custom_command: Command template, required for Action.CUSTOM
            select_file: Highlight files in the file manager when supported
            lookup: Resolver for non built-in variables in custom commands

        Returns:
            LaunchResult; unsupported actions, lookup errors and spawn
            failures are all reported as a failed result

        Raises:
            ValidationError: If Action.CUSTOM is requested without a command
        """
        if action is Action.CUSTOM and custom_command is None:
            raise ValidationError("A custom command is required", field_name="custom_command")

        description = describe_action(action)
        if custom_command is not None and action is Action.CUSTOM:
            description = f"{description} {custom_command.description!r}"

        if not targets:
            return LaunchResult.failure(description, "Nothing selected", FailureKind.PREPARATION)

        warnings: List[str] = []
        try:
            if action is Action.CUSTOM:
                commands, warnings = self.plan_custom(custom_command, targets, lookup)
            else:
                commands = self.plan(action, targets, select_file)
        except UnsupportedActionError as exc:
            logger.warning(f"{description}: {exc}")
            return LaunchResult.failure(description, str(exc), FailureKind.UNSUPPORTED)
        except VariableResolutionError as exc:
            logger.warning(f"{description}: {exc}")
            return LaunchResult.failure(description, str(exc), FailureKind.PREPARATION)
        except ValidationError as exc:
            return LaunchResult.failure(description, str(exc), FailureKind.PREPARATION)

        return self.execute(description, commands, warnings)
