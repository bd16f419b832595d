"""
Action pipeline: classify the selection, then launch.

Host integrations call one of two entry points:

- ``run_for_paths`` with resources that are already resolved to absolute
  paths (e.g. a multi-selection in a project tree)
- ``run_for_text`` with raw text selected in an editor, plus optionally the
  file opened in that editor as a fallback for an empty selection

Each action is described by data (``ACTIONS``); which URL capability gates
the URL fallback and which resource type is expected are looked up, not
overridden.
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from oslaunch.config import LAUNCH
from oslaunch.exceptions import ValidationError
from oslaunch.launcher import ProcessLauncher
from oslaunch.logging_config import get_logger
from oslaunch.models import (
    Action,
    CustomCommand,
    FailureKind,
    Invalid,
    LaunchResult,
    ResourceType,
    ValidationOutcome,
)
from oslaunch.platform import Capabilities, current, describe_action
from oslaunch.validators import classify
from oslaunch.variables import VariableLookup

logger = get_logger(__name__)


@dataclass(frozen=True)
class ActionDescriptor:
    """Static description of an action.

    Attributes:
        action: The action
        resource_type: Kind of entry a text selection must name
        select_file: Highlight files in the file manager by default
    """

    action: Action
    resource_type: ResourceType = ResourceType.EITHER
    select_file: bool = False

    @property
    def description(self) -> str:
        return describe_action(self.action)

    def url_allowed(
        self, capabilities: Capabilities, custom_command: Optional[CustomCommand] = None
    ) -> bool:
        """Whether a text selection may fall back to URL interpretation."""
        if self.action is Action.CUSTOM:
            return bool(custom_command and custom_command.accepts_urls)
        return capabilities.supports_url(self.action)

    def expected_type(self, custom_command: Optional[CustomCommand] = None) -> ResourceType:
        if self.action is Action.CUSTOM and custom_command is not None:
            return custom_command.resource_type
        return self.resource_type


ACTIONS = {
    Action.FILE_MANAGER: ActionDescriptor(Action.FILE_MANAGER, select_file=True),
    Action.SYSTEM_APP: ActionDescriptor(Action.SYSTEM_APP),
    Action.SHELL: ActionDescriptor(Action.SHELL),
    Action.CUSTOM: ActionDescriptor(Action.CUSTOM),
}


def parse_action(name: Union[str, Action]) -> Action:
    """Return the Action for its name (``filemanager``, ``shell``...)."""
    if isinstance(name, Action):
        return name
    try:
        return Action(name.strip().lower())
    except ValueError as exc:
        choices = ", ".join(a.value for a in Action)
        raise ValidationError(
            f"Unknown action, expected one of {choices}", field_name="action", invalid_value=name
        ) from exc


def classify_for_action(
    text: Optional[str],
    action: Action,
    custom_command: Optional[CustomCommand] = None,
    capabilities: Optional[Capabilities] = None,
) -> ValidationOutcome:
    """Classify selected text with the rules of ``action`` on this platform."""
    caps = capabilities or current()
    descriptor = ACTIONS[action]
    return classify(
        text,
        expected_type=descriptor.expected_type(custom_command),
        url_allowed=descriptor.url_allowed(caps, custom_command),
        os_family=caps.os_family,
    )


def run_for_paths(
    action: Action,
    paths: Sequence[Union[str, Path]],
    custom_command: Optional[CustomCommand] = None,
    select_file: Optional[bool] = None,
    lookup: Optional[VariableLookup] = None,
    launcher: Optional[ProcessLauncher] = None,
) -> LaunchResult:
    """
    Perform an action on resolved resources.

    Args:
        action: Action to perform
        paths: Absolute paths of the selected resources
        custom_command: Command template for Action.CUSTOM
        select_file: Override the action's default file highlighting
        lookup: Resolver for non built-in variables
        launcher: Launcher to use; defaults to one for the running platform
    """
    launcher = launcher or ProcessLauncher()
    descriptor = ACTIONS[action]
    if select_file is None:
        select_file = descriptor.select_file
    return launcher.launch(
        action,
        [Path(p) for p in paths],
        custom_command=custom_command,
        select_file=select_file,
        lookup=lookup,
    )


def run_with_text_file(
    custom_command: CustomCommand,
    text: str,
    lookup: Optional[VariableLookup] = None,
    launcher: Optional[ProcessLauncher] = None,
) -> LaunchResult:
    """
    Write selected text to a temporary file and run a custom command on it.

    The file is left in place; the started program owns it from then on.
    """
    launcher = launcher or ProcessLauncher()
    suffix = custom_command.temp_file_suffix or LAUNCH.TEMP_FILE_SUFFIX
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            prefix=LAUNCH.TEMP_FILE_PREFIX,
            suffix=suffix,
            encoding=LAUNCH.TEMP_FILE_ENCODING,
            delete=False,
        ) as handle:
            handle.write(text)
            temp_path = Path(handle.name)
    except OSError as exc:
        logger.error(f"Could not write selected text to a temporary file: {exc}")
        return LaunchResult.failure(
            f"{describe_action(Action.CUSTOM)} {custom_command.description!r}",
            f"Could not create temporary file: {exc}",
            FailureKind.PREPARATION,
        )

    logger.debug(f"Selected text written to {temp_path}")
    return launcher.launch(Action.CUSTOM, [temp_path], custom_command=custom_command, lookup=lookup)


def run_for_text(
    action: Action,
    text: Optional[str],
    opened_file: Optional[Union[str, Path]] = None,
    custom_command: Optional[CustomCommand] = None,
    select_file: Optional[bool] = None,
    lookup: Optional[VariableLookup] = None,
    launcher: Optional[ProcessLauncher] = None,
) -> Union[Invalid, LaunchResult]:
    """
    Perform an action on text selected in an editor.

    An empty selection falls back to ``opened_file`` when one is given.
    Otherwise the text is classified as a path, then (when the action
    supports it on this platform) as a URL.

    Returns:
        Invalid if the text cannot be used, LaunchResult otherwise
    """
    launcher = launcher or ProcessLauncher()

    if text is None or not text.strip():
        if opened_file is not None:
            logger.debug(f"Empty selection, using opened file {opened_file}")
            return run_for_paths(
                action, [opened_file], custom_command, select_file, lookup, launcher
            )
        return classify(text)

    if action is Action.CUSTOM and custom_command is not None and custom_command.pass_selected_text:
        return run_with_text_file(custom_command, text, lookup, launcher)

    outcome = classify_for_action(text, action, custom_command, launcher.capabilities)
    if isinstance(outcome, Invalid):
        logger.info(f"{describe_action(action)}: {outcome.message}")
        return outcome

    if select_file is None:
        select_file = ACTIONS[action].select_file
    return launcher.launch(
        action,
        [outcome.target],
        custom_command=custom_command,
        select_file=select_file,
        lookup=lookup,
    )

