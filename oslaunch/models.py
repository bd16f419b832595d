"""Value objects shared by the oslaunch pipeline.

Everything here is immutable and lives for a single action invocation:
classification outcomes, launch targets, substitution results and launch
results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union
from urllib.parse import SplitResult, urlsplit


# ==================== Enums ====================


class OSFamily(Enum):
    """Operating system families with distinct launch conventions."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"  # Linux and every other POSIX desktop


class ResourceType(Enum):
    """Kind of filesystem entry an action expects."""

    FILE = "file"
    DIRECTORY = "directory"
    EITHER = "either"


class Action(Enum):
    """Actions that can be performed on a target."""

    FILE_MANAGER = "filemanager"
    SYSTEM_APP = "systemapp"
    SHELL = "shell"
    CUSTOM = "custom"


class InvalidReason(Enum):
    """Why a piece of text could not be used as a target."""

    EMPTY = "empty"
    NOT_ABSOLUTE = "not_absolute"
    NOT_EXISTENT = "not_existent"
    NOT_A_URL = "not_a_url"


class FailureKind(Enum):
    """Stage at which a launch request failed."""

    UNSUPPORTED = "unsupported"  # platform has no program for the action
    PREPARATION = "preparation"  # nothing to run, bad template, lookup error
    SPAWN = "spawn"  # the OS refused to start a process


# ==================== Targets ====================


@dataclass(frozen=True)
class Url:
    """A URL that passed strict validation."""

    value: str

    @property
    def parts(self) -> SplitResult:
        return urlsplit(self.value)

    @property
    def scheme(self) -> str:
        return self.parts.scheme.lower()

    def __str__(self) -> str:
        return self.value


Target = Union[Path, Url]


# ==================== Validation outcome ====================


@dataclass(frozen=True)
class ValidPath:
    """Text resolved to an existing filesystem entry."""

    path: Path
    is_valid: bool = field(default=True, init=False)

    @property
    def target(self) -> Path:
        return self.path


@dataclass(frozen=True)
class ValidUrl:
    """Text parsed as a well-formed URL."""

    url: Url
    is_valid: bool = field(default=True, init=False)

    @property
    def target(self) -> Url:
        return self.url


@dataclass(frozen=True)
class Invalid:
    """Text that is neither a usable path nor a usable URL.

    Attributes:
        reason: Machine-readable reason code
        text: The (trimmed) text that was examined
        message: Human-readable explanation suitable for a dialog
    """

    reason: InvalidReason
    text: str
    message: str
    is_valid: bool = field(default=False, init=False)


ValidationOutcome = Union[ValidPath, ValidUrl, Invalid]


# ==================== Custom commands ====================


@dataclass(frozen=True)
class CustomCommand:
    """A user-defined command template.

    Attributes:
        command: One command-line string or a pre-split argument sequence,
            containing ``${...}`` variables
        wrap_in_quotes: Wrap substituted values containing whitespace or a
            path separator in double quotes
        escape_special_chars: Escape shell metacharacters in substituted values
        resource_type: Kind of entry the command accepts for text selections
        accepts_urls: Fall back to URL interpretation for text selections
        pass_selected_text: Write the selected text to a temporary file and
            run the command against that file instead of interpreting it
        temp_file_suffix: Suffix of that temporary file
        name: Optional display name
    """

    command: Union[str, Tuple[str, ...]]
    wrap_in_quotes: bool = False
    escape_special_chars: bool = False
    resource_type: ResourceType = ResourceType.EITHER
    accepts_urls: bool = False
    pass_selected_text: bool = False
    temp_file_suffix: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.command, str):
            object.__setattr__(self, "command", tuple(self.command))

    @property
    def description(self) -> str:
        if self.name:
            return self.name
        if isinstance(self.command, str):
            return self.command
        return " ".join(self.command)


# ==================== Results ====================


@dataclass(frozen=True)
class SubstitutionResult:
    """Outcome of variable substitution.

    Attributes:
        tokens: The substituted argument vector
        warnings: Non-fatal problems, e.g. a parent variable that could not
            be expanded
    """

    tokens: Tuple[str, ...]
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LaunchResult:
    """Result of a launch request.

    Attributes:
        success: Whether every process was started
        action: Description of the requested action
        commands: Argument vectors that were started
        error: OS error message(s) if a process could not be started
        warnings: Non-fatal problems reported while preparing the commands
        failure_kind: Stage that failed, None on success
    """

    success: bool
    action: str
    commands: Tuple[Tuple[str, ...], ...] = ()
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    failure_kind: Optional[FailureKind] = None

    @classmethod
    def ok(
        cls,
        action: str,
        commands: Sequence[Sequence[str]] = (),
        warnings: Sequence[str] = (),
    ) -> LaunchResult:
        return cls(
            success=True,
            action=action,
            commands=tuple(tuple(c) for c in commands),
            warnings=tuple(warnings),
        )

    @classmethod
    def failure(
        cls,
        action: str,
        error: str,
        kind: FailureKind,
        commands: Sequence[Sequence[str]] = (),
        warnings: Sequence[str] = (),
    ) -> LaunchResult:
        return cls(
            success=False,
            action=action,
            commands=tuple(tuple(c) for c in commands),
            error=error,
            warnings=tuple(warnings),
            failure_kind=kind,
        )

    @property
    def message(self) -> str:
        """Human-readable summary for display."""
        if self.success:
            return f"{self.action}: started {len(self.commands)} process(es)"
        return f"{self.action} failed: {self.error}"
