"""Open file managers, default applications, shells and custom commands
for paths and URLs picked out of an editor selection."""

from oslaunch.__version__ import __version__
from oslaunch.actions import classify_for_action, run_for_paths, run_for_text
from oslaunch.exceptions import (
    OSLaunchError,
    SpawnError,
    UnsupportedActionError,
    ValidationError,
    VariableResolutionError,
)
from oslaunch.launcher import ProcessLauncher
from oslaunch.models import (
    Action,
    CustomCommand,
    FailureKind,
    Invalid,
    InvalidReason,
    LaunchResult,
    OSFamily,
    ResourceType,
    SubstitutionResult,
    Url,
    ValidPath,
    ValidUrl,
)
from oslaunch.platform import Capabilities, current
from oslaunch.tokenizer import tokenize
from oslaunch.validators import classify
from oslaunch.variables import substitute

__all__ = [
    "__version__",
    "Action",
    "Capabilities",
    "CustomCommand",
    "FailureKind",
    "Invalid",
    "InvalidReason",
    "LaunchResult",
    "OSFamily",
    "OSLaunchError",
    "ProcessLauncher",
    "ResourceType",
    "SpawnError",
    "SubstitutionResult",
    "UnsupportedActionError",
    "Url",
    "ValidPath",
    "ValidUrl",
    "ValidationError",
    "VariableResolutionError",
    "classify",
    "classify_for_action",
    "current",
    "run_for_paths",
    "run_for_text",
    "substitute",
    "tokenize",
]
