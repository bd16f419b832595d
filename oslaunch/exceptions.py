"""
Custom exceptions for oslaunch.

Validation of user-selected text never raises; it produces a tagged outcome
(see ``oslaunch.models``). The exceptions below cover the remaining failure
paths. Launch failures are caught at the launcher boundary and converted to a
failed ``LaunchResult`` so the calling process is never taken down.
"""

from typing import Optional, Sequence


class OSLaunchError(Exception):
    """
    Base exception for all oslaunch errors.

    All custom exceptions in this package inherit from this class, so callers
    can catch every launcher-specific error with a single except clause while
    letting system errors (KeyboardInterrupt, SystemExit) bubble up.
    """

    pass


class ValidationError(OSLaunchError):
    """
    Raised when the library is called with arguments it cannot work with.

    This covers programming errors on the caller's side, for example:
    - Requesting the custom action without a command
    - Passing an unknown action name

    It is never raised for malformed user text; that is reported as an
    ``Invalid`` outcome.

    Args:
        message: Human-readable error description
        field_name: The field that failed validation (optional)
        invalid_value: The value that failed validation (optional)
    """

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        invalid_value: Optional[str] = None,
    ):
        self.field_name = field_name
        self.invalid_value = invalid_value
        error_parts = [message]
        if field_name:
            error_parts.append(f"field: {field_name}")
        if invalid_value:
            error_parts.append(f"value: {invalid_value}")
        super().__init__(" | ".join(error_parts))


class VariableResolutionError(OSLaunchError):
    """
    Raised when the externally injected variable lookup fails.

    Args:
        message: Underlying error message reported by the lookup
        variable: Name of the variable being resolved (optional)
    """

    def __init__(self, message: str, variable: Optional[str] = None):
        self.variable = variable
        if variable:
            super().__init__(f"{message} (variable: {variable})")
        else:
            super().__init__(message)


class UnsupportedActionError(OSLaunchError):
    """
    Raised when an action has no command pattern on the current platform.

    Args:
        action: Description of the requested action
        os_family: Name of the platform family
    """

    def __init__(self, action: str, os_family: str):
        self.action = action
        self.os_family = os_family
        super().__init__(f"{action} is not supported on {os_family}")


class SpawnError(OSLaunchError):
    """
    Raised when the operating system refuses to start a process.

    This includes:
    - Executable not found
    - Permission denied
    - Invalid arguments (embedded NUL bytes, bad working directory)

    Args:
        message: Human-readable error description
        command: The argument vector that failed to start (optional)
    """

    def __init__(self, message: str, command: Optional[Sequence[str]] = None):
        self.command = list(command) if command else None
        if command:
            super().__init__(f"{message} | command: {' '.join(command)}")
        else:
            super().__init__(message)
