"""
Variable substitution for custom command templates.

Five built-in variables describe the target of a command:

    ${resource_path}                      full path (or URL)
    ${resource_parent}                    parent directory
    ${resource_name}                      file name
    ${resource_name_without_extension}    file name without extension
    ${resource_extension}                 extension, without the dot

Any other ``${...}`` variable is handed to an optional lookup function
supplied by the caller. Built-in variables are expanded first; the lookup
only ever sees variables written in the template itself, never text that came
out of a built-in value.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlunsplit

from oslaunch.config import LAUNCH
from oslaunch.exceptions import VariableResolutionError
from oslaunch.logging_config import get_logger
from oslaunch.models import OSFamily, SubstitutionResult, Target, Url
from oslaunch.platform import detect_os_family

logger = get_logger(__name__)

RESOURCE_PATH = "resource_path"
RESOURCE_PARENT = "resource_parent"
RESOURCE_NAME = "resource_name"
RESOURCE_NAME_WITHOUT_EXTENSION = "resource_name_without_extension"
RESOURCE_EXTENSION = "resource_extension"

VariableLookup = Callable[[str], Optional[str]]

_VARIABLE_RE = re.compile(re.escape(LAUNCH.VAR_BEGIN) + r"([^{}]*)" + re.escape(LAUNCH.VAR_END))

_POSIX_SPECIAL = frozenset("\\'\"`$&|;<>()[]{}*?!#~ \t")
_WINDOWS_SPECIAL = frozenset("^&|<>()%!")


def variable_token(name: str) -> str:
    """Return the template spelling of a variable, e.g. ``${resource_name}``."""
    return f"{LAUNCH.VAR_BEGIN}{name}{LAUNCH.VAR_END}"


# ==================== Target accessors ====================


def split_name_and_extension(name: str) -> Tuple[str, str]:
    """Split a file name at its last dot.

    A leading dot does not start an extension (``.bashrc`` has none).
    """
    index = name.rfind(".")
    if index <= 0:
        return name, ""
    return name[:index], name[index + 1 :]


def _url_segments(url: Url) -> List[str]:
    return [segment for segment in url.parts.path.split("/") if segment]


def target_path(target: Target) -> str:
    return str(target)


def target_name(target: Target) -> str:
    if isinstance(target, Url):
        segments = _url_segments(target)
        return segments[-1] if segments else ""
    return target.name


def target_parent(target: Target) -> Optional[str]:
    """Parent directory (or parent URL), None for roots."""
    if isinstance(target, Url):
        segments = _url_segments(target)
        if not segments:
            return None
        parts = target.parts
        parent_path = "/" + "/".join(segments[:-1]) if len(segments) > 1 else "/"
        return urlunsplit((parts.scheme, parts.netloc, parent_path, "", ""))
    parent = target.parent
    if parent == target:
        return None
    return str(parent)


@dataclass(frozen=True)
class VariableDefinition:
    """A built-in variable: its description and how to resolve it."""

    name: str
    description: str
    resolve: Callable[[Target], Optional[str]]

    @property
    def token(self) -> str:
        return variable_token(self.name)


@lru_cache(maxsize=None)
def variable_table() -> Mapping[str, VariableDefinition]:
    """Read-only table of built-in variables, built once."""
    definitions = [
        VariableDefinition(
            RESOURCE_PATH,
            "Absolute path of the selected resource",
            target_path,
        ),
        VariableDefinition(
            RESOURCE_PARENT,
            "Absolute path of the directory containing the selected resource",
            target_parent,
        ),
        VariableDefinition(
            RESOURCE_NAME,
            "Name of the selected resource",
            target_name,
        ),
        VariableDefinition(
            RESOURCE_NAME_WITHOUT_EXTENSION,
            "Name of the selected resource without its extension",
            lambda target: split_name_and_extension(target_name(target))[0],
        ),
        VariableDefinition(
            RESOURCE_EXTENSION,
            "Extension of the selected resource, without the dot",
            lambda target: split_name_and_extension(target_name(target))[1],
        ),
    ]
    return MappingProxyType({d.name: d for d in definitions})


def describe_variables(external: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Map ``${name}`` to a description for every known variable.

    Args:
        external: Additional ``name -> description`` pairs from the host's
            own variable namespace
    """
    descriptions = {d.token: d.description for d in variable_table().values()}
    for name, description in (external or {}).items():
        descriptions.setdefault(variable_token(name), description)
    return descriptions


def environment_lookup(name: str) -> Optional[str]:
    """Resolve ``env_var:NAME`` from the process environment."""
    if not name.startswith(LAUNCH.ENV_VAR_PREFIX):
        return None
    return os.environ.get(name[len(LAUNCH.ENV_VAR_PREFIX) :])


# ==================== Formatting ====================


def escape_value(value: str, os_family: OSFamily) -> str:
    """Escape shell metacharacters: carets on Windows, backslashes elsewhere."""
    if os_family is OSFamily.WINDOWS:
        return "".join(f"^{ch}" if ch in _WINDOWS_SPECIAL else ch for ch in value)
    return "".join(f"\\{ch}" if ch in _POSIX_SPECIAL else ch for ch in value)


def _needs_quotes(value: str, os_family: OSFamily) -> bool:
    separators = ("\\", "/") if os_family is OSFamily.WINDOWS else ("/",)
    return any(ch.isspace() for ch in value) or any(sep in value for sep in separators)


def format_value(
    value: str, wrap_in_quotes: bool, escape_special_chars: bool, os_family: OSFamily
) -> str:
    """Escape, then quote, one substituted value."""
    needs_quotes = wrap_in_quotes and _needs_quotes(value, os_family)
    if escape_special_chars:
        value = escape_value(value, os_family)
    if needs_quotes:
        value = f'"{value}"'
    return value


# ==================== Substitution ====================


@dataclass
class _Variable:
    name: str
    raw: str


_Segment = Union[str, _Variable]


def _segments(token: str) -> List[_Segment]:
    segments: List[_Segment] = []
    position = 0
    for match in _VARIABLE_RE.finditer(token):
        if match.start() > position:
            segments.append(token[position : match.start()])
        segments.append(_Variable(match.group(1), match.group(0)))
        position = match.end()
    if position < len(token):
        segments.append(token[position:])
    return segments


def _lookup(lookup: VariableLookup, name: str) -> Optional[str]:
    try:
        return lookup(name)
    except VariableResolutionError:
        raise
    except Exception as exc:  # noqa: generic-exception - lookup is caller code
        raise VariableResolutionError(str(exc) or type(exc).__name__, variable=name) from exc


def substitute(
    template: Sequence[str],
    target: Target,
    wrap_in_quotes: bool = False,
    escape_special_chars: bool = False,
    lookup: Optional[VariableLookup] = None,
    os_family: Optional[OSFamily] = None,
) -> SubstitutionResult:
    """
    Replace variables in every token of a command template.

    Args:
        template: Command tokens; never modified
        target: Path or URL the command runs for
        wrap_in_quotes: Quote substituted values containing whitespace or a
            path separator
        escape_special_chars: Escape shell metacharacters in substituted values
        lookup: Resolver for variables that are not built in; returning None
            leaves the variable untouched
        os_family: Escaping and separator conventions; defaults to the
            running platform

    Returns:
        SubstitutionResult with the new tokens and any warnings

    Raises:
        VariableResolutionError: If ``lookup`` raised
    """
    family = os_family or detect_os_family()
    table = variable_table()
    warnings: List[str] = []
    tokens: List[str] = []

    for token in template:
        segments = _segments(token)

        # Built-in variables first
        for index, segment in enumerate(segments):
            if not isinstance(segment, _Variable) or segment.name not in table:
                continue
            value = table[segment.name].resolve(target)
            if value is None:
                message = (
                    f"The command contains the variable {segment.raw} "
                    f"but {target} has no parent"
                )
                if message not in warnings:
                    logger.warning(message)
                    warnings.append(message)
                segments[index] = segment.raw
            else:
                segments[index] = format_value(
                    value, wrap_in_quotes, escape_special_chars, family
                )

        # Then whatever the caller's lookup knows about
        for index, segment in enumerate(segments):
            if not isinstance(segment, _Variable):
                continue
            value = _lookup(lookup, segment.name) if lookup else None
            segments[index] = segment.raw if value is None else value

        tokens.append("".join(segments))  # type: ignore[arg-type]

    return SubstitutionResult(tuple(tokens), tuple(warnings))
