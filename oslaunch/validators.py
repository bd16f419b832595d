"""Interpretation of selected text as a filesystem path or a URL.

Nothing in here raises for malformed input. Every entry point returns one of
the outcome variants from ``oslaunch.models``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Optional, Union
from urllib.parse import urlsplit

from oslaunch.logging_config import get_logger
from oslaunch.models import (
    Invalid,
    InvalidReason,
    OSFamily,
    ResourceType,
    Url,
    ValidationOutcome,
    ValidPath,
    ValidUrl,
)
from oslaunch.platform import detect_os_family

logger = get_logger(__name__)

# At least two characters, so "C:" drive prefixes never look like a scheme
_URL_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]+$")
# Schemes that are well-formed without a network location
_PATH_ONLY_SCHEMES = frozenset({"file", "mailto"})
_QUOTE_CHARS = ('"', "'")


def strip_quotes(text: str) -> str:
    """Remove one pair of matching quotes around ``text``."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTE_CHARS:
        return text[1:-1].strip()
    return text


def is_absolute_path(text: str, os_family: Optional[OSFamily] = None) -> bool:
    """Return True if ``text`` is absolute in the path syntax of ``os_family``.

    Windows needs a drive with a root (``C:\\``) or a UNC share; everything
    else needs a leading separator.
    """
    family = os_family or detect_os_family()
    if family is OSFamily.WINDOWS:
        return PureWindowsPath(text).is_absolute()
    return PurePosixPath(text).is_absolute()


def _matches_type(path: Path, resource_type: ResourceType) -> Optional[bool]:
    """True/False for an existing entry, None if the entry does not exist."""
    try:
        if path.is_dir():
            return resource_type in (ResourceType.DIRECTORY, ResourceType.EITHER)
        if path.exists():
            return resource_type in (ResourceType.FILE, ResourceType.EITHER)
    except (OSError, ValueError) as exc:
        logger.debug(f"Cannot stat {path!r}: {exc}")
    return None


def check_path(
    text: str,
    resource_type: ResourceType = ResourceType.EITHER,
    os_family: Optional[OSFamily] = None,
) -> Union[ValidPath, Invalid]:
    """Validate ``text`` as an absolute path to an existing entry.

    Args:
        text: Trimmed, unquoted candidate
        resource_type: Kind of entry required
        os_family: Path syntax to apply; defaults to the running platform

    Returns:
        ValidPath, or Invalid with NOT_ABSOLUTE / NOT_EXISTENT
    """
    candidate = os.path.expanduser(text) if text.startswith("~") else text

    if not is_absolute_path(candidate, os_family):
        return Invalid(
            InvalidReason.NOT_ABSOLUTE,
            text,
            f"{text} is not an absolute path",
        )

    path = Path(candidate)
    matches = _matches_type(path, resource_type)
    if matches is None:
        return Invalid(
            InvalidReason.NOT_EXISTENT,
            text,
            f"{text} does not exist",
        )
    if not matches:
        expected = "a directory" if resource_type is ResourceType.DIRECTORY else "a file"
        return Invalid(
            InvalidReason.NOT_EXISTENT,
            text,
            f"{text} exists but is not {expected}",
        )

    return ValidPath(path)


def check_url(text: str) -> Union[ValidUrl, Invalid]:
    """Validate ``text`` as a well-formed absolute URL.

    A scheme is required; hierarchical URLs need a host, ``file:`` and
    ``mailto:`` need a path. Whitespace is never allowed.
    """
    invalid = Invalid(
        InvalidReason.NOT_A_URL,
        text,
        f"{text} is neither a valid path nor a valid URL",
    )

    if not text or any(ch.isspace() for ch in text):
        return invalid

    try:
        parts = urlsplit(text)
        # Accessing port validates it
        parts.port
    except ValueError:
        return invalid

    if not _URL_SCHEME_RE.fullmatch(parts.scheme):
        return invalid

    scheme = parts.scheme.lower()
    if parts.netloc or (scheme in _PATH_ONLY_SCHEMES and parts.path):
        return ValidUrl(Url(text))
    return invalid


def classify(
    raw_text: Optional[str],
    expected_type: ResourceType = ResourceType.EITHER,
    url_allowed: bool = False,
    os_family: Optional[OSFamily] = None,
) -> ValidationOutcome:
    """Interpret selected text as a path, or failing that as a URL.

    The path interpretation is always tried first. The URL interpretation is
    only attempted when it failed and ``url_allowed`` is set; in that case a
    URL failure is reported as NOT_A_URL, otherwise the path failure is
    reported as is.

    Args:
        raw_text: Text exactly as selected by the user
        expected_type: Kind of filesystem entry the action needs
        url_allowed: Whether the action can handle URLs on this platform
        os_family: Path syntax to apply; defaults to the running platform

    Returns:
        ValidPath, ValidUrl or Invalid
    """
    if raw_text is None or not raw_text.strip():
        return Invalid(InvalidReason.EMPTY, "", "The selection is empty")

    text = strip_quotes(raw_text.strip())
    if not text:
        return Invalid(InvalidReason.EMPTY, "", "The selection is empty")

    outcome = check_path(text, expected_type, os_family)
    if outcome.is_valid or not url_allowed:
        return outcome

    url_outcome = check_url(text)
    if not url_outcome.is_valid:
        logger.debug(f"{text!r} rejected as path ({outcome.reason.value}) and as URL")
    return url_outcome
