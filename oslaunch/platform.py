"""Per-platform launch capabilities.

Describes, for each operating system family, which program starts a file
manager, the default application or a shell, and which of those actions can
take URLs, highlight a file, or accept several targets in one process. The
tables are plain data; detection happens once per process in ``current()``.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from oslaunch.config import LAUNCH
from oslaunch.exceptions import UnsupportedActionError
from oslaunch.logging_config import get_logger
from oslaunch.models import Action, OSFamily

logger = get_logger(__name__)

TARGET = LAUNCH.TARGET_PLACEHOLDER


@dataclass(frozen=True)
class CommandPattern:
    """Program and argument layout for one action.

    Attributes:
        argv: Program followed by its arguments; ``{target}`` marks where the
            target goes
        cwd_is_target: Start the program with the target as working directory
        multi_target: One process can take several targets
        literal_command_line: The program parses its own command line, so
            the tokens are joined with spaces and passed as written instead
            of being quoted per argument (``explorer.exe /select,"C:\\a b"``)
    """

    argv: Tuple[str, ...]
    cwd_is_target: bool = False
    multi_target: bool = False
    literal_command_line: bool = False

    def build(self, targets: Sequence[str]) -> List[str]:
        """Return the argument vector for the given targets.

        Tokens containing ``{target}`` are repeated once per target, so a
        multi-target pattern ``open -R {target}`` becomes
        ``open -R a b``.
        """
        if len(targets) > 1 and not self.multi_target:
            raise ValueError(f"{self.argv[0]} takes a single target")

        argv: List[str] = []
        for token in self.argv:
            if TARGET in token:
                argv.extend(token.replace(TARGET, t) for t in targets)
            else:
                argv.append(token)
        return argv

    def command_line(self, targets: Sequence[str]) -> Optional[str]:
        """Return the raw command line for literal patterns, else None."""
        if not self.literal_command_line:
            return None
        return " ".join(self.build(targets))


@dataclass(frozen=True)
class Capabilities:
    """Immutable capability table for one platform."""

    os_family: OSFamily
    file_manager: CommandPattern
    system_app: CommandPattern
    shell: CommandPattern
    file_manager_select: Optional[CommandPattern] = None
    file_manager_url: Optional[CommandPattern] = None
    system_app_url: Optional[CommandPattern] = None
    shell_url: Optional[CommandPattern] = None
    desktop: Optional[str] = None

    @property
    def supports_url_for_file_manager(self) -> bool:
        return self.file_manager_url is not None

    @property
    def supports_url_for_system_app(self) -> bool:
        return self.system_app_url is not None

    @property
    def supports_url_for_shell(self) -> bool:
        return self.shell_url is not None

    @property
    def supports_select_file_in_file_manager(self) -> bool:
        return self.file_manager_select is not None

    def supports_url(self, action: Action) -> bool:
        """Whether text that is not a path may be tried as a URL for ``action``.

        Custom commands are not covered by the platform; their own descriptor
        decides.
        """
        if action is Action.FILE_MANAGER:
            return self.supports_url_for_file_manager
        if action is Action.SYSTEM_APP:
            return self.supports_url_for_system_app
        if action is Action.SHELL:
            return self.supports_url_for_shell
        return False

    def pattern_for(
        self, action: Action, is_url: bool = False, select: bool = False
    ) -> CommandPattern:
        """Look up the command pattern for an action.

        Raises:
            UnsupportedActionError: If the platform has no pattern for it
        """
        if action is Action.FILE_MANAGER:
            if is_url:
                pattern = self.file_manager_url
            elif select:
                pattern = self.file_manager_select
            else:
                pattern = self.file_manager
        elif action is Action.SYSTEM_APP:
            pattern = self.system_app_url if is_url else self.system_app
        elif action is Action.SHELL:
            pattern = self.shell_url if is_url else self.shell
        else:
            pattern = None

        if pattern is None:
            what = describe_action(action)
            if is_url:
                what += " for URLs"
            elif select:
                what += " with file selection"
            raise UnsupportedActionError(what, self.os_family.value)
        return pattern

    def summary(self) -> Dict[str, object]:
        """Flat view of the table for display."""
        return {
            "os_family": self.os_family.value,
            "desktop": self.desktop,
            "supports_url_for_file_manager": self.supports_url_for_file_manager,
            "supports_url_for_system_app": self.supports_url_for_system_app,
            "supports_url_for_shell": self.supports_url_for_shell,
            "supports_select_file_in_file_manager": self.supports_select_file_in_file_manager,
            "file_manager": " ".join(self.file_manager.argv),
            "system_app": " ".join(self.system_app.argv),
            "shell": " ".join(self.shell.argv),
        }


_ACTION_DESCRIPTIONS = {
    Action.FILE_MANAGER: "Open file manager",
    Action.SYSTEM_APP: "Open with system application",
    Action.SHELL: "Open shell",
    Action.CUSTOM: "Run custom command",
}


def describe_action(action: Action) -> str:
    return _ACTION_DESCRIPTIONS[action]


# ==================== Tables ====================

_WINDOWS = Capabilities(
    os_family=OSFamily.WINDOWS,
    file_manager=CommandPattern(("explorer.exe", TARGET)),
    # explorer wants /select,"C:\a b\f.txt"; per-argument quoting would wrap
    # the whole switch and open the default folder instead
    file_manager_select=CommandPattern(
        ("explorer.exe", f'/select,"{TARGET}"'), literal_command_line=True
    ),
    file_manager_url=CommandPattern(("explorer.exe", TARGET)),
    system_app=CommandPattern(("rundll32.exe", "url.dll,FileProtocolHandler", TARGET)),
    system_app_url=CommandPattern(("rundll32.exe", "url.dll,FileProtocolHandler", TARGET)),
    shell=CommandPattern(("cmd.exe", "/c", "start", "cmd.exe"), cwd_is_target=True),
)

_MACOS = Capabilities(
    os_family=OSFamily.MACOS,
    file_manager=CommandPattern(("open", TARGET), multi_target=True),
    file_manager_select=CommandPattern(("open", "-R", TARGET), multi_target=True),
    system_app=CommandPattern(("open", TARGET), multi_target=True),
    system_app_url=CommandPattern(("open", TARGET), multi_target=True),
    shell=CommandPattern(("open", "-a", "Terminal", TARGET), multi_target=True),
)

# Linux desktop flavours: file manager, its select flag, terminal pattern
_LINUX_DESKTOPS: Dict[str, Tuple[str, Optional[str], CommandPattern]] = {
    "gnome": (
        "nautilus",
        "--select",
        CommandPattern(("gnome-terminal", f"--working-directory={TARGET}")),
    ),
    "kde": (
        "dolphin",
        "--select",
        CommandPattern(("konsole", "--workdir", TARGET)),
    ),
    "xfce": (
        "thunar",
        None,
        CommandPattern(("xfce4-terminal", f"--working-directory={TARGET}")),
    ),
}

_DESKTOP_ALIASES = {
    "gnome": "gnome",
    "unity": "gnome",
    "cinnamon": "gnome",
    "budgie": "gnome",
    "pantheon": "gnome",
    "kde": "kde",
    "plasma": "kde",
    "xfce": "xfce",
}


def _linux_capabilities(desktop: Optional[str]) -> Capabilities:
    system_app = CommandPattern(("xdg-open", TARGET))
    if desktop not in _LINUX_DESKTOPS:
        return Capabilities(
            os_family=OSFamily.LINUX,
            file_manager=CommandPattern(("xdg-open", TARGET)),
            system_app=system_app,
            system_app_url=system_app,
            shell=CommandPattern(("x-terminal-emulator",), cwd_is_target=True),
            desktop=None,
        )

    program, select_flag, shell = _LINUX_DESKTOPS[desktop]
    select = CommandPattern((program, select_flag, TARGET)) if select_flag else None
    return Capabilities(
        os_family=OSFamily.LINUX,
        file_manager=CommandPattern((program, TARGET)),
        file_manager_select=select,
        file_manager_url=CommandPattern((program, TARGET)),
        system_app=system_app,
        system_app_url=system_app,
        shell=shell,
        desktop=desktop,
    )


# ==================== Detection ====================


def detect_os_family(platform_name: Optional[str] = None) -> OSFamily:
    """Map a ``sys.platform`` value to an OS family."""
    name = platform_name if platform_name is not None else sys.platform
    if name in ("win32", "cygwin"):
        return OSFamily.WINDOWS
    if name == "darwin":
        return OSFamily.MACOS
    return OSFamily.LINUX


def detect_desktop(environ: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Return the normalized Linux desktop flavour from ``XDG_CURRENT_DESKTOP``."""
    env = os.environ if environ is None else environ
    raw = env.get("XDG_CURRENT_DESKTOP", "")
    # e.g. "ubuntu:GNOME" lists several names, most specific first
    for part in raw.split(":"):
        key = part.strip().lower()
        if key in _DESKTOP_ALIASES:
            return _DESKTOP_ALIASES[key]
    return None


def capabilities_for(os_family: OSFamily, desktop: Optional[str] = None) -> Capabilities:
    """Return the capability table for a platform."""
    if os_family is OSFamily.WINDOWS:
        return _WINDOWS
    if os_family is OSFamily.MACOS:
        return _MACOS
    return _linux_capabilities(desktop)


@lru_cache(maxsize=None)
def current() -> Capabilities:
    """Capabilities of the running platform, detected once."""
    os_family = detect_os_family()
    desktop = detect_desktop() if os_family is OSFamily.LINUX else None
    capabilities = capabilities_for(os_family, desktop)
    logger.debug(
        f"Detected platform {os_family.value} (desktop={desktop or 'generic'}), "
        f"file manager: {capabilities.file_manager.argv[0]}"
    )
    return capabilities
