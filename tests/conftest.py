"""
Pytest configuration and shared fixtures for oslaunch tests.

This file is automatically loaded by pytest and provides reusable fixtures
for all tests in the test suite. Processes are never really started: tests
that launch go through the ``spawned`` recorder.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import pytest

# Keep log files out of the user's cache directory
os.environ.setdefault("OSLAUNCH_LOG_DIR", tempfile.mkdtemp(prefix="oslaunch-test-logs-"))

from oslaunch.launcher import ProcessLauncher  # noqa: E402
from oslaunch.models import OSFamily  # noqa: E402
from oslaunch.platform import Capabilities, capabilities_for  # noqa: E402

# ==================== Path Fixtures ====================


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """
    Create a small directory tree to point actions at.

    Layout:
        home/user/my file.txt
        home/user/report.txt
        home/user/.bashrc
        home/user/projects/
    """
    user = tmp_path / "home" / "user"
    (user / "projects").mkdir(parents=True)
    (user / "my file.txt").write_text("notes")
    (user / "report.txt").write_text("report")
    (user / ".bashrc").write_text("")
    return user


# ==================== Capability Fixtures ====================


@pytest.fixture
def gnome_caps() -> Capabilities:
    """Linux with GNOME: nautilus with --select, URLs, gnome-terminal."""
    return capabilities_for(OSFamily.LINUX, "gnome")


@pytest.fixture
def generic_linux_caps() -> Capabilities:
    """Linux without a known desktop: xdg-open, no URLs, no selection."""
    return capabilities_for(OSFamily.LINUX, None)


@pytest.fixture
def windows_caps() -> Capabilities:
    return capabilities_for(OSFamily.WINDOWS)


@pytest.fixture
def macos_caps() -> Capabilities:
    return capabilities_for(OSFamily.MACOS)


# ==================== Launcher Fixtures ====================


class SpawnRecorder:
    """Stand-in for ``oslaunch.launcher.spawn`` that records every call."""

    def __init__(self):
        self.calls: List[Tuple[Union[str, Tuple[str, ...]], Optional[str]]] = []
        self.fail_for: set = set()

    def __call__(self, args: Union[str, Sequence[str]], cwd: Optional[str] = None) -> None:
        from oslaunch.exceptions import SpawnError

        program = args.split()[0] if isinstance(args, str) else args[0]
        if program in self.fail_for:
            raise SpawnError(f"[Errno 2] No such file or directory: '{program}'", command=[program])
        self.calls.append((args if isinstance(args, str) else tuple(args), cwd))

    @property
    def argvs(self) -> List[Union[str, Tuple[str, ...]]]:
        """Argument vectors, or raw command lines, in start order."""
        return [args for args, _ in self.calls]


@pytest.fixture
def spawned() -> SpawnRecorder:
    return SpawnRecorder()


@pytest.fixture
def make_launcher(spawned):
    """Build a ProcessLauncher for a capability table, recording spawns."""

    def factory(capabilities: Capabilities) -> ProcessLauncher:
        return ProcessLauncher(capabilities, spawner=spawned)

    return factory


# ==================== Markers ====================


def pytest_configure(config):
    """
    Register custom pytest markers.
    """
    config.addinivalue_line("markers", "unit: Unit tests with mocked external dependencies")
    config.addinivalue_line("markers", "integration: Integration tests with real file I/O")
