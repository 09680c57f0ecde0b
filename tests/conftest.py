"""
Pytest configuration and shared fixtures for lxc-export tests.

This module provides common fixtures and utilities used across all test modules.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from unittest.mock import Mock

import pytest

from lxc_export.config.settings import ExportConfig
from lxc_export.domain import Identity
from lxc_export.exceptions import IdentityLookupError
from lxc_export.storage.command_runners import CommandResult


SAMPLE_CONTAINER_CONFIG = """\
# Template used to create this container: /usr/share/lxc/templates/lxc-download
lxc.include = /usr/share/lxc/config/common.conf
lxc.include = /usr/share/lxc/config/userns.conf
lxc.arch = linux64

# Container specific configuration
lxc.idmap = u 0 100000 65536
lxc.idmap = g 0 100000 65536
lxc.rootfs.path = dir:/var/lib/lxc/web01/rootfs
lxc.uts.name = web01

# Network configuration
lxc.net.0.type = veth
lxc.net.0.link = lxcbr0
lxc.net.0.flags = up
"""


# ==============================================================================
# Fakes
# ==============================================================================


@dataclass
class RecordingRunner:
    """CommandRunner that records argv and returns canned results.

    ``fail_on`` decides, per argv, whether the command should exit non-zero.
    """

    fail_on: Optional[Callable[[Sequence[str]], bool]] = None
    returncode: int = 1
    stderr: str = "command failed"
    calls: List[List[str]] = field(default_factory=list)

    def execute(self, argv: Sequence[str]) -> CommandResult:
        self.calls.append(list(argv))
        if self.fail_on is not None and self.fail_on(argv):
            return CommandResult(returncode=self.returncode, stderr=self.stderr)
        return CommandResult(returncode=0)


class FakeUi:
    def __init__(self) -> None:
        self.said: List[str] = []
        self.errors: List[str] = []

    def say(self, message: str) -> None:
        self.said.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


# ==============================================================================
# Container Fixtures
# ==============================================================================


@pytest.fixture
def container_config_file(tmp_path) -> Path:
    """
    Fixture providing a container config file with two idmap entries.

    Returns:
        Path to the config file.
    """
    path = tmp_path / "lxc" / "web01" / "config"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_CONTAINER_CONFIG, encoding="utf-8")
    return path


@pytest.fixture
def output_dir(tmp_path) -> Path:
    """Fixture providing an existing, empty output directory."""
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def export_config(container_config_file, output_dir) -> ExportConfig:
    return ExportConfig(
        container_name="web01",
        output_dir=output_dir,
        config_file=container_config_file,
    )


# ==============================================================================
# Collaborator Fixtures
# ==============================================================================


@pytest.fixture
def recording_runner() -> RecordingRunner:
    """Fixture providing a runner where every command succeeds."""
    return RecordingRunner()


@pytest.fixture
def fake_ui() -> FakeUi:
    return FakeUi()


@pytest.fixture
def root_identity() -> Callable[[], Identity]:
    return lambda: Identity(uid=0, home_dir="/root")


@pytest.fixture
def alice_identity() -> Callable[[], Identity]:
    return lambda: Identity(uid=1000, home_dir="/home/alice")


@pytest.fixture
def failing_identity() -> Callable[[], Identity]:
    def resolver():
        raise IdentityLookupError("no passwd entry for uid 4242")

    return resolver


@pytest.fixture
def mock_subprocess_run(mocker) -> Mock:
    """
    Fixture providing a mock for subprocess.run.

    Returns:
        Mock object for subprocess.run
    """
    return mocker.patch("lxc_export.storage.command_runners.subprocess.run")


@pytest.fixture
def make_runner() -> Callable[..., RecordingRunner]:
    """Fixture providing a factory for runners with custom failure rules."""
    return RecordingRunner
