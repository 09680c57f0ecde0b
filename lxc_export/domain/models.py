"""Domain model for container export operations.

Type-safe objects for the values that flow through one export: the resolved
paths, the parsed identity mappings and the fixed command plan.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple, Union


ARCHIVE_FILENAME = "rootfs.tar.gz"
CONFIG_COPY_FILENAME = "lxc-config"


# ==============================================================================
# Export Context
# ==============================================================================


@dataclass(frozen=True)
class Identity:
    """The invoking user as seen by the identity resolver."""

    uid: int
    home_dir: str = ""

    @property
    def is_root(self) -> bool:
        return self.uid == 0


@dataclass(frozen=True)
class ExportContext:
    """Resolved paths for one export invocation.

    Created once from the build configuration and never mutated.
    """

    container_name: str  # e.g., "web01"
    container_dir: Path  # e.g., /var/lib/lxc/web01
    output_dir: Path  # e.g., /tmp/out

    @property
    def rootfs_dir(self) -> Path:
        """Root filesystem of the container (source of the archive)."""
        return self.container_dir / "rootfs"

    @property
    def archive_path(self) -> Path:
        return self.output_dir / ARCHIVE_FILENAME

    @property
    def config_copy_path(self) -> Path:
        return self.output_dir / CONFIG_COPY_FILENAME


# ==============================================================================
# Identity Map Domain
# ==============================================================================


class MappingKind(str, Enum):
    """Kind of id an identity mapping applies to."""

    USER = "u"
    GROUP = "g"


@dataclass(frozen=True)
class IdentityMapEntry:
    """One ``lxc.idmap = <kind> <cid> <hid> <len>`` directive."""

    kind: str
    container_id: str
    host_id: str
    range_length: str
    line: str = ""  # Raw source line, kept for error reporting

    @property
    def remap_value(self) -> str:
        """Value passed to ``lxc-usernsexec -m`` (e.g., "u:0:100000:65536")."""
        return (
            f"{self.kind}:{self.container_id}:{self.host_id}:{self.range_length}"
        )

    def to_arguments(self) -> Tuple[str, str]:
        return ("-m", self.remap_value)


@dataclass(frozen=True)
class OtherLine:
    """A configuration line that is not an identity mapping."""

    line: str


ConfigLine = Union[IdentityMapEntry, OtherLine]


# ==============================================================================
# Command Plan Domain
# ==============================================================================


@dataclass(frozen=True)
class ExportCommand:
    """A single external command in the export plan."""

    name: str  # e.g., "stop", "archive"
    argv: Tuple[str, ...]

    def describe(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class CommandPlan:
    """Ordered commands for an export: stop, relax, archive, finalize.

    Commands run strictly in sequence; each one depends on the file-system or
    process state left by the previous one.
    """

    commands: Tuple[ExportCommand, ...]

    def __iter__(self):
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(command.name for command in self.commands)


class StepAction(Enum):
    """Signal returned to the orchestrator after a step runs."""

    CONTINUE = "continue"
    HALT = "halt"
