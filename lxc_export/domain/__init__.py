"""Domain models for container export operations."""

from __future__ import annotations

from .models import (
    ARCHIVE_FILENAME,
    CONFIG_COPY_FILENAME,
    CommandPlan,
    ConfigLine,
    ExportCommand,
    ExportContext,
    Identity,
    IdentityMapEntry,
    MappingKind,
    OtherLine,
    StepAction,
)


__all__ = [
    "ARCHIVE_FILENAME",
    "CONFIG_COPY_FILENAME",
    "CommandPlan",
    "ConfigLine",
    "ExportCommand",
    "ExportContext",
    "Identity",
    "IdentityMapEntry",
    "MappingKind",
    "OtherLine",
    "StepAction",
]
