"""Custom exceptions for container export operations.

This module defines a hierarchy of exceptions for the export step so that
every failure carries the identifiers a user needs to act on it (the
offending config line, the failing command, the path that could not be
written).

Exception Hierarchy:
    ExportError (base)
        ├── ConfigurationError
        ├── IdentityLookupError
        ├── ConfigReadError
        ├── IdentityMapError
        │   ├── IdentityMapParseError
        │   └── NoIdentityMappingsError
        ├── ArtifactError
        │   ├── ArtifactCreateError
        │   └── ArtifactCopyError
        └── CommandExecutionError

Usage:
    from lxc_export.exceptions import IdentityMapParseError

    if len(fields) != 4:
        raise IdentityMapParseError(line)
"""

from __future__ import annotations

from typing import Optional, Sequence


class ExportError(Exception):
    """Base exception for all export operations."""



class ConfigurationError(ExportError):
    """Export configuration is missing or invalid."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class IdentityLookupError(ExportError):
    """The invoking user's identity could not be determined."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot find current user: {reason}")


class ConfigReadError(ExportError):
    """Container configuration file could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error opening config file {path}: {reason}")


class IdentityMapError(ExportError):
    """Base exception for identity map errors."""



class IdentityMapParseError(IdentityMapError):
    """An identity map directive does not have exactly four fields."""

    def __init__(self, line: str):
        self.line = line
        super().__init__(f'Error parsing idmap: "{line}"')


class NoIdentityMappingsError(IdentityMapError):
    """Container configuration declares no identity mappings."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        msg = "Error parsing idmap to create a command to wrap tar in lxc-usernsexec"
        if path:
            msg += f": no lxc.idmap entries in {path}"
        super().__init__(msg)


class ArtifactError(ExportError):
    """Base exception for output artifact errors."""



class ArtifactCreateError(ArtifactError):
    """Config copy artifact could not be created."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error creating config file {path}: {reason}")


class ArtifactCopyError(ArtifactError):
    """Copying the container config into the artifact failed."""

    def __init__(self, source: str, destination: str, reason: str):
        self.source = source
        self.destination = destination
        self.reason = reason
        super().__init__(
            f"Error copying file {source} to {destination}: {reason}"
        )


class CommandExecutionError(ExportError):
    """An external command exited non-zero or could not be spawned."""

    def __init__(
        self,
        command: Sequence[str],
        reason: str,
        returncode: Optional[int] = None,
    ):
        self.command = list(command)
        self.reason = reason
        self.returncode = returncode
        super().__init__(
            f"Error exporting container: {reason}, "
            f"command: {' '.join(self.command)}"
        )
