"""Resolve where a container lives on disk and where its export goes.

Privileged containers live in the system-wide store; unprivileged ones live
under the invoking user's home directory. This module only derives paths and
never touches the file system.
"""

from __future__ import annotations

import os
import pwd
from pathlib import Path
from typing import Callable, Optional

from lxc_export.domain import ExportContext, Identity
from lxc_export.exceptions import IdentityLookupError
from lxc_export.logging import LoggerFactory

SYSTEM_LXC_DIR = Path("/var/lib/lxc")
USER_LXC_SUBDIR = Path(".local") / "share" / "lxc"

IdentityResolver = Callable[[], Identity]

log = LoggerFactory.for_config()


def resolve_identity() -> Identity:
    """Look up the current user's uid and home directory.

    Raises:
        IdentityLookupError: If the uid has no passwd entry and $HOME is unset
    """
    uid = os.getuid()
    try:
        home_dir = pwd.getpwuid(uid).pw_dir
    except KeyError:
        home_dir = os.environ.get("HOME", "")
        if not home_dir:
            raise IdentityLookupError(f"no passwd entry for uid {uid}")
    return Identity(uid=uid, home_dir=home_dir)


def lxc_storage_root(identity: Optional[Identity]) -> Path:
    """Container store for the given user (system store for root or unknown)."""
    if identity is None or identity.is_root or not identity.home_dir:
        return SYSTEM_LXC_DIR
    return Path(identity.home_dir) / USER_LXC_SUBDIR


def resolve_export_context(
    container_name: str,
    output_dir: Path,
    identity_resolver: IdentityResolver = resolve_identity,
) -> ExportContext:
    """Derive the container directory and artifact paths for an export.

    A failed identity lookup is not fatal: the system-wide store is used.
    """
    try:
        identity: Optional[Identity] = identity_resolver()
    except IdentityLookupError as error:
        log.warning(f"{error}. Falling back to {SYSTEM_LXC_DIR}...")
        identity = None

    root = lxc_storage_root(identity)
    log.debug(f"Using LXC storage root {root} for {container_name}")
    return ExportContext(
        container_name=container_name,
        container_dir=root / container_name,
        output_dir=Path(output_dir),
    )
