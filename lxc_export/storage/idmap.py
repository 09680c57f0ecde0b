"""Identity map parsing for LXC container configurations.

Each ``lxc.idmap`` directive maps a range of ids inside the container's user
namespace to a range on the host::

    lxc.idmap = u 0 100000 65536
    lxc.idmap = g 0 100000 65536

Lines are classified into IdentityMapEntry or OtherLine and only the mapping
entries are folded into ``lxc-usernsexec -m`` arguments. Source order is
preserved because later mappings for the same id shadow earlier ones.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from lxc_export.domain import (
    ConfigLine,
    IdentityMapEntry,
    MappingKind,
    OtherLine,
)
from lxc_export.exceptions import (
    ConfigReadError,
    IdentityMapParseError,
    NoIdentityMappingsError,
)
from lxc_export.logging import LoggerFactory

# lxc.id_map is the pre-3.0 spelling of the same key
IDMAP_MARKERS = ("lxc.idmap", "lxc.id_map")
IDMAP_FIELD_COUNT = 4
VALID_KINDS = frozenset(kind.value for kind in MappingKind)

log = LoggerFactory.for_idmap()


def read_container_config(path: Path) -> str:
    """Read the container configuration file as text.

    Raises:
        ConfigReadError: If the file cannot be opened, read or decoded
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ConfigReadError(str(path), str(error)) from error


def is_idmap_directive(line: str) -> bool:
    return any(marker in line for marker in IDMAP_MARKERS)


def classify_line(line: str) -> ConfigLine:
    """Classify a config line as an identity mapping or anything else.

    Raises:
        IdentityMapParseError: If a mapping directive is malformed
    """
    if not is_idmap_directive(line):
        return OtherLine(line)

    _, delimiter, value = line.partition("=")
    if not delimiter:
        raise IdentityMapParseError(line)

    fields = value.strip().split(" ")
    if len(fields) != IDMAP_FIELD_COUNT:
        raise IdentityMapParseError(line)

    kind, container_id, host_id, range_length = fields
    if kind not in VALID_KINDS:
        raise IdentityMapParseError(line)

    return IdentityMapEntry(
        kind=kind,
        container_id=container_id,
        host_id=host_id,
        range_length=range_length,
        line=line,
    )


def parse_idmap(text: str) -> List[IdentityMapEntry]:
    """Return every identity mapping in ``text`` in source order.

    Parsing stops at the first malformed directive; no partial result is
    returned.
    """
    entries = []
    for line in text.splitlines():
        classified = classify_line(line)
        if isinstance(classified, IdentityMapEntry):
            log.trace(f"idmap entry: {classified.remap_value}")
            entries.append(classified)
    return entries


def build_remap_arguments(
    entries: Iterable[IdentityMapEntry], source: Optional[str] = None
) -> List[str]:
    """Fold mapping entries into ``-m kind:cid:hid:len`` argument pairs.

    Raises:
        NoIdentityMappingsError: If there are no entries
    """
    arguments: List[str] = []
    for entry in entries:
        arguments.extend(entry.to_arguments())
    if not arguments:
        raise NoIdentityMappingsError(source)
    return arguments


def load_remap_arguments(config_path: Path) -> List[str]:
    """Read a container config and return its lxc-usernsexec mapping args."""
    text = read_container_config(config_path)
    entries = parse_idmap(text)
    arguments = build_remap_arguments(entries, source=str(config_path))
    log.debug(
        f"Parsed {len(entries)} idmap entries from {config_path}: "
        f"{' '.join(arguments)}"
    )
    return arguments
