"""Settings storage for export configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from lxc_export.exceptions import ConfigurationError


SETTINGS_PATH = Path(
    os.environ.get(
        "LXC_EXPORT_SETTINGS_PATH",
        Path.home() / ".config" / "lxc-export" / "settings.json",
    )
)

DEFAULT_OUTPUT_DIR_PREFIX = "output-"
CONTAINER_CONFIG_FILENAME = "config"

DEFAULT_SETTINGS: dict[str, Any] = {
    "container_name": None,
    "output_dir": None,
    "config_file": None,
}

SETTING_TYPES: dict[str, tuple] = {
    "container_name": (str,),
    "output_dir": (str, os.PathLike),
    "config_file": (str, os.PathLike),
}


@dataclass(frozen=True)
class ExportConfig:
    """Build configuration consumed by the export step."""

    container_name: str
    output_dir: Path
    config_file: Optional[Path] = None

    def config_file_for(self, container_dir: Path) -> Path:
        """Container config path, defaulting to the one in the container dir."""
        if self.config_file is not None:
            return self.config_file
        return container_dir / CONTAINER_CONFIG_FILENAME


def read_settings(settings_path: Optional[Path] = None) -> dict[str, Any]:
    path = settings_path or SETTINGS_PATH
    values = dict(DEFAULT_SETTINGS)
    if not path.exists():
        return values
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise ConfigurationError(f"Cannot read settings file {path}: {error}")
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Settings file {path} must contain a JSON object"
        )
    values.update(data)
    return values


def load_config(
    settings_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ExportConfig:
    """Build an ExportConfig from the settings file and explicit overrides.

    Overrides whose value is None are ignored so unset CLI flags fall
    through to the settings file.
    """
    values = read_settings(settings_path)
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    for key, allowed in SETTING_TYPES.items():
        value = values.get(key)
        if value is not None and not isinstance(value, allowed):
            raise ConfigurationError(
                f"{key} must be a string, got {type(value).__name__}", key=key
            )

    container_name = (values.get("container_name") or "").strip()
    if not container_name:
        raise ConfigurationError(
            "container_name must be specified", key="container_name"
        )
    if "/" in container_name:
        raise ConfigurationError(
            f"Invalid container name: {container_name}", key="container_name"
        )

    output_dir = values.get("output_dir") or (
        f"{DEFAULT_OUTPUT_DIR_PREFIX}{container_name}"
    )
    config_file = values.get("config_file")

    return ExportConfig(
        container_name=container_name,
        output_dir=Path(os.path.abspath(os.fspath(output_dir))),
        config_file=(
            Path(os.path.abspath(os.fspath(config_file))) if config_file else None
        ),
    )
