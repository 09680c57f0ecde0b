from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, TextIO

from lxc_export.logging import get_logger


class Ui(Protocol):
    def say(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


@dataclass
class StateBag:
    """Values shared between the orchestrator and its steps."""

    values: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def put(self, key: str, value: Any) -> None:
        self.values[key] = value

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def __contains__(self, key: str) -> bool:
        return key in self.values


class ConsoleUi:
    """Writes user-facing messages to the terminal."""

    def __init__(
        self, out: Optional[TextIO] = None, err: Optional[TextIO] = None
    ) -> None:
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self._log = get_logger(source="ui", tags=["ui"])

    def say(self, message: str) -> None:
        self._log.debug(f"say: {message}")
        print(f"==> {message}", file=self.out, flush=True)

    def error(self, message: str) -> None:
        self._log.debug(f"error: {message}")
        print(message, file=self.err, flush=True)
