"""Command execution for the export step.

Commands go through a CommandRunner so the executor can be exercised with a
runner that records invocations instead of touching containers.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

from lxc_export.exceptions import CommandExecutionError
from lxc_export.logging import LoggerFactory

log = LoggerFactory.for_commands()


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    def execute(self, argv: Sequence[str]) -> CommandResult:
        """Run ``argv`` to completion. Raises OSError if it cannot be spawned."""
        ...


class SubprocessRunner:
    """Runs commands with subprocess, blocking until each one exits.

    Output is decoded with replacement characters; tar names rootfs files
    verbatim and those are not always valid UTF-8.
    """

    def execute(self, argv: Sequence[str]) -> CommandResult:
        result = subprocess.run(
            list(argv),
            text=True,
            encoding="utf-8",
            errors="replace",
            capture_output=True,
        )
        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


def run_checked_command(runner: CommandRunner, argv: Sequence[str]) -> str:
    """Run a command and raise CommandExecutionError if it fails."""
    command = list(argv)
    log.debug(f"Running command: {' '.join(command)}")
    try:
        result = runner.execute(command)
    except OSError as error:
        raise CommandExecutionError(command, str(error)) from error
    if result.stdout.strip():
        log.bind(tags=["commands", "output"]).trace(
            f"stdout: {result.stdout.strip()}"
        )
    if not result.ok:
        stderr = result.stderr.strip()
        stdout = result.stdout.strip()
        if stderr:
            log.debug(f"stderr: {stderr}")
        message = stderr or stdout or f"exit status {result.returncode}"
        raise CommandExecutionError(command, message, returncode=result.returncode)
    return result.stdout
