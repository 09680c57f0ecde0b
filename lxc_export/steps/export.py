"""Export a container's root filesystem with its identity mappings.

The export is a short pipeline. Each stage either returns the input of the
next one or raises an ExportError that halts the step:

    resolve context -> load remap args -> copy config -> build plan -> run plan

The command plan is fixed and strictly sequential:

    1. lxc-stop --name NAME
    2. sudo chmod -R 0777 OUTPUT_DIR
    3. lxc-usernsexec -m ... -- tar -C CONTAINER_DIR/rootfs ... -czf ARCHIVE ./
    4. chmod +x CONFIG_COPY
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Sequence

from lxc_export.config.settings import ExportConfig
from lxc_export.domain import CommandPlan, ExportCommand, ExportContext, StepAction
from lxc_export.exceptions import (
    ArtifactCopyError,
    ArtifactCreateError,
    ExportError,
)
from lxc_export.logging import operation_context
from lxc_export.storage.command_runners import (
    CommandRunner,
    SubprocessRunner,
    run_checked_command,
)
from lxc_export.storage.idmap import load_remap_arguments
from lxc_export.storage.paths import (
    IdentityResolver,
    resolve_export_context,
    resolve_identity,
)

from .state import StateBag, Ui

if TYPE_CHECKING:
    from loguru import Logger

# Device-log socket, relative to the archive root
ARCHIVE_EXCLUDES = ("./rootfs/dev/log",)
OUTPUT_DIR_MODE = "0777"


def create_config_artifact(source: Path, destination: Path) -> None:
    """Write a byte-identical copy of the container config to ``destination``.

    Raises:
        ArtifactCreateError: If the destination cannot be created
        ArtifactCopyError: If reading the source or writing the copy fails
    """
    try:
        dst_handle = open(destination, "wb")
    except OSError as error:
        raise ArtifactCreateError(str(destination), str(error)) from error
    with dst_handle:
        try:
            with open(source, "rb") as src_handle:
                shutil.copyfileobj(src_handle, dst_handle)
        except OSError as error:
            raise ArtifactCopyError(
                str(source), str(destination), str(error)
            ) from error


def build_command_plan(
    context: ExportContext, remap_arguments: Sequence[str]
) -> CommandPlan:
    """Build the stop, relax, archive and finalize commands for an export."""
    archive_argv: List[str] = ["lxc-usernsexec", *remap_arguments, "--"]
    archive_argv += [
        "tar",
        "-C",
        str(context.rootfs_dir),
        "--numeric-owner",
        "--anchored",
        *(f"--exclude={path}" for path in ARCHIVE_EXCLUDES),
        "-czf",
        str(context.archive_path),
        "./",
    ]
    return CommandPlan(
        commands=(
            ExportCommand(
                "stop", ("lxc-stop", "--name", context.container_name)
            ),
            ExportCommand(
                "relax-permissions",
                ("sudo", "chmod", "-R", OUTPUT_DIR_MODE, str(context.output_dir)),
            ),
            ExportCommand("archive", tuple(archive_argv)),
            ExportCommand(
                "finalize", ("chmod", "+x", str(context.config_copy_path))
            ),
        )
    )


def run_command_plan(
    plan: CommandPlan, runner: CommandRunner, log: Optional[Logger] = None
) -> None:
    """Run each command in order, stopping at the first failure.

    Raises:
        CommandExecutionError: For the first command that fails
    """
    for index, command in enumerate(plan, start=1):
        if log is not None:
            log.info(f"[{index}/{len(plan)}] {command.name}: {command.describe()}")
        run_checked_command(runner, command.argv)


def export_container(
    config: ExportConfig,
    ui: Ui,
    runner: Optional[CommandRunner] = None,
    identity_resolver: IdentityResolver = resolve_identity,
) -> ExportContext:
    """Export the configured container. Raises ExportError on any failure."""
    runner = runner or SubprocessRunner()
    with operation_context("export", container=config.container_name) as log:
        context = resolve_export_context(
            config.container_name, config.output_dir, identity_resolver
        )
        config_file = config.config_file_for(context.container_dir)
        log.debug(f"Container dir: {context.container_dir}, config: {config_file}")

        remap_arguments = load_remap_arguments(config_file)
        create_config_artifact(config_file, context.config_copy_path)
        plan = build_command_plan(context, remap_arguments)

        ui.say("Exporting container...")
        run_command_plan(plan, runner, log=log)
        log.info(f"Archive written to {context.archive_path}")
    return context


class StepExport:
    """Build step that exports the container named in ``state["config"]``."""

    def run(self, state: StateBag) -> StepAction:
        config: ExportConfig = state["config"]
        ui: Ui = state["ui"]
        try:
            export_container(
                config,
                ui,
                runner=state.get("runner"),
                identity_resolver=state.get("identity_resolver") or resolve_identity,
            )
        except ExportError as error:
            state.put("error", error)
            ui.error(str(error))
            return StepAction.HALT
        return StepAction.CONTINUE

    def cleanup(self, state: StateBag) -> None:
        pass
