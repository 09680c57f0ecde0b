"""Tests for export domain models."""

from pathlib import Path

import pytest

from lxc_export.domain import (
    CommandPlan,
    ExportCommand,
    ExportContext,
    Identity,
    IdentityMapEntry,
    MappingKind,
    StepAction,
)


class TestIdentity:
    def test_root(self):
        assert Identity(uid=0).is_root

    def test_regular_user(self):
        assert not Identity(uid=1000, home_dir="/home/alice").is_root


class TestExportContext:
    def test_derived_paths(self):
        context = ExportContext(
            container_name="web01",
            container_dir=Path("/var/lib/lxc/web01"),
            output_dir=Path("/tmp/out"),
        )

        assert context.rootfs_dir == Path("/var/lib/lxc/web01/rootfs")
        assert context.archive_path == Path("/tmp/out/rootfs.tar.gz")
        assert context.config_copy_path == Path("/tmp/out/lxc-config")


class TestIdentityMapEntry:
    def test_remap_arguments(self):
        entry = IdentityMapEntry("g", "0", "100000", "65536")

        assert entry.to_arguments() == ("-m", "g:0:100000:65536")

    def test_kind_values(self):
        assert {kind.value for kind in MappingKind} == {"u", "g"}

    def test_is_frozen(self):
        entry = IdentityMapEntry("u", "0", "100000", "65536")

        with pytest.raises(AttributeError):
            entry.kind = "g"


class TestCommandPlan:
    def test_iteration_preserves_order(self):
        plan = CommandPlan(
            commands=(
                ExportCommand("stop", ("lxc-stop", "--name", "web01")),
                ExportCommand("finalize", ("chmod", "+x", "/tmp/out/lxc-config")),
            )
        )

        assert len(plan) == 2
        assert plan.names == ("stop", "finalize")
        assert [command.describe() for command in plan] == [
            "lxc-stop --name web01",
            "chmod +x /tmp/out/lxc-config",
        ]


def test_step_action_values():
    assert StepAction.CONTINUE.value == "continue"
    assert StepAction.HALT.value == "halt"
