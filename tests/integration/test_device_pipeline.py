"""
Integration test: eepl.ini + device descriptor + toolchain tree on disk to
ready invocations.
"""

import pytest

from eepl.build import DirectoryStatus
from eepl.build.stage_table import StageKind
from eepl.config import ProjectSettings
from eepl.packages import Toolchain
from eepl.tasks import TaskProvider


@pytest.mark.integration
class TestDevicePipelineIntegration:
    """Full pipeline for a project configured through eepl.ini."""

    @pytest.fixture
    def settings(self, workspace, device_descriptor):
        (workspace / "eepl.ini").write_text(
            "[build]\n"
            "presets = Custom\n"
            "optimization = -O1\n"
            "generateDbgInfo = true\n"
            "runtimeChecks = true\n"
            "inputFile = app.es\n"
            "\n"
            "[device]\n"
            f"target = {device_descriptor.as_posix()}\n"
        )
        return ProjectSettings.from_workspace(workspace)

    def test_full_pipeline(self, settings, toolchain_root, workspace, device_descriptor):
        provider = TaskProvider(Toolchain(toolchain_root))

        compile_task, link, package, flash = provider.create_pipeline(settings.snapshot())

        out_dir = f"{workspace.as_posix()}/out/nrf52"
        assert compile_task.args[0] == f"{workspace.as_posix()}/app.es"
        assert "-O1" in compile_task.args and "-g" in compile_task.args
        assert "-drtc" not in compile_task.args
        assert compile_task.args[-1] == f"{out_dir}/output.o"
        assert link.args[0] == compile_task.args[-1]
        assert f"{device_descriptor.parent.as_posix()}/target_out.ld" in link.args
        assert package.args[1] == f"{out_dir}/output.elf"
        assert flash.args == (f"{out_dir}/prog.alf",)

        assert compile_task.output_dir.status is DirectoryStatus.CREATED
        assert link.output_dir.status is DirectoryStatus.EXISTS
        assert package.output_dir.status is DirectoryStatus.EXISTS
        assert flash.output_dir is None

    def test_rebuild_is_idempotent(self, settings, toolchain_root):
        provider = TaskProvider(Toolchain(toolchain_root))

        first = provider.create_pipeline(settings.snapshot())
        second = provider.create_pipeline(settings.snapshot())

        assert [t.command_line for t in first] == [t.command_line for t in second]
        assert all(
            t.output_dir is None or t.output_dir.status is DirectoryStatus.EXISTS for t in second
        )

    def test_simulator(self, settings, toolchain_root, workspace):
        provider = TaskProvider(Toolchain(toolchain_root))

        (simulate,) = provider.create_pipeline(settings.snapshot(), simulate=True)

        assert simulate.descriptor.kind is StageKind.SIMULATE
        assert simulate.args[0] == f"{workspace.as_posix()}/app.es"
