"""Unit tests for the tasks and show commands."""

from unittest.mock import patch

import pytest

from eepl.cli import ShowArgs, TasksArgs, show_command, tasks_command


@pytest.fixture
def project(workspace, toolchain_root, device_descriptor):
    (workspace / "eepl.ini").write_text(
        "[build]\npresets = Release\n"
        f"[device]\ntarget = {device_descriptor.as_posix()}\n"
        f"[toolchain]\nroot = {toolchain_root.as_posix()}\n"
    )
    return workspace


class TestTasksCommand:
    """Tests for tasks_command."""

    def test_lists_device_pipeline(self, project, capsys):
        with pytest.raises(SystemExit) as exc_info:
            tasks_command(TasksArgs(project_dir=project))

        assert exc_info.value.code == 0
        output = capsys.readouterr().out
        assert "1. Build for Device" in output
        assert "4. EEmbFlasher" in output
        assert not (project / "out").exists()

    def test_materialize_creates_output_dir(self, project, capsys):
        with pytest.raises(SystemExit):
            tasks_command(TasksArgs(project_dir=project, materialize=True))

        assert (project / "out" / "nrf52").is_dir()
        assert "(created)" in capsys.readouterr().out

    def test_simulate(self, project, capsys):
        with pytest.raises(SystemExit):
            tasks_command(TasksArgs(project_dir=project, simulate=True))

        output = capsys.readouterr().out
        assert "Run Simulator" in output
        assert "linker" not in output

    def test_no_device(self, workspace, toolchain_root, capsys):
        (workspace / "eepl.ini").write_text(f"[toolchain]\nroot = {toolchain_root.as_posix()}\n")

        with pytest.raises(SystemExit) as exc_info:
            tasks_command(TasksArgs(project_dir=workspace))

        assert exc_info.value.code == 1
        assert "Select a target device" in capsys.readouterr().out

    def test_device_option_answers_selection(self, workspace, toolchain_root, device_descriptor, capsys):
        (workspace / "eepl.ini").write_text(f"[toolchain]\nroot = {toolchain_root.as_posix()}\n")

        with pytest.raises(SystemExit) as exc_info:
            tasks_command(TasksArgs(project_dir=workspace, device=device_descriptor))

        assert exc_info.value.code == 0
        assert "out/nrf52/output.o" in capsys.readouterr().out

    def test_missing_settings(self, workspace, capsys):
        with pytest.raises(SystemExit) as exc_info:
            tasks_command(TasksArgs(project_dir=workspace))

        assert exc_info.value.code == 1
        assert "eepl.ini" in capsys.readouterr().out


class TestShowCommand:
    """Tests for show_command."""

    def test_show_package(self, project, capsys):
        with pytest.raises(SystemExit) as exc_info:
            show_command(ShowArgs(stage="ebuild", project_dir=project))

        assert exc_info.value.code == 0
        output = capsys.readouterr().out
        assert "buildAELF" in output
        assert "out/nrf52/prog.alf" in output

    def test_unknown_stage(self, project):
        with pytest.raises(SystemExit) as exc_info:
            show_command(ShowArgs(stage="deploy", project_dir=project))

        assert exc_info.value.code == 2

    def test_error_while_building_is_not_an_unknown_stage(self, project, capsys):
        with patch("eepl.cli.PipelineBuilder.build_stage", side_effect=ValueError("bad value")):
            with pytest.raises(SystemExit) as exc_info:
                show_command(ShowArgs(stage="link", project_dir=project))

        assert exc_info.value.code == 1
        output = capsys.readouterr().out
        assert "Unexpected error" in output
        assert "Unknown stage" not in output
