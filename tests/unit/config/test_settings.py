"""
Unit tests for eepl.ini settings parsing.
"""

import pytest

from eepl.config import NO_DEVICE, Preset, ProjectSettings, ProjectSettingsError
from eepl.config.device_target import DeviceTargetError


class TestProjectSettings:
    """Test suite for ProjectSettings."""

    @pytest.fixture
    def write_ini(self, workspace):
        def write(content):
            ini_path = workspace / "eepl.ini"
            ini_path.write_text(content)
            return ProjectSettings(ini_path)

        return write

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectSettingsError, match="not found"):
            ProjectSettings(tmp_path / "eepl.ini")

    def test_malformed_file(self, write_ini):
        with pytest.raises(ProjectSettingsError, match="Failed to parse"):
            write_ini("presets = Debug\n")

    def test_defaults(self, write_ini):
        settings = write_ini("[build]\n")

        options = settings.get_build_options()
        assert options.preset is Preset.DEBUG
        assert options.optimization == "-O0"
        assert options.generate_debug_info is False
        assert options.runtime_checks is True
        assert settings.get_input_file() == "main.es"
        assert settings.get_device_target() is NO_DEVICE
        assert settings.get_toolchain_root() is None

    @pytest.mark.parametrize(
        "name, preset",
        [
            ("Debug", Preset.DEBUG),
            ("OpDebug", Preset.OPTIMIZED_DEBUG),
            ("Release", Preset.RELEASE),
            ("Safe Release", Preset.SAFE_RELEASE),
            ("Custom", Preset.CUSTOM),
        ],
    )
    def test_persisted_preset_names(self, write_ini, name, preset):
        settings = write_ini(f"[build]\npresets = {name}\n")

        assert settings.get_build_options().preset is preset

    def test_unknown_preset(self, write_ini, caplog):
        settings = write_ini("[build]\npresets = Turbo\n")

        assert settings.get_build_options().preset is None
        assert "Turbo" in caplog.text

    def test_custom_options(self, write_ini):
        settings = write_ini(
            "[build]\n"
            "presets = Custom\n"
            "optimization = -O1\n"
            "generateDbgInfo = true\n"
            "runtimeChecks = false\n"
            "inputFile = src/app.es\n"
        )

        options = settings.get_build_options()
        assert options.optimization == "-O1"
        assert options.generate_debug_info is True
        assert options.runtime_checks is False
        assert settings.get_input_file() == "src/app.es"

    def test_inline_comments_are_stripped(self, write_ini, device_descriptor):
        settings = write_ini(
            "[build]\n"
            "presets = Custom          ; Debug, OpDebug, Release, Safe Release, Custom\n"
            "optimization = -O1          ; Custom only\n"
            "generateDbgInfo = true      # Custom only\n"
            f"[device]\ntarget = {device_descriptor.as_posix()}   ; absent => no device\n"
        )

        options = settings.get_build_options()
        assert options.preset is Preset.CUSTOM
        assert options.optimization == "-O1"
        assert options.generate_debug_info is True
        assert settings.get_device_target().dev_name == "nrf52"

    def test_invalid_boolean(self, write_ini):
        settings = write_ini("[build]\ngenerateDbgInfo = maybe\n")

        with pytest.raises(ProjectSettingsError, match="generateDbgInfo"):
            settings.get_build_options()

    def test_relative_device_path(self, write_ini, workspace):
        device_dir = workspace / "devices" / "a"
        device_dir.mkdir(parents=True)
        (device_dir / "targetInfo.json").write_text(
            '{"description": "A", "devName": "a", "triplet": "t", "stdlib": "s"}'
        )
        settings = write_ini("[device]\ntarget = devices/a/targetInfo.json\n")

        device = settings.get_device_target()
        assert device.dev_name == "a"
        assert device.descriptor_path.endswith("devices/a/targetInfo.json")

    def test_missing_device_descriptor(self, write_ini):
        settings = write_ini("[device]\ntarget = devices/none/targetInfo.json\n")

        with pytest.raises(DeviceTargetError):
            settings.get_device_target()

    def test_toolchain_root(self, write_ini, tmp_path):
        settings = write_ini(f"[toolchain]\nroot = {tmp_path.as_posix()}/eec\n")

        assert settings.get_toolchain_root() == tmp_path / "eec"

    def test_snapshot(self, write_ini, workspace, device_descriptor):
        settings = write_ini(
            "[build]\npresets = Release\ninputFile = app.es\n"
            f"[device]\ntarget = {device_descriptor.as_posix()}\n"
        )

        config = settings.snapshot()
        assert config.workspace_dir == workspace.absolute()
        assert config.options.preset is Preset.RELEASE
        assert config.device.dev_name == "nrf52"
        assert config.input_file == "app.es"
