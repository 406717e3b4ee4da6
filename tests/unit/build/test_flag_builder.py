"""
Unit tests for FlagBuilder.

Tests preset to compiler flag resolution.
"""

import pytest

from eepl.build.flag_builder import FlagBuilder
from eepl.config.build_options import BuildOptions, Preset


class TestPresetFlags:
    """Test suite for fixed presets."""

    def test_debug(self):
        assert FlagBuilder.resolve_flags(Preset.DEBUG) == ["-g", "-O0"]

    def test_optimized_debug(self):
        assert FlagBuilder.resolve_flags(Preset.OPTIMIZED_DEBUG) == ["-g", "-O3"]

    def test_release(self):
        """Release: highest optimization, runtime checks off, no debug info."""
        flags = FlagBuilder.resolve_flags(Preset.RELEASE)

        assert flags == ["-O3", "-drtc"]
        assert "-g" not in flags

    def test_safe_release_keeps_runtime_checks(self):
        assert FlagBuilder.resolve_flags(Preset.SAFE_RELEASE) == ["-O3"]

    @pytest.mark.parametrize(
        "preset",
        [Preset.DEBUG, Preset.OPTIMIZED_DEBUG, Preset.RELEASE, Preset.SAFE_RELEASE],
    )
    def test_fixed_presets_ignore_custom_options(self, preset):
        """Fixed presets depend on the preset alone."""
        custom = BuildOptions(
            preset=preset, optimization="-O1", generate_debug_info=True, runtime_checks=False
        )

        assert FlagBuilder.resolve_flags(preset, custom) == FlagBuilder.resolve_flags(preset)

    def test_returned_list_is_a_copy(self):
        """Mutating a result does not leak into later calls."""
        flags = FlagBuilder.resolve_flags(Preset.DEBUG)
        flags.append("-Werror")

        assert FlagBuilder.resolve_flags(Preset.DEBUG) == ["-g", "-O0"]

    def test_unknown_preset_yields_no_flags(self, caplog):
        flags = FlagBuilder.resolve_flags(None)

        assert flags == []
        assert "compiler defaults" in caplog.text


class TestCustomFlags:
    """Test suite for the Custom preset."""

    def test_debug_info_with_runtime_checks(self):
        options = BuildOptions(
            preset=Preset.CUSTOM, optimization="-O1", generate_debug_info=True, runtime_checks=True
        )

        assert FlagBuilder.from_options(options) == ["-O1", "-g"]

    def test_no_debug_info_without_runtime_checks(self):
        options = BuildOptions(
            preset=Preset.CUSTOM, optimization="-O2", generate_debug_info=False, runtime_checks=False
        )

        assert FlagBuilder.from_options(options) == ["-O2", "-drtc"]

    def test_all_toggles(self):
        options = BuildOptions(
            preset=Preset.CUSTOM, optimization="-Os", generate_debug_info=True, runtime_checks=False
        )

        assert FlagBuilder.from_options(options) == ["-Os", "-g", "-drtc"]

    def test_empty_optimization_is_omitted(self):
        options = BuildOptions(preset=Preset.CUSTOM, optimization="", runtime_checks=True)

        assert FlagBuilder.from_options(options) == []

    def test_custom_without_options_uses_defaults(self):
        assert FlagBuilder.resolve_flags(Preset.CUSTOM) == ["-O0"]
