"""
eepl.ini project settings parser.

This module reads the per-workspace settings file and produces the immutable
BuildConfig snapshot that the pipeline builder works from.
"""

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .build_options import BuildOptions, Preset
from .device_target import NO_DEVICE, DeviceTarget

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "eepl.ini"


class ProjectSettingsError(Exception):
    """Exception raised for eepl.ini configuration errors."""

    pass


@dataclass(frozen=True)
class BuildConfig:
    """Snapshot of everything a pipeline build reads from configuration."""

    workspace_dir: Path
    options: BuildOptions
    device: DeviceTarget
    input_file: str

    def with_device(self, device: DeviceTarget) -> "BuildConfig":
        """Return a copy of this snapshot targeting another device."""
        return BuildConfig(
            workspace_dir=self.workspace_dir,
            options=self.options,
            device=device,
            input_file=self.input_file,
        )


class ProjectSettings:
    """
    Parser for eepl.ini settings files.

    Example eepl.ini:
        [build]
        presets = Custom
        optimization = -O1
        generateDbgInfo = true
        runtimeChecks = true
        inputFile = main.es

        [device]
        target = devices/nrf52/targetInfo.json

    Usage:
        settings = ProjectSettings(Path("eepl.ini"))
        config = settings.snapshot()
    """

    DEFAULT_INPUT_FILE = "main.es"

    def __init__(self, ini_path: Path):
        """
        Initialize the parser with an eepl.ini file.

        Args:
            ini_path: Path to the eepl.ini file

        Raises:
            ProjectSettingsError: If the file doesn't exist or cannot be parsed
        """
        self.ini_path = ini_path

        if not ini_path.exists():
            raise ProjectSettingsError(f"Settings file not found: {ini_path}")

        self.config = configparser.ConfigParser(
            allow_no_value=True,
            inline_comment_prefixes=(";", "#"),
            interpolation=configparser.ExtendedInterpolation(),
        )
        # Keys are camelCase to match the editor settings
        self.config.optionxform = str  # type: ignore[assignment]

        try:
            self.config.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise ProjectSettingsError(f"Failed to parse {ini_path}: {e}") from e

    @classmethod
    def from_workspace(cls, workspace_dir: Path) -> "ProjectSettings":
        """Load eepl.ini from a workspace directory."""
        return cls(workspace_dir / SETTINGS_FILENAME)

    @property
    def workspace_dir(self) -> Path:
        return self.ini_path.parent.absolute()

    def _get(self, section: str, key: str) -> Optional[str]:
        if not self.config.has_section(section):
            return None
        value = self.config[section].get(key)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def _get_bool(self, section: str, key: str, default: bool) -> bool:
        if self._get(section, key) is None:
            return default
        try:
            return self.config.getboolean(section, key)
        except ValueError as e:
            raise ProjectSettingsError(
                f"Invalid boolean for [{section}] {key} in {self.ini_path}: {e}"
            ) from e

    def get_build_options(self) -> BuildOptions:
        """
        Get the build options from the [build] section.

        Returns:
            BuildOptions; preset is None when the persisted name is unknown
        """
        raw_preset = self._get("build", "presets")
        preset = Preset.parse(raw_preset) if raw_preset else Preset.DEBUG
        if preset is None:
            logger.warning(
                f"Unknown build preset '{raw_preset}' in {self.ini_path}; "
                + "compiler defaults will apply"
            )

        return BuildOptions(
            preset=preset,
            optimization=self._get("build", "optimization") or "-O0",
            generate_debug_info=self._get_bool("build", "generateDbgInfo", False),
            runtime_checks=self._get_bool("build", "runtimeChecks", True),
        )

    def get_input_file(self) -> str:
        """Get the source file, relative to the workspace, that the compiler reads."""
        return self._get("build", "inputFile") or self.DEFAULT_INPUT_FILE

    def get_device_target(self) -> DeviceTarget:
        """
        Get the selected device.

        Returns:
            DeviceTarget loaded from [device] target, or NO_DEVICE if unset

        Raises:
            DeviceTargetError: If the configured descriptor cannot be loaded
        """
        target = self._get("device", "target")
        if target is None:
            return NO_DEVICE

        descriptor_path = Path(target).expanduser()
        if not descriptor_path.is_absolute():
            descriptor_path = self.workspace_dir / descriptor_path
        return DeviceTarget.from_descriptor(descriptor_path)

    def get_toolchain_root(self) -> Optional[Path]:
        """Get the toolchain root override, if any."""
        root = self._get("toolchain", "root")
        return Path(root).expanduser() if root else None

    def snapshot(self) -> BuildConfig:
        """Capture the current settings as an immutable BuildConfig."""
        return BuildConfig(
            workspace_dir=self.workspace_dir,
            options=self.get_build_options(),
            device=self.get_device_target(),
            input_file=self.get_input_file(),
        )
