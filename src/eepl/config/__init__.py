"""Configuration modules for eepl."""

from .build_options import BuildOptions, Preset
from .device_target import NO_DEVICE, DeviceTarget, DeviceTargetError
from .settings import BuildConfig, ProjectSettings, ProjectSettingsError

__all__ = [
    "Preset",
    "BuildOptions",
    "DeviceTarget",
    "DeviceTargetError",
    "NO_DEVICE",
    "BuildConfig",
    "ProjectSettings",
    "ProjectSettingsError",
]
