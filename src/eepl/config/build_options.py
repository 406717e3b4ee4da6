"""
Build option definitions.

This module defines the build presets offered to the user and the option
bundle the flag builder consumes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Preset(Enum):
    """Named flag bundles. Values are the strings persisted in eepl.ini."""

    DEBUG = "Debug"
    OPTIMIZED_DEBUG = "OpDebug"
    RELEASE = "Release"
    SAFE_RELEASE = "Safe Release"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Preset"]:
        """
        Look up a preset by its persisted name.

        Args:
            value: Persisted preset string (e.g., "Safe Release")

        Returns:
            Matching Preset, or None if the name is not recognized
        """
        if value is None:
            return None
        value = value.strip()
        for preset in cls:
            if preset.value == value or preset.name == value.upper():
                return preset
        return None


@dataclass(frozen=True)
class BuildOptions:
    """
    Options that drive compiler flag derivation.

    The custom fields are only consulted when preset is Preset.CUSTOM.
    """

    preset: Optional[Preset] = Preset.DEBUG
    optimization: str = "-O0"
    generate_debug_info: bool = False
    runtime_checks: bool = True
