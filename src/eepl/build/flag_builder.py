"""Compilation Flag Builder.

This module maps a build preset to the compiler flags the eec compiler
understands.

Design:
    - Fixed presets map to fixed flag lists
    - Custom builds flags from the user's optimization level and toggles
    - An unknown preset yields no flags, so the compiler falls back to its
      own defaults
"""

import logging
from typing import Dict, List, Optional

from ..config.build_options import BuildOptions, Preset

logger = logging.getLogger(__name__)

DEBUG_INFO = "-g"
NO_OPTIMIZATION = "-O0"
MAX_OPTIMIZATION = "-O3"
DISABLE_RUNTIME_CHECKS = "-drtc"


class FlagBuilder:
    """Builds compiler flags from build options.

    Example:
        >>> FlagBuilder.resolve_flags(Preset.RELEASE)
        ['-O3', '-drtc']
    """

    PRESET_FLAGS: Dict[Preset, List[str]] = {
        Preset.DEBUG: [DEBUG_INFO, NO_OPTIMIZATION],
        Preset.OPTIMIZED_DEBUG: [DEBUG_INFO, MAX_OPTIMIZATION],
        Preset.RELEASE: [MAX_OPTIMIZATION, DISABLE_RUNTIME_CHECKS],
        Preset.SAFE_RELEASE: [MAX_OPTIMIZATION],
    }

    @classmethod
    def resolve_flags(
        cls, preset: Optional[Preset], custom: Optional[BuildOptions] = None
    ) -> List[str]:
        """Resolve a preset to its ordered flag list.

        Args:
            preset: Build preset, or None if the configured name was unknown
            custom: Options supplying the custom fields (used for Preset.CUSTOM)

        Returns:
            New list of flag tokens
        """
        if preset is Preset.CUSTOM:
            return cls._custom_flags(custom or BuildOptions(preset=Preset.CUSTOM))

        if preset in cls.PRESET_FLAGS:
            return list(cls.PRESET_FLAGS[preset])

        logger.warning(f"No flags for build preset {preset!r}; using compiler defaults")
        return []

    @classmethod
    def from_options(cls, options: BuildOptions) -> List[str]:
        """Resolve the flags for a complete BuildOptions bundle."""
        return cls.resolve_flags(options.preset, options)

    @staticmethod
    def _custom_flags(options: BuildOptions) -> List[str]:
        flags = []
        if options.optimization:
            flags.append(options.optimization)
        if options.generate_debug_info:
            flags.append(DEBUG_INFO)
        if not options.runtime_checks:
            flags.append(DISABLE_RUNTIME_CHECKS)
        return flags
