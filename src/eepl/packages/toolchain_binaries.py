"""Toolchain Binary Finder Utilities.

This module maps the logical executable roles used by pipeline stages to the
binaries shipped in the toolchain installation directory.

Binary Naming Conventions:
    - Compiler: eec
    - Linker: ld.lld
    - Packager: ebuild
    - Flasher: eflash
    Windows builds carry an .exe suffix.

Directory Structure:
    toolchain_root/bin/{binary}
"""

import platform
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..errors import PipelineError


class BinaryNotFoundError(PipelineError):
    """Raised when a required toolchain binary is not found."""

    pass


class ExecutableRole(Enum):
    """Logical executable a stage needs. Values are binary base names."""

    COMPILER = "eec"
    LINKER = "ld.lld"
    PACKAGER = "ebuild"
    FLASHER = "eflash"

    @property
    def binary_name(self) -> str:
        """Binary file name on the host platform."""
        if platform.system() == "Windows":
            return f"{self.value}.exe"
        return self.value


class ToolchainBinaryFinder:
    """Finds and verifies toolchain binaries in the installation directory."""

    def __init__(self, toolchain_root: Path):
        """Initialize the binary finder.

        Args:
            toolchain_root: Base path to the toolchain installation
        """
        self.toolchain_root = toolchain_root

    @property
    def bin_dir(self) -> Path:
        return self.toolchain_root / "bin"

    def binary_path(self, role: ExecutableRole) -> Path:
        """Get the expected path of a role's binary, whether or not it exists."""
        return self.bin_dir / role.binary_name

    def find_binary(self, role: ExecutableRole) -> Optional[Path]:
        """Find the binary for a role.

        Args:
            role: Executable role to look up

        Returns:
            Path to the binary, or None if not found
        """
        binary_path = self.binary_path(role)
        if binary_path.is_file():
            return binary_path
        return None

    def verify_required_binaries(
        self, required_roles: List[ExecutableRole]
    ) -> tuple[bool, List[ExecutableRole]]:
        """Verify that all required binaries exist.

        Args:
            required_roles: Roles whose binaries must be present

        Returns:
            Tuple of (all_found, missing_roles)
        """
        missing = [role for role in required_roles if self.find_binary(role) is None]
        return len(missing) == 0, missing
