"""Toolchain discovery for the eec toolchain.

This module locates an installed eec toolchain and answers the questions the
pipeline needs before it can be built: is it installed, where is its root,
and where does each executable live. Installing the toolchain is not handled
here.
"""

import logging
from pathlib import Path
from typing import Optional

from ..errors import PipelineError
from .toolchain_binaries import BinaryNotFoundError, ExecutableRole, ToolchainBinaryFinder

logger = logging.getLogger(__name__)


class ToolchainError(PipelineError):
    """Raised when the toolchain is absent or unusable."""

    pass


class Toolchain:
    """Locates the eec toolchain installation."""

    # Default install location, relative to the user's home directory
    DEFAULT_DIRNAME = ".eec"

    # Binaries that must exist for the toolchain to count as installed
    REQUIRED_ROLES = [ExecutableRole.COMPILER]

    def __init__(self, root: Optional[Path] = None):
        """Initialize toolchain discovery.

        Args:
            root: Toolchain install root (default: ~/.eec)
        """
        self._root = root if root is not None else Path.home() / self.DEFAULT_DIRNAME
        self.finder = ToolchainBinaryFinder(self._root)

    def is_installed(self) -> bool:
        """Check whether the toolchain's required binaries are present."""
        all_found, missing = self.finder.verify_required_binaries(self.REQUIRED_ROLES)
        if not all_found:
            logger.debug(
                f"Toolchain at {self._root} is missing: "
                + ", ".join(role.binary_name for role in missing)
            )
        return all_found

    def ensure_installed(self) -> None:
        """
        Raises:
            ToolchainError: If the toolchain is not installed
        """
        if not self.is_installed():
            raise ToolchainError(
                f"eec toolchain not found in {self._root}. "
                + "Install the toolchain or set [toolchain] root in eepl.ini."
            )

    def root_path(self) -> Path:
        """Get the toolchain install root."""
        return self._root

    def executable_path(self, role: ExecutableRole) -> Path:
        """Get the path to the binary serving a role.

        Args:
            role: Executable role

        Returns:
            Path to the binary

        Raises:
            BinaryNotFoundError: If the binary does not exist
        """
        binary = self.finder.find_binary(role)
        if binary is None:
            raise BinaryNotFoundError(
                f"{role.binary_name} not found in {self.finder.bin_dir}"
            )
        return binary
