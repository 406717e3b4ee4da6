"""Toolchain discovery for eepl.

This module locates the installed eec toolchain and its executables.
"""

from .toolchain import Toolchain, ToolchainError
from .toolchain_binaries import BinaryNotFoundError, ExecutableRole, ToolchainBinaryFinder

__all__ = [
    "Toolchain",
    "ToolchainError",
    "ExecutableRole",
    "ToolchainBinaryFinder",
    "BinaryNotFoundError",
]
