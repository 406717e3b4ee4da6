"""
Path resolution for device builds.

This module derives every file-system path a pipeline needs from the selected
device and the toolchain installation:

- Linker script: the target_out.ld sitting next to the device's targetInfo.json
- Standard library root: <toolchain root>/lib/<stdlib variant>/std/picolib
- Output directory: <workspace>/out/<devName>
- Runtime library link token: -l<runtime>, only when the device names one

Paths are rendered with forward slashes, since they are passed verbatim as
command-line arguments and compared by string equality between stages.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional, Union

from ..config.device_target import DeviceTarget
from ..errors import PipelineError

logger = logging.getLogger(__name__)

DESCRIPTOR_FILENAME = "targetInfo.json"
LINKER_SCRIPT_FILENAME = "target_out.ld"
TOOLCHAIN_BIN_SEGMENT = "bin"
OUTPUT_ROOT = "out"

# Artifact names inside the per-device output directory
OBJECT_FILE = "output.o"
MAP_FILE = "output.map"
ELF_FILE = "output.elf"
CONFIG_BIN = "output_CFG.bin"
RESOURCE_BIN = "output_RES.bin"
PROGRAM_FILE = "prog.alf"


class ConfigurationError(PipelineError):
    """Raised when configured paths cannot be turned into build paths."""

    pass


@dataclass(frozen=True)
class ResolvedPaths:
    """Paths derived for one device build."""

    output_dir: str
    linker_script: str
    stdlib_root: str
    runtime_library: Optional[str] = None

    def artifact(self, name: str) -> str:
        """Path of a named artifact inside the output directory."""
        return f"{self.output_dir}/{name}"


class PathResolver:
    """Derives build paths from device metadata and the toolchain location."""

    @staticmethod
    def linker_script_path(descriptor_path: str) -> str:
        """
        Get the linker script that ships beside a device descriptor.

        Args:
            descriptor_path: Path to the device's targetInfo.json

        Returns:
            Path to target_out.ld in the same directory

        Raises:
            ConfigurationError: If the path does not end in targetInfo.json
        """
        path = PurePath(descriptor_path)
        if path.name != DESCRIPTOR_FILENAME:
            raise ConfigurationError(
                f"Device descriptor path must end in {DESCRIPTOR_FILENAME}: {descriptor_path}"
            )
        return path.with_name(LINKER_SCRIPT_FILENAME).as_posix()

    @staticmethod
    def stdlib_root(compiler_path: Union[str, PurePath], stdlib: str) -> str:
        """
        Get the standard library root for a stdlib variant.

        The last "bin" segment of the compiler path marks the toolchain root;
        everything from it onward is replaced with lib/<stdlib>/std/picolib.

        Args:
            compiler_path: Path to the eec compiler executable
            stdlib: Standard library variant name (e.g., "v7m")

        Returns:
            Standard library root path

        Raises:
            ConfigurationError: If the path has no bin segment or stdlib is empty
        """
        if not stdlib:
            raise ConfigurationError("Device does not name a standard library variant")

        parts = PurePath(compiler_path).parts
        if TOOLCHAIN_BIN_SEGMENT not in parts:
            raise ConfigurationError(
                f"Compiler path has no '{TOOLCHAIN_BIN_SEGMENT}' segment: {compiler_path}"
            )
        bin_index = len(parts) - 1 - parts[::-1].index(TOOLCHAIN_BIN_SEGMENT)
        root = PurePath(*parts[:bin_index]) if bin_index else PurePath(".")
        return (root / "lib" / stdlib / "std" / "picolib").as_posix()

    @staticmethod
    def output_dir(base_dir: str, dev_name: str) -> str:
        """
        Get the per-device output directory, <base>/out/<devName>.

        Raises:
            ConfigurationError: If the device has no identifier
        """
        if not dev_name:
            raise ConfigurationError("Device has no identifier (devName)")
        return f"{base_dir.rstrip('/')}/{OUTPUT_ROOT}/{dev_name}"

    @staticmethod
    def runtime_library_token(runtime: Optional[str]) -> Optional[str]:
        """Get the -l token for the device's runtime library, if it has one."""
        return f"-l{runtime}" if runtime else None

    @classmethod
    def resolve(
        cls,
        base_dir: str,
        device: DeviceTarget,
        compiler_path: Union[str, PurePath],
    ) -> ResolvedPaths:
        """
        Derive all paths for building a device.

        Args:
            base_dir: Workspace directory, forward-slashed
            device: Selected device
            compiler_path: Path to the eec compiler executable

        Returns:
            ResolvedPaths for the device

        Raises:
            ConfigurationError: If any path cannot be derived
        """
        paths = ResolvedPaths(
            output_dir=cls.output_dir(base_dir, device.dev_name),
            linker_script=cls.linker_script_path(device.descriptor_path),
            stdlib_root=cls.stdlib_root(compiler_path, device.stdlib),
            runtime_library=cls.runtime_library_token(device.runtime),
        )
        logger.debug(f"Resolved paths for {device.dev_name}: {paths}")
        return paths
