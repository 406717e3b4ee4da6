"""
Invocation materializer.

This module binds an InvocationDescriptor to the concrete executable that
runs it and makes sure the directory its "-o" argument writes into exists.
The result is a ReadyInvocation the host can run as-is.

Invocations are materialized one at a time in pipeline order. A failure
stops the remaining stages; directories created for earlier stages stay.
"""

import logging
import posixpath
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..errors import PipelineError
from ..packages.toolchain import Toolchain
from ..packages.toolchain_binaries import ExecutableRole
from .pipeline import CWD_TOKEN, TASK_SOURCE, TASK_TYPE, InvocationDescriptor
from .stage_table import StageKind, TaskGroup

logger = logging.getLogger(__name__)

OUTPUT_OPTION = "-o"


class ResourceError(PipelineError):
    """Raised when an output directory cannot be created."""

    pass


class DirectoryStatus(Enum):
    """Outcome of ensuring a directory exists."""

    EXISTS = "exists"
    CREATED = "created"
    FAILED = "failed"


@dataclass(frozen=True)
class DirectoryResult:
    """Result of ensure_directory."""

    status: DirectoryStatus
    path: Path
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not DirectoryStatus.FAILED


@dataclass(frozen=True)
class ReadyInvocation:
    """An invocation bound to its executable, ready to hand to the host."""

    descriptor: InvocationDescriptor
    executable: Path
    output_dir: Optional[DirectoryResult] = None
    task_type: str = TASK_TYPE
    source: str = TASK_SOURCE
    show_reuse_message: bool = False

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def args(self) -> Tuple[str, ...]:
        return self.descriptor.args

    @property
    def cwd(self) -> str:
        return self.descriptor.cwd

    @property
    def group(self) -> Optional[TaskGroup]:
        return self.descriptor.group

    @property
    def command_line(self) -> List[str]:
        """Executable followed by its arguments."""
        return [str(self.executable), *self.descriptor.args]


# Executable each stage runs
STAGE_ROLES = {
    StageKind.COMPILE: ExecutableRole.COMPILER,
    StageKind.SIMULATE: ExecutableRole.COMPILER,
    StageKind.LINK: ExecutableRole.LINKER,
    StageKind.PACKAGE: ExecutableRole.PACKAGER,
    StageKind.FLASH: ExecutableRole.FLASHER,
}


def role_for(kind: StageKind) -> ExecutableRole:
    """Get the executable role a stage runs."""
    return STAGE_ROLES[kind]


def output_argument(args: Iterable[str]) -> Optional[str]:
    """
    Get the value of the last "-o" option in an argument list.

    Returns:
        The argument following the last "-o", or None if there is none
    """
    args = list(args)
    for index in range(len(args) - 1, -1, -1):
        if args[index] == OUTPUT_OPTION:
            return args[index + 1] if index + 1 < len(args) else None
    return None


def ensure_directory(path: Path) -> DirectoryResult:
    """
    Make sure a directory exists.

    Args:
        path: Directory to create

    Returns:
        DirectoryResult: EXISTS if it was already there, CREATED if it was
        made, FAILED with the reason otherwise
    """
    if path.is_dir():
        return DirectoryResult(DirectoryStatus.EXISTS, path)

    try:
        path.mkdir(parents=True)
    except FileExistsError:
        if path.is_dir():
            return DirectoryResult(DirectoryStatus.EXISTS, path)
        return DirectoryResult(
            DirectoryStatus.FAILED, path, f"{path} exists and is not a directory"
        )
    except OSError as e:
        return DirectoryResult(DirectoryStatus.FAILED, path, str(e))

    logger.info(f"Created output directory {path}")
    return DirectoryResult(DirectoryStatus.CREATED, path)


class InvocationMaterializer:
    """
    Turns descriptors into ready invocations.

    Example usage:
        materializer = InvocationMaterializer(toolchain)
        ready = materializer.materialize_all(builder.build(config))
    """

    def __init__(self, toolchain: Toolchain):
        """
        Initialize materializer.

        Args:
            toolchain: Toolchain discovery used to locate executables
        """
        self.toolchain = toolchain

    def materialize(
        self, descriptor: InvocationDescriptor, working_dir: Optional[Path] = None
    ) -> ReadyInvocation:
        """
        Bind a descriptor to its executable and create its output directory.

        Args:
            descriptor: Invocation to materialize
            working_dir: Directory the host expands ${cwd} to (default: the
                descriptor's cwd, or the current directory if that is ${cwd})

        Returns:
            ReadyInvocation

        Raises:
            BinaryNotFoundError: If the stage's executable is missing
            ResourceError: If the output directory cannot be created
        """
        if descriptor.role is not role_for(descriptor.kind):
            raise PipelineError(
                f"Stage '{descriptor.command}' must run {role_for(descriptor.kind).value}, "
                + f"not {descriptor.role.value}"
            )
        executable = self.toolchain.executable_path(descriptor.role)

        directory = None
        output = output_argument(descriptor.args)
        if output is not None:
            directory = ensure_directory(self._output_dir(output, descriptor.cwd, working_dir))
            if not directory.ok:
                raise ResourceError(
                    f"Cannot create output directory for '{descriptor.name}': {directory.reason}"
                )

        return ReadyInvocation(
            descriptor=descriptor,
            executable=executable,
            output_dir=directory,
        )

    def materialize_all(
        self,
        descriptors: Iterable[InvocationDescriptor],
        working_dir: Optional[Path] = None,
    ) -> List[ReadyInvocation]:
        """Materialize descriptors in order, stopping at the first failure."""
        return [self.materialize(descriptor, working_dir) for descriptor in descriptors]

    @staticmethod
    def _output_dir(output: str, cwd: str, working_dir: Optional[Path]) -> Path:
        directory = posixpath.dirname(output)
        if CWD_TOKEN in directory:
            if working_dir is None:
                working_dir = Path.cwd() if cwd == CWD_TOKEN else Path(cwd)
            directory = directory.replace(CWD_TOKEN, working_dir.as_posix())
        return Path(directory)
