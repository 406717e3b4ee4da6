"""
Pipeline builder.

This module turns a BuildConfig snapshot into the ordered list of process
invocations that build (or simulate) a program for the selected device.

Build Process:
1. Check the toolchain is installed
2. Make sure a device is selected, prompting once if it is not
3. Resolve compiler flags from the build preset
4. Resolve linker script, stdlib root, and output paths for the device
5. Render each stage's arguments from STAGE_TABLE in pipeline order,
   feeding each stage's output path to the next stage as its input

Nothing is returned unless every stage rendered. The builder never reads
settings on its own; everything comes from the snapshot it is given.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config.device_target import DeviceTarget
from ..config.settings import BuildConfig
from ..errors import PipelineError
from ..packages.toolchain import Toolchain
from ..packages.toolchain_binaries import ExecutableRole
from . import path_resolver
from .flag_builder import FlagBuilder
from .path_resolver import ConfigurationError, PathResolver, ResolvedPaths
from .stage_table import (
    CONFIG_BIN,
    DEVICE_PIPELINE,
    FLAGS,
    INPUT,
    LINKER_SCRIPT,
    MAP_FILE,
    OUTPUT,
    RESOURCE_BIN,
    RUNTIME_LIBRARY,
    SIMULATOR_PIPELINE,
    STAGE_TABLE,
    STDLIB_ROOT,
    TARGET,
    TRIPLET,
    PlaceholderValue,
    StageKind,
    TaskGroup,
    stage_chain,
    template_for,
)

logger = logging.getLogger(__name__)

TASK_TYPE = "eec"
TASK_SOURCE = "eepl"

# Host variable standing in for the working directory in generic tasks
CWD_TOKEN = "${cwd}"

# Values used by the generic pipeline shown before a device is chosen
DEFAULT_TRIPLET = "thumbv7m-none-none-eabi"
DEFAULT_FLAGS = ("-g", "-O3")
DEFAULT_SOURCE_FILE = "PackageInfo.es"

DeviceSelector = Callable[[], Optional[DeviceTarget]]


class SelectionError(PipelineError):
    """Raised when no target device is selected."""

    pass


@dataclass(frozen=True)
class InvocationDescriptor:
    """
    One fully resolved process invocation.

    Attributes:
        kind: Stage this invocation runs
        role: Executable role to run
        args: Resolved argument list
        cwd: Working directory for the process
        name: Task name shown to the user
        group: Scheduling group hint (None for no group)
        input_path: File the stage reads
        output_path: File the stage writes, if any
    """

    kind: StageKind
    role: ExecutableRole
    args: Tuple[str, ...]
    cwd: str
    name: str
    group: Optional[TaskGroup] = None
    input_path: Optional[str] = None
    output_path: Optional[str] = None

    @property
    def command(self) -> str:
        return self.kind.command

    @property
    def task_type(self) -> str:
        return TASK_TYPE

    @property
    def source(self) -> str:
        return TASK_SOURCE


def render_stages(
    stages: Sequence[StageKind],
    values: Mapping[str, PlaceholderValue],
    source_path: str,
    output_dir: str,
    cwd: str,
) -> List[InvocationDescriptor]:
    """
    Render stages in order, chaining each stage's output into its dependent.

    Every stage a requested stage depends on must come earlier in the sequence.

    Args:
        stages: Stages to render, in pipeline order
        values: Placeholder values shared by all stages
        source_path: Source file read by entry stages
        output_dir: Directory stage artifacts are written to
        cwd: Working directory for every invocation

    Returns:
        One descriptor per stage

    Raises:
        ConfigurationError: If a placeholder is unresolved or a stage's
            dependency has not been rendered
    """
    outputs: Dict[StageKind, str] = {}
    descriptors = []

    for kind in stages:
        template = template_for(kind)
        stage_values = dict(values)

        if template.is_entry:
            input_path = source_path
        elif template.depends_on in outputs:
            input_path = outputs[template.depends_on]  # type: ignore[index]
        else:
            raise ConfigurationError(
                f"Stage '{template.display_name}' needs the output of "
                + f"'{template.depends_on.command}', which is not part of the pipeline"  # type: ignore[union-attr]
            )
        stage_values[INPUT] = input_path

        output_path = None
        if template.output_artifact is not None:
            output_path = f"{output_dir}/{template.output_artifact}"
            stage_values[OUTPUT] = output_path
            outputs[kind] = output_path

        args = template.render(stage_values)
        logger.debug(f"{template.display_name}: {' '.join(args)}")

        descriptors.append(
            InvocationDescriptor(
                kind=kind,
                role=template.role,
                args=tuple(args),
                cwd=cwd,
                name=template.display_name,
                group=template.group,
                input_path=input_path,
                output_path=output_path,
            )
        )

    return descriptors


def device_values(
    paths: ResolvedPaths, device: DeviceTarget, flags: Sequence[str]
) -> Dict[str, PlaceholderValue]:
    """Get the placeholder values for a device build."""
    return {
        TARGET: device.descriptor_path,
        TRIPLET: device.triplet,
        FLAGS: tuple(flags),
        STDLIB_ROOT: paths.stdlib_root,
        RUNTIME_LIBRARY: paths.runtime_library,
        LINKER_SCRIPT: paths.linker_script,
        MAP_FILE: paths.artifact(path_resolver.MAP_FILE),
        CONFIG_BIN: paths.artifact(path_resolver.CONFIG_BIN),
        RESOURCE_BIN: paths.artifact(path_resolver.RESOURCE_BIN),
    }


def build_default_pipeline(workspace_dir: Path) -> List[InvocationDescriptor]:
    """
    Build the generic task list shown before any device is chosen.

    Every stage of STAGE_TABLE is included. No device or toolchain lookup is
    involved: the target and stdlib arguments are omitted and artifact paths
    are relative to the host's ${cwd}.

    Args:
        workspace_dir: Workspace folder the source file lives in

    Returns:
        One descriptor per stage, in table order
    """
    output_dir = f"{CWD_TOKEN}/{path_resolver.OUTPUT_ROOT}"
    values: Dict[str, PlaceholderValue] = {
        TARGET: None,
        TRIPLET: DEFAULT_TRIPLET,
        FLAGS: DEFAULT_FLAGS,
        STDLIB_ROOT: None,
        RUNTIME_LIBRARY: None,
        LINKER_SCRIPT: f"{output_dir}/{path_resolver.LINKER_SCRIPT_FILENAME}",
        MAP_FILE: f"{output_dir}/{path_resolver.MAP_FILE}",
        CONFIG_BIN: f"{output_dir}/{path_resolver.CONFIG_BIN}",
        RESOURCE_BIN: f"{output_dir}/{path_resolver.RESOURCE_BIN}",
    }
    source_path = f"{workspace_dir.as_posix()}/{DEFAULT_SOURCE_FILE}"

    # Render entry stages first so chained stages find their inputs, then
    # restore table order
    rendered = {
        d.kind: d
        for d in render_stages(
            SIMULATOR_PIPELINE + DEVICE_PIPELINE, values, source_path, output_dir, CWD_TOKEN
        )
    }
    return [rendered[template.kind] for template in STAGE_TABLE]


class PipelineBuilder:
    """
    Builds device pipelines from configuration snapshots.

    Example usage:
        builder = PipelineBuilder(Toolchain())
        config = ProjectSettings.from_workspace(Path(".")).snapshot()
        for invocation in builder.build(config):
            print(invocation.name, invocation.args)
    """

    def __init__(self, toolchain: Toolchain, select_device: Optional[DeviceSelector] = None):
        """
        Initialize pipeline builder.

        Args:
            toolchain: Toolchain discovery
            select_device: Called once when no device is selected; returns
                the device the user picked, or None
        """
        self.toolchain = toolchain
        self.select_device = select_device

    def build(self, config: BuildConfig, simulate: bool = False) -> List[InvocationDescriptor]:
        """
        Build the pipeline for the configured device.

        Args:
            config: Configuration snapshot
            simulate: Build the single-stage simulator pipeline instead of
                compile, link, package, flash

        Returns:
            Descriptors in pipeline order

        Raises:
            ToolchainError: If the toolchain is not installed
            SelectionError: If no device is selected
            ConfigurationError: If paths cannot be derived
        """
        stages = SIMULATOR_PIPELINE if simulate else DEVICE_PIPELINE
        descriptors = self._build_stages(config, stages)
        logger.info(
            f"Built {'simulator' if simulate else 'device'} pipeline with "
            + f"{len(descriptors)} stage(s) for {descriptors[0].cwd}"
        )
        return descriptors

    def build_stage(self, config: BuildConfig, kind: StageKind) -> InvocationDescriptor:
        """
        Build a single stage's invocation.

        Stages it depends on are rendered too, so chained inputs are the same
        as in the full pipeline, but only the requested stage is returned.
        """
        return self._build_stages(config, stage_chain(kind))[-1]

    def _build_stages(
        self, config: BuildConfig, stages: Sequence[StageKind]
    ) -> List[InvocationDescriptor]:
        self.toolchain.ensure_installed()
        device = self._require_device(config.device)

        compiler_path = self.toolchain.executable_path(ExecutableRole.COMPILER)
        flags = FlagBuilder.from_options(config.options)
        logger.debug(f"Compiler flags: {flags}")

        base_dir = config.workspace_dir.as_posix()
        paths = PathResolver.resolve(base_dir, device, compiler_path)
        source_path = f"{base_dir}/{config.input_file}"

        return render_stages(
            stages,
            device_values(paths, device, flags),
            source_path,
            paths.output_dir,
            base_dir,
        )

    def _require_device(self, device: DeviceTarget) -> DeviceTarget:
        if device.is_selected:
            return device

        if self.select_device is not None:
            selected = self.select_device()
            if selected is not None and selected.is_selected:
                return selected
            logger.warning("Device selection did not choose a device")

        raise SelectionError("No target device selected. Select a target device and try again.")
