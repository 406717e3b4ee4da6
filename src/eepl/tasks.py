"""
Task provider for editor hosts.

This module is the surface a host (editor, CLI) uses to list and resolve
eec tasks:

- provide_tasks(): the generic task list for each workspace folder
- create_task(): one stage of the configured device pipeline
- resolve_task(): bind a user-written task definition to its executable

Running the tasks is up to the host.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .build.materializer import InvocationMaterializer, ReadyInvocation, role_for
from .build.path_resolver import ConfigurationError
from .build.pipeline import (
    CWD_TOKEN,
    TASK_TYPE,
    DeviceSelector,
    InvocationDescriptor,
    PipelineBuilder,
    build_default_pipeline,
)
from .build.stage_table import StageKind, template_for
from .config.settings import BuildConfig
from .packages.toolchain import Toolchain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskDefinition:
    """A task as written in the user's tasks file."""

    type: str
    command: Optional[str] = None
    args: Tuple[str, ...] = field(default_factory=tuple)
    cwd: Optional[str] = None


class TaskProvider:
    """Provides and resolves eec tasks for a host."""

    def __init__(self, toolchain: Toolchain, select_device: Optional[DeviceSelector] = None):
        self.toolchain = toolchain
        self.builder = PipelineBuilder(toolchain, select_device)
        self.materializer = InvocationMaterializer(toolchain)

    def provide_tasks(self, workspace_folders: Iterable[Path]) -> List[ReadyInvocation]:
        """
        Get the generic task list for every workspace folder.

        These tasks always exist; users can tweak them in their tasks file but
        not remove them.
        """
        tasks = []
        for folder in workspace_folders:
            tasks.extend(
                self.materializer.materialize_all(build_default_pipeline(folder), folder)
            )
        return tasks

    def create_task(self, kind: StageKind, config: BuildConfig) -> ReadyInvocation:
        """
        Create the task for one stage of the configured device pipeline.

        Raises:
            ToolchainError: If the toolchain is not installed
            SelectionError: If no device is selected
            ConfigurationError: If paths cannot be derived
            ResourceError: If the output directory cannot be created
        """
        descriptor = self.builder.build_stage(config, kind)
        return self.materializer.materialize(descriptor)

    def create_pipeline(self, config: BuildConfig, simulate: bool = False) -> List[ReadyInvocation]:
        """Create the tasks for the whole configured pipeline, in order."""
        return self.materializer.materialize_all(self.builder.build(config, simulate))

    def resolve_task(
        self, definition: TaskDefinition, name: Optional[str] = None
    ) -> Optional[ReadyInvocation]:
        """
        Resolve a user-written task definition.

        Args:
            definition: Task definition from the user's tasks file
            name: Task name (default: the stage's display name)

        Returns:
            ReadyInvocation running the definition's args verbatim, or None if
            the definition is not an eec task

        Raises:
            ToolchainError: If the toolchain is not installed
            ConfigurationError: If the command names no known stage
        """
        if definition.type != TASK_TYPE or not definition.command:
            return None

        self.toolchain.ensure_installed()

        try:
            kind = StageKind.from_command(definition.command)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        template = template_for(kind)
        descriptor = InvocationDescriptor(
            kind=kind,
            role=role_for(kind),
            args=tuple(definition.args),
            cwd=definition.cwd or CWD_TOKEN,
            name=name or template.display_name,
            group=template.group,
        )
        logger.debug(f"Resolved task '{descriptor.name}' ({definition.command})")
        return self.materializer.materialize(descriptor)
