"""
Build pipeline components for eepl.

This module provides the pipeline model:
- Preset to compiler flag resolution
- Device and toolchain path resolution
- The stage table (compile, simulate, link, package, flash)
- Pipeline building and invocation materialization
"""

from .flag_builder import FlagBuilder
from .materializer import (
    DirectoryResult,
    DirectoryStatus,
    InvocationMaterializer,
    ReadyInvocation,
    ResourceError,
    ensure_directory,
)
from .path_resolver import ConfigurationError, PathResolver, ResolvedPaths
from .pipeline import (
    InvocationDescriptor,
    PipelineBuilder,
    SelectionError,
    build_default_pipeline,
)
from .stage_table import STAGE_TABLE, StageKind, StageTemplate, TaskGroup

__all__ = [
    "FlagBuilder",
    "PathResolver",
    "ResolvedPaths",
    "ConfigurationError",
    "StageKind",
    "StageTemplate",
    "TaskGroup",
    "STAGE_TABLE",
    "InvocationDescriptor",
    "PipelineBuilder",
    "SelectionError",
    "build_default_pipeline",
    "InvocationMaterializer",
    "ReadyInvocation",
    "ResourceError",
    "DirectoryStatus",
    "DirectoryResult",
    "ensure_directory",
]
