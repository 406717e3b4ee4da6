"""eepl - build pipeline synthesis for the eec embedded toolchain."""

from .build import InvocationDescriptor, InvocationMaterializer, PipelineBuilder, StageKind
from .config import BuildConfig, BuildOptions, DeviceTarget, Preset, ProjectSettings
from .errors import PipelineError
from .packages import Toolchain

__version__ = "0.1.0"

__all__ = [
    "BuildConfig",
    "BuildOptions",
    "DeviceTarget",
    "InvocationDescriptor",
    "InvocationMaterializer",
    "PipelineBuilder",
    "PipelineError",
    "Preset",
    "ProjectSettings",
    "StageKind",
    "Toolchain",
]
