"""
Pipeline stage definitions.

This module is the catalog of pipeline stages. Each StageTemplate names the
executable role it runs, its argument list as a sequence of literals and
placeholders, the artifact it writes, and the stage whose output it reads.
Changing the shape of the pipeline means changing STAGE_TABLE, nothing else.

Argument templates are typed: a Literal is emitted as-is, a Placeholder is
looked up by key when the template is rendered. Rendering with a missing key
is an error rather than an empty substitution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..packages.toolchain_binaries import ExecutableRole
from .path_resolver import ELF_FILE, OBJECT_FILE, PROGRAM_FILE, ConfigurationError


class StageKind(Enum):
    """Pipeline stages in pipeline order."""

    COMPILE = "build"
    SIMULATE = "simulate"
    LINK = "link"
    PACKAGE = "ebuild"
    FLASH = "flash"

    @property
    def command(self) -> str:
        """Task command name for this stage."""
        return self.value

    @classmethod
    def from_command(cls, command: str) -> "StageKind":
        for kind in cls:
            if kind.value == command:
                return kind
        raise ValueError(
            f"Unknown stage command: {command}. "
            + f"Known commands: {', '.join(kind.value for kind in cls)}"
        )


class TaskGroup(Enum):
    """Scheduling hint for the host that runs the tasks."""

    BUILD = "build"


# Placeholder keys
INPUT = "input"
OUTPUT = "output"
TARGET = "target"
TRIPLET = "triplet"
FLAGS = "flags"
STDLIB_ROOT = "stdlib_root"
RUNTIME_LIBRARY = "runtime_library"
LINKER_SCRIPT = "linker_script"
MAP_FILE = "map_file"
CONFIG_BIN = "config_bin"
RESOURCE_BIN = "resource_bin"

# A placeholder value: one token, several tokens, or None for "omit"
PlaceholderValue = Union[str, Sequence[str], None]


@dataclass(frozen=True)
class Literal:
    """Argument emitted verbatim."""

    text: str

    def render(self, values: Mapping[str, PlaceholderValue]) -> List[str]:
        return [self.text]


@dataclass(frozen=True)
class Placeholder:
    """
    Argument looked up by key at render time.

    Each value is emitted as prefix + value + suffix. When option is set, every
    value is preceded by the option token (e.g., "-target <path>"). A value of
    None or an empty sequence emits nothing.
    """

    key: str
    prefix: str = ""
    suffix: str = ""
    option: Optional[str] = None

    def render(self, values: Mapping[str, PlaceholderValue]) -> List[str]:
        if self.key not in values:
            raise KeyError(self.key)
        value = values[self.key]
        if value is None:
            return []
        items = [value] if isinstance(value, str) else list(value)

        tokens: List[str] = []
        for item in items:
            if self.option is not None:
                tokens.append(self.option)
            tokens.append(f"{self.prefix}{item}{self.suffix}")
        return tokens


Arg = Union[Literal, Placeholder]


@dataclass(frozen=True)
class StageTemplate:
    """
    Declaration of one pipeline stage.

    Attributes:
        kind: Stage this template builds
        role: Executable role the stage runs
        display_name: Task name shown to the user
        args: Argument template, in order
        output_artifact: File name (inside the output directory) this stage
            writes to its OUTPUT placeholder, or None if it writes nothing
        depends_on: Stage whose output becomes this stage's INPUT; None for
            entry stages, which read the user's source file
        group: Scheduling group hint
    """

    kind: StageKind
    role: ExecutableRole
    display_name: str
    args: Tuple[Arg, ...]
    output_artifact: Optional[str] = None
    depends_on: Optional[StageKind] = None
    group: Optional[TaskGroup] = None

    @property
    def is_entry(self) -> bool:
        """True for stages that read the user's source file directly."""
        return self.depends_on is None

    @property
    def placeholder_keys(self) -> List[str]:
        keys: List[str] = []
        for arg in self.args:
            if isinstance(arg, Placeholder) and arg.key not in keys:
                keys.append(arg.key)
        return keys

    def render(self, values: Mapping[str, PlaceholderValue]) -> List[str]:
        """
        Substitute placeholder values into the argument template.

        Args:
            values: Placeholder values by key

        Returns:
            Fully resolved argument list

        Raises:
            ConfigurationError: If a placeholder key has no value
        """
        tokens: List[str] = []
        for arg in self.args:
            try:
                tokens.extend(arg.render(values))
            except KeyError as e:
                raise ConfigurationError(
                    f"No value for placeholder '{e.args[0]}' in stage '{self.display_name}'"
                ) from e
        return tokens


STAGE_TABLE: Tuple[StageTemplate, ...] = (
    StageTemplate(
        kind=StageKind.COMPILE,
        role=ExecutableRole.COMPILER,
        display_name="Build for Device",
        args=(
            Placeholder(INPUT),
            Placeholder(TARGET, option="-target"),
            Placeholder(TRIPLET, option="-triplet"),
            Literal("-S"),
            Literal("-emit-llvm"),
            Placeholder(FLAGS),
            Literal("-o"),
            Placeholder(OUTPUT),
        ),
        output_artifact=OBJECT_FILE,
        group=TaskGroup.BUILD,
    ),
    StageTemplate(
        kind=StageKind.SIMULATE,
        role=ExecutableRole.COMPILER,
        display_name="Run Simulator",
        args=(
            Placeholder(INPUT),
            Placeholder(TARGET, option="-target"),
            Literal("-jit"),
            Literal("-S"),
            Literal("-emit-llvm"),
            Placeholder(FLAGS),
            Literal("-o"),
            Placeholder(OUTPUT),
        ),
        output_artifact=OBJECT_FILE,
    ),
    StageTemplate(
        kind=StageKind.LINK,
        role=ExecutableRole.LINKER,
        display_name="linker",
        args=(
            Placeholder(INPUT),
            Placeholder(STDLIB_ROOT, prefix="--sysroot="),
            Placeholder(STDLIB_ROOT, prefix="-L", suffix="/lib"),
            Literal("-lc"),
            Literal("-lm"),
            Placeholder(RUNTIME_LIBRARY),
            Literal("--format=elf"),
            Placeholder(MAP_FILE, prefix="--Map="),
            Placeholder(LINKER_SCRIPT),
            Literal("-o"),
            Placeholder(OUTPUT),
            Literal("-nostdlib"),
        ),
        output_artifact=ELF_FILE,
        depends_on=StageKind.COMPILE,
    ),
    StageTemplate(
        kind=StageKind.PACKAGE,
        role=ExecutableRole.PACKAGER,
        display_name="buildAELF",
        args=(
            Literal("-f"),
            Placeholder(INPUT),
            Literal("-o"),
            Placeholder(OUTPUT),
            Literal("-m"),
            Placeholder(MAP_FILE),
            Literal("-c"),
            Placeholder(CONFIG_BIN),
            Literal("-r"),
            Placeholder(RESOURCE_BIN),
        ),
        output_artifact=PROGRAM_FILE,
        depends_on=StageKind.LINK,
    ),
    StageTemplate(
        kind=StageKind.FLASH,
        role=ExecutableRole.FLASHER,
        display_name="EEmbFlasher",
        args=(Placeholder(INPUT),),
        depends_on=StageKind.PACKAGE,
    ),
)

_TEMPLATES: Dict[StageKind, StageTemplate] = {t.kind: t for t in STAGE_TABLE}

# Stage sequences a pipeline can run
DEVICE_PIPELINE = (StageKind.COMPILE, StageKind.LINK, StageKind.PACKAGE, StageKind.FLASH)
SIMULATOR_PIPELINE = (StageKind.SIMULATE,)


def template_for(kind: StageKind) -> StageTemplate:
    """Get the template for a stage."""
    return _TEMPLATES[kind]


def stage_chain(kind: StageKind) -> List[StageKind]:
    """Get the stages that must be rendered to build a stage, ending with it."""
    chain = [kind]
    while _TEMPLATES[chain[0]].depends_on is not None:
        chain.insert(0, _TEMPLATES[chain[0]].depends_on)  # type: ignore[arg-type]
    return chain
