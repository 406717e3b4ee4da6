"""
Command-line interface for eepl.

This module provides the `eepl` CLI tool for listing the eec build pipeline
of a project.
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from eepl.build import (
    InvocationMaterializer,
    PipelineBuilder,
    StageKind,
    build_default_pipeline,
)
from eepl.cli_utils import (
    ErrorFormatter,
    PathValidator,
    SettingsLoader,
    TaskPrinter,
    setup_logging,
)
from eepl.config import DeviceTarget, DeviceTargetError, ProjectSettingsError
from eepl.errors import PipelineError


@dataclass
class TasksArgs:
    """Arguments for the tasks command."""

    project_dir: Path
    device: Optional[Path] = None
    simulate: bool = False
    default: bool = False
    materialize: bool = False
    verbose: bool = False


@dataclass
class ShowArgs:
    """Arguments for the show command."""

    stage: str
    project_dir: Path
    device: Optional[Path] = None
    verbose: bool = False


def _device_selector(device: Optional[Path]):
    """Use --device as the answer when no device is configured."""
    if device is None:
        return None
    return lambda: DeviceTarget.from_descriptor(device.absolute())


def tasks_command(args: TasksArgs) -> None:
    """List the build pipeline for a project.

    Examples:
        eepl tasks                    # Device pipeline for current project
        eepl tasks --simulate         # Simulator pipeline
        eepl tasks --default          # Generic tasks, no device needed
        eepl tasks --materialize      # Resolve executables, create out/ dirs
    """
    setup_logging(args.verbose)

    try:
        if args.default:
            toolchain = SettingsLoader.toolchain(None)
            descriptors = build_default_pipeline(args.project_dir.absolute())
            if args.materialize:
                materializer = InvocationMaterializer(toolchain)
                TaskPrinter.print_invocations(
                    materializer.materialize_all(descriptors, args.project_dir.absolute())
                )
            else:
                TaskPrinter.print_descriptors(descriptors)
            sys.exit(0)

        settings = SettingsLoader.load(args.project_dir)
        toolchain = SettingsLoader.toolchain(settings)
        builder = PipelineBuilder(toolchain, _device_selector(args.device))
        descriptors = builder.build(settings.snapshot(), simulate=args.simulate)

        if args.materialize:
            materializer = InvocationMaterializer(toolchain)
            TaskPrinter.print_invocations(materializer.materialize_all(descriptors))
        else:
            TaskPrinter.print_descriptors(descriptors)
        sys.exit(0)

    except PipelineError as e:
        ErrorFormatter.handle_pipeline_error(e)
    except (DeviceTargetError, ProjectSettingsError) as e:
        ErrorFormatter.print_error("Configuration error", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def show_command(args: ShowArgs) -> None:
    """Show one materialized stage of the device pipeline.

    Examples:
        eepl show link                # Linker invocation for current project
        eepl show flash -d dev.json   # Flasher, using dev.json if no device set
    """
    setup_logging(args.verbose)

    try:
        kind = StageKind.from_command(args.stage)
    except ValueError as e:
        ErrorFormatter.print_error("Unknown stage", str(e))
        sys.exit(2)

    try:
        settings = SettingsLoader.load(args.project_dir)
        toolchain = SettingsLoader.toolchain(settings)
        builder = PipelineBuilder(toolchain, _device_selector(args.device))
        descriptor = builder.build_stage(settings.snapshot(), kind)
        TaskPrinter.print_invocations([InvocationMaterializer(toolchain).materialize(descriptor)])
        sys.exit(0)

    except PipelineError as e:
        ErrorFormatter.handle_pipeline_error(e)
    except (DeviceTargetError, ProjectSettingsError) as e:
        ErrorFormatter.print_error("Configuration error", str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def main() -> None:
    """eepl - eec build pipeline tool.

    Lists the compile, link, package, and flash invocations for an eec
    project, or the single-stage simulator pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="eepl",
        description="eepl - eec build pipeline tool",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="eepl 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Tasks command
    tasks_parser = subparsers.add_parser(
        "tasks",
        help="List the build pipeline",
    )
    tasks_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    tasks_parser.add_argument(
        "-d",
        "--device",
        type=Path,
        default=None,
        help="targetInfo.json to use when no device is configured",
    )
    tasks_parser.add_argument(
        "--simulate",
        action="store_true",
        help="List the simulator pipeline instead of the device pipeline",
    )
    tasks_parser.add_argument(
        "--default",
        action="store_true",
        help="List the generic tasks that need no device",
    )
    tasks_parser.add_argument(
        "--materialize",
        action="store_true",
        help="Resolve executables and create output directories",
    )
    tasks_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Show command
    show_parser = subparsers.add_parser(
        "show",
        help="Show one stage of the build pipeline",
    )
    show_parser.add_argument(
        "stage",
        choices=[kind.command for kind in StageKind],
        help="Stage to show",
    )
    show_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    show_parser.add_argument(
        "-d",
        "--device",
        type=Path,
        default=None,
        help="targetInfo.json to use when no device is configured",
    )
    show_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )

    # Parse arguments
    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    # Validate project directory exists
    if hasattr(parsed_args, "project_dir"):
        PathValidator.validate_project_dir(parsed_args.project_dir)

    # Execute command
    if parsed_args.command == "tasks":
        tasks_args = TasksArgs(
            project_dir=parsed_args.project_dir,
            device=parsed_args.device,
            simulate=parsed_args.simulate,
            default=parsed_args.default,
            materialize=parsed_args.materialize,
            verbose=parsed_args.verbose,
        )
        tasks_command(tasks_args)
    elif parsed_args.command == "show":
        show_args = ShowArgs(
            stage=parsed_args.stage,
            project_dir=parsed_args.project_dir,
            device=parsed_args.device,
            verbose=parsed_args.verbose,
        )
        show_command(show_args)


if __name__ == "__main__":
    main()
