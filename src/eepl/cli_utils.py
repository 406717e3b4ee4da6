"""CLI utility functions for eepl.

This module provides common utilities used across CLI commands including:
- Logging setup
- Settings loading from eepl.ini
- Error handling and formatting
- Task printing
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from eepl.build import InvocationDescriptor, ReadyInvocation, SelectionError
from eepl.config import ProjectSettings
from eepl.config.settings import SETTINGS_FILENAME
from eepl.errors import PipelineError
from eepl.packages import Toolchain, ToolchainError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console_handler: Optional[logging.Handler] = None


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stdout; INFO and up when verbose, WARNING otherwise."""
    global _console_handler
    level = logging.INFO if verbose else logging.WARNING

    logger = logging.getLogger()
    logger.setLevel(level)

    # Replace the handler from an earlier call
    if _console_handler is not None:
        logger.removeHandler(_console_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    _console_handler = console_handler
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)


class SettingsLoader:
    """Loads project settings and the toolchain they point at."""

    @staticmethod
    def load(project_dir: Path) -> ProjectSettings:
        """Load eepl.ini from a project directory.

        Raises:
            FileNotFoundError: If eepl.ini doesn't exist
        """
        ini_path = project_dir / SETTINGS_FILENAME
        if not ini_path.exists():
            raise FileNotFoundError(f"{SETTINGS_FILENAME} not found in {project_dir}")
        return ProjectSettings(ini_path)

    @staticmethod
    def toolchain(settings: Optional[ProjectSettings]) -> Toolchain:
        """Get the toolchain named by settings, or the default install."""
        root = settings.get_toolchain_root() if settings is not None else None
        return Toolchain(root)


class TaskPrinter:
    """Prints pipeline tasks."""

    @staticmethod
    def print_descriptors(descriptors: Iterable[InvocationDescriptor]) -> None:
        for index, descriptor in enumerate(descriptors, 1):
            group = f" [{descriptor.group.value}]" if descriptor.group else ""
            print(f"{index}. {descriptor.name} ({descriptor.command}){group}")
            print(f"   run:  {descriptor.role.binary_name} {' '.join(descriptor.args)}")
            print(f"   cwd:  {descriptor.cwd}")

    @staticmethod
    def print_invocations(invocations: Iterable[ReadyInvocation]) -> None:
        for index, invocation in enumerate(invocations, 1):
            group = f" [{invocation.group.value}]" if invocation.group else ""
            print(f"{index}. {invocation.name} ({invocation.descriptor.command}){group}")
            print(f"   run:  {' '.join(invocation.command_line)}")
            print(f"   cwd:  {invocation.cwd}")
            if invocation.output_dir is not None:
                print(
                    f"   out:  {invocation.output_dir.path} ({invocation.output_dir.status.value})"
                )


class ErrorFormatter:
    """Formats and displays error messages with ANSI color codes."""

    # ANSI color codes
    RED = "\033[1;31m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str) -> None:
        """Print formatted error message.

        Args:
            title: Error title (e.g., "Select a target device")
            message: Error message details
        """
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        print()

    @staticmethod
    def print_warning(message: str) -> None:
        print()
        print(f"{ErrorFormatter.YELLOW}✗ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def handle_pipeline_error(error: PipelineError) -> None:
        """Handle a pipeline error with one actionable message.

        Args:
            error: The pipeline error to handle
        """
        if isinstance(error, SelectionError):
            ErrorFormatter.print_error("Select a target device", str(error))
            print(f"Set [device] target in {SETTINGS_FILENAME} or pass --device.")
        elif isinstance(error, ToolchainError):
            ErrorFormatter.print_error("Toolchain not installed", str(error))
        else:
            ErrorFormatter.print_error(type(error).__name__, str(error))
        sys.exit(1)

    @staticmethod
    def handle_file_not_found(error: FileNotFoundError) -> None:
        ErrorFormatter.print_error("Error: File not found", str(error))
        print(f"Make sure you're in an eepl project directory with a {SETTINGS_FILENAME} file.")
        sys.exit(1)

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        """Handle KeyboardInterrupt with standard formatting."""
        ErrorFormatter.print_warning("Interrupted")
        sys.exit(130)  # Standard exit code for SIGINT

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Handle unexpected errors with standard formatting.

        Args:
            error: The exception to handle
            verbose: Whether to print traceback
        """
        message = f"{type(error).__name__}: {error}"
        ErrorFormatter.print_error("Unexpected error", message)

        if verbose:
            import traceback

            print("Traceback:")
            print(traceback.format_exc())

        sys.exit(1)


class PathValidator:
    """Validates project paths and directories."""

    @staticmethod
    def validate_project_dir(project_dir: Path) -> None:
        """Validate that project directory exists and is a directory.

        Raises:
            SystemExit: If path doesn't exist or isn't a directory
        """
        if not project_dir.exists():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path does not exist: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
        if not project_dir.is_dir():
            print(
                f"{ErrorFormatter.RED}✗ Error: Path is not a directory: {project_dir}{ErrorFormatter.RESET}"
            )
            sys.exit(2)
