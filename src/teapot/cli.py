"""
Command-line interface for Teapot.

This module provides the `tea` CLI tool for building native C packages.
"""

import argparse
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from teapot import __version__
from teapot.build import BuildMode, BuildOrchestrator, BuildProfile
from teapot.cli_utils import ErrorFormatter, PathValidator, configure_logging
from teapot.scaffold import ScaffoldError, create_package


@dataclass
class BuildArgs:
    """Arguments for the brew, pour and sip commands."""

    project_dir: Path
    release: bool = False
    debug: bool = False
    verbose: bool = False


@dataclass
class NewArgs:
    """Arguments for the new command."""

    name: str
    path: Path


def run_binary(binary: Path) -> int:
    """Run a built executable with inherited stdio and return its exit code."""
    print(f"Running {binary}")
    print()
    try:
        return subprocess.run([str(binary)]).returncode
    except OSError as e:
        ErrorFormatter.print_error("Failed to run binary", f"{binary}: {e}")
        return 1


def build_command(args: BuildArgs, mode: BuildMode = BuildMode.PROGRAM, run: bool = False) -> None:
    """Build the package in project_dir, optionally running the result.

    Examples:
        tea brew                      # Debug build of the current package
        tea brew --release            # Optimized build
        tea pour examples/hello       # Build and run a specific package
        tea sip -v                    # Build and run the tests with verbose output
    """
    print(f"Teapot Build System v{__version__}")
    print()

    try:
        orchestrator = BuildOrchestrator(verbose=args.verbose)
        profile = BuildProfile(release=args.release, debug=args.debug)

        label = "tests" if mode is BuildMode.TEST else "package"
        if args.verbose:
            print(f"Building {label}: {args.project_dir}")
            print(f"Profile: {profile.output_dir_name}")
            print()
        else:
            print(f"Building {label} ({profile.output_dir_name})...")

        result = orchestrator.build(
            project_dir=args.project_dir,
            profile=profile,
            mode=mode,
            verbose=args.verbose,
        )

        if not result.success:
            ErrorFormatter.print_error("Build failed!", result.message)
            sys.exit(1)

        ErrorFormatter.print_success("Build successful!")
        print()
        print(f"Binary: {result.binary_path}")
        print(f"Build time: {result.build_time:.2f}s")

        if not run:
            sys.exit(0)

        print()
        sys.exit(run_binary(result.binary_path))

    except FileNotFoundError as e:
        ErrorFormatter.handle_file_not_found(e)
    except PermissionError as e:
        ErrorFormatter.handle_permission_error(e)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def new_command(args: NewArgs) -> None:
    """Create a new package.

    Examples:
        tea new hello                 # Creates ./hello
        tea new hello --path libs     # Creates libs/hello
    """
    try:
        package_dir = create_package(args.name, args.path)
    except ScaffoldError as e:
        ErrorFormatter.print_error("Failed to create package", str(e))
        sys.exit(1)

    ErrorFormatter.print_success(f"Created package {args.name}")
    print(f"Location: {package_dir}")
    sys.exit(0)


def _add_build_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Package directory (default: current directory)",
    )
    profile_group = parser.add_mutually_exclusive_group()
    profile_group.add_argument(
        "--release",
        action="store_true",
        help="Optimize (-O3) and write to target/release",
    )
    profile_group.add_argument(
        "--debug",
        action="store_true",
        help="Emit debug info (-g)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose build output",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Teapot - Build system for native C packages."""
    parser = argparse.ArgumentParser(
        prog="tea",
        description="Teapot - Build system for native C packages",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"tea {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    brew_parser = subparsers.add_parser("brew", help="Build the package")
    _add_build_arguments(brew_parser)

    pour_parser = subparsers.add_parser("pour", help="Build and run the package")
    _add_build_arguments(pour_parser)

    sip_parser = subparsers.add_parser("sip", help="Build and run the package's tests")
    _add_build_arguments(sip_parser)

    new_parser = subparsers.add_parser("new", help="Create a new package")
    new_parser.add_argument("name", help="Package name")
    new_parser.add_argument(
        "--path",
        type=Path,
        default=Path.cwd(),
        help="Parent directory (default: current directory)",
    )

    parsed_args = parser.parse_args(argv)

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    if parsed_args.command == "new":
        PathValidator.validate_project_dir(parsed_args.path)
        new_command(NewArgs(name=parsed_args.name, path=parsed_args.path))
        return

    PathValidator.validate_project_dir(parsed_args.project_dir)
    configure_logging(parsed_args.verbose)

    build_args = BuildArgs(
        project_dir=parsed_args.project_dir,
        release=parsed_args.release,
        debug=parsed_args.debug,
        verbose=parsed_args.verbose,
    )
    if parsed_args.command == "brew":
        build_command(build_args)
    elif parsed_args.command == "pour":
        build_command(build_args, run=True)
    elif parsed_args.command == "sip":
        build_command(build_args, mode=BuildMode.TEST, run=True)


if __name__ == "__main__":
    main()
