"""Build utilities for Teapot.

Shared subprocess handling for every external toolchain invocation
(compiler driver, archiver, symbol inspector) plus small path helpers.
"""

import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import List, Sequence, Union

from ..interrupt_utils import handle_keyboard_interrupt_properly


class ToolchainInvocationError(Exception):
    """Raised when an external tool can't be spawned or exits nonzero."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: int = -1,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def __str__(self) -> str:
        lines = [super().__str__()]
        if self.command:
            lines.append(f"command: {' '.join(self.command)}")
        if self.stdout.strip():
            lines.append(f"stdout: {self.stdout.rstrip()}")
        if self.stderr.strip():
            lines.append(f"stderr: {self.stderr.rstrip()}")
        return "\n".join(lines)


def run_tool(cmd: List[str], description: str) -> subprocess.CompletedProcess:
    """Run an external tool, capturing its output.

    No timeout is applied; toolchain invocations run to completion.

    Args:
        cmd: Command and arguments
        description: Short description used in error messages (e.g. "compile main.c")

    Returns:
        CompletedProcess of a successful run

    Raises:
        ToolchainInvocationError: If the tool can't be started or exits nonzero
    """
    logging.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except KeyboardInterrupt as ke:
        handle_keyboard_interrupt_properly(ke)
        raise  # Never reached, but satisfies type checker
    except OSError as e:
        raise ToolchainInvocationError(
            f"Failed to {description}: could not run {cmd[0]}: {e}", command=cmd
        ) from e

    if result.returncode != 0:
        raise ToolchainInvocationError(
            f"Failed to {description} (exit code {result.returncode})",
            command=cmd,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result


def tool_command(tool: Union[str, Sequence[str]]) -> List[str]:
    """Command prefix for a tool given as a shell-style string or an argv list.

    Example:
        >>> tool_command("ccache gcc")
        ['ccache', 'gcc']
    """
    if isinstance(tool, str):
        return shlex.split(tool)
    return list(tool)


def c_identifier(name: str) -> str:
    """Turn a package name into a valid C identifier fragment."""
    identifier = re.sub(r"[^0-9A-Za-z_]", "_", name)
    if identifier and identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


def archive_path(target_directory: Path, name: str) -> Path:
    """Location of a package's static archive."""
    return Path(target_directory) / f"lib{name}.a"
