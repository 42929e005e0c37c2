"""Compilation Executor.

This module handles running a single compiler invocation that turns one C
source file into one object file.

Design:
    - Wraps the compiler driver via build_utils.run_tool
    - Creates the object's parent directory on demand
    - Safe to call from several worker threads at once (no shared state)
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

from .build_utils import ToolchainInvocationError, run_tool, tool_command


class CompilationExecutor:
    """Executes one source-to-object compilation."""

    def __init__(self, compiler: Union[str, Sequence[str]] = "cc"):
        """Initialize compilation executor.

        Args:
            compiler: Compiler driver command, optionally behind a launcher
                such as "ccache cc"
        """
        self.compiler = tool_command(compiler)

    def build_command(self, source_path: Path, output_path: Path, compile_flags: List[str]) -> List[str]:
        """Build the compiler command line.

        Args:
            source_path: Path to source file
            output_path: Path for output object file
            compile_flags: Define, include, optimization and debug flags

        Returns:
            Command as a list of arguments
        """
        cmd = list(self.compiler)
        cmd.extend(compile_flags)
        cmd.extend(["-c", str(source_path)])
        cmd.extend(["-o", str(output_path)])
        return cmd

    def compile_source(self, source_path: Path, output_path: Path, compile_flags: List[str]) -> Path:
        """Compile a single source file.

        Args:
            source_path: Path to source file
            output_path: Path for output object file
            compile_flags: Flags passed verbatim to the compiler

        Returns:
            Path to generated object file

        Raises:
            ToolchainInvocationError: If compilation fails
        """
        if not source_path.exists():
            raise ToolchainInvocationError(f"Source file not found: {source_path}")

        output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(source_path, output_path, compile_flags)
        result = run_tool(cmd, f"compile {source_path.name}")

        # Warnings are surfaced even when compilation succeeds
        if result.stderr:
            logging.warning(result.stderr.rstrip())

        return output_path
