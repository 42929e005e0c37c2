"""
Executable linker wrapper.

This module drives the compiler as a linker to turn object files and static
archives into a standalone executable.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

from .build_utils import run_tool, tool_command


class Linker:
    """
    Wrapper for linking executables with the C compiler driver.

    Inputs (objects and archives) are placed before the link flags so that
    single-pass linkers see every undefined reference before the libraries
    that satisfy it.
    """

    def __init__(self, compiler: Union[str, Sequence[str]] = "cc"):
        """
        Initialize linker.

        Args:
            compiler: Compiler driver used for linking
        """
        self.compiler = tool_command(compiler)

    def build_command(self, inputs: List[Path], output_path: Path, link_flags: List[str]) -> List[str]:
        cmd = list(self.compiler)
        cmd.extend(str(path) for path in inputs)
        cmd.extend(["-o", str(output_path)])
        cmd.extend(link_flags)
        return cmd

    def link(self, inputs: List[Path], output_path: Path, link_flags: List[str]) -> Path:
        """
        Link inputs into an executable.

        Args:
            inputs: Object files and static archives, in link order
            output_path: Path of the executable to produce
            link_flags: Linker flags such as -lm and -l<system library>

        Returns:
            Path to the linked executable

        Raises:
            ToolchainInvocationError: If linking fails
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = self.build_command(inputs, output_path, link_flags)
        run_tool(cmd, f"link {output_path.name}")

        logging.debug(f"Linked {output_path}")
        return output_path
