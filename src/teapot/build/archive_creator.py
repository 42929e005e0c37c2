"""Archive Creator.

This module handles creating static library archives (.a files) from compiled
object files using the archiver tool (ar).

Design:
    - Wraps ar command execution
    - Replaces any archive left over from a previous invocation
    - Shows archive size information
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

from .build_utils import ToolchainInvocationError, run_tool, tool_command


class ArchiveCreator:
    """Creates static library archives from object files."""

    def __init__(self, archiver: Union[str, Sequence[str]] = "ar"):
        """Initialize archive creator.

        Args:
            archiver: Archiver command (name on PATH, full path, or argv list)
        """
        self.archiver = tool_command(archiver)

    def create_archive(self, archive_path: Path, members: List[Path]) -> Path:
        """Create static library archive.

        Args:
            archive_path: Path for output .a file
            members: Object (or archive) paths to store, in order

        Returns:
            Path to generated archive file

        Raises:
            ToolchainInvocationError: If archive creation fails
        """
        archive_path.parent.mkdir(parents=True, exist_ok=True)

        # 'r' would merge into an existing archive; start from scratch instead
        if archive_path.exists():
            archive_path.unlink()

        # 'rcs' flags: r=insert/replace, c=create, s=index (ranlib)
        cmd = [*self.archiver, "rcs", str(archive_path)]
        cmd.extend(str(member) for member in members)

        run_tool(cmd, f"archive {archive_path.name}")

        if not archive_path.exists():
            raise ToolchainInvocationError(f"Archive was not created: {archive_path}", command=cmd)

        size = archive_path.stat().st_size
        logging.debug(f"Created {archive_path.name}: {size:,} bytes from {len(members)} members")

        return archive_path
