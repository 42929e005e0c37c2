"""Symbol table inspection.

Lists the global function symbols a static archive defines by running the
toolchain's symbol inspector (nm). Used to discover test functions without
any registration metadata.

The order of the returned names is whatever nm prints. It is neither
alphabetical nor declaration order and may differ between toolchains.
"""

import sys
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .build_utils import ToolchainInvocationError, run_tool, tool_command

# nm type letter for a global symbol in the text (code) section
GLOBAL_TEXT_SYMBOL = "T"


class SymbolReadError(ToolchainInvocationError):
    """Raised when an archive's symbol table can't be read."""
    pass


def parse_nm_output(output: str, strip_leading_underscore: bool = False) -> List[str]:
    """Extract global text symbol names from `nm -g` output.

    Member headers ("foo.o:"), blank lines and undefined symbols are skipped.

    Args:
        output: Text printed by nm
        strip_leading_underscore: Drop the C-symbol underscore prefix (macOS)

    Returns:
        Symbol names in the order nm printed them
    """
    names = []
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 3 or parts[1] != GLOBAL_TEXT_SYMBOL:
            continue

        name = parts[2]
        if strip_leading_underscore and name.startswith("_"):
            name = name[1:]
        names.append(name)

    return names


class SymbolReader:
    """Reads defined function symbols from a static archive."""

    def __init__(self, nm: Union[str, Sequence[str]] = "nm", strip_leading_underscore: Optional[bool] = None):
        """Initialize symbol reader.

        Args:
            nm: Symbol inspector executable
            strip_leading_underscore: Override the platform default (True on macOS)
        """
        self.nm = tool_command(nm)
        if strip_leading_underscore is None:
            strip_leading_underscore = sys.platform == "darwin"
        self.strip_leading_underscore = strip_leading_underscore

    def read_function_symbols(self, archive: Path) -> List[str]:
        """List global function symbols defined in an archive.

        Args:
            archive: Path to a static archive

        Returns:
            Symbol names in inspector enumeration order

        Raises:
            SymbolReadError: If the archive doesn't exist
            ToolchainInvocationError: If nm can't be run or fails
        """
        if not Path(archive).exists():
            raise SymbolReadError(f"Archive not found: {archive}")

        result = run_tool([*self.nm, "-g", str(archive)], f"read symbols of {Path(archive).name}")
        return parse_nm_output(result.stdout, self.strip_leading_underscore)

    def find_symbols_with_prefix(self, archive: Path, prefix: str) -> List[str]:
        """Function symbols starting with a prefix, first occurrence order, no duplicates."""
        found: List[str] = []
        for name in self.read_function_symbols(archive):
            if name.startswith(prefix) and name not in found:
                found.append(name)
        return found
