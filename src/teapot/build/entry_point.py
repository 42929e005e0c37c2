"""Entry-point and test-harness synthesis.

Every package, including the root, is built as a static archive. Executables
are produced by compiling a small generated translation unit that supplies
main() and pulls the rest in from the archives:

- Program mode: main() calls <package>_main() exactly once.
- Test mode: main() calls every function whose name starts with "test_",
  as discovered from the root archive's symbol table, in the order the symbol
  inspector lists them (not guaranteed to be stable across toolchains).
"""

from pathlib import Path
from typing import Sequence

from .build_utils import c_identifier

TEST_PREFIX = "test_"
ENTRY_SUFFIX = "_main"

GENERATED_HEADER = "/* Generated by teapot. Do not edit. */"


def entry_symbol(package_name: str) -> str:
    """Name of the function a program package must define."""
    return f"{c_identifier(package_name)}{ENTRY_SUFFIX}"


def generate_program_main(package_name: str) -> str:
    """Source of the shim main() for program mode.

    Args:
        package_name: Root package name

    Returns:
        C source text
    """
    symbol = entry_symbol(package_name)
    return "\n".join([
        GENERATED_HEADER,
        "",
        f"void {symbol}(void);",
        "",
        "int main(void)",
        "{",
        f"    {symbol}();",
        "    return 0;",
        "}",
        "",
    ])


def generate_test_harness(test_symbols: Sequence[str]) -> str:
    """Source of a main() that runs every test function in order.

    An empty symbol list produces a harness that reports zero tests and
    exits successfully.

    Args:
        test_symbols: Test function names in the order they should run

    Returns:
        C source text
    """
    lines = [GENERATED_HEADER, "", "#include <stdio.h>", ""]
    lines.extend(f"void {symbol}(void);" for symbol in test_symbols)
    if test_symbols:
        lines.append("")

    lines.extend([
        "int main(void)",
        "{",
        f'    printf("running {len(test_symbols)} tests\\n");',
    ])
    for symbol in test_symbols:
        lines.extend([
            f'    printf("test {symbol} ... ");',
            "    fflush(stdout);",
            f"    {symbol}();",
            '    printf("ok\\n");',
        ])
    lines.extend([
        f'    printf("\\ntest result: ok. {len(test_symbols)} passed\\n");',
        "    return 0;",
        "}",
        "",
    ])
    return "\n".join(lines)


def write_generated_source(path: Path, source: str) -> Path:
    """Write a generated translation unit, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path
