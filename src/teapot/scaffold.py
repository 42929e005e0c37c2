"""Package scaffolding for `tea new`.

Creates the minimal layout a buildable package needs:

    <name>/
        tea.toml
        include/<name>.h
        src/<name>.c      defines <name>_main()
"""

import logging
from pathlib import Path

from .build.entry_point import entry_symbol
from .config.manifest import MANIFEST_FILE

DEFAULT_VERSION = "0.1.0"


class ScaffoldError(Exception):
    """Raised when a package directory can't be created."""
    pass


def manifest_template(name: str) -> str:
    return "\n".join([
        "[package]",
        f'name = "{name}"',
        f'version = "{DEFAULT_VERSION}"',
        "features = []",
        "",
        "[dependencies]",
        "",
        "[defines]",
        "",
        "[libraries]",
        "",
    ])


def header_template(name: str) -> str:
    guard = f"{entry_symbol(name).upper()}_H"
    return "\n".join([
        f"#ifndef {guard}",
        f"#define {guard}",
        "",
        f"void {entry_symbol(name)}(void);",
        "",
        "#endif",
        "",
    ])


def source_template(name: str) -> str:
    return "\n".join([
        "#include <stdio.h>",
        "",
        f'#include "{name}.h"',
        "",
        f"void {entry_symbol(name)}(void)",
        "{",
        '    printf("Hello, world!\\n");',
        "}",
        "",
    ])


def create_package(name: str, parent: Path) -> Path:
    """
    Create a new package directory.

    Args:
        name: Package name (also the directory name)
        parent: Directory the package is created in

    Returns:
        Path to the new package directory

    Raises:
        ScaffoldError: If the name is empty or the directory already exists
    """
    if not name or name.strip() != name or "/" in name or "\\" in name:
        raise ScaffoldError(f"Invalid package name: {name!r}")

    package_dir = Path(parent) / name
    if package_dir.exists():
        raise ScaffoldError(f"Destination already exists: {package_dir}")

    try:
        (package_dir / "src").mkdir(parents=True)
        (package_dir / "include").mkdir()
        (package_dir / MANIFEST_FILE).write_text(manifest_template(name), encoding="utf-8")
        (package_dir / "include" / f"{name}.h").write_text(header_template(name), encoding="utf-8")
        (package_dir / "src" / f"{name}.c").write_text(source_template(name), encoding="utf-8")
    except OSError as e:
        raise ScaffoldError(f"Failed to create package {name}: {e}") from e

    logging.debug(f"Created package {name} in {package_dir}")
    return package_dir
