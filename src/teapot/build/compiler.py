"""Compilation engine.

A Compiler accumulates include, define, optimization and debug flags plus an
ordered list of link inputs, then either compiles a batch of sources in
parallel or links its inputs into a static archive or an executable.

Design:
    - One Compiler per orchestration step; it is discarded after linking
    - Flags are append-only and passed to the toolchain verbatim
    - Sources compile on a bounded thread pool; the first failure aborts
    - Compiled objects are prepended to the link inputs, archives appended
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

from tqdm import tqdm

from ..config.toolchain_config import ToolchainConfig
from .archive_creator import ArchiveCreator
from .build_utils import archive_path
from .compilation_executor import CompilationExecutor
from .linker import Linker

OBJECT_SUFFIX = ".o"


class OutputType(Enum):
    """What link() produces."""

    BINARY = "binary"
    LIBRARY = "library"


class Compiler:
    """Accumulates toolchain flags and artifacts for one compile/link step.

    Example usage:
        compiler = Compiler(Path("target/debug"), ToolchainConfig())
        compiler.include(Path("util/include"))
        compiler.define("VERSION", "3")
        compiler.enable_debug_info()
        compiler.compile([Path("util/src/util.c")], "util", source_root=Path("util"))
        compiler.link("util", OutputType.LIBRARY)
    """

    def __init__(
        self,
        target_directory: Path,
        toolchain: Optional[ToolchainConfig] = None,
        show_progress: bool = True,
    ):
        """Initialize compiler.

        Args:
            target_directory: Output root for objects, archives and binaries
            toolchain: External tools and worker count
            show_progress: Whether to show a progress bar while compiling
        """
        self.target_directory = Path(target_directory)
        self.toolchain = toolchain or ToolchainConfig.from_environment()
        self.show_progress = show_progress

        self.compile_flags: List[str] = []
        self.defines: List[str] = []
        self.link_flags: List[str] = ["-lm"]
        self.artifacts: List[Path] = []

        self.executor = CompilationExecutor(self.toolchain.cc)

    def include(self, path: Path) -> None:
        self.compile_flags.append(f"-I{path}")

    def define(self, name: str, value: Optional[str] = None) -> None:
        """Add a preprocessor define; an empty value counts as no value."""
        if value is None or value == "":
            self.defines.append(f"-D{name}")
        else:
            self.defines.append(f"-D{name}={value}")

    def set_optimization_level(self, level: int) -> None:
        self.compile_flags.append(f"-O{level}")

    def enable_debug_info(self) -> None:
        self.compile_flags.append("-g")

    def add_static_library(self, name: str) -> None:
        """Append a previously built archive lib<name>.a to the link inputs."""
        self.artifacts.append(archive_path(self.target_directory, name))

    def add_system_library(self, name: str) -> None:
        self.link_flags.append(f"-l{name}")

    def get_compile_flags(self) -> List[str]:
        """Defines first, then includes, optimization and debug flags."""
        return self.defines + self.compile_flags

    def object_path(self, source: Path, display_name: str, source_root: Optional[Path] = None) -> Path:
        """Object location mirroring the source's relative path.

        Args:
            source: Source file path
            display_name: Package name; selects the private objects subtree
            source_root: Directory the mirrored path is taken relative to

        Returns:
            <target>/objects/<display_name>/<relative source path>.o
        """
        source = Path(source)
        if source_root is not None:
            try:
                relative = source.relative_to(source_root)
            except ValueError:
                relative = source
        else:
            relative = source

        # Keep the mirrored path inside the objects tree
        parts = [part for part in relative.parts if part not in (relative.anchor, "")]
        parts = ["__" if part == ".." else part for part in parts]
        mirrored = Path(*parts) if parts else Path(source.name)

        return (
            self.target_directory / "objects" / display_name / mirrored
        ).with_suffix(OBJECT_SUFFIX)

    def compile(
        self,
        sources: Sequence[Path],
        display_name: str,
        source_root: Optional[Path] = None,
    ) -> List[Path]:
        """Compile sources to objects in parallel.

        Every source is compiled independently with the accumulated flags.
        The first failure cancels work that has not started yet and is
        re-raised; objects already written by siblings stay on disk.

        Args:
            sources: Source files to compile
            display_name: Name shown in progress output and used for the objects subtree
            source_root: Directory object paths are mirrored relative to

        Returns:
            Object file paths in source order

        Raises:
            ToolchainInvocationError: If any compilation fails
        """
        objects = [self.object_path(source, display_name, source_root) for source in sources]
        if not objects:
            logging.debug(f"No sources to compile for {display_name}")
            return []

        flags = self.get_compile_flags()
        workers = max(1, min(self.toolchain.jobs, len(objects)))
        logging.debug(f"Compiling {len(objects)} sources for {display_name} with {workers} workers")

        progress = tqdm(
            total=len(objects),
            desc=f"Compiling {display_name}",
            unit="file",
            disable=not self.show_progress,
        )
        pool = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [
                pool.submit(self.executor.compile_source, Path(source), obj, flags)
                for source, obj in zip(sources, objects)
            ]
            for future in as_completed(futures):
                future.result()
                progress.update(1)
        except BaseException:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        else:
            pool.shutdown(wait=True)
        finally:
            progress.close()

        self.artifacts = objects + self.artifacts
        return objects

    def link(self, name: str, output: OutputType) -> Path:
        """Link the accumulated artifacts.

        Args:
            name: Package (or binary) name
            output: LIBRARY for lib<name>.a, BINARY for an executable <name>

        Returns:
            Path of the produced artifact

        Raises:
            ToolchainInvocationError: If the archiver or linker fails
        """
        if output is OutputType.LIBRARY:
            return ArchiveCreator(self.toolchain.ar).create_archive(
                archive_path(self.target_directory, name), self.artifacts
            )

        return Linker(self.toolchain.cc).link(
            self.artifacts, self.target_directory / name, self.link_flags
        )
