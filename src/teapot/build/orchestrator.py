"""
Build orchestration for Teapot projects.

This module coordinates the entire build process, from reading tea.toml to
linking the final executable. It integrates all build system components:
- Dependency graph resolution (manifests, features, defines, libraries)
- Source scanning with feature-tagged file selection
- Parallel compilation of every package into a static archive
- Entry-point or test-harness synthesis and the final link
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from ..config.host_platform import detect_host_platform
from ..config.manifest import ManifestError
from ..config.toolchain_config import ToolchainConfig
from ..packages.dependency_graph import DependencyGraphBuilder, Leaf
from .build_utils import ToolchainInvocationError, archive_path, c_identifier
from .compiler import Compiler, OutputType
from .entry_point import (
    TEST_PREFIX,
    generate_program_main,
    generate_test_harness,
    write_generated_source,
)
from .source_scanner import SourceCollection, SourceScanner
from .symbol_reader import SymbolReader

FEATURE_DEFINE_PREFIX = "FEATURE_"
RELEASE_OPTIMIZATION_LEVEL = 3


class BuildOrchestratorError(Exception):
    """Exception raised for build orchestration errors."""
    pass


class BuildMode(Enum):
    """What the final link step produces."""

    PROGRAM = "program"
    TEST = "test"


@dataclass
class BuildProfile:
    """Optimization and debug settings selected on the command line."""

    release: bool = False
    debug: bool = False

    @property
    def output_dir_name(self) -> str:
        return "release" if self.release else "debug"

    def apply(self, compiler: Compiler) -> None:
        """Add this profile's flags to a compiler."""
        if self.release:
            compiler.set_optimization_level(RELEASE_OPTIMIZATION_LEVEL)
        if self.debug:
            compiler.enable_debug_info()


@dataclass
class BuildResult:
    """Result of a complete build operation."""

    success: bool
    binary_path: Optional[Path]
    archive_path: Optional[Path]
    build_time: float
    message: str
    tests: List[str] = field(default_factory=list)


def feature_define(feature_name: str) -> str:
    """Preprocessor symbol marking an enabled feature (e.g. FEATURE_LINUX)."""
    return FEATURE_DEFINE_PREFIX + c_identifier(feature_name).upper()


class BuildOrchestrator:
    """
    Orchestrates the complete build process for a Teapot package tree.

    This class coordinates all phases of the build:
    1. Resolve the dependency graph (every manifest, before compiling anything)
    2. Compile each package depth-first into lib<name>.a, dependencies first
    3. Generate the entry point (program) or test harness (test)
    4. Link the executable against every archive and system library

    Example usage:
        orchestrator = BuildOrchestrator()
        result = orchestrator.build(
            project_dir=Path("."),
            profile=BuildProfile(release=True),
            mode=BuildMode.PROGRAM,
        )
        if result.success:
            print(f"Binary: {result.binary_path}")
    """

    def __init__(
        self,
        toolchain: Optional[ToolchainConfig] = None,
        host_platform: Optional[str] = None,
        show_progress: bool = True,
        verbose: bool = False,
    ):
        """
        Initialize build orchestrator.

        Args:
            toolchain: External tools (defaults to environment configuration)
            host_platform: Implicit platform feature (defaults to detected host)
            show_progress: Show per-package compile progress bars
            verbose: Enable verbose output
        """
        self.toolchain = toolchain or ToolchainConfig.from_environment()
        self.host_platform = host_platform or detect_host_platform()
        self.show_progress = show_progress
        self.verbose = verbose

    def build(
        self,
        project_dir: Path,
        profile: Optional[BuildProfile] = None,
        mode: BuildMode = BuildMode.PROGRAM,
        verbose: Optional[bool] = None,
    ) -> BuildResult:
        """
        Execute complete build process.

        Args:
            project_dir: Root package directory containing tea.toml
            profile: Release/debug settings
            mode: Link a program or a test harness
            verbose: Override verbose setting

        Returns:
            BuildResult with build status and output paths
        """
        start_time = time.time()
        verbose_mode = verbose if verbose is not None else self.verbose
        profile = profile or BuildProfile()

        try:
            project_dir = Path(project_dir).resolve()
            if not project_dir.is_dir():
                raise BuildOrchestratorError(f"Project directory not found: {project_dir}")

            # Phase 1: Resolve the whole graph so manifest errors abort early
            if verbose_mode:
                print("[1/3] Resolving dependencies...")

            root = self.resolve(project_dir)
            target_dir = self.get_target_dir(project_dir, profile)

            if verbose_mode:
                print(f"      Package: {root.name} v{root.version}")
                print(f"      Dependencies: {sum(1 for _ in root.iter_dependencies())}")
                print(f"      Output: {target_dir}")

            # Phase 2: Compile every package into an archive
            if verbose_mode:
                print("[2/3] Compiling packages...")

            root_archive = self.compile_leaf(root, target_dir, profile, verbose_mode)

            # Phase 3: Final link
            if verbose_mode:
                print("[3/3] Linking executable...")

            tests: List[str] = []
            if mode is BuildMode.TEST:
                tests = self.discover_tests(root, target_dir)
                if verbose_mode:
                    print(f"      Discovered {len(tests)} tests")
                binary_path = self.link_test_harness(root, target_dir, profile, tests)
            else:
                binary_path = self.link_program(root, target_dir, profile)

            build_time = time.time() - start_time

            if verbose_mode:
                print(f"      Binary: {binary_path}")
                print(f"Build time: {build_time:.2f}s")

            return BuildResult(
                success=True,
                binary_path=binary_path,
                archive_path=root_archive,
                build_time=build_time,
                message="Build successful",
                tests=tests,
            )

        except (ManifestError, ToolchainInvocationError, BuildOrchestratorError) as e:
            return BuildResult(
                success=False,
                binary_path=None,
                archive_path=None,
                build_time=time.time() - start_time,
                message=str(e),
            )
        except Exception as e:
            logging.debug("Unexpected build failure", exc_info=True)
            return BuildResult(
                success=False,
                binary_path=None,
                archive_path=None,
                build_time=time.time() - start_time,
                message=f"Unexpected error: {e}",
            )

    def resolve(self, project_dir: Path) -> Leaf:
        """
        Resolve the Leaf tree rooted at a package directory.

        Raises:
            ManifestError: If any manifest in the graph is missing or invalid
        """
        builder = DependencyGraphBuilder(host_platform=self.host_platform)
        return builder.build_root(project_dir)

    @staticmethod
    def get_target_dir(project_dir: Path, profile: BuildProfile) -> Path:
        return Path(project_dir) / "target" / profile.output_dir_name

    def scan_sources(self, leaf: Leaf) -> SourceCollection:
        """Sources of a Leaf split by feature-tag selection."""
        scanner = SourceScanner(leaf.feature_names, leaf.enabled_features)
        return scanner.scan(leaf.source_dir)

    def compile_leaf(
        self,
        leaf: Leaf,
        target_dir: Path,
        profile: BuildProfile,
        verbose: bool = False,
    ) -> Path:
        """
        Compile a Leaf and its dependencies into static archives.

        Dependencies are compiled first (depth-first, in declaration order)
        so their archives exist before this Leaf is compiled.

        Args:
            leaf: Leaf to compile
            target_dir: Output root
            profile: Release/debug settings
            verbose: Verbose output

        Returns:
            Path to this Leaf's archive

        Raises:
            ToolchainInvocationError: If compiling or archiving fails
        """
        for dependency in leaf.dependencies:
            self.compile_leaf(dependency, target_dir, profile, verbose)

        sources = self.scan_sources(leaf)

        if verbose:
            print(f"      {leaf.name} v{leaf.version}: {len(sources.selected)} sources")
            for skipped in sources.excluded:
                print(f"        skipping {skipped.relative_to(leaf.source_dir)}")

        compiler = self._create_compiler(leaf, target_dir, profile)
        compiler.compile(sources.selected, leaf.name, source_root=leaf.path)
        return compiler.link(leaf.name, OutputType.LIBRARY)

    def discover_tests(self, root: Leaf, target_dir: Path) -> List[str]:
        """Test functions exported by the root archive, in nm order."""
        reader = SymbolReader(self.toolchain.nm)
        return reader.find_symbols_with_prefix(archive_path(target_dir, root.name), TEST_PREFIX)

    def link_program(self, root: Leaf, target_dir: Path, profile: BuildProfile) -> Path:
        """
        Generate the shim main() and link the program binary.

        Returns:
            Path to <target>/<root name>
        """
        source = write_generated_source(
            target_dir / "generated" / "main.c", generate_program_main(root.name)
        )
        return self._link_executable(root, target_dir, profile, source, f"{root.name}-entry", root.name)

    def link_test_harness(
        self,
        root: Leaf,
        target_dir: Path,
        profile: BuildProfile,
        tests: Optional[List[str]] = None,
    ) -> Path:
        """
        Generate the test runner main() and link the test binary.

        Args:
            root: Root Leaf (its archive must already exist)
            target_dir: Output root
            profile: Release/debug settings
            tests: Test symbols to call (discovered from the archive if None)

        Returns:
            Path to <target>/<root name>-test
        """
        if tests is None:
            tests = self.discover_tests(root, target_dir)

        source = write_generated_source(
            target_dir / "generated" / "test_main.c", generate_test_harness(tests)
        )
        return self._link_executable(
            root, target_dir, profile, source, f"{root.name}-tests", f"{root.name}-test"
        )

    def _link_executable(
        self,
        root: Leaf,
        target_dir: Path,
        profile: BuildProfile,
        source: Path,
        display_name: str,
        binary_name: str,
    ) -> Path:
        compiler = Compiler(target_dir, self.toolchain, show_progress=self.show_progress)
        profile.apply(compiler)
        compiler.compile([source], display_name, source_root=source.parent)

        # Parents before children so single-pass linkers resolve every archive
        compiler.add_static_library(root.name)
        for dependency in root.iter_dependencies():
            compiler.add_static_library(dependency.name)

        for library in root.libraries:
            compiler.add_system_library(library)
        for dependency in root.iter_dependencies():
            for library in dependency.libraries:
                compiler.add_system_library(library)

        return compiler.link(binary_name, OutputType.BINARY)

    def _create_compiler(self, leaf: Leaf, target_dir: Path, profile: BuildProfile) -> Compiler:
        """
        Create a compiler configured for one Leaf.

        Args:
            leaf: Leaf being compiled
            target_dir: Output root
            profile: Release/debug settings

        Returns:
            Configured Compiler instance
        """
        compiler = Compiler(target_dir, self.toolchain, show_progress=self.show_progress)

        compiler.include(leaf.include_dir)
        compiler.include(leaf.source_dir)
        for dependency in leaf.iter_dependencies():
            compiler.include(dependency.include_dir)

        for feature_name in leaf.enabled_features:
            compiler.define(feature_define(feature_name))
        for define in leaf.defines:
            compiler.define(define.name, define.value)

        profile.apply(compiler)
        return compiler
