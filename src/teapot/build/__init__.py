"""
Build system components for Teapot.

This module provides the build system implementation including:
- Source file discovery and feature-tagged selection
- Compilation (cc), archiving (ar) and linking
- Symbol inspection (nm) and entry-point synthesis
- Build orchestration
"""

from .source_scanner import SourceScanner, SourceCollection
from .build_utils import ToolchainInvocationError
from .compilation_executor import CompilationExecutor
from .archive_creator import ArchiveCreator
from .linker import Linker
from .compiler import Compiler, OutputType
from .symbol_reader import SymbolReader, SymbolReadError
from .orchestrator import (
    BuildMode,
    BuildOrchestrator,
    BuildOrchestratorError,
    BuildProfile,
    BuildResult,
)

__all__ = [
    'SourceScanner',
    'SourceCollection',
    'ToolchainInvocationError',
    'CompilationExecutor',
    'ArchiveCreator',
    'Linker',
    'Compiler',
    'OutputType',
    'SymbolReader',
    'SymbolReadError',
    'BuildMode',
    'BuildOrchestrator',
    'BuildOrchestratorError',
    'BuildProfile',
    'BuildResult',
]
