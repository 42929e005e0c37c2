"""
Source file discovery and conditional source selection.

This module handles:
- Recursively scanning a package's src/ directory for C sources
- Selecting sources by the feature tag encoded in their file name

File naming convention:
    <stem>.c          always compiled
    <stem>.<tag>.c    if <tag> names a feature known to the package, compiled
                      only when that feature is enabled; if <tag> is not a
                      known feature name the file is always compiled

The second rule means a misspelled feature tag silently makes a file
unconditional. It is kept on purpose and covered by tests.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

SOURCE_EXTENSION = ".c"


@dataclass
class SourceCollection:
    """Sources found for a package, split by the selection rule."""

    selected: List[Path]   # Sources to compile
    excluded: List[Path]   # Sources gated by a disabled feature


def feature_tag(source: Path) -> Optional[str]:
    """
    Extract the feature tag from a source file name.

    Args:
        source: Source file path

    Returns:
        The tag between the stem and the extension, or None

    Example:
        >>> feature_tag(Path("net.linux.c"))
        'linux'
        >>> feature_tag(Path("net.c")) is None
        True
    """
    tag = Path(source.stem).suffix
    if not tag or tag == ".":
        return None
    return tag[1:]


class SourceScanner:
    """
    Scans a package for C sources and applies feature-tag selection.

    Example usage:
        scanner = SourceScanner(
            known_features=["windows", "linux", "fast"],
            enabled_features=["linux"],
        )
        sources = scanner.scan(Path("app/src"))
        compile(sources.selected)
    """

    def __init__(self, known_features: Sequence[str], enabled_features: Sequence[str]):
        """
        Initialize source scanner.

        Args:
            known_features: Every feature name in the package's universe
            enabled_features: Feature names enabled for this package instance
        """
        self.known_features = set(known_features)
        self.enabled_features = set(enabled_features)

    def scan(self, src_dir: Path) -> SourceCollection:
        """
        Scan for source files and split them by the selection rule.

        Args:
            src_dir: Source directory to scan recursively

        Returns:
            SourceCollection with selected and excluded sources, each sorted
        """
        selected = []
        excluded = []

        for source in self.find_sources(Path(src_dir)):
            if self.is_selected(source):
                selected.append(source)
            else:
                excluded.append(source)

        return SourceCollection(selected=selected, excluded=excluded)

    def is_selected(self, source: Path) -> bool:
        """Whether a single source file should be compiled."""
        tag = feature_tag(source)
        if tag is None or tag not in self.known_features:
            return True
        return tag in self.enabled_features

    @staticmethod
    def find_sources(src_dir: Path) -> List[Path]:
        """
        Find all C source files under a directory.

        Args:
            src_dir: Directory to scan

        Returns:
            Sorted list of source paths (empty if the directory is missing)
        """
        if not src_dir.is_dir():
            return []

        return sorted(
            path for path in src_dir.rglob(f"*{SOURCE_EXTENSION}")
            if path.is_file()
        )
