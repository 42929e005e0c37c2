"""
Dependency graph resolution for Teapot packages.

This module turns a tree of tea.toml manifests into a tree of resolved build
nodes (Leaves). Each Leaf is one package instance with one enabled-feature
set; its dependency, define and library lists are flattened from the
manifest using that feature set.

Resolution rules:
- The root is built with only the host platform feature requested
- A dependency is built with exactly the features its declaration requests,
  plus the host platform feature; nothing is inherited from the parent
- Dependencies are located by path relative to the declaring package
- Shared dependencies are not deduplicated: each declaration gets its own Leaf
- A missing or invalid manifest anywhere aborts the whole resolution
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Callable, Iterator, Optional, Tuple

from ..config.host_platform import detect_host_platform
from ..config.manifest import Define, Manifest, load_manifest
from .features import Feature, enabled_names, flatten_over_enabled, resolve_features


@dataclass(frozen=True)
class Leaf:
    """A resolved, feature-instantiated build node."""

    manifest: Manifest
    path: Path
    features: Tuple[Feature, ...]
    defines: Tuple[Define, ...]
    libraries: Tuple[str, ...]
    dependencies: Tuple["Leaf", ...]

    @property
    def name(self) -> str:
        return self.manifest.package.name

    @property
    def version(self) -> str:
        return self.manifest.package.version

    @property
    def feature_names(self) -> Tuple[str, ...]:
        """Every feature name known to this Leaf, enabled or not."""
        return tuple(feature.name for feature in self.features)

    @property
    def enabled_features(self) -> Tuple[str, ...]:
        return enabled_names(self.features)

    def is_enabled(self, feature_name: str) -> bool:
        return feature_name in self.enabled_features

    @property
    def include_dir(self) -> Path:
        return self.path / "include"

    @property
    def source_dir(self) -> Path:
        return self.path / "src"

    def iter_dependencies(self) -> Iterator["Leaf"]:
        """Yield every transitive dependency, pre-order, duplicates included."""
        for dependency in self.dependencies:
            yield dependency
            yield from dependency.iter_dependencies()


class DependencyGraphBuilder:
    """
    Builds the Leaf tree for a root package.

    Example usage:
        builder = DependencyGraphBuilder(host_platform="linux")
        root = builder.build_root(Path("."))
        for leaf in root.iter_dependencies():
            print(leaf.name, leaf.enabled_features)
    """

    def __init__(
        self,
        host_platform: Optional[str] = None,
        manifest_loader: Callable[[Path], Manifest] = load_manifest,
    ):
        """
        Initialize graph builder.

        Args:
            host_platform: Implicit platform feature (defaults to detected host)
            manifest_loader: Callable loading a Manifest from a directory
        """
        self.host_platform = host_platform or detect_host_platform()
        self.manifest_loader = manifest_loader

    def build_root(self, project_dir: Path) -> Leaf:
        """
        Load the root manifest and resolve the whole graph.

        Args:
            project_dir: Root package directory

        Returns:
            Root Leaf

        Raises:
            ManifestError: If any manifest in the graph is missing or invalid
        """
        project_dir = Path(project_dir)
        manifest = self.manifest_loader(project_dir)
        return self.build(manifest, {self.host_platform}, project_dir)

    def build(self, manifest: Manifest, enabled_features: AbstractSet[str], base_path: Path) -> Leaf:
        """
        Resolve one package instance and, recursively, its dependencies.

        Args:
            manifest: The package's manifest
            enabled_features: Feature names requested for this instance
            base_path: Directory of the package

        Returns:
            Resolved Leaf

        Raises:
            ManifestError: If a dependency manifest is missing or invalid
        """
        features = resolve_features(manifest.package.features, enabled_features)

        effective_deps = flatten_over_enabled(
            manifest.dependencies.base, manifest.dependencies.features, features
        )

        children = []
        for declaration in effective_deps:
            dependency_path = base_path / declaration.path
            dependency_manifest = self.manifest_loader(dependency_path)
            requested = set(declaration.features) | {self.host_platform}
            children.append(self.build(dependency_manifest, requested, dependency_path))

        defines = flatten_over_enabled(manifest.defines.base, manifest.defines.features, features)
        libraries = flatten_over_enabled(
            manifest.libraries.base, manifest.libraries.features, features
        )

        leaf = Leaf(
            manifest=manifest,
            path=base_path,
            features=features,
            defines=tuple(defines),
            libraries=tuple(libraries),
            dependencies=tuple(children),
        )

        logging.debug(
            f"Resolved {leaf.name} v{leaf.version} at {base_path} "
            f"(features: {', '.join(leaf.enabled_features) or 'none'}, "
            f"dependencies: {len(children)})"
        )
        return leaf
