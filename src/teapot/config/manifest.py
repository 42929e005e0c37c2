"""
tea.toml manifest parser.

This module parses a package directory's tea.toml into typed, immutable
records consumed by the dependency graph builder.

Example tea.toml:
    [package]
    name = "app"
    version = "0.1.0"
    features = ["fast"]

    [dependencies]
    util = { path = "../util", features = ["simd"] }

    [dependencies.fast]
    turbo = { path = "../turbo" }

    [defines]
    APP_NAME = "demo"
    VERBOSE = ""

    [defines.linux]
    USE_EPOLL = 1

    [libraries]
    pthread = true

Every section except [package] is split the same way: direct keys that are
not feature names are base entries, keys that name a feature (one of the
implicit platform features or a declared package feature) hold a sub-table
of entries that only apply when that feature is enabled.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from .host_platform import BASE_FEATURES

MANIFEST_FILE = "tea.toml"

T = TypeVar("T")


class ManifestError(Exception):
    """Exception raised for missing or invalid tea.toml manifests."""

    pass


class UnsupportedDependencyError(ManifestError):
    """Raised when a dependency entry is not a path-bearing table."""

    pass


@dataclass(frozen=True)
class Package:
    """The [package] section."""

    name: str
    version: str
    features: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Dependency:
    """A dependency declaration located by a path relative to its manifest."""

    name: str
    path: Path
    features: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Define:
    """A preprocessor define; value None means defined without a value."""

    name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class FeatureTable(Generic[T]):
    """Base entries plus per-feature entries for one manifest section."""

    base: Tuple[T, ...] = ()
    features: Dict[str, Tuple[T, ...]] = field(default_factory=dict)

    def for_feature(self, name: str) -> Tuple[T, ...]:
        """Entries gated by a feature (empty if the feature has none)."""
        return self.features.get(name, ())


@dataclass(frozen=True)
class Manifest:
    """Typed contents of one package's tea.toml."""

    package: Package
    dependencies: FeatureTable[Dependency]
    defines: FeatureTable[Define]
    libraries: FeatureTable[str]
    path: Path

    @property
    def name(self) -> str:
        return self.package.name

    @classmethod
    def from_dict(cls, document: Dict[str, Any], path: Path) -> "Manifest":
        """
        Build a Manifest from an already-parsed TOML document.

        Args:
            document: Parsed TOML data
            path: Path of the manifest file (used in error messages)

        Returns:
            Manifest instance

        Raises:
            ManifestError: If required sections or fields are missing or invalid
        """
        package = _parse_package(document.get("package"), path)
        feature_names = tuple(dict.fromkeys(BASE_FEATURES + package.features))

        if "dependencies" not in document:
            raise ManifestError(f"Missing [dependencies] section in {path}")
        dependencies = _parse_feature_table(
            _require_table(document["dependencies"], "dependencies", path),
            feature_names,
            lambda name, value: _parse_dependency(name, value, path),
            "dependencies",
            path,
        )

        defines: FeatureTable[Define] = FeatureTable()
        if "defines" in document:
            defines = _parse_feature_table(
                _require_table(document["defines"], "defines", path),
                feature_names,
                lambda name, value: _parse_define(name, value, path),
                "defines",
                path,
            )

        libraries: FeatureTable[str] = FeatureTable()
        if "libraries" in document:
            libraries = _parse_feature_table(
                _require_table(document["libraries"], "libraries", path),
                feature_names,
                lambda name, _value: name,
                "libraries",
                path,
            )

        return cls(
            package=package,
            dependencies=dependencies,
            defines=defines,
            libraries=libraries,
            path=path,
        )


def load_manifest(directory: Path) -> Manifest:
    """
    Load and validate the tea.toml in a package directory.

    Args:
        directory: Package directory containing tea.toml

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file doesn't exist or cannot be parsed
    """
    manifest_path = Path(directory) / MANIFEST_FILE

    if not manifest_path.is_file():
        raise ManifestError(f"Can't find {MANIFEST_FILE} in {directory}")

    try:
        with open(manifest_path, "rb") as f:
            document = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Failed to parse {manifest_path}: {e}") from e
    except OSError as e:
        raise ManifestError(f"Failed to read {manifest_path}: {e}") from e

    return Manifest.from_dict(document, manifest_path)


def _require_table(value: Any, section: str, path: Path) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ManifestError(f"[{section}] must be a table in {path}")
    return value


def _parse_string_list(value: Any, field_name: str, path: Path) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ManifestError(f"{field_name} must be an array of strings in {path}")
    return tuple(value)


def _parse_package(value: Any, path: Path) -> Package:
    if value is None:
        raise ManifestError(f"Missing [package] section in {path}")
    table = _require_table(value, "package", path)

    name = table.get("name")
    version = table.get("version")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"package.name must be a non-empty string in {path}")
    if not isinstance(version, str):
        raise ManifestError(f"package.version must be a string in {path}")

    # Repeated feature names collapse to their first occurrence
    features = _parse_string_list(table.get("features"), "package.features", path)

    return Package(
        name=name,
        version=version,
        features=tuple(dict.fromkeys(features)),
    )


def _parse_feature_table(
    table: Dict[str, Any],
    feature_names: Sequence[str],
    parse_entry: Callable[[str, Any], T],
    section: str,
    path: Path,
) -> FeatureTable[T]:
    """Split a section into base entries and per-feature sub-tables."""
    base: List[T] = []
    features: Dict[str, Tuple[T, ...]] = {}

    for key, value in table.items():
        if key in feature_names:
            sub_table = _require_table(value, f"{section}.{key}", path)
            features[key] = tuple(parse_entry(name, item) for name, item in sub_table.items())
        else:
            base.append(parse_entry(key, value))

    return FeatureTable(base=tuple(base), features=features)


def _parse_dependency(name: str, value: Any, path: Path) -> Dependency:
    if not isinstance(value, dict):
        raise UnsupportedDependencyError(
            f"Dependency '{name}' in {path} must be a table like "
            + f'{name} = {{ path = "../{name}" }}'
        )

    dep_path = value.get("path")
    if not isinstance(dep_path, str):
        raise UnsupportedDependencyError(
            f"Dependency '{name}' in {path} has no path; only path dependencies are supported"
        )

    return Dependency(
        name=name,
        path=Path(dep_path),
        features=_parse_string_list(value.get("features"), f"dependencies.{name}.features", path),
    )


def _parse_define(name: str, value: Any, path: Path) -> Define:
    # bool is checked before int since bool is an int subclass
    if isinstance(value, bool):
        return Define(name, "true" if value else "false")
    if isinstance(value, str):
        return Define(name, value if value != "" else None)
    if isinstance(value, (int, float)):
        return Define(name, str(value))
    raise ManifestError(
        f"Unsupported define type for '{name}' in {path}: {type(value).__name__}"
    )
