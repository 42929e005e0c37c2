"""Configuration parsing modules for Teapot."""

from .host_platform import BASE_FEATURES, HostPlatformDetector, detect_host_platform
from .manifest import (
    MANIFEST_FILE,
    Define,
    Dependency,
    FeatureTable,
    Manifest,
    ManifestError,
    Package,
    UnsupportedDependencyError,
    load_manifest,
)
from .toolchain_config import ToolchainConfig

__all__ = [
    "BASE_FEATURES",
    "HostPlatformDetector",
    "detect_host_platform",
    "MANIFEST_FILE",
    "Define",
    "Dependency",
    "FeatureTable",
    "Manifest",
    "ManifestError",
    "Package",
    "UnsupportedDependencyError",
    "load_manifest",
    "ToolchainConfig",
]
