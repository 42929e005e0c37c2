"""Package graph resolution for Teapot.

This module turns manifests into resolved build nodes: feature resolution
and the recursive dependency graph builder.
"""

from .dependency_graph import DependencyGraphBuilder, Leaf
from .features import Feature, enabled_names, feature_universe, flatten_over_enabled, resolve_features

__all__ = [
    "DependencyGraphBuilder",
    "Leaf",
    "Feature",
    "enabled_names",
    "feature_universe",
    "flatten_over_enabled",
    "resolve_features",
]
