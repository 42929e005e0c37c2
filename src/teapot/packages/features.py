"""Feature resolution.

A package's feature universe is the two implicit platform features followed by
the features its manifest declares. A Leaf enables exactly the universe names
that were requested for it; requested names outside the universe are dropped.

Flattening walks the universe in order and appends each enabled feature's
entries after the base entries. It never deduplicates and never mutates its
inputs, so the same inputs always produce the same list.
"""

from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Mapping, Sequence, Tuple, TypeVar

from ..config.host_platform import BASE_FEATURES

T = TypeVar("T")


@dataclass(frozen=True)
class Feature:
    """A feature name and whether it is enabled for one Leaf."""

    name: str
    enabled: bool


def feature_universe(declared: Sequence[str]) -> Tuple[str, ...]:
    """Implicit platform features followed by the declared ones.

    Each name appears once, at its first position.
    """
    return tuple(dict.fromkeys(BASE_FEATURES + tuple(declared)))


def resolve_features(declared: Sequence[str], requested: AbstractSet[str]) -> Tuple[Feature, ...]:
    """Resolve which features are enabled for a package instance.

    Args:
        declared: Feature names declared by the package manifest
        requested: Names requested by the dependent (plus the host platform)

    Returns:
        One Feature per universe name, enabled iff its name was requested
    """
    return tuple(Feature(name, name in requested) for name in feature_universe(declared))


def enabled_names(features: Iterable[Feature]) -> Tuple[str, ...]:
    """Names of the enabled features, in universe order."""
    return tuple(feature.name for feature in features if feature.enabled)


def flatten_over_enabled(
    base: Sequence[T],
    per_feature: Mapping[str, Sequence[T]],
    features: Iterable[Feature],
) -> List[T]:
    """Append each enabled feature's entries to the base entries.

    Args:
        base: Entries that always apply
        per_feature: Entries keyed by the feature that gates them
        features: Resolved features in universe order

    Returns:
        New list; base order first, then enabled feature lists in universe order
    """
    flattened = list(base)
    for name in enabled_names(features):
        flattened.extend(per_feature.get(name, ()))
    return flattened
