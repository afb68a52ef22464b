"""Dependency resolution between derived quantities."""

from .graph import topological_order, upstream_closure
from .resolver import (
    RAGLAN_METHODS,
    SLEEVE_TYPE_SECTION,
    DependencyResolver,
    ResolutionPlan,
    applicable_components,
    changed_sections,
)
from .state import DerivedStateTracker

__all__ = [
    "RAGLAN_METHODS",
    "SLEEVE_TYPE_SECTION",
    "DependencyResolver",
    "DerivedStateTracker",
    "ResolutionPlan",
    "applicable_components",
    "changed_sections",
    "topological_order",
    "upstream_closure",
]
