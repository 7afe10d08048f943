"""Dependency handling utilities.

Provides functions for parsing PEP 508 dependency strings into internal
dependency edges of the package graph.
"""

from __future__ import annotations

from collections.abc import Iterable

from packaging.requirements import Requirement
from packaging.utils import canonicalize_name

from .models import DependencyEdge


def dep_canonical_name(dep_str: str) -> str:
    """Extract the canonical package name from a PEP 508 dependency string.

    Handles version specifiers, extras, and normalizes the name per PEP 503
    (lowercase, hyphens instead of underscores).

    Examples:
        "requests>=2.0" → "requests"
        "My_Package[extra]~=1.0" → "my-package"
    """
    return canonicalize_name(Requirement(dep_str).name)


def dep_specifier(dep_str: str) -> str:
    """Extract the version range of a PEP 508 dependency string.

    Examples:
        "requests>=2.0,<3" → "<3,>=2.0"
        "pkg[extra]" → ""
    """
    return str(Requirement(dep_str).specifier)


def internal_edges(
    dep_strs: Iterable[str],
    workspace_names: set[str],
    kind: str,
    seen: set[str],
) -> list[DependencyEdge]:
    """Turn dependency strings into edges to workspace packages.

    External packages are dropped. A name already in ``seen`` is skipped so a
    package listed both as a runtime dep and in a dependency group keeps only
    its first (runtime) edge. ``seen`` is updated in place.
    """
    edges: list[DependencyEdge] = []
    for dep_str in dep_strs:
        name = dep_canonical_name(dep_str)
        if name in workspace_names and name not in seen:
            edges.append(
                DependencyEdge(name=name, specifier=dep_specifier(dep_str), kind=kind)
            )
            seen.add(name)
    return edges
