"""Dependency graph utilities.

The engine walks the graph from a package to the packages that depend on
it, so the forward edges stored on PackageInfo are reversed here.
"""

from __future__ import annotations

from collections.abc import Mapping

from .models import PackageInfo


def dependents_graph(packages: Mapping[str, PackageInfo]) -> dict[str, list[str]]:
    """Build the reverse dependency map over runtime edges.

    Edges to packages outside ``packages`` are ignored, and each dependent
    list is sorted for deterministic traversal.

    Example:
        If A depends on B, and B depends on C:
        dependents_graph({A, B, C}) → {A: [], B: [A], C: [B]}
    """
    reverse: dict[str, set[str]] = {n: set() for n in packages}
    for name, info in packages.items():
        for dep in info.runtime_deps:
            # Only track edges within the snapshot; self edges never cascade
            if dep in reverse and dep != name:
                reverse[dep].add(name)
    return {n: sorted(dependents) for n, dependents in reverse.items()}
