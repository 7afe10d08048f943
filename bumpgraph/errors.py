"""Exceptions raised by bumpgraph.

Structural problems abort plan generation before any plan exists. Issues
local to a single declaration are reported as Diagnostic values on the plan
instead (see bumpgraph.models.Diagnostic).
"""

from __future__ import annotations


class BumpgraphError(Exception):
    """Base class for fatal bumpgraph errors."""


class ConfigError(BumpgraphError):
    """The [tool.bumpgraph] table or the workspace layout is invalid."""


class AmbiguousGroupMembership(BumpgraphError):
    """A package is claimed by two fixed groups or two linked groups."""

    def __init__(self, package: str, kind: str, groups: list[list[str]]) -> None:
        self.package = package
        self.kind = kind
        self.groups = groups
        listed = "; ".join(", ".join(entries) for entries in groups)
        super().__init__(
            f"Package {package!r} matches more than one {kind} group: {listed}"
        )


class IgnoredDependencyConflict(BumpgraphError):
    """An ignored package is a runtime dependency of a package being released."""

    def __init__(self, package: str, dependents: list[str]) -> None:
        self.package = package
        self.dependents = dependents
        super().__init__(
            f"Ignored package {package!r} is a dependency of "
            f"{', '.join(dependents)}, which would be released. "
            "Ignore the dependents as well or stop ignoring the package."
        )
