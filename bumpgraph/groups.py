"""Grouping resolver.

Expands the fixed / linked / ignore entries of an EngineConfig into concrete
package membership. Entries are either literal package names or shell-style
glob patterns ("plugin-*") matched against the workspace package names.

A package may sit in one fixed group and one linked group at the same time,
but never in two groups of the same kind.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Iterable, Mapping, Sequence

from packaging.utils import canonicalize_name
from pydantic import BaseModel, Field

from .config import EngineConfig
from .errors import AmbiguousGroupMembership, IgnoredDependencyConflict
from .graph import dependents_graph
from .models import Bump, Diagnostic, PackageInfo

logger = logging.getLogger(__name__)

_GLOB_CHARS = frozenset("*?[")


class Grouping(BaseModel):
    """Resolved group membership for one run.

    Attributes:
        fixed: Member lists of the fixed groups, in config order.
        linked: Member lists of the linked groups, in config order.
        ignored: Names of packages excluded from versioning.
        fixed_index: Package name → index into ``fixed``.
        linked_index: Package name → index into ``linked``.
        diagnostics: Entries that matched no package.
    """

    fixed: list[list[str]] = Field(default_factory=list)
    linked: list[list[str]] = Field(default_factory=list)
    ignored: set[str] = Field(default_factory=set)
    fixed_index: dict[str, int] = Field(default_factory=dict)
    linked_index: dict[str, int] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def fixed_group(self, name: str) -> list[str] | None:
        """Members of the fixed group containing ``name``, if any."""
        index = self.fixed_index.get(name)
        return None if index is None else self.fixed[index]

    def linked_group(self, name: str) -> list[str] | None:
        """Members of the linked group containing ``name``, if any."""
        index = self.linked_index.get(name)
        return None if index is None else self.linked[index]

    def groups_of(self, name: str) -> list[list[str]]:
        """All groups (fixed first) that contain ``name``."""
        return [g for g in (self.fixed_group(name), self.linked_group(name)) if g]

    def all_groups(self) -> list[list[str]]:
        return [*self.fixed, *self.linked]


def _is_pattern(entry: str) -> bool:
    return any(ch in _GLOB_CHARS for ch in entry)


def match_patterns(
    patterns: Sequence[str], names: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Match literal names and glob patterns against package names.

    Literal entries match a package of the same name, or of the same
    canonical (PEP 503) name. Glob entries are matched case-sensitively,
    both as written and canonicalized.

    Args:
        patterns: Literal names and/or glob patterns.
        names: Canonical package names of the workspace.

    Returns:
        Tuple of (sorted matched names, entries that matched nothing).
    """
    pool = sorted(set(names))
    available = set(pool)
    matched: set[str] = set()
    unmatched: list[str] = []

    for entry in patterns:
        wanted = canonicalize_name(entry)
        if _is_pattern(entry):
            hits = [
                n
                for n in pool
                if fnmatch.fnmatchcase(n, entry) or fnmatch.fnmatchcase(n, wanted)
            ]
        elif entry in available:
            hits = [entry]
        else:
            hits = [wanted] if wanted in available else []
        if not hits:
            unmatched.append(entry)
        matched.update(hits)

    return sorted(matched), unmatched


def _resolve_kind(
    kind: str,
    tuples: Sequence[Sequence[str]],
    names: list[str],
    ignored: set[str],
    diagnostics: list[Diagnostic],
) -> tuple[list[list[str]], dict[str, int]]:
    """Expand one kind of group tuples, rejecting overlapping membership."""
    groups: list[list[str]] = []
    index: dict[str, int] = {}

    for entries in tuples:
        members, unmatched = match_patterns(entries, names)
        for entry in unmatched:
            logger.warning("%s group entry %r matches no package", kind, entry)
            diagnostics.append(
                Diagnostic(
                    code="unmatched-pattern",
                    message=f"{kind} group entry {entry!r} matches no package",
                )
            )

        dropped = [m for m in members if m in ignored]
        if dropped:
            logger.info("dropping ignored packages from %s group: %s", kind, dropped)
        members = [m for m in members if m not in ignored]

        position = len(groups)
        for member in members:
            if member in index:
                raise AmbiguousGroupMembership(
                    member, kind, [list(tuples[index[member]]), list(entries)]
                )
            index[member] = position
        groups.append(members)

    return groups, index


def resolve_groups(config: EngineConfig, names: Iterable[str]) -> Grouping:
    """Resolve config group entries into concrete membership.

    Ignored packages are expanded first and removed from every group, since
    they can never carry a bump.

    Raises:
        AmbiguousGroupMembership: If a package matches two fixed groups or
            two linked groups.
    """
    pool = sorted(set(names))
    diagnostics: list[Diagnostic] = []

    ignored_list, unmatched = match_patterns(config.ignore, pool)
    for entry in unmatched:
        logger.warning("ignore entry %r matches no package", entry)
        diagnostics.append(
            Diagnostic(
                code="unmatched-pattern",
                message=f"ignore entry {entry!r} matches no package",
            )
        )
    ignored = set(ignored_list)

    fixed, fixed_index = _resolve_kind("fixed", config.fixed, pool, ignored, diagnostics)
    linked, linked_index = _resolve_kind(
        "linked", config.linked, pool, ignored, diagnostics
    )

    return Grouping(
        fixed=fixed,
        linked=linked,
        ignored=ignored,
        fixed_index=fixed_index,
        linked_index=linked_index,
        diagnostics=diagnostics,
    )


def find_ignored_dependents(
    packages: Mapping[str, PackageInfo], grouping: Grouping
) -> dict[str, list[str]]:
    """Map each ignored package to the non-ignored packages that need it.

    Only runtime edges count: a dev-only dependency on an ignored package
    does not affect the dependent's published version.
    """
    reverse = dependents_graph(packages)
    conflicts: dict[str, list[str]] = {}
    for name in sorted(grouping.ignored):
        dependents = [d for d in reverse.get(name, []) if d not in grouping.ignored]
        if dependents:
            conflicts[name] = dependents
    return conflicts


def check_ignored_dependencies(
    conflicts: Mapping[str, list[str]], bumps: Mapping[str, Bump]
) -> None:
    """Fail if a package being released depends on an ignored package.

    Raises:
        IgnoredDependencyConflict: For the first ignored package (by name)
            with a released dependent.
    """
    for name, dependents in conflicts.items():
        released = [d for d in dependents if bumps.get(d, Bump.NONE) > Bump.NONE]
        if released:
            raise IgnoredDependencyConflict(name, released)
