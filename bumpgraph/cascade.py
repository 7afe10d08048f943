"""Dependency cascader.

When a package is released, the packages that depend on it at runtime may
need a release too. This module pushes bumps along the reverse dependency
graph until nothing changes any more.

Each package's bump can only go up, and there are only four values
(none < patch < minor < major), so every package is raised at most three
times. The loop therefore terminates after at most 3 * N elevations, even
when the graph contains cycles.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from typing import Literal

from .graph import dependents_graph
from .groups import Grouping
from .models import Bump, PackageInfo
from .propagate import propagate_groups

logger = logging.getLogger(__name__)


def cascade_bump(dependency_bump: Bump, policy: Literal["patch", "minor"]) -> Bump:
    """Bump a dependent receives from a released dependency.

    With the "patch" policy any release of a dependency gives its dependents
    a patch release. With the "minor" policy only minor or major releases
    cascade, and they cascade as minor.
    """
    if dependency_bump == Bump.NONE:
        return Bump.NONE
    if policy == "patch":
        return Bump.PATCH
    return Bump.MINOR if dependency_bump >= Bump.MINOR else Bump.NONE


def cascade_bumps(
    bumps: dict[str, Bump],
    packages: Mapping[str, PackageInfo],
    grouping: Grouping,
    policy: Literal["patch", "minor"],
) -> int:
    """Propagate bumps to dependents until a fixpoint is reached.

    Modifies ``bumps`` in place. Whenever a grouped package is raised, its
    groups are propagated again and every raised sibling is queued as well,
    so group members agree after every step.

    Args:
        bumps: Package name → effective bump, already group-propagated.
        packages: Package graph snapshot.
        grouping: Resolved group membership.
        policy: Cascade policy ("patch" or "minor").

    Returns:
        Number of elevation events performed.
    """
    reverse = dependents_graph(packages)
    worklist = deque(sorted(n for n, b in bumps.items() if b > Bump.NONE))
    elevations = 0

    while worklist:
        name = worklist.popleft()
        incoming = cascade_bump(bumps[name], policy)
        if incoming == Bump.NONE:
            continue

        for dependent in reverse.get(name, []):
            if dependent in grouping.ignored:
                continue
            if incoming <= bumps[dependent]:
                continue

            bumps[dependent] = incoming
            elevations += 1
            logger.debug("%s: %s (depends on %s)", dependent, incoming, name)

            worklist.append(dependent)
            if grouping.groups_of(dependent):
                siblings = propagate_groups(bumps, grouping, [dependent])
                elevations += len(siblings)
                worklist.extend(sorted(siblings))

    logger.debug("cascade reached fixpoint after %d elevations", elevations)
    return elevations
