"""Group propagator.

Fixed and linked groups share one bump magnitude across their members.
Fixed groups additionally share one version, derived from a single base
version per group.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping

from .groups import Grouping
from .models import Bump, Diagnostic, PackageInfo
from .pep440 import parse_version

logger = logging.getLogger(__name__)


def propagate_groups(
    bumps: dict[str, Bump],
    grouping: Grouping,
    names: Iterable[str] | None = None,
) -> set[str]:
    """Raise every group member to the highest bump in its group.

    Modifies ``bumps`` in place and never lowers a value. Since a package
    can belong to a fixed and a linked group at once, raising it may in turn
    raise the other group; this repeats until nothing changes.

    Args:
        bumps: Package name → current effective bump.
        grouping: Resolved group membership.
        names: Only propagate the groups containing these packages.
               All groups when omitted.

    Returns:
        Names of the packages whose bump was raised.
    """
    if names is None:
        queue = deque(grouping.all_groups())
    else:
        queue = deque(g for name in names for g in grouping.groups_of(name))

    elevated: set[str] = set()
    while queue:
        group = queue.popleft()
        top = max((bumps[m] for m in group), default=Bump.NONE)
        for member in group:
            if bumps[member] < top:
                bumps[member] = top
                elevated.add(member)
                # The member's other group (if any) must follow
                queue.extend(g for g in grouping.groups_of(member) if g is not group)

    return elevated


def fixed_base_versions(
    packages: Mapping[str, PackageInfo],
    grouping: Grouping,
    bumps: Mapping[str, Bump],
) -> tuple[dict[str, str], list[Diagnostic]]:
    """Pick the shared base version of every released fixed group.

    The base is the highest current version among the members, so no member
    ever moves backwards. Members starting at different versions produce a
    warning diagnostic.

    Returns:
        Tuple of (member name → base version, diagnostics).
    """
    bases: dict[str, str] = {}
    diagnostics: list[Diagnostic] = []

    for group in grouping.fixed:
        if not group or all(bumps[m] == Bump.NONE for m in group):
            continue
        versions = {m: packages[m].version for m in group}
        base = max(group, key=lambda m: parse_version(versions[m]))

        if len({str(parse_version(v)) for v in versions.values()}) > 1:
            listed = ", ".join(f"{m} {versions[m]}" for m in group)
            logger.warning(
                "fixed group members have divergent versions (%s), using %s",
                listed,
                versions[base],
            )
            diagnostics.append(
                Diagnostic(
                    code="fixed-group-version-divergence",
                    message=(
                        f"Fixed group members start at different versions ({listed}); "
                        f"using {versions[base]} from {base}"
                    ),
                    package=base,
                )
            )

        for member in group:
            bases[member] = versions[base]

    return bases, diagnostics
