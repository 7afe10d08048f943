"""Resolution pipeline: resolve → aggregate → propagate → cascade → version → emit.

This module orchestrates one engine run:
1. Resolve fixed / linked / ignored membership from the config
2. Aggregate change declarations into one raw bump per package
3. Propagate bumps across fixed and linked groups
4. Cascade bumps to dependents until a fixpoint is reached
5. Check that no released package depends on an ignored one
6. Calculate target versions under the configured mode
7. Emit the release plan

The run is a pure function of its inputs: no I/O, no shared state, and
identical inputs give an identical plan.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .aggregate import aggregate_bumps
from .cascade import cascade_bumps
from .config import EngineConfig
from .groups import check_ignored_dependencies, find_ignored_dependents, resolve_groups
from .models import ChangeDeclaration, PackageInfo, ReleasePlan
from .plan import emit_release_plan
from .propagate import fixed_base_versions, propagate_groups
from .versions import calculate_versions

logger = logging.getLogger(__name__)


def assemble_release_plan(
    declarations: Sequence[ChangeDeclaration],
    packages: Mapping[str, PackageInfo],
    config: EngineConfig | None = None,
) -> ReleasePlan:
    """Compute the release plan for a set of pending declarations.

    Args:
        declarations: Pending change declarations.
        packages: Package graph snapshot (name → PackageInfo). Not modified.
        config: Grouping, cascade and versioning policy. Defaults apply
                when omitted.

    Returns:
        The release plan. Packages without a bump are not part of it.

    Raises:
        AmbiguousGroupMembership: If a package matches two groups of a kind.
        IgnoredDependencyConflict: If a released package depends on an
            ignored package.
        ConfigError: If a snapshot template cannot be filled.
    """
    config = config or EngineConfig()

    # Phase 1: Structure
    grouping = resolve_groups(config, packages)
    ignored_dependents = find_ignored_dependents(packages, grouping)

    # Phase 2: Bumps
    aggregated = aggregate_bumps(declarations, packages, grouping)
    bumps = dict(aggregated.raw)
    propagate_groups(bumps, grouping)
    cascade_bumps(bumps, packages, grouping, config.update_internal_dependencies)
    check_ignored_dependencies(ignored_dependents, bumps)

    # Phase 3: Versions
    fixed_bases, divergence = fixed_base_versions(packages, grouping, bumps)
    targets = calculate_versions(packages, bumps, fixed_bases, config)

    logger.debug(
        "planned %d releases from %d declarations", len(targets), len(declarations)
    )
    return emit_release_plan(
        packages,
        bumps,
        targets,
        aggregated.sources,
        [decl.id for decl in declarations],
        [*grouping.diagnostics, *aggregated.diagnostics, *divergence],
        config,
    )
