"""Release plan emitter."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .config import EngineConfig
from .models import Bump, Diagnostic, PackageInfo, PlannedRelease, ReleasePlan


def emit_release_plan(
    packages: Mapping[str, PackageInfo],
    bumps: Mapping[str, Bump],
    targets: Mapping[str, str],
    sources: Mapping[str, list[str]],
    declaration_ids: Sequence[str],
    diagnostics: Sequence[Diagnostic],
    config: EngineConfig,
) -> ReleasePlan:
    """Assemble the final plan from the computed pieces.

    Only packages with a target version are included, sorted by name.
    """
    releases = {
        name: PlannedRelease(
            bump=bumps[name],
            old=packages[name].version,
            new=targets[name],
            changes=list(sources.get(name, [])),
        )
        for name in sorted(targets)
    }
    return ReleasePlan(
        releases=releases,
        declarations=list(declaration_ids),
        diagnostics=list(diagnostics),
        mode=config.mode.value,
    )
