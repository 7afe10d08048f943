"""Bump aggregator: reduce change declarations to one raw bump per package."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from packaging.utils import canonicalize_name
from pydantic import BaseModel, Field

from .groups import Grouping
from .models import Bump, ChangeDeclaration, Diagnostic, PackageInfo

logger = logging.getLogger(__name__)


class AggregatedBumps(BaseModel):
    """Result of aggregating declarations.

    Attributes:
        raw: Package name → highest declared bump (NONE when undeclared).
             Covers every non-ignored package.
        sources: Package name → ids of declarations that requested a bump,
                 in declaration order.
        diagnostics: Skipped declaration entries.
    """

    raw: dict[str, Bump] = Field(default_factory=dict)
    sources: dict[str, list[str]] = Field(default_factory=dict)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


def aggregate_bumps(
    declarations: Sequence[ChangeDeclaration],
    packages: Mapping[str, PackageInfo],
    grouping: Grouping,
) -> AggregatedBumps:
    """Compute raw bumps as the max declared magnitude per package.

    Entries naming an unknown or ignored package are skipped with a
    diagnostic; the rest of the declaration still applies.
    """
    result = AggregatedBumps(
        raw={name: Bump.NONE for name in packages if name not in grouping.ignored}
    )

    for decl in declarations:
        for entry, bump in decl.releases.items():
            name = entry if entry in packages else canonicalize_name(entry)
            if name not in packages:
                logger.warning(
                    "declaration %s references unknown package %r, skipping",
                    decl.id,
                    entry,
                )
                result.diagnostics.append(
                    Diagnostic(
                        code="unresolved-package-reference",
                        message=f"Unknown package {entry!r}",
                        package=entry,
                        declaration=decl.id,
                    )
                )
                continue
            if name in grouping.ignored:
                logger.info(
                    "declaration %s names ignored package %r, skipping", decl.id, name
                )
                result.diagnostics.append(
                    Diagnostic(
                        code="ignored-package-skipped",
                        message=f"Package {name!r} is ignored",
                        package=name,
                        declaration=decl.id,
                    )
                )
                continue

            if bump > result.raw[name]:
                result.raw[name] = bump
            if bump > Bump.NONE:
                sources = result.sources.setdefault(name, [])
                if decl.id not in sources:
                    sources.append(decl.id)

    return result
