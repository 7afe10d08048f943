"""Data models for bumpgraph.

These Pydantic models represent the core data structures passed into and
out of the version resolution engine.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .pep440 import parse_version


class Bump(IntEnum):
    """Size of a version change, totally ordered none < patch < minor < major."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @classmethod
    def parse(cls, value: str | int | Bump) -> Bump:
        """Accept "none" / "patch" / "minor" / "major" (any case) or an int."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown bump type: {value!r}") from None
        return cls(value)

    def __str__(self) -> str:
        return self.name.lower()


class ChangeDeclaration(BaseModel):
    """A pending change: which packages it bumps and by how much.

    Attributes:
        id: Identifier assigned by the declaration store.
        releases: Package name → bump magnitude, in declaration order.
        summary: Free-text summary for changelog writers.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    releases: dict[str, Bump]
    summary: str = ""

    @field_validator("releases", mode="before")
    @classmethod
    def _parse_bumps(cls, value: dict) -> dict:
        return {name: Bump.parse(bump) for name, bump in value.items()}

    @field_serializer("releases")
    def _dump_bumps(self, releases: dict[str, Bump]) -> dict[str, str]:
        return {name: str(bump) for name, bump in releases.items()}


class DependencyEdge(BaseModel):
    """An internal (workspace) dependency of a package.

    Attributes:
        name: Canonical name of the depended-on package.
        specifier: PEP 440 version range as written, or "" when unpinned.
        kind: "runtime" for [project] dependencies and extras, "dev" for
              PEP 735 dependency groups. Dev edges never cascade bumps.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    specifier: str = ""
    kind: Literal["runtime", "dev"] = "runtime"


class PackageInfo(BaseModel):
    """Metadata for a single package in the workspace graph snapshot.

    Attributes:
        path: Relative path from workspace root to the package directory.
        version: Current version string from pyproject.toml.
        deps: Internal dependency edges. External deps are not tracked
              here since only workspace packages take part in resolution.
    """

    path: str = "."
    version: str
    deps: list[DependencyEdge] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        parse_version(value)
        return value

    @field_validator("deps", mode="before")
    @classmethod
    def _coerce_names(cls, value: list) -> list:
        # Bare names are shorthand for an unpinned runtime dependency.
        return [DependencyEdge(name=dep) if isinstance(dep, str) else dep for dep in value]

    @property
    def runtime_deps(self) -> list[str]:
        """Names of the version-affecting dependencies."""
        return [dep.name for dep in self.deps if dep.kind == "runtime"]


class Diagnostic(BaseModel):
    """A non-fatal issue found while computing a plan.

    Codes:
        unresolved-package-reference: a declaration names an unknown package.
        ignored-package-skipped: a declaration names an ignored package.
        fixed-group-version-divergence: fixed members start at different versions.
        unmatched-pattern: a group or ignore entry matches no package.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    package: str | None = None
    declaration: str | None = None


class PlannedRelease(BaseModel):
    """Records the version change planned for one package.

    Attributes:
        bump: Effective bump magnitude after groups and cascading.
        old: The version before bumping.
        new: The version after bumping.
        changes: Ids of the declarations that requested this bump directly.
                 Empty for packages bumped only through a dependency or group.
    """

    bump: Bump
    old: str
    new: str
    changes: list[str] = Field(default_factory=list)

    @field_validator("bump", mode="before")
    @classmethod
    def _parse_bump(cls, value: str | int) -> Bump:
        return Bump.parse(value)

    @field_serializer("bump")
    def _dump_bump(self, bump: Bump) -> str:
        return str(bump)


class ReleasePlan(BaseModel):
    """The engine's output: package name → planned release.

    Attributes:
        releases: Planned releases, sorted by package name.
        declarations: Ids of every declaration considered for this plan.
        diagnostics: Non-fatal issues, in the order they were found.
        mode: Versioning mode the plan was computed in.
    """

    model_config = ConfigDict(frozen=True)

    releases: dict[str, PlannedRelease] = Field(default_factory=dict)
    declarations: list[str] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    mode: str = "release"

    def version_map(self, packages: dict[str, PackageInfo]) -> dict[str, str]:
        """Build a complete version map for pinning internal deps.

        Released packages get their new version, the rest keep their
        current version.
        """
        return {name: info.version for name, info in packages.items()} | {
            name: release.new for name, release in self.releases.items()
        }
