"""Tests for bumpgraph.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from bumpgraph.models import (
    Bump,
    ChangeDeclaration,
    DependencyEdge,
    PackageInfo,
    PlannedRelease,
    ReleasePlan,
)


class TestBump:
    def test_total_order(self) -> None:
        assert Bump.NONE < Bump.PATCH < Bump.MINOR < Bump.MAJOR

    def test_parse_names(self) -> None:
        assert Bump.parse("patch") is Bump.PATCH
        assert Bump.parse("Minor") is Bump.MINOR
        assert Bump.parse(" MAJOR ") is Bump.MAJOR
        assert Bump.parse("none") is Bump.NONE

    def test_parse_int_and_member(self) -> None:
        assert Bump.parse(2) is Bump.MINOR
        assert Bump.parse(Bump.PATCH) is Bump.PATCH

    def test_parse_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown bump type"):
            Bump.parse("huge")

    def test_str_is_lowercase_name(self) -> None:
        assert str(Bump.MINOR) == "minor"


class TestChangeDeclaration:
    def test_parses_bump_strings(self) -> None:
        decl = ChangeDeclaration(id="c1", releases={"a": "minor", "b": "patch"})
        assert decl.releases == {"a": Bump.MINOR, "b": Bump.PATCH}
        assert decl.summary == ""

    def test_keeps_release_order(self) -> None:
        decl = ChangeDeclaration(id="c1", releases={"z": "patch", "a": "major"})
        assert list(decl.releases) == ["z", "a"]

    def test_rejects_unknown_bump(self) -> None:
        with pytest.raises(ValidationError):
            ChangeDeclaration(id="c1", releases={"a": "huge"})

    def test_is_frozen(self) -> None:
        decl = ChangeDeclaration(id="c1", releases={"a": "minor"})
        with pytest.raises(ValidationError):
            decl.summary = "changed"  # type: ignore[misc]

    def test_dumps_bump_names(self) -> None:
        decl = ChangeDeclaration(id="c1", releases={"a": "minor"})
        assert decl.model_dump()["releases"] == {"a": "minor"}


class TestPackageInfo:
    def test_create_with_required_fields(self) -> None:
        pkg = PackageInfo(version="1.0.0")
        assert pkg.path == "."
        assert pkg.deps == []

    def test_bare_names_become_runtime_edges(self) -> None:
        pkg = PackageInfo(version="2.1.0", deps=["foo", "baz"])
        assert pkg.deps == [DependencyEdge(name="foo"), DependencyEdge(name="baz")]
        assert pkg.runtime_deps == ["foo", "baz"]

    def test_runtime_deps_skip_dev_edges(self) -> None:
        pkg = PackageInfo(
            version="1.0.0",
            deps=[
                DependencyEdge(name="core", specifier=">=1.0"),
                DependencyEdge(name="testing", kind="dev"),
            ],
        )
        assert pkg.runtime_deps == ["core"]

    def test_accepts_short_versions(self) -> None:
        assert PackageInfo(version="1.2").version == "1.2"

    def test_rejects_invalid_version(self) -> None:
        with pytest.raises(ValidationError):
            PackageInfo(version="not-a-version")


class TestReleasePlan:
    def test_version_map_merges_current_versions(self) -> None:
        packages = {
            "a": PackageInfo(version="1.0.0"),
            "b": PackageInfo(version="2.0.0"),
        }
        plan = ReleasePlan(
            releases={"a": PlannedRelease(bump=Bump.PATCH, old="1.0.0", new="1.0.1")}
        )
        assert plan.version_map(packages) == {"a": "1.0.1", "b": "2.0.0"}

    def test_json_uses_bump_names(self) -> None:
        plan = ReleasePlan(
            releases={"a": PlannedRelease(bump=Bump.MAJOR, old="1.0.0", new="2.0.0")}
        )
        dumped = plan.model_dump(mode="json")
        assert dumped["releases"]["a"]["bump"] == "major"

    def test_planned_release_parses_bump_name(self) -> None:
        release = PlannedRelease.model_validate(
            {"bump": "minor", "old": "1.0.0", "new": "1.1.0"}
        )
        assert release.bump is Bump.MINOR
