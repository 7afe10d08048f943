"""Tests for bumpgraph.pep440."""

from __future__ import annotations

import pytest
import semver

from bumpgraph.errors import ConfigError
from bumpgraph.pep440 import (
    parse_version,
    pre_release_label,
    pre_release_state,
    render_version,
)


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)

    def test_two_part_version(self) -> None:
        v = parse_version("1.2")
        assert (v.major, v.minor, v.patch) == (1, 2, 0)

    def test_single_part_version(self) -> None:
        v = parse_version("5")
        assert (v.major, v.minor, v.patch) == (5, 0, 0)

    def test_keeps_prerelease(self) -> None:
        assert parse_version("1.2.3-rc.1").prerelease == "rc.1"

    def test_pep440_prerelease(self) -> None:
        assert parse_version("1.2.3rc1") == semver.Version(1, 2, 3, prerelease="rc.1")

    def test_pep440_dev_and_local(self) -> None:
        v = parse_version("0.0.0.dev20260102030405+canary")
        assert v.prerelease == "dev.20260102030405"
        assert v.build == "canary"

    def test_pep440_post_kept_as_build(self) -> None:
        assert parse_version("1.0.post2").build == "post.2"

    def test_pep440_prerelease_sorts_before_release(self) -> None:
        assert parse_version("1.1.0rc0") < parse_version("1.1.0")

    def test_rejects_garbage(self) -> None:
        with pytest.raises(ValueError, match="banana"):
            parse_version("banana")


class TestRenderVersion:
    @pytest.mark.parametrize(
        ("computed", "expected"),
        [
            ("1.2.3", "1.2.3"),
            ("1.1.0-rc.0", "1.1.0rc0"),
            ("2.0.0-beta.3", "2.0.0b3"),
            ("0.0.0.dev20260102030405+canary", "0.0.0.dev20260102030405+canary"),
        ],
    )
    def test_normalizes(self, computed: str, expected: str) -> None:
        assert render_version(computed) == expected

    def test_rejects_non_pep440(self) -> None:
        with pytest.raises(ConfigError, match="PEP 440"):
            render_version("1.1.0-next.0")


class TestPreReleaseLabel:
    @pytest.mark.parametrize(
        ("tag", "label"),
        [("rc", "rc"), ("beta", "b"), ("alpha", "a"), ("c", "rc"), ("preview", "rc")],
    )
    def test_known_labels(self, tag: str, label: str) -> None:
        assert pre_release_label(tag) == label

    @pytest.mark.parametrize("tag", ["next", "", "dev", "post", "canary"])
    def test_unknown_labels(self, tag: str) -> None:
        assert pre_release_label(tag) is None


class TestPreReleaseState:
    def test_numbered(self) -> None:
        assert pre_release_state(parse_version("1.1.0-rc.3")) == ("rc", 3)

    def test_implicit_zero(self) -> None:
        assert pre_release_state(parse_version("1.1.0-rc")) == ("rc", 0)

    def test_not_pep440(self) -> None:
        assert pre_release_state(parse_version("1.1.0-next.4")) is None

    def test_release(self) -> None:
        assert pre_release_state(parse_version("1.1.0")) is None
