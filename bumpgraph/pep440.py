"""Bridge between semver arithmetic and PEP 440 version strings.

Bumps are computed on semver.Version objects, but the versions that end up
in pyproject.toml must be valid PEP 440. Workspace versions are read in
either form, and every computed version is normalized to PEP 440 on the
way out ("1.1.0-rc.0" → "1.1.0rc0").
"""

from __future__ import annotations

import semver
from packaging.version import InvalidVersion, Version

from .errors import ConfigError


def parse_version(version_str: str) -> semver.Version:
    """Parse a semantic or PEP 440 version into a semver.Version.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1" → "1.2.3-rc.1"
    - "1.2.3rc1" → "1.2.3-rc.1"
    - "1.2.3.dev4+local" → "1.2.3-dev.4+local"

    A PEP 440 post release is kept as build metadata, since semver has no
    ordering for it.

    Raises:
        ValueError: If the string is neither form.
    """
    try:
        return semver.Version.parse(version_str, optional_minor_and_patch=True)
    except ValueError:
        pass

    try:
        pep440 = Version(version_str)
    except InvalidVersion:
        raise ValueError(
            f"{version_str!r} is neither a semantic nor a PEP 440 version"
        ) from None

    major, minor, patch = (*pep440.release, 0, 0)[:3]
    prerelease: list[str] = []
    if pep440.pre is not None:
        prerelease += [pep440.pre[0], str(pep440.pre[1])]
    if pep440.dev is not None:
        prerelease += ["dev", str(pep440.dev)]
    build: list[str] = []
    if pep440.post is not None:
        build += ["post", str(pep440.post)]
    if pep440.local is not None:
        build.append(pep440.local)

    return semver.Version(
        major,
        minor,
        patch,
        prerelease=".".join(prerelease) or None,
        build=".".join(build) or None,
    )


def render_version(version_str: str) -> str:
    """Normalize a computed version to its PEP 440 form.

    Raises:
        ConfigError: If the version is not valid PEP 440, e.g. because the
            configured pre-release tag or snapshot template produced
            something pip would reject.
    """
    try:
        return str(Version(version_str))
    except InvalidVersion:
        raise ConfigError(f"{version_str!r} is not a valid PEP 440 version") from None


def pre_release_label(tag: str) -> str | None:
    """Normalized PEP 440 pre-release label for a tag, or None.

    Examples:
        "rc" → "rc"
        "beta" → "b"
        "next" → None
    """
    try:
        pre = Version(f"0{tag}0").pre
    except InvalidVersion:
        return None
    return pre[0] if pre else None


def pre_release_state(version: semver.Version) -> tuple[str, int] | None:
    """The (label, number) pre-release of a version, if it has a PEP 440 one."""
    try:
        return Version(str(version)).pre
    except InvalidVersion:
        return None
