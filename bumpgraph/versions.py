"""Version parsing and bumping utilities.

Converts an abstract bump magnitude into a concrete version string. Three
strategies exist, selected by EngineConfig.mode:

- release: plain positional increment ("1.2.3" + minor → "1.3.0")
- pre: increment or append a pre-release identifier ("1.3.0rc0")
- snapshot: synthetic, time-derived version ("0.0.0.dev20260101120000+canary")

Every produced version is a normalized PEP 440 string.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timezone

import semver

from .config import EngineConfig, ReleaseMode, SnapshotOptions
from .errors import ConfigError
from .models import Bump, PackageInfo
from .pep440 import parse_version, pre_release_label, pre_release_state, render_version


def increment_version(version_str: str, bump: Bump) -> str:
    """Increment a version by the given magnitude and return as a string.

    Any pre-release or build suffix is dropped.

    Examples:
        ("1.2.3", PATCH) → "1.2.4"
        ("1.2.3", MINOR) → "1.3.0"
        ("1.2", MAJOR) → "2.0.0"
    """
    version = parse_version(version_str)
    if bump == Bump.MAJOR:
        version = version.bump_major()
    elif bump == Bump.MINOR:
        version = version.bump_minor()
    elif bump == Bump.PATCH:
        version = version.bump_patch()
    return render_version(str(version))


def _release_covers(version: semver.Version, bump: Bump) -> bool:
    """Whether a pre-release's release part already includes ``bump``.

    "2.0.0rc1" already is a major step, "1.3.0rc1" a minor one,
    any pre-release already is at least a patch step.
    """
    if bump == Bump.MAJOR:
        return version.minor == 0 and version.patch == 0
    if bump == Bump.MINOR:
        return version.patch == 0
    return True


def increment_prerelease(version_str: str, bump: Bump, tag: str) -> str:
    """Increment a version in pre-release mode.

    ``tag`` is a PEP 440 pre-release label; spellings are normalized
    ("beta" → "b").

    Examples:
        ("1.0.0", MINOR, "rc") → "1.1.0rc0"
        ("1.1.0rc0", PATCH, "rc") → "1.1.0rc1"
        ("1.1.0rc3", MAJOR, "rc") → "2.0.0rc0"
        ("1.1.0a2", MINOR, "beta") → "1.1.0b0"

    Raises:
        ConfigError: If ``tag`` is not a PEP 440 pre-release label.
    """
    label = pre_release_label(tag)
    if label is None:
        raise ConfigError(
            f"{tag!r} is not a PEP 440 pre-release label (a, b, rc, alpha, beta, ...)"
        )
    version = parse_version(version_str).replace(build=None)

    if version.prerelease and _release_covers(version, bump):
        current = pre_release_state(version)
        number = current[1] + 1 if current and current[0] == label else 0
        return render_version(str(version.replace(prerelease=f"{label}.{number}")))

    release = parse_version(increment_version(str(version.finalize_version()), bump))
    return render_version(str(release.replace(prerelease=f"{label}.0")))


def snapshot_version(calculated: str, options: SnapshotOptions) -> str:
    """Build a snapshot version from the template.

    The filled template is appended to the release part after a dot, so it
    must form a PEP 440 dev, pre or post segment, optionally followed by a
    "+local" label.

    Placeholders: {tag}, {datetime} (YYYYMMDDHHMMSS, UTC when the timestamp
    is aware), {timestamp} (epoch milliseconds) and {commit}.

    Examples:
        tag "canary" → "0.0.0.dev20260101120000+canary"
        tag "" → "0.0.0.dev20260101120000"
        use_calculated_version → "1.3.0.dev20260101120000+canary"

    Raises:
        ConfigError: If the template needs a missing commit or does not
            produce a valid PEP 440 version.
    """
    moment = options.timestamp
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    template = options.template or (
        "dev{datetime}+{tag}" if options.tag else "dev{datetime}"
    )
    if "{commit}" in template and not options.commit:
        raise ConfigError("snapshot template uses {commit} but no commit was given")

    suffix = template.format(
        tag=options.tag,
        datetime=moment.strftime("%Y%m%d%H%M%S"),
        timestamp=int(moment.timestamp() * 1000),
        commit=options.commit or "",
    )
    base = (
        parse_version(calculated).finalize_version()
        if options.use_calculated_version
        else "0.0.0"
    )
    return render_version(f"{base}.{suffix}")


def next_version(version_str: str, bump: Bump, config: EngineConfig) -> str:
    """Compute the target version for one package under the configured mode."""
    if config.mode is ReleaseMode.PRE:
        return increment_prerelease(version_str, bump, config.pre_tag)
    if config.mode is ReleaseMode.SNAPSHOT:
        if config.snapshot is None:
            raise ConfigError("snapshot mode requires snapshot options")
        return snapshot_version(increment_version(version_str, bump), config.snapshot)
    return increment_version(version_str, bump)


def calculate_versions(
    packages: Mapping[str, PackageInfo],
    bumps: Mapping[str, Bump],
    fixed_bases: Mapping[str, str],
    config: EngineConfig,
) -> dict[str, str]:
    """Compute target versions for every package with a bump.

    Fixed group members start from their group's shared base version,
    everyone else from their own current version. Packages without a bump
    are left out.
    """
    targets: dict[str, str] = {}
    for name in sorted(bumps):
        bump = bumps[name]
        if bump == Bump.NONE:
            continue
        base = fixed_bases.get(name, packages[name].version)
        targets[name] = next_version(base, bump, config)
    return targets
