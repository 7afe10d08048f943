"""Engine configuration.

A single frozen EngineConfig value carries every policy knob and is passed
explicitly to each stage of the pipeline. It can be built directly or read
from the [tool.bumpgraph] table of the workspace root pyproject.toml:

    [tool.bumpgraph]
    fixed = [["core", "core-*"]]
    linked = [["plugin-*"]]
    ignore = ["internal-tool"]
    update-internal-dependencies = "minor"
"""

from __future__ import annotations

import string
from datetime import datetime
from enum import Enum
from typing import Any, Literal

import tomlkit
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import ConfigError
from .pep440 import pre_release_label
from .toml import get_tool_table

SNAPSHOT_PLACEHOLDERS = frozenset({"tag", "datetime", "timestamp", "commit"})


class ReleaseMode(str, Enum):
    """How target versions are derived from bump magnitudes."""

    RELEASE = "release"
    PRE = "pre"
    SNAPSHOT = "snapshot"


class SnapshotOptions(BaseModel):
    """Inputs for snapshot versions.

    The timestamp is supplied by the caller so identical inputs always
    produce identical versions.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamp: datetime
    tag: str = ""
    commit: str | None = None
    template: str | None = None
    use_calculated_version: bool = False

    @field_validator("template")
    @classmethod
    def _known_placeholders(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            fields = {
                name for _, name, _, _ in string.Formatter().parse(value) if name is not None
            }
        except ValueError as exc:
            raise ValueError(f"malformed snapshot template {value!r}: {exc}") from exc
        unknown = sorted(fields - SNAPSHOT_PLACEHOLDERS)
        if unknown:
            allowed = ", ".join(sorted(SNAPSHOT_PLACEHOLDERS))
            raise ValueError(
                f"unknown snapshot template placeholders {unknown} (allowed: {allowed})"
            )
        return value


class EngineConfig(BaseModel):
    """Grouping, cascade and versioning policy for one engine run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    fixed: tuple[tuple[str, ...], ...] = ()
    linked: tuple[tuple[str, ...], ...] = ()
    ignore: tuple[str, ...] = ()
    update_internal_dependencies: Literal["patch", "minor"] = "patch"
    mode: ReleaseMode = ReleaseMode.RELEASE
    pre_tag: str = "rc"
    snapshot: SnapshotOptions | None = None

    @model_validator(mode="after")
    def _mode_requirements(self) -> EngineConfig:
        if self.mode is ReleaseMode.SNAPSHOT and self.snapshot is None:
            raise ValueError("snapshot mode requires snapshot options")
        if self.mode is ReleaseMode.PRE and pre_release_label(self.pre_tag) is None:
            raise ValueError(
                f"pre_tag {self.pre_tag!r} is not a PEP 440 pre-release label "
                "(a, b, rc, alpha, beta, ...)"
            )
        return self


def load_config(doc: tomlkit.TOMLDocument, **overrides: Any) -> EngineConfig:
    """Build an EngineConfig from the [tool.bumpgraph] table.

    Hyphenated keys are accepted ("update-internal-dependencies").
    Keyword overrides (e.g. mode chosen on the command line) win over the
    file.

    Raises:
        ConfigError: If the table holds unknown keys or invalid values.
    """
    raw = {key.replace("-", "_"): value for key, value in get_tool_table(doc).items()}
    raw.update(overrides)
    try:
        return EngineConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid [tool.bumpgraph] configuration:\n{exc}") from exc
