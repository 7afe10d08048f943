"""Workspace discovery: build the package graph snapshot from a uv workspace."""

from __future__ import annotations

import glob
import logging
from pathlib import Path

from pydantic import ValidationError

from .deps import internal_edges
from .errors import ConfigError
from .models import PackageInfo
from .toml import (
    get_dev_dependency_strings,
    get_project_name,
    get_project_version,
    get_runtime_dependency_strings,
    get_workspace_member_globs,
    load_pyproject,
)

logger = logging.getLogger(__name__)


def discover_packages(root: Path) -> dict[str, PackageInfo]:
    """Scan the workspace and discover all packages.

    Reads [tool.uv.workspace].members from root pyproject.toml to find
    package directories, then extracts name, version, and internal deps
    from each package's pyproject.toml.

    Returns:
        Map of package name to PackageInfo, in directory order.

    Raises:
        ConfigError: If the workspace defines no members or none match.
    """
    root_doc = load_pyproject(root / "pyproject.toml")
    member_globs = get_workspace_member_globs(root_doc)

    # Expand globs to find all package directories
    member_dirs: list[Path] = []
    for pattern in member_globs:
        for match in sorted(glob.glob(str(root / pattern))):
            p = Path(match)
            if (p / "pyproject.toml").exists():
                member_dirs.append(p)

    if not member_dirs:
        raise ConfigError("No packages found matching workspace members")

    # First pass: collect basic info from each package
    packages: dict[str, PackageInfo] = {}
    docs = {}
    for d in member_dirs:
        doc = load_pyproject(d / "pyproject.toml")
        name = get_project_name(doc, d.name)
        try:
            packages[name] = PackageInfo(
                path=d.relative_to(root).as_posix(),
                version=get_project_version(doc),
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid package metadata for {name}:\n{exc}") from exc
        docs[name] = doc

    # Second pass: keep only deps that point inside the workspace
    workspace_names = set(packages)
    for name, doc in docs.items():
        # Self references (e.g. an extra pulling in its own package) are not edges
        seen: set[str] = {name}
        info = packages[name]
        info.deps.extend(
            internal_edges(
                get_runtime_dependency_strings(doc), workspace_names, "runtime", seen
            )
        )
        info.deps.extend(
            internal_edges(get_dev_dependency_strings(doc), workspace_names, "dev", seen)
        )

    for name, info in packages.items():
        logger.debug(
            "discovered %s %s (%s) deps=%s",
            name,
            info.version,
            info.path,
            [dep.name for dep in info.deps],
        )

    return packages
