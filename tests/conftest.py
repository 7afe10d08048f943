"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
import tomlkit

from bumpgraph.models import PackageInfo


@pytest.fixture
def tmp_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml file."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = [
    "requests>=2.0",
    "internal-dep>=1.0",
]

[project.optional-dependencies]
dev = ["pytest>=8.0", "another-internal>=0.5"]

[dependency-groups]
test = ["pytest>=8.0", "group-internal>=0.1"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def sample_toml_doc() -> tomlkit.TOMLDocument:
    """Create a sample TOML document."""
    content = """\
[project]
name = "my-package"
version = "2.0.0"
dependencies = ["click>=8.0", "pydantic>=2.0"]

[project.optional-dependencies]
dev = ["pytest>=8.0"]
docs = ["sphinx>=7.0"]

[dependency-groups]
test = ["hypothesis>=6.0", {include-group = "lint"}]
lint = ["ruff"]

[tool.uv.workspace]
members = ["packages/*", "libs/*"]

[tool.bumpgraph]
fixed = [["core", "core-*"]]
ignore = ["internal-tool"]
update-internal-dependencies = "minor"
"""
    return tomlkit.parse(content)


@pytest.fixture
def chain_packages() -> dict[str, PackageInfo]:
    """core ← react ← app, all at 1.0.0."""
    return {
        "core": PackageInfo(path="packages/core", version="1.0.0"),
        "react": PackageInfo(path="packages/react", version="1.0.0", deps=["core"]),
        "app": PackageInfo(path="packages/app", version="1.0.0", deps=["react"]),
    }


@pytest.fixture
def write_workspace(tmp_path: Path) -> Callable[..., Path]:
    """Write a uv workspace under tmp_path.

    Call with package name → (version, dependency strings) and an optional
    [tool.bumpgraph] TOML snippet.
    """

    def _write(
        members: dict[str, tuple[str, list[str]]], tool: str = ""
    ) -> Path:
        root_toml = '[tool.uv.workspace]\nmembers = ["packages/*"]\n'
        if tool:
            root_toml += f"\n[tool.bumpgraph]\n{tool}\n"
        (tmp_path / "pyproject.toml").write_text(root_toml)
        for name, (version, deps) in members.items():
            package_dir = tmp_path / "packages" / name
            package_dir.mkdir(parents=True)
            dep_list = ", ".join(f'"{d}"' for d in deps)
            (package_dir / "pyproject.toml").write_text(
                f'[project]\nname = "{name}"\nversion = "{version}"\n'
                f"dependencies = [{dep_list}]\n"
            )
        return tmp_path

    return _write
