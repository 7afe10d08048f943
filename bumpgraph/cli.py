"""CLI entry point for bumpgraph."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import click

from .config import ReleaseMode, SnapshotOptions, load_config
from .errors import BumpgraphError
from .models import Bump, ChangeDeclaration
from .pipeline import assemble_release_plan
from .shell import short_commit, step
from .store import MemoryDeclarationStore
from .toml import load_pyproject
from .workspace import discover_packages


def _parse_bump_option(value: str) -> tuple[str, Bump]:
    name, sep, bump = value.partition("=")
    if not sep or not name:
        raise click.BadParameter(f"expected PKG=TYPE, got {value!r}", param_hint="--bump")
    try:
        return name.strip(), Bump.parse(bump)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--bump") from exc


@click.group()
@click.version_option(package_name="bumpgraph")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool) -> None:
    """Compute consistent release plans for workspace packages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root containing pyproject.toml.",
)
@click.option(
    "-b",
    "--bump",
    "bumps",
    multiple=True,
    metavar="PKG=TYPE",
    help="Declare a change, e.g. -b core=minor (repeatable).",
)
@click.option("--summary", default="", help="Summary recorded on the declaration.")
@click.option("--pre", "pre_tag", default=None, metavar="TAG", help="Pre-release mode with a PEP 440 label (a, b, rc).")
@click.option(
    "--snapshot", "snapshot_tag", default=None, metavar="TAG", help="Snapshot mode."
)
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON.")
def plan(
    root: Path,
    bumps: tuple[str, ...],
    summary: str,
    pre_tag: str | None,
    snapshot_tag: str | None,
    as_json: bool,
) -> None:
    """Show the release plan for the declared changes."""
    if pre_tag is not None and snapshot_tag is not None:
        raise click.UsageError("--pre and --snapshot are mutually exclusive.")

    overrides: dict = {}
    if pre_tag is not None:
        overrides.update(mode=ReleaseMode.PRE, pre_tag=pre_tag)
    elif snapshot_tag is not None:
        overrides.update(
            mode=ReleaseMode.SNAPSHOT,
            snapshot=SnapshotOptions(
                timestamp=datetime.now(timezone.utc),
                tag=snapshot_tag,
                commit=short_commit(),
            ),
        )

    # Repeated -b flags for one package keep the largest bump
    releases: dict[str, Bump] = {}
    for option in bumps:
        name, bump = _parse_bump_option(option)
        releases[name] = max(bump, releases.get(name, Bump.NONE))

    store = MemoryDeclarationStore()
    if releases:
        store.add(ChangeDeclaration(id="cli", releases=releases, summary=summary))

    try:
        config = load_config(load_pyproject(root / "pyproject.toml"), **overrides)
        packages = discover_packages(root)
        result = assemble_release_plan(store.pending(), packages, config)
    except (BumpgraphError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    for diagnostic in result.diagnostics:
        click.echo(f"warning: {diagnostic.message}", err=True)

    if not result.releases:
        click.echo("Nothing to release.")
        return

    step(f"Release plan ({result.mode})")
    for name, release in result.releases.items():
        via = f" [{', '.join(release.changes)}]" if release.changes else ""
        click.echo(f"  {name}: {release.old} → {release.new} ({release.bump}){via}")
