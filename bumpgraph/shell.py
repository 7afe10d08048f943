"""Shell and git utilities, plus output formatting helpers for the CLI."""

from __future__ import annotations

import subprocess

import click


def git(*args: str, check: bool = True) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "rev-parse", "--short", "HEAD").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail.

    Returns:
        Stripped stdout from the git command.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True, check=check)
    return result.stdout.strip()


def short_commit() -> str | None:
    """Abbreviated HEAD commit, or None outside a git checkout or without git."""
    try:
        return git("rev-parse", "--short", "HEAD", check=False) or None
    except OSError:
        return None


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")
