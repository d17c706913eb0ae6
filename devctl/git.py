"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Iterable, Sequence

from .process import run_command


def run_git(
    args: Iterable[str],
    *,
    cwd: Path,
    raise_on_error: bool = True,
    capture: bool = True,
    dry_run: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    return run_command(["git", *args], cwd=cwd, capture=capture, check=raise_on_error, dry_run=dry_run)


def current_branch(path: Path) -> str | None:
    # "HEAD" means a detached checkout.
    proc = run_git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=path)
    branch = proc.stdout.strip()
    if not branch or branch == "HEAD":
        return None
    return branch


def describe(path: Path) -> str | None:
    proc = run_git(["describe", "--tags", "--always", "--dirty"], cwd=path, raise_on_error=False)
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def checkout(path: Path, branch: str, *, dry_run: bool = False) -> None:
    run_git(["checkout", branch], cwd=path, capture=False, dry_run=dry_run)


def stash(path: Path, *, dry_run: bool = False) -> None:
    run_git(["stash", "push", "--include-untracked"], cwd=path, capture=False, dry_run=dry_run)


def stash_apply(path: Path, *, dry_run: bool = False) -> None:
    run_git(["stash", "apply"], cwd=path, capture=False, dry_run=dry_run)


def pull(path: Path, *, dry_run: bool = False) -> None:
    run_git(["pull"], cwd=path, capture=False, dry_run=dry_run)


def push(
    path: Path,
    branch: str,
    *,
    remote: str = "origin",
    force: bool = False,
    upstream: bool = False,
    dry_run: bool = False,
) -> None:
    args = ["push"]
    if force:
        args.append("--force-with-lease")
    if upstream:
        args.append("--set-upstream")
    args.extend([remote, branch])
    run_git(args, cwd=path, capture=False, dry_run=dry_run)


def commit(path: Path, message: str, *, all_changes: bool = False, dry_run: bool = False) -> None:
    args = ["commit"]
    if all_changes:
        args.append("--all")
    args.extend(["-m", message])
    run_git(args, cwd=path, capture=False, dry_run=dry_run)


def diff(path: Path, paths: Sequence[str] = (), *, staged: bool = False) -> None:
    args = ["diff"]
    if staged:
        args.append("--staged")
    if paths:
        args.extend(["--", *paths])
    run_git(args, cwd=path, capture=False)
