"""Run external collaborators and map their failures."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import Sequence

import typer

from .exceptions import CollaboratorFailure

logger = logging.getLogger(__name__)

MISSING_BINARY_EXIT = 127


def run_command(
    command: Sequence[str],
    *,
    cwd: Path,
    capture: bool = False,
    check: bool = True,
    dry_run: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Execute ``command`` in ``cwd``.

    Output is streamed to the terminal unless ``capture`` is set. With
    ``dry_run`` the command is echoed and reported as successful.
    """

    cmd = list(command)
    log_line = shlex.join(cmd)
    if dry_run:
        typer.echo(f"DRY RUN: {log_line}")
        return subprocess.CompletedProcess(cmd, 0, "", "")
    logger.debug("Running command: %s", log_line)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=capture,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        raise CollaboratorFailure(cmd, MISSING_BINARY_EXIT, f"Required binary not found in PATH: {cmd[0]}") from exc
    if check and proc.returncode != 0:
        raise CollaboratorFailure(cmd, proc.returncode, proc.stderr if capture else None)
    return proc
