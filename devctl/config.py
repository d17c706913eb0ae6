"""Load environment variables into a runtime configuration."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError

DEFAULT_HISTORY_FILE = "~/.devctl_history"
DEFAULT_COMPOSE = "docker compose"
DEFAULT_DOCKER = "docker"
DEFAULT_SHELL = "sh"


@dataclass(frozen=True)
class Config:
    """Settings resolved once per invocation."""

    history_file: Path
    compose_command: tuple[str, ...]
    docker_command: tuple[str, ...]
    shell: str
    workdir: Path
    dry_run: bool = False
    verbose: bool = False


def load_config(
    *,
    workdir: Path | None = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> Config:
    return Config(
        history_file=resolve_history_file(),
        compose_command=_command_from_env("DEVCTL_COMPOSE", DEFAULT_COMPOSE),
        docker_command=_command_from_env("DEVCTL_DOCKER", DEFAULT_DOCKER),
        shell=os.environ.get("DEVCTL_SHELL") or DEFAULT_SHELL,
        workdir=(workdir or Path.cwd()).expanduser().resolve(),
        dry_run=dry_run,
        verbose=verbose,
    )


def resolve_history_file() -> Path:
    raw = os.environ.get("DEVCTL_HISTORY_FILE") or DEFAULT_HISTORY_FILE
    return Path(raw).expanduser()


def _command_from_env(var: str, default: str) -> tuple[str, ...]:
    raw = os.environ.get(var)
    if raw is None:
        raw = default
    parts = tuple(shlex.split(raw))
    if not parts:
        raise ConfigError(f"Environment variable {var} is set but empty. Example: export {var}='{default}'")
    return parts


__all__ = ["Config", "load_config", "resolve_history_file"]
