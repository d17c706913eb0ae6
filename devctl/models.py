"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Config


@dataclass(frozen=True)
class Project:
    """The working directory a command operates on."""

    path: Path
    config: Config

    @property
    def key(self) -> str:
        return str(self.path)

    @property
    def dry_run(self) -> bool:
        return self.config.dry_run


@dataclass(frozen=True)
class HistoryEntry:
    """A single ledger record: a branch visited inside a project."""

    project_key: str
    branch: str
