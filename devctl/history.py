"""Per-directory branch history backed by a line-oriented ledger file.

Each line of the ledger is ``<project path>::<branch>``. For a given project
a branch appears at most once; revisiting a branch moves it to the end, so a
project's list is always ordered oldest visit first.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .exceptions import InvalidOffset, NoHistory, StorageUnavailable, ValidationError
from .models import HistoryEntry

logger = logging.getLogger(__name__)

SEPARATOR = "::"


@dataclass
class HistoryLedger:
    """In-memory view of the ledger: project key -> ordered branch names."""

    projects: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> HistoryLedger:
        return ledger_from_entries(_iter_entries(text))

    def render(self) -> str:
        return "".join(f"{entry.project_key}{SEPARATOR}{entry.branch}\n" for entry in self.entries())

    def entries(self) -> Iterator[HistoryEntry]:
        for key, branches in self.projects.items():
            for branch in branches:
                yield HistoryEntry(project_key=key, branch=branch)

    def branches(self, project_key: str) -> list[str]:
        return list(self.projects.get(project_key, ()))

    def record(self, project_key: str, branch: str) -> None:
        branches = self.projects.setdefault(project_key, [])
        if branch in branches:
            branches.remove(branch)
        branches.append(branch)


def parse_line(line: str) -> HistoryEntry | None:
    # Branch names cannot contain ':', so the last separator is the boundary.
    key, sep, branch = line.rpartition(SEPARATOR)
    if not sep or not key or not branch:
        return None
    return HistoryEntry(project_key=key, branch=branch)


def _iter_entries(text: str) -> Iterator[HistoryEntry]:
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        entry = parse_line(line)
        if entry is None:
            logger.warning("Skipping malformed history line %d: %r", lineno, raw)
            continue
        yield entry


class BranchHistoryStore:
    """Read-modify-write access to the ledger file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> HistoryLedger:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return HistoryLedger()
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageUnavailable(f"Unable to read history file {self.path}: {exc}") from exc
        return HistoryLedger.parse(text)

    def save(self, ledger: HistoryLedger) -> None:
        """Rewrite the whole ledger via a temporary file and an atomic rename."""

        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}-", dir=str(directory))
        except OSError as exc:
            raise StorageUnavailable(f"Unable to write history file {self.path}: {exc}") from exc
        tmp_path = Path(tmp_name)
        try:
            with open(fd, "w", encoding="utf-8") as fh:
                fh.write(ledger.render())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageUnavailable(f"Unable to write history file {self.path}: {exc}") from exc

    def record_visit(self, project_key: str, branch: str) -> None:
        branch = branch.strip()
        if not branch:
            raise ValidationError("Branch name cannot be empty.")
        if SEPARATOR in branch or "\n" in branch:
            raise ValidationError(f"Branch name cannot contain '{SEPARATOR}' or newlines: {branch!r}")
        if "\n" in project_key:
            raise ValidationError("Project path cannot contain newlines.")
        ledger = self.load()
        ledger.record(project_key, branch)
        self.save(ledger)
        logger.debug("Recorded visit to %s in %s", branch, project_key)

    def branches(self, project_key: str) -> list[str]:
        return self.load().branches(project_key)

    def count_entries(self, project_key: str) -> int:
        return len(self.branches(project_key))

    def most_recent(self, project_key: str, excluding: str | None = None) -> str:
        """Return the last visited branch, skipping ``excluding`` if it is last."""

        branches = self.branches(project_key)
        if branches and excluding is not None and branches[-1] == excluding:
            branches.pop()
        if not branches:
            raise NoHistory(f"No previous branch recorded for {project_key}.")
        return branches[-1]

    def at_offset_from_end(self, project_key: str, offset: int | str) -> str:
        """Return the entry ``offset`` positions from the end (1 is the last)."""

        position = _parse_offset(offset)
        branches = self.branches(project_key)
        if position < 1 or position > len(branches):
            raise NoHistory(
                f"History for {project_key} has {len(branches)} branch(es); offset {position} is unavailable."
            )
        return branches[-position]

    def steps_back(self, project_key: str, steps: int | str) -> str:
        """Resolve ``last -n N``: the entry ``N`` back from the most recent one."""

        back = _parse_offset(steps)
        total = self.count_entries(project_key)
        if total == 0:
            raise NoHistory(f"No branch history recorded for {project_key}.")
        count = total - back
        if count < 1 or count > total:
            raise InvalidOffset(f"Offset {back} is out of range; valid values are 0 to {total - 1}.")
        return self.at_offset_from_end(project_key, total - count + 1)


def _parse_offset(value: int | str) -> int:
    if isinstance(value, bool):
        raise InvalidOffset(f"Offset must be a whole number, got {value!r}.")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise InvalidOffset(f"Offset must be a whole number, got {value!r}.") from exc


def ledger_from_entries(entries: Iterable[HistoryEntry]) -> HistoryLedger:
    ledger = HistoryLedger()
    for entry in entries:
        ledger.record(entry.project_key, entry.branch)
    return ledger


__all__ = ["SEPARATOR", "HistoryLedger", "BranchHistoryStore", "parse_line", "ledger_from_entries"]
