"""Tests for the per-directory branch ledger."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from devctl.exceptions import InvalidOffset, NoHistory, StorageUnavailable, ValidationError
from devctl.history import BranchHistoryStore, HistoryLedger, ledger_from_entries, parse_line
from devctl.models import HistoryEntry


class BranchHistoryStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.ledger_path = self.root / "history"
        self.store = BranchHistoryStore(self.ledger_path)

    def seed(self, project: str, *branches: str) -> None:
        for branch in branches:
            self.store.record_visit(project, branch)

    def test_move_to_end(self) -> None:
        self.seed("/repo", "main", "feature", "main")
        self.assertEqual(self.store.branches("/repo"), ["feature", "main"])
        self.assertEqual(self.store.count_entries("/repo"), 2)

    def test_most_recent_skips_current_branch(self) -> None:
        self.seed("/repo", "main", "feature", "main")
        self.assertEqual(self.store.most_recent("/repo", excluding="main"), "feature")

    def test_most_recent_returns_last_when_current_is_elsewhere(self) -> None:
        self.seed("/repo", "main", "feature")
        self.assertEqual(self.store.most_recent("/repo", excluding="hotfix"), "feature")
        self.assertEqual(self.store.most_recent("/repo"), "feature")

    def test_most_recent_without_history(self) -> None:
        with self.assertRaises(NoHistory):
            self.store.most_recent("/repo", excluding="main")
        self.seed("/repo", "main")
        with self.assertRaises(NoHistory):
            self.store.most_recent("/repo", excluding="main")

    def test_at_offset_from_end(self) -> None:
        self.seed("/repo", "a", "b", "c")
        self.assertEqual(self.store.at_offset_from_end("/repo", 1), "c")
        self.assertEqual(self.store.at_offset_from_end("/repo", "3"), "a")
        for offset in (0, -1, 4):
            with self.subTest(offset=offset), self.assertRaises(NoHistory):
                self.store.at_offset_from_end("/repo", offset)
        with self.assertRaises(InvalidOffset):
            self.store.at_offset_from_end("/repo", "two")

    def test_steps_back_counts_from_most_recent(self) -> None:
        self.seed("/repo", "a", "b", "c")
        self.assertEqual(self.store.steps_back("/repo", 0), "c")
        self.assertEqual(self.store.steps_back("/repo", "1"), "b")
        self.assertEqual(self.store.steps_back("/repo", 2), "a")
        for steps in (3, -1):
            with self.subTest(steps=steps), self.assertRaises(InvalidOffset):
                self.store.steps_back("/repo", steps)
        with self.assertRaises(InvalidOffset):
            self.store.steps_back("/repo", "x")

    def test_steps_back_without_history(self) -> None:
        with self.assertRaises(NoHistory):
            self.store.steps_back("/repo", 1)

    def test_projects_do_not_interfere(self) -> None:
        self.seed("/one", "main", "feature")
        self.seed("/two", "develop")
        self.seed("/one", "bugfix")
        self.assertEqual(self.store.branches("/one"), ["main", "feature", "bugfix"])
        self.assertEqual(self.store.most_recent("/two", excluding="main"), "develop")
        self.assertEqual(self.store.at_offset_from_end("/one", 1), "bugfix")
        with self.assertRaises(NoHistory):
            self.store.at_offset_from_end("/two", 2)

    def test_file_format_is_one_record_per_line(self) -> None:
        self.seed("/repo", "main", "feature/login")
        self.assertEqual(self.ledger_path.read_text(), "/repo::main\n/repo::feature/login\n")

    def test_write_leaves_no_temporary_files(self) -> None:
        self.seed("/repo", "main", "feature")
        self.assertEqual([p.name for p in self.root.iterdir()], ["history"])

    def test_missing_file_is_empty_history(self) -> None:
        self.assertEqual(self.store.branches("/repo"), [])
        self.assertEqual(self.store.count_entries("/repo"), 0)

    def test_malformed_lines_are_skipped(self) -> None:
        self.ledger_path.write_text("/repo::main\nnot a record\n\n/repo::\n/repo::feature\n")
        with self.assertLogs("devctl.history", level="WARNING") as logs:
            branches = self.store.branches("/repo")
        self.assertEqual(branches, ["main", "feature"])
        self.assertEqual(len(logs.records), 2)

    def test_duplicate_lines_in_file_collapse(self) -> None:
        self.ledger_path.write_text("/repo::a\n/repo::b\n/repo::a\n")
        self.assertEqual(self.store.branches("/repo"), ["b", "a"])

    def test_rejects_branch_with_separator(self) -> None:
        with self.assertRaises(ValidationError):
            self.store.record_visit("/repo", "bad::name")
        with self.assertRaises(ValidationError):
            self.store.record_visit("/repo", "  ")

    def test_unreadable_ledger(self) -> None:
        self.ledger_path.mkdir()
        with self.assertRaises(StorageUnavailable):
            self.store.branches("/repo")

    def test_creates_parent_directory(self) -> None:
        store = BranchHistoryStore(self.root / "nested" / "dir" / "history")
        store.record_visit("/repo", "main")
        self.assertEqual(store.branches("/repo"), ["main"])


class LedgerParsingTests(unittest.TestCase):
    def test_project_path_may_contain_separator(self) -> None:
        self.assertEqual(parse_line("/odd::dir::main"), HistoryEntry("/odd::dir", "main"))

    def test_parse_line_rejects_missing_fields(self) -> None:
        for line in ("main", "::main", "/repo::"):
            with self.subTest(line=line):
                self.assertIsNone(parse_line(line))

    def test_render_groups_by_project(self) -> None:
        ledger = ledger_from_entries(
            [HistoryEntry("/a", "x"), HistoryEntry("/b", "y"), HistoryEntry("/a", "z")]
        )
        self.assertEqual(ledger.render(), "/a::x\n/a::z\n/b::y\n")
        self.assertEqual(HistoryLedger.parse(ledger.render()), ledger)


if __name__ == "__main__":
    unittest.main()
