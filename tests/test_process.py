"""Tests for the subprocess seam."""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from devctl.exceptions import CollaboratorFailure
from devctl.process import MISSING_BINARY_EXIT, run_command


class RunCommandTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.cwd = Path(self._tmp.name)

    def test_dry_run_does_not_execute(self) -> None:
        with mock.patch("devctl.process.subprocess.run") as run, mock.patch("devctl.process.typer.echo") as echo:
            proc = run_command(["git", "checkout", "my branch"], cwd=self.cwd, dry_run=True)
        run.assert_not_called()
        echo.assert_called_once_with("DRY RUN: git checkout 'my branch'")
        self.assertEqual(proc.returncode, 0)

    def test_non_zero_exit_raises(self) -> None:
        failed = subprocess.CompletedProcess(["git", "pull"], 4, "", "conflict")
        with mock.patch("devctl.process.subprocess.run", return_value=failed):
            with self.assertRaises(CollaboratorFailure) as ctx:
                run_command(["git", "pull"], cwd=self.cwd, capture=True)
        self.assertEqual(ctx.exception.exit_code, 4)
        self.assertIn("conflict", str(ctx.exception))

    def test_non_zero_exit_tolerated_without_check(self) -> None:
        failed = subprocess.CompletedProcess(["git", "describe"], 128, "", "")
        with mock.patch("devctl.process.subprocess.run", return_value=failed):
            proc = run_command(["git", "describe"], cwd=self.cwd, check=False)
        self.assertEqual(proc.returncode, 128)

    def test_missing_binary(self) -> None:
        with self.assertRaises(CollaboratorFailure) as ctx:
            run_command(["devctl-test-no-such-binary"], cwd=self.cwd)
        self.assertEqual(ctx.exception.exit_code, MISSING_BINARY_EXIT)


if __name__ == "__main__":
    unittest.main()
