"""Tests for the Typer entry point."""

from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from typer.testing import CliRunner

from devctl.cli import app


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.runner = CliRunner()
        self.env = {
            "DEVCTL_HISTORY_FILE": str(Path(self._tmp.name) / "history"),
            "DEVCTL_COMPOSE": "docker compose",
            "DEVCTL_DOCKER": "docker",
        }

    def invoke(self, *args: str):
        return self.runner.invoke(app, list(args), env=self.env)

    def test_unknown_command_exits_one(self) -> None:
        result = self.invoke("frobnicate")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown command: frobnicate", result.output)

    def test_help_lists_commands(self) -> None:
        for args in (("help",), ("--help",), ()):
            with self.subTest(args=args):
                result = self.invoke(*args)
                self.assertEqual(result.exit_code, 0)
                self.assertIn("swap", result.output)
                self.assertIn("reinstall", result.output)

    def test_version(self) -> None:
        result = self.invoke("--version")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("devctl", result.output)

    def test_dry_run_expands_clusters(self) -> None:
        result = self.invoke("--dry-run", "up", "-dbrc", "web")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(
            "DRY RUN: docker compose up --build --detach --force-recreate --remove-orphans web",
            result.output,
        )

    def test_dry_run_reup_with_repeated_letters(self) -> None:
        result = self.invoke("--dry-run", "ru", "-dvbd")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("DRY RUN: docker compose down --volumes", result.output)
        self.assertIn("DRY RUN: docker compose up --build --detach", result.output)

    def test_malformed_flag(self) -> None:
        result = self.invoke("up", "-x")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("-x", result.output)

    def test_exec_keeps_inner_flags(self) -> None:
        result = self.invoke("--dry-run", "run", "web", "ls", "-la")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("DRY RUN: docker compose exec web ls -la", result.output)

    def test_global_options_after_service_belong_to_container_command(self) -> None:
        result = self.invoke("--dry-run", "run", "web", "pytest", "--verbose", "--version")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("DRY RUN: docker compose exec web pytest --verbose --version", result.output)

    def test_dry_run_after_service_still_executes(self) -> None:
        done = subprocess.CompletedProcess([], 0, "", "")
        with mock.patch("devctl.process.subprocess.run", return_value=done) as run:
            result = self.invoke("run", "web", "echo", "--dry-run")
        self.assertEqual(result.exit_code, 0, result.output)
        run.assert_called_once()
        self.assertEqual(run.call_args.args[0], ["docker", "compose", "exec", "web", "echo", "--dry-run"])

    def test_swap_rejects_cluster_with_unknown_letter(self) -> None:
        with mock.patch("devctl.process.subprocess.run") as run:
            result = self.invoke("swap", "feature", "-sp", "--no-up")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("-sp", result.output)
        run.assert_not_called()


if __name__ == "__main__":
    unittest.main()
