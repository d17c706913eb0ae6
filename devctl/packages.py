"""Detect package manifests and re-run their installers."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .exceptions import ValidationError
from .models import Project
from .process import run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Installer:
    """A package manager keyed by the manifest that selects it."""

    name: str
    manifest: str
    command: tuple[str, ...]
    lockfile: str | None = None
    install_dir: str | None = None

    def matches(self, root: Path) -> bool:
        if not (root / self.manifest).is_file():
            return False
        return self.lockfile is None or (root / self.lockfile).is_file()


INSTALLERS: tuple[Installer, ...] = (
    Installer("composer", "composer.json", ("composer", "install"), install_dir="vendor"),
    Installer("yarn", "package.json", ("yarn", "install"), lockfile="yarn.lock", install_dir="node_modules"),
    Installer("pnpm", "package.json", ("pnpm", "install"), lockfile="pnpm-lock.yaml", install_dir="node_modules"),
    Installer("npm", "package.json", ("npm", "install"), lockfile="package-lock.json", install_dir="node_modules"),
    Installer("bundler", "Gemfile", ("bundle", "install")),
    Installer("pip", "requirements.txt", ("pip", "install", "-r", "requirements.txt")),
    Installer("swift", "Package.swift", ("swift", "package", "resolve"), install_dir=".build"),
    Installer("gradle", "build.gradle", ("gradle", "dependencies")),
)

KNOWN_NAMES = frozenset(installer.name for installer in INSTALLERS)


def detect_installers(root: Path, only: Sequence[str] = ()) -> list[Installer]:
    unknown = sorted(set(only) - KNOWN_NAMES)
    if unknown:
        known = ", ".join(sorted(KNOWN_NAMES))
        raise ValidationError(f"Unknown package manager(s): {', '.join(unknown)}. Choose from: {known}")
    found: list[Installer] = []
    seen_manifests: set[str] = set()
    for installer in INSTALLERS:
        if only and installer.name not in only:
            continue
        if not installer.matches(root):
            continue
        # One JS installer per project even if several lockfiles linger.
        if installer.manifest == "package.json" and "package.json" in seen_manifests:
            continue
        seen_manifests.add(installer.manifest)
        found.append(installer)
    if not only and (root / "package.json").is_file() and "package.json" not in seen_manifests:
        logger.info("package.json has no lockfile; skipping JavaScript dependencies")
    return found


def install_command(installer: Installer, root: Path) -> list[str]:
    if installer.name == "gradle" and (root / "gradlew").is_file():
        return ["./gradlew", *installer.command[1:]]
    return list(installer.command)


def reinstall(project: Project, only: Sequence[str] = (), *, clean: bool = False) -> list[Installer]:
    """Run every detected installer in declaration order and return them."""

    installers = detect_installers(project.path, only)
    if not installers:
        logger.warning("No package manifests found in %s", project.path)
        return []
    for installer in installers:
        if clean and installer.install_dir:
            _remove_install_dir(project, installer.install_dir)
        logger.info("Installing %s dependencies", installer.name)
        run_command(install_command(installer, project.path), cwd=project.path, dry_run=project.dry_run)
    return installers


def _remove_install_dir(project: Project, name: str) -> None:
    target = project.path / name
    if not target.is_dir():
        return
    if project.dry_run:
        logger.info("DRY RUN: would remove %s", target)
        return
    logger.info("Removing %s", target)
    shutil.rmtree(target)
