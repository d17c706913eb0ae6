"""Wrappers around the container orchestration and engine commands."""

from __future__ import annotations

from typing import Sequence

from .models import Project
from .process import run_command

COMPOSE_FILES = ("compose.yaml", "compose.yml", "docker-compose.yaml", "docker-compose.yml")


def run_compose(project: Project, args: Sequence[str]) -> None:
    command = [*project.config.compose_command, *args]
    run_command(command, cwd=project.path, dry_run=project.dry_run)


def compose_file(project: Project) -> str | None:
    for name in COMPOSE_FILES:
        if (project.path / name).is_file():
            return name
    return None


def build(project: Project, services: Sequence[str] = ()) -> None:
    run_compose(project, ["build", *services])


def up(
    project: Project,
    services: Sequence[str] = (),
    *,
    build: bool = False,
    detach: bool = False,
    force_recreate: bool = False,
    remove_orphans: bool = False,
) -> None:
    args = ["up"]
    if build:
        args.append("--build")
    if detach:
        args.append("--detach")
    if force_recreate:
        args.append("--force-recreate")
    if remove_orphans:
        args.append("--remove-orphans")
    run_compose(project, [*args, *services])


def down(project: Project, *, volumes: bool = False) -> None:
    args = ["down"]
    if volumes:
        args.append("--volumes")
    run_compose(project, args)


def restart(project: Project, services: Sequence[str] = ()) -> None:
    run_compose(project, ["restart", *services])


def exec_in(project: Project, service: str, command: Sequence[str]) -> None:
    run_compose(project, ["exec", service, *command])


def run_image(project: Project, image: str, command: Sequence[str] = (), *, entrypoint: str | None = None) -> None:
    args = [*project.config.docker_command, "run", "--rm", "-it"]
    if entrypoint:
        args.extend(["--entrypoint", entrypoint])
    args.append(image)
    args.extend(command)
    run_command(args, cwd=project.path, dry_run=project.dry_run)
