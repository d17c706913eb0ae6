"""Operation handlers invoked by the router."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from . import compose, git, packages
from .exceptions import MalformedFlag, MissingRequiredArgument, ValidationError
from .flags import describe
from .history import SEPARATOR
from .router import Invocation
from .swap import BranchSwapper


def _positionals(inv: Invocation, limit: int | None = None) -> tuple[str, ...]:
    """Return the positionals, rejecting leftover flag tokens and anything past ``limit``."""

    positionals = inv.args.positionals
    for token in positionals:
        if token.startswith("-") and token != "-":
            raise MalformedFlag(token, inv.command.name)
    if limit is not None and len(positionals) > limit:
        extra = " ".join(positionals[limit:])
        raise ValidationError(f"{inv.command.name} takes at most {limit} argument(s); unexpected: {extra}")
    return positionals


def build(inv: Invocation) -> None:
    compose.build(inv.project, _positionals(inv))


def up(inv: Invocation) -> None:
    args = inv.args
    compose.up(
        inv.project,
        _positionals(inv),
        build=args.has("build"),
        detach=args.has("detach"),
        force_recreate=args.has("recreate"),
        remove_orphans=args.has("cleanup"),
    )


def down(inv: Invocation) -> None:
    _positionals(inv, limit=0)
    compose.down(inv.project, volumes=inv.args.has("volumes"))


def restart(inv: Invocation) -> None:
    compose.restart(inv.project, _positionals(inv))


def reup(inv: Invocation) -> None:
    args = inv.args
    services = _positionals(inv)
    compose.down(inv.project, volumes=args.has("volumes"))
    compose.up(inv.project, services, build=args.has("build"), detach=args.has("detach"))


def run(inv: Invocation) -> None:
    image = inv.args.value("global")
    positionals = list(inv.args.positionals)
    if image:
        compose.run_image(inv.project, image, positionals)
        return
    if len(positionals) < 2:
        raise MissingRequiredArgument("run requires a service name and a command, or --global <image>.")
    service, *command = positionals
    compose.exec_in(inv.project, service, command)


def shell(inv: Invocation) -> None:
    image = inv.args.value("global")
    program = inv.config.shell
    if image:
        compose.run_image(inv.project, image, entrypoint=program)
        return
    if not inv.args.positionals:
        raise MissingRequiredArgument("shell requires a service name, or --global <image>.")
    compose.exec_in(inv.project, inv.args.positionals[0], [program])


def swap(inv: Invocation) -> None:
    positionals = _positionals(inv, limit=1)
    branch = positionals[0] if positionals else None
    result = BranchSwapper(inv.project, inv.history).swap(branch, inv.args)
    if result.switched:
        inv.console.print(f"Switched to [bold]{escape(result.target)}[/bold]")
    else:
        inv.console.print(f"Already on [bold]{escape(result.target)}[/bold]")


def reinstall(inv: Invocation) -> None:
    installed = packages.reinstall(inv.project, _positionals(inv), clean=inv.args.has("clean"))
    if not installed:
        inv.console.print("No package manifests found.")


def branch(inv: Invocation) -> None:
    current = git.current_branch(inv.project.path)
    inv.console.print(escape(current) if current else "(detached)")


def info(inv: Invocation) -> None:
    project = inv.project
    current = git.current_branch(project.path)
    installers = packages.detect_installers(project.path)
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Project", str(project.path))
    table.add_row("Branch", current or "(detached)")
    table.add_row("Describe", git.describe(project.path) or "-")
    table.add_row("Compose file", compose.compose_file(project) or "-")
    table.add_row("Package managers", ", ".join(installer.name for installer in installers) or "-")
    table.add_row("History entries", str(inv.history.count_entries(project.key)))
    table.add_row("History file", str(inv.config.history_file))
    inv.console.print(table)


def history(inv: Invocation) -> None:
    branches = inv.history.branches(inv.project.key)
    if not branches:
        inv.console.print("No branch history recorded for this directory.")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("-n", justify="right")
    table.add_column("Branch")
    for back, name in enumerate(reversed(branches)):
        table.add_row(str(back), escape(name))
    inv.console.print(table)


def push(inv: Invocation) -> None:
    project = inv.project
    positionals = _positionals(inv, limit=1)
    target = positionals[0] if positionals else git.current_branch(project.path)
    if not target:
        raise MissingRequiredArgument("push requires a branch name when HEAD is detached.")
    git.push(
        project.path,
        target,
        force=inv.args.has("force"),
        upstream=inv.args.has("upstream"),
        dry_run=project.dry_run,
    )


def commit(inv: Invocation) -> None:
    message = " ".join(inv.args.positionals).strip()
    if not message:
        raise MissingRequiredArgument("commit requires a message.")
    git.commit(inv.project.path, message, all_changes=inv.args.has("all"), dry_run=inv.project.dry_run)


def diff(inv: Invocation) -> None:
    git.diff(inv.project.path, inv.args.positionals, staged=inv.args.has("staged"))


def show_help(inv: Invocation) -> None:
    table = Table(show_header=True, header_style="bold", title="devctl <command> [flags] [args]")
    table.add_column("Command")
    table.add_column("Aliases")
    table.add_column("Flags")
    table.add_column("Description")
    for command in inv.commands:
        flag_lines = describe(command.flags) if command.flags else []
        summary = command.summary
        if command.usage:
            summary = f"{summary}\n{command.usage}"
        table.add_row(
            command.name,
            ", ".join(command.aliases),
            escape("\n".join(flag_lines)),
            escape(summary),
        )
    inv.console.print(table)
    inv.console.print(f"Branch history is stored in {escape(str(inv.config.history_file))} as path{SEPARATOR}branch lines.")
