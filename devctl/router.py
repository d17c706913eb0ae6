"""Resolve a command name or alias and hand it normalized arguments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, Iterable, Sequence

from rich.console import Console
from rich.markup import escape

from .config import Config
from .exceptions import DevctlError, UnknownCommand
from .flags import FlagSpec, ParsedArgs, long_form, normalize
from .history import BranchHistoryStore
from .models import Project

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "help"


@dataclass(frozen=True)
class CommandDef:
    """A routable command. ``flags=None`` hands arguments over unsplatted."""

    name: str
    handler: Callable[[Invocation], None]
    aliases: tuple[str, ...] = ()
    flags: FlagSpec | None = None
    summary: str = ""
    usage: str = ""

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


@dataclass
class Invocation:
    """Everything a handler needs for one run."""

    command: CommandDef
    args: ParsedArgs
    config: Config
    console: Console
    commands: Sequence[CommandDef] = ()

    @cached_property
    def project(self) -> Project:
        return Project(path=self.config.workdir, config=self.config)

    @cached_property
    def history(self) -> BranchHistoryStore:
        return BranchHistoryStore(self.config.history_file)


class CommandRouter:
    def __init__(
        self,
        commands: Iterable[CommandDef],
        config: Config,
        *,
        console: Console | None = None,
        err_console: Console | None = None,
    ):
        self.commands = tuple(commands)
        self.config = config
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self._lookup: dict[str, CommandDef] = {}
        for command in self.commands:
            for name in command.names:
                if name in self._lookup:
                    raise ValueError(f"'{name}' is registered by both {self._lookup[name].name} and {command.name}")
                self._lookup[name] = command

    def resolve(self, token: str) -> CommandDef:
        try:
            return self._lookup[token]
        except KeyError:
            raise UnknownCommand(token) from None

    def parse(self, command: CommandDef, raw_args: Sequence[str]) -> ParsedArgs:
        if command.flags is None:
            return ParsedArgs(positionals=tuple(raw_args))
        return normalize(command.flags, raw_args, command=command.name)

    def dispatch(self, argv: Sequence[str]) -> int:
        """Run the command named by ``argv[0]`` and return an exit status."""

        tokens = list(argv) or [DEFAULT_COMMAND]
        try:
            command = self.resolve(tokens[0])
            args = self.parse(command, tokens[1:])
            if command.flags is not None:
                logger.debug("%s %s %s", command.name, " ".join(long_form(command.flags, args.effects)), args.positionals)
            invocation = Invocation(
                command=command,
                args=args,
                config=self.config,
                console=self.console,
                commands=self.commands,
            )
            command.handler(invocation)
        except DevctlError as exc:
            self.err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
            return exc.exit_code
        return 0


__all__ = ["CommandDef", "Invocation", "CommandRouter"]
