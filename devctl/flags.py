"""Expand clustered short flags into canonical effects.

A command declares its vocabulary as a :class:`FlagSpec`. ``normalize`` then
accepts any mix of long flags (``--build``), single short flags (``-b``) and
clusters (``-bdv``, ``-dvbd``) and reduces them to a set of effects plus the
positional arguments in their original order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from .exceptions import MalformedFlag, MissingRequiredArgument

END_OF_OPTIONS = "--"


@dataclass(frozen=True)
class FlagDef:
    """One flag a command understands.

    ``short`` is ``None`` for long-only flags. Value flags consume the next
    token and are never part of a cluster.
    """

    effect: str
    long: str
    short: str | None = None
    takes_value: bool = False
    help: str = ""

    def __post_init__(self) -> None:
        if self.short is not None and len(self.short) != 1:
            raise ValueError(f"Short flag must be a single letter: {self.short!r}")
        if not self.long.startswith("--"):
            raise ValueError(f"Long flag must start with '--': {self.long!r}")

    @property
    def short_token(self) -> str | None:
        return f"-{self.short}" if self.short else None


@dataclass(frozen=True)
class FlagSpec:
    """The flag vocabulary of a single command."""

    flags: tuple[FlagDef, ...] = ()
    stop_at_positional: bool = False
    _by_long: Mapping[str, FlagDef] = field(init=False, repr=False, compare=False)
    _by_short: Mapping[str, FlagDef] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_long: dict[str, FlagDef] = {}
        by_short: dict[str, FlagDef] = {}
        for flag in self.flags:
            if flag.long in by_long:
                raise ValueError(f"Duplicate long flag: {flag.long}")
            by_long[flag.long] = flag
            if flag.short is None:
                continue
            if flag.short in by_short:
                raise ValueError(f"Letter '{flag.short}' maps to more than one flag")
            by_short[flag.short] = flag
        object.__setattr__(self, "_by_long", by_long)
        object.__setattr__(self, "_by_short", by_short)

    @property
    def alphabet(self) -> frozenset[str]:
        """Letters that may appear in a cluster."""

        return frozenset(letter for letter, flag in self._by_short.items() if not flag.takes_value)

    @property
    def effects(self) -> frozenset[str]:
        return frozenset(flag.effect for flag in self.flags if not flag.takes_value)

    def by_long(self, token: str) -> FlagDef | None:
        return self._by_long.get(token)

    def by_short(self, letter: str) -> FlagDef | None:
        return self._by_short.get(letter)


@dataclass(frozen=True)
class ParsedArgs:
    """Result of normalizing one command's arguments."""

    effects: frozenset[str] = frozenset()
    positionals: tuple[str, ...] = ()
    values: Mapping[str, str] = field(default_factory=dict)

    def __contains__(self, effect: object) -> bool:
        return effect in self.effects

    def has(self, effect: str) -> bool:
        return effect in self.effects

    def value(self, effect: str) -> str | None:
        return self.values.get(effect)


def normalize(spec: FlagSpec, raw_args: Iterable[str], *, command: str | None = None) -> ParsedArgs:
    """Split ``raw_args`` into activated effects and positional arguments.

    Unknown lone short flags (``-x``) raise :class:`MalformedFlag`. Unknown
    long flags and clusters holding any letter outside the alphabet are kept
    as positional arguments.
    """

    effects: set[str] = set()
    values: dict[str, str] = {}
    positionals: list[str] = []
    tokens = list(raw_args)
    passthrough = False
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if passthrough or not _looks_like_flag(token):
            positionals.append(token)
            if spec.stop_at_positional:
                passthrough = True
            continue
        if token == END_OF_OPTIONS:
            passthrough = True
            continue

        value_flag, inline_value = _match_value_flag(spec, token)
        if value_flag is not None:
            if inline_value is None:
                if index >= len(tokens):
                    raise MissingRequiredArgument(f"{token} requires a value")
                inline_value = tokens[index]
                index += 1
            values[value_flag.effect] = inline_value
            continue

        flag = spec.by_long(token)
        if flag is None and len(token) == 2:
            flag = spec.by_short(token[1])
            if flag is None:
                raise MalformedFlag(token, command)
        if flag is not None:
            effects.add(flag.effect)
            continue

        cluster = splat(spec, token)
        if cluster is None:
            positionals.append(token)
            if spec.stop_at_positional:
                passthrough = True
            continue
        effects.update(cluster)

    return ParsedArgs(effects=frozenset(effects), positionals=tuple(positionals), values=values)


def splat(spec: FlagSpec, token: str) -> frozenset[str] | None:
    """Return the effects of a cluster token, or ``None`` if it is not one.

    Letters may come in any order and repeat; every letter must belong to the
    command's alphabet.
    """

    if not token.startswith("-") or token.startswith(END_OF_OPTIONS):
        return None
    letters = token[1:]
    if not letters:
        return None
    alphabet = spec.alphabet
    if any(letter not in alphabet for letter in letters):
        return None
    return frozenset(spec.by_short(letter).effect for letter in set(letters))  # type: ignore[union-attr]


def long_form(spec: FlagSpec, effects: Iterable[str]) -> list[str]:
    """Render effects back into long flags, in declaration order."""

    wanted = set(effects)
    return [flag.long for flag in spec.flags if flag.effect in wanted and not flag.takes_value]


def describe(spec: FlagSpec) -> Sequence[str]:
    """Human-readable flag summaries for help output."""

    lines: list[str] = []
    for flag in spec.flags:
        names = f"{flag.short_token}, {flag.long}" if flag.short else flag.long
        if flag.takes_value:
            names = f"{names} <{flag.effect}>"
        lines.append(f"{names}  {flag.help}".rstrip())
    return lines


def _looks_like_flag(token: str) -> bool:
    return token.startswith("-") and token != "-"


def _match_value_flag(spec: FlagSpec, token: str) -> tuple[FlagDef | None, str | None]:
    if token.startswith(END_OF_OPTIONS):
        name, sep, inline = token.partition("=")
        flag = spec.by_long(name)
        if flag is not None and flag.takes_value:
            return flag, inline if sep else None
        return None, None
    if len(token) == 2:
        flag = spec.by_short(token[1])
        if flag is not None and flag.takes_value:
            return flag, None
    return None, None


__all__ = ["FlagDef", "FlagSpec", "ParsedArgs", "normalize", "splat", "long_form", "describe"]
