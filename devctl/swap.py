"""Switch the working copy to another branch and bring the stack back up."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from . import compose, git, packages
from .exceptions import CollaboratorFailure, InvalidOffset, MissingRequiredArgument
from .flags import ParsedArgs
from .history import BranchHistoryStore
from .models import Project

logger = logging.getLogger(__name__)

LAST_TOKEN = "last"


class SwapStage(enum.Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    STASHING = "stashing"
    CHECKING_OUT = "checking-out"
    PULLING = "pulling"
    APPLYING_STASH = "applying-stash"
    REINSTALLING = "reinstalling"
    BRINGING_UP = "bringing-up"
    DONE = "done"


@dataclass
class SwapResult:
    target: str
    previous: str | None
    stages: list[SwapStage] = field(default_factory=list)

    @property
    def switched(self) -> bool:
        return SwapStage.CHECKING_OUT in self.stages


@dataclass
class BranchSwapper:
    project: Project
    history: BranchHistoryStore

    def swap(self, branch: str | None, args: ParsedArgs) -> SwapResult:
        stages = [SwapStage.IDLE, SwapStage.RESOLVING]
        target = self.resolve_target(branch, args.value("back"))
        current = git.current_branch(self.project.path)
        if target is None:
            target = self.history.most_recent(self.project.key, excluding=current)
        result = SwapResult(target=target, previous=current, stages=stages)
        dry_run = self.project.dry_run

        if target == current:
            logger.info("Already on %s; skipping checkout", target)
            self._record(target)
        else:
            if args.has("stash"):
                self._enter(result, SwapStage.STASHING)
                git.stash(self.project.path, dry_run=dry_run)
            if current is not None:
                self._record(current)
            self._enter(result, SwapStage.CHECKING_OUT, target)
            git.checkout(self.project.path, target, dry_run=dry_run)
            self._record(target)
            if args.has("pull"):
                self._enter(result, SwapStage.PULLING)
                git.pull(self.project.path, dry_run=dry_run)
            if args.has("apply"):
                self._enter(result, SwapStage.APPLYING_STASH)
                git.stash_apply(self.project.path, dry_run=dry_run)

        if args.has("install"):
            self._enter(result, SwapStage.REINSTALLING)
            packages.reinstall(self.project)
        if not args.has("no_up"):
            self._enter(result, SwapStage.BRINGING_UP)
            self._bring_up(volumes=args.has("volumes"))
        self._enter(result, SwapStage.DONE)
        return result

    def resolve_target(self, branch: str | None, back: str | None) -> str | None:
        """Resolve everything that needs no git query.

        Returns ``None`` for a bare ``last``, which depends on the current branch.
        """

        if not branch:
            if back is not None:
                raise MissingRequiredArgument("-n/--back needs a branch: use 'swap last -n N'.")
            raise MissingRequiredArgument("swap requires a branch name, 'last' or 'last -n N'.")
        if branch != LAST_TOKEN:
            if back is not None:
                raise InvalidOffset(f"-n/--back only applies to 'last' (got '{branch}'): use 'swap last -n N'.")
            return branch
        if back is None:
            return None
        return self.history.steps_back(self.project.key, back)

    def _bring_up(self, *, volumes: bool) -> None:
        try:
            compose.down(self.project, volumes=volumes)
        except CollaboratorFailure as exc:
            logger.warning("Ignoring failed shutdown: %s", exc)
        compose.up(
            self.project,
            build=True,
            detach=True,
            force_recreate=True,
            remove_orphans=True,
        )

    def _record(self, branch: str) -> None:
        if self.project.dry_run:
            return
        self.history.record_visit(self.project.key, branch)

    @staticmethod
    def _enter(result: SwapResult, stage: SwapStage, detail: str | None = None) -> None:
        result.stages.append(stage)
        if detail:
            logger.info("%s %s", stage.value, detail)
        else:
            logger.info("%s", stage.value)
