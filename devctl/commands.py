"""The command table: names, aliases and each command's flag vocabulary."""

from __future__ import annotations

from . import handlers
from .flags import FlagDef, FlagSpec
from .router import CommandDef

GLOBAL_IMAGE = FlagDef("global", "--global", "g", takes_value=True, help="Run against an image instead of a service")

UP_FLAGS = FlagSpec(
    (
        FlagDef("build", "--build", "b", help="Build images before starting"),
        FlagDef("detach", "--detach", "d", help="Run in the background"),
        FlagDef("recreate", "--recreate", "r", help="Force-recreate containers"),
        FlagDef("cleanup", "--cleanup", "c", help="Remove orphaned containers"),
    )
)

DOWN_FLAGS = FlagSpec((FlagDef("volumes", "--volumes", "v", help="Remove named volumes"),))

REUP_FLAGS = FlagSpec(
    (
        FlagDef("volumes", "--volumes", "v", help="Remove named volumes on the way down"),
        FlagDef("build", "--build", "b", help="Build images before starting"),
        FlagDef("detach", "--detach", "d", help="Run in the background"),
    )
)

# --pull, --no-up and --install have no short letters and cannot be clustered.
SWAP_FLAGS = FlagSpec(
    (
        FlagDef("volumes", "--volumes", "v", help="Remove named volumes before bringing up"),
        FlagDef("stash", "--stash", "s", help="Stash local changes before checkout"),
        FlagDef("apply", "--apply", "a", help="Apply the latest stash after checkout"),
        FlagDef("pull", "--pull", help="Pull after checkout"),
        FlagDef("no_up", "--no-up", help="Leave containers alone"),
        FlagDef("install", "--install", help="Reinstall packages after checkout"),
        FlagDef("back", "--back", "n", takes_value=True, help="With 'last': go N branches back"),
    )
)

EXEC_FLAGS = FlagSpec((GLOBAL_IMAGE,), stop_at_positional=True)

REINSTALL_FLAGS = FlagSpec((FlagDef("clean", "--clean", "c", help="Delete install directories first"),))

PUSH_FLAGS = FlagSpec(
    (
        FlagDef("force", "--force", "f", help="Push with --force-with-lease"),
        FlagDef("upstream", "--upstream", "u", help="Set the upstream branch"),
    )
)

COMMIT_FLAGS = FlagSpec((FlagDef("all", "--all", "a", help="Stage tracked changes"),))

DIFF_FLAGS = FlagSpec((FlagDef("staged", "--staged", "s", help="Show staged changes"),))

EMPTY_FLAGS = FlagSpec()

COMMANDS: tuple[CommandDef, ...] = (
    CommandDef("build", handlers.build, ("b",), EMPTY_FLAGS, "Build service images", "[services...]"),
    CommandDef("up", handlers.up, ("u",), UP_FLAGS, "Start services", "[-bdrc] [services...]"),
    CommandDef("down", handlers.down, ("dn",), DOWN_FLAGS, "Stop services", "[-v]"),
    CommandDef("restart", handlers.restart, ("rs",), EMPTY_FLAGS, "Restart services", "[services...]"),
    CommandDef("reup", handlers.reup, ("ru",), REUP_FLAGS, "Stop then start services", "[-vbd] [services...]"),
    CommandDef("run", handlers.run, ("r",), EXEC_FLAGS, "Run a command in a service", "<service> <cmd...> | -g <image> [cmd...]"),
    CommandDef("shell", handlers.shell, ("sh",), EXEC_FLAGS, "Open a shell in a service", "<service> | -g <image>"),
    CommandDef("swap", handlers.swap, ("sw",), SWAP_FLAGS, "Switch branches and rebuild", "<branch> | last [-n N]"),
    CommandDef("reinstall", handlers.reinstall, ("ri",), REINSTALL_FLAGS, "Reinstall packages", "[-c] [managers...]"),
    CommandDef("branch", handlers.branch, ("br",), None, "Show the current branch"),
    CommandDef("info", handlers.info, ("i",), None, "Summarize the current project"),
    CommandDef("history", handlers.history, ("hist", "h"), None, "List visited branches"),
    CommandDef("push", handlers.push, ("p",), PUSH_FLAGS, "Push a branch to origin", "[-fu] [branch]"),
    CommandDef("commit", handlers.commit, ("c", "ci"), COMMIT_FLAGS, "Commit with a message", "[-a] <message...>"),
    CommandDef("diff", handlers.diff, ("df",), DIFF_FLAGS, "Show changes", "[-s] [paths...]"),
    CommandDef("help", handlers.show_help, ("-h", "--help"), None, "Show this table"),
)
