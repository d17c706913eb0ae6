"""Custom exception hierarchy for devctl."""

from __future__ import annotations

from typing import Sequence


class DevctlError(Exception):
    """Base error for all custom exceptions."""

    exit_code = 1


class ConfigError(DevctlError):
    """Raised when an environment variable holds an unusable value."""


class UnknownCommand(DevctlError):
    """Raised when the first token names no command or alias."""

    def __init__(self, token: str):
        super().__init__(f"Unknown command: {token}")
        self.token = token


class MalformedFlag(DevctlError):
    """Raised when a short flag is not part of the command's vocabulary."""

    def __init__(self, token: str, command: str | None = None):
        message = f"Unrecognized flag: {token}"
        if command:
            message = f"Unrecognized flag for '{command}': {token}"
        super().__init__(message)
        self.token = token
        self.command = command


class MissingRequiredArgument(DevctlError):
    """Raised when a command is missing a branch, service or image name."""


class InvalidOffset(DevctlError):
    """Raised when a history offset is non-numeric or out of range."""


class NoHistory(DevctlError):
    """Raised when the ledger holds nothing usable for the project."""


class StorageUnavailable(DevctlError):
    """Raised when the ledger file cannot be read or written."""


class ValidationError(DevctlError):
    """Raised when user input is invalid."""


class CollaboratorFailure(DevctlError):
    """Raised when an external command exits non-zero."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str | None = None):
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr or ""
        message = f"Command failed (exit {returncode}): {' '.join(self.command)}"
        if self.stderr.strip():
            message = f"{message}\n{self.stderr.strip()}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        return self.returncode or 1


__all__ = [
    "DevctlError",
    "ConfigError",
    "UnknownCommand",
    "MalformedFlag",
    "MissingRequiredArgument",
    "InvalidOffset",
    "NoHistory",
    "StorageUnavailable",
    "ValidationError",
    "CollaboratorFailure",
]
