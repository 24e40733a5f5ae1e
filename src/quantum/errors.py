# src/quantum/errors.py

"""Error hierarchy shared by the store and the CLI.

Library code raises these; only the CLI layer turns them into a message and an exit code.
"""

from __future__ import annotations


class QuantumError(Exception):
    """Base class for every failure reported to the user."""

    exit_code: int = 1


class UsageError(QuantumError):
    """Missing or invalid command arguments."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class NotFoundError(QuantumError):
    """A stop/delete referenced a record that does not exist."""

    def __init__(self, collection: str, key: str) -> None:
        super().__init__(f"No record {key!r} in {collection}")
        self.collection = collection
        self.key = key


class StorageError(QuantumError):
    """I/O or deserialization failure in the document store."""


class HomeDirResolutionError(QuantumError):
    """The user's home directory could not be located."""
