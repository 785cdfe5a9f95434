"""Data models for shellfinder."""

from shellfinder.models.command import CommandResult
from shellfinder.models.files import DirectoryEntry, FileContent
from shellfinder.models.session import ConnectionParams, Session

__all__ = [
    "CommandResult",
    "ConnectionParams",
    "DirectoryEntry",
    "FileContent",
    "Session",
]
