"""Directory listing and file content models."""

from dataclasses import dataclass


@dataclass
class DirectoryEntry:
    """A single entry of a remote directory listing."""

    name: str
    is_directory: bool
    path: str


@dataclass
class FileContent:
    """Text content of a remote file plus derived type information."""

    content: str
    file_name: str
    file_type: str
    content_type: str
