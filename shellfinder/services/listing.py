"""Directory listing by parsing `ls -l` output.

The remote host is only guaranteed to have a POSIX shell, so listings are
scraped from the long format of `ls`. Two limitations follow from that:

- A file name containing a newline is split across two output lines. The
  first half usually parses as a bogus entry and the second half is dropped.
- Parsing depends on the column layout of `ls -l`. The command runs with
  LC_ALL=C to pin the date columns, but an `ls` that prints a different
  layout (e.g. a busybox build with unusual flags) yields no entries.

A structured directory read (SFTP readdir) would remove both problems.
"""

import logging
import re

from shellfinder.errors import CommandFailure
from shellfinder.models import DirectoryEntry, Session
from shellfinder.services.executor import execute
from shellfinder.utils.shell import quote_path
from shellfinder.utils.validation import validate_path

logger = logging.getLogger(__name__)

# mode links owner group size month day time-or-year name
LS_LINE = re.compile(
    r"^(?P<type>[-dlbcps])\S*\s+"
    r"\d+\s+"
    r"\S+\s+"
    r"\S+\s+"
    r"(?:\d+,\s*)?\d+\s+"
    r"\w{3}\s+\d{1,2}\s+(?:\d{1,2}:\d{2}|\d{4})\s"
    r"(?P<name>.+)$"
)

SKIPPED_NAMES = {".", ".."}


def join_path(parent: str, name: str) -> str:
    """Join a directory path and an entry name, collapsing repeated '/'."""
    return re.sub(r"/{2,}", "/", f"{parent}/{name}")


def listing_command(path: str, include_hidden: bool) -> str:
    """Build the ls command for a directory."""
    flags = "-la" if include_hidden else "-l"
    return f"LC_ALL=C ls {flags} -- {quote_path(path)}"


def parse_listing(output: str, parent: str) -> list[DirectoryEntry]:
    """Parse `ls -l` output into directory entries.

    Args:
        output: Raw stdout of the listing command
        parent: Directory that was listed

    Returns:
        Entries in the order `ls` printed them. '.', '..', the 'total'
        line and lines that do not match the column layout are skipped.
    """
    entries: list[DirectoryEntry] = []

    for line in output.splitlines():
        if not line.strip() or line.startswith("total "):
            continue

        match = LS_LINE.match(line)
        if not match:
            logger.debug("Skipping unparseable listing line: %r", line)
            continue

        name = match.group("name")
        kind = match.group("type")
        if kind == "l" and " -> " in name:
            name = name.split(" -> ", 1)[0]

        if name in SKIPPED_NAMES or "/" in name:
            continue

        entries.append(
            DirectoryEntry(
                name=name,
                is_directory=kind == "d",
                path=join_path(parent, name),
            )
        )

    return entries


async def list_directory(
    session: Session,
    path: str,
    include_hidden: bool = False,
    timeout: float | None = None,
) -> list[DirectoryEntry]:
    """List a remote directory.

    Args:
        session: Session to run the listing on
        path: Directory to list
        include_hidden: Include dot-files
        timeout: Command timeout in seconds

    Returns:
        Parsed directory entries

    Raises:
        ValidationError: If the path contains control characters
        CommandFailure: If `ls` exits non-zero
    """
    path = validate_path(path)
    result = await execute(session, listing_command(path, include_hidden), timeout=timeout)

    if result.returncode != 0:
        raise CommandFailure(
            f"Failed to list {path}",
            stderr=result.error,
            returncode=result.returncode,
        )

    entries = parse_listing(result.output, path)
    logger.debug("Found %d entries in %s", len(entries), path)
    return entries
