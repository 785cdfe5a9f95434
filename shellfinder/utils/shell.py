"""Shell command safety utilities."""

import shlex


def quote_path(path: str) -> str:
    """Safely quote a path for shell commands.

    Args:
        path: File system path to quote

    Returns:
        Shell-safe quoted path
    """
    return shlex.quote(path)


def build_command(*args: str) -> str:
    """Join arguments into a command line, quoting each one.

    Args:
        args: Program name followed by its arguments

    Returns:
        Command line safe to hand to a POSIX shell
    """
    return " ".join(shlex.quote(arg) for arg in args)
