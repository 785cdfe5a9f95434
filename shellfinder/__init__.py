"""Browse and edit files on remote hosts over plain SSH."""

__version__ = "0.1.0"
