"""MCP tools for shellfinder."""

from shellfinder.tools.files import (
    ssh_connect,
    ssh_disconnect,
    ssh_list,
    ssh_read,
    ssh_write,
)

__all__ = ["ssh_connect", "ssh_disconnect", "ssh_list", "ssh_read", "ssh_write"]
